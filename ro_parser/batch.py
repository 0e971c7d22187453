from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from .config import Constants
from .logger import get_logger
from .pipeline import parse_record
from .schema import BatchResult, BatchSummary, ParseResult, ParseSuccess, RawRORecord

logger = get_logger(__name__)


def _parse_concurrently(raws: Sequence[RawRORecord], max_workers: int) -> List[ParseResult]:
    # 인덱스 순서로 future를 모으므로 실행 순서와 무관하게 출력 순서는 입력 순서
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ro_parser") as executor:
        futures = [executor.submit(parse_record, raw) for raw in raws]
        try:
            return [f.result() for f in futures]
        except BaseException:
            # 예상 밖의 예외: 아직 시작하지 않은 레코드는 취소하고 그대로 전파
            for f in futures:
                f.cancel()
            raise


def summarize_results(results: Sequence[ParseResult]) -> BatchSummary:
    """성공 레코드 기준 오퍼레이션/파트 라인 수와 딜러 목록"""
    total_operations = 0
    total_part_lines = 0
    dealers: List[str] = []

    for result in results:
        if not isinstance(result, ParseSuccess):
            continue
        record = result.record
        total_operations += len(record.operations)
        total_part_lines += sum(len(op.parts) for op in record.operations)
        if record.dealer_id not in dealers:
            dealers.append(record.dealer_id)

    return BatchSummary(
        total_operations=total_operations,
        total_part_lines=total_part_lines,
        dealers=dealers,
    )


def parse_batch(
    raws: Sequence[RawRORecord],
    max_workers: Optional[int] = None,
) -> BatchResult:
    """
    RO 여러 건 파싱

    - 레코드마다 독립 처리: 한 건의 실패가 다른 레코드를 건너뛰게 하지 않는다
    - results[i]는 raws[i]의 결과
    - 경고 수는 성공 레코드의 경고만 합산
    - max_workers > 1이면 스레드 풀로 분산 처리
    - 파서 내부 버그 같은 예상 밖의 예외는 잡지 않는다 (배치 전체 실패)
    """
    workers = max_workers if max_workers is not None else Constants.DEFAULT_MAX_WORKERS

    if workers > 1 and len(raws) > 1:
        results = _parse_concurrently(raws, workers)
    else:
        results = [parse_record(raw) for raw in raws]

    succeeded = sum(1 for r in results if r.success)
    warning_count = sum(len(r.warnings) for r in results if r.success)

    batch = BatchResult(
        results=results,
        total=len(results),
        succeeded=succeeded,
        failed=len(results) - succeeded,
        warning_count=warning_count,
        summary=summarize_results(results),
    )

    logger.info(
        f"배치 파싱 완료: 전체 {batch.total}건, 성공 {batch.succeeded}건, "
        f"실패 {batch.failed}건, 경고 {batch.warning_count}개"
    )
    return batch
