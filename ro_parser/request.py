"""
JSON 요청 봉투 처리 (전송 계층과 무관)

    {"record": {...}}     -> 단건
    {"records": [{...}]}  -> 배치 ("records" 배열이 있으면 배치)

봉투 자체가 잘못되면 RequestError (파싱 진단과 구분, 400 상당).
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from .batch import parse_batch
from .error_handler import RequestError
from .logger import get_logger
from .output_formatters import format_batch_response, format_request_error, format_single_response
from .pipeline import parse_record
from .schema import RawRORecord

logger = get_logger(__name__)

HTTP_OK = 200
HTTP_BAD_REQUEST = 400


def _to_raw_record(item: Any, where: str) -> RawRORecord:
    if not isinstance(item, Mapping):
        raise RequestError(f"{where} must be an object, got {type(item).__name__}")
    try:
        return RawRORecord.model_validate(dict(item))
    except ValidationError as e:
        # 컬럼 값이 문자열/숫자가 아닌 경우 등
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise RequestError(f"{where} has invalid column values: {fields}") from e


def parse_request(body: Any) -> Union[RawRORecord, List[RawRORecord]]:
    """
    요청 본문 -> RawRORecord (단건) 또는 List[RawRORecord] (배치)
    빈 records 배열은 빈 배치로 허용한다.
    """
    if not isinstance(body, Mapping):
        raise RequestError(f"request body must be an object, got {type(body).__name__}")

    records = body.get("records")
    if isinstance(records, list):
        return [_to_raw_record(item, f"records[{i}]") for i, item in enumerate(records)]
    if records is not None:
        raise RequestError(f"'records' must be an array, got {type(records).__name__}")

    if "record" not in body:
        raise RequestError("request body must contain 'record' or 'records'")
    return _to_raw_record(body["record"], "record")


def handle_request(body: Any, max_workers: Optional[int] = None) -> Tuple[int, Dict[str, Any]]:
    """
    요청 처리 -> (상태 코드, 응답 본문)
    - 봉투 오류: 400 + {success: false, error}
    - 단건: 200 + {success, data?, errors?, warnings}
    - 배치: 200 + {success: true, batchResult}
    파서 내부의 예상 밖 예외는 잡지 않는다.
    """
    try:
        parsed = parse_request(body)
    except RequestError as e:
        logger.warning(f"요청 거부: {e}")
        return HTTP_BAD_REQUEST, dict(format_request_error(str(e)))

    if isinstance(parsed, list):
        logger.info(f"배치 요청 처리: {len(parsed)}건")
        batch = parse_batch(parsed, max_workers=max_workers)
        return HTTP_OK, dict(format_batch_response(batch))

    logger.info("단건 요청 처리")
    return HTTP_OK, dict(format_single_response(parse_record(parsed)))
