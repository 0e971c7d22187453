from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from .batch import parse_batch
from .config import Constants
from .error_handler import ErrorHandler, OutputError, ROParserError
from .loader import load_request_json
from .logger import setup_logger, get_logger, log_step
from .output_formatters import (
    FileNamingConvention,
    format_batch_response,
    format_csv_row,
    format_single_response,
    write_summary_csv,
)
from .pipeline import parse_record
from .progress import ProgressBar, print_file_status, print_section_header
from .reporter import format_batch, format_result
from .request import parse_request
from .schema import ParseResult
from .schemas import CSVRowSchema

ROOT = Path.cwd()
DEFAULT_OUTPUT_DIR = ROOT / "data" / "processed"
DEFAULT_LOG_DIR = ROOT / "logs"

logger = get_logger(__name__)


# ============================================================================
# 파일 I/O 함수 (순수 I/O만 담당)
# ============================================================================

def write_text(path: Path, content: str) -> None:
    """텍스트 파일 쓰기"""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding=Constants.DEFAULT_ENCODING)
    except OSError as e:
        raise OutputError(f"파일 쓰기 실패: {path}") from e


def write_json(path: Path, data: Any) -> None:
    """JSON 파일 쓰기"""
    write_text(path, json.dumps(data, ensure_ascii=False, indent=Constants.JSON_INDENT))


# ============================================================================
# 단일 파일 처리
# ============================================================================

def parse_file(input_path: Path, max_workers: Optional[int] = None) -> Tuple[Any, List[ParseResult], str]:
    """
    요청 파일 하나를 파싱 (파일 쓰기 없음)

    Returns:
        (payload, results, report)
        payload: JSON 응답 본문
        results: 입력 순서의 ParseResult 목록 (단건이면 1개)
        report: 사람이 읽는 요약
    """
    body = load_request_json(str(input_path))
    parsed = parse_request(body)

    if isinstance(parsed, list):
        batch = parse_batch(parsed, max_workers=max_workers)
        return format_batch_response(batch), list(batch.results), format_batch(batch)

    result = parse_record(parsed)
    return format_single_response(result), [result], format_result(result)


def process_single_file(
    input_path: Path,
    output_dir: Path,
    error_handler: ErrorHandler,
    max_workers: Optional[int] = None,
) -> Tuple[str, List[CSVRowSchema]]:
    """
    단일 파일 처리 + 산출물 저장

    Returns:
        (status, csv_rows)
        status: "SUCCESS" | "FAILED" | "MISSING"
    """
    if not input_path.exists():
        logger.warning(f"파일 없음: {input_path.name}")
        return "MISSING", []

    # 요청/파일 단위 문제만 기록하고 다음 파일로 넘어간다
    try:
        with log_step(logger, f"{input_path.name} 파싱"):
            payload, results, report = parse_file(input_path, max_workers=max_workers)
    except ROParserError as e:
        error_handler.handle_error(e, source=input_path.name, stage="요청 읽기")
        return "FAILED", []

    try:
        stem = input_path.stem
        write_json(output_dir / FileNamingConvention.parse_result(stem), payload)
        write_text(output_dir / FileNamingConvention.report(stem), report)
    except OutputError as e:
        error_handler.handle_error(e, source=input_path.name, stage="결과 저장")
        return "FAILED", []

    logger.debug(report)

    rows = [format_csv_row(input_path.name, i, r) for i, r in enumerate(results)]
    failed = sum(1 for r in results if not r.success)
    if failed:
        logger.warning(f"✗ {input_path.name}: {len(results)}건 중 {failed}건 거부")
    else:
        logger.info(f"✓ {input_path.name}: {len(results)}건 모두 성공")

    return "SUCCESS", rows


# ============================================================================
# 메인 함수
# ============================================================================

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ro_parser",
        description="DMS RO 레코드 JSON 요청 파일을 파싱한다",
    )
    parser.add_argument("files", nargs="+", type=Path, help="요청 JSON 파일 ({record} 또는 {records})")
    parser.add_argument("--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR)
    parser.add_argument("--log-dir", type=Path, default=DEFAULT_LOG_DIR)
    parser.add_argument("--workers", type=int, default=Constants.DEFAULT_MAX_WORKERS,
                        help="배치 파싱 스레드 수 (1이면 순차)")
    parser.add_argument("--verbose", action="store_true", help="콘솔에 DEBUG 로그 출력")
    parser.add_argument("--no-color", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """메인 실행 함수"""
    args = build_arg_parser().parse_args(argv)

    root_logger = setup_logger(
        log_dir=args.log_dir,
        console_level=logging.DEBUG if args.verbose else logging.INFO,
        enable_color=not args.no_color,
    )
    error_handler = ErrorHandler(root_logger)

    print_section_header("DMS RO 파싱")

    root_logger.info(f"처리 대상: {len(args.files)}개 파일")
    root_logger.info(f"출력 경로: {args.output_dir}")

    args.output_dir.mkdir(parents=True, exist_ok=True)

    statuses: List[str] = []
    csv_rows: List[CSVRowSchema] = []

    progress = ProgressBar(total=len(args.files), prefix="진행률")

    for input_path in args.files:
        status, rows = process_single_file(input_path, args.output_dir, error_handler, args.workers)

        rejected = sum(1 for r in rows if r["success"] == "FALSE")
        print_file_status(input_path.name, status, len(rows), rejected)

        statuses.append(status)
        csv_rows.extend(rows)
        progress.update(failed=status != "SUCCESS")

    # CSV 파일 생성
    csv_failed = False
    if csv_rows:
        csv_path = args.output_dir / FileNamingConvention.summary_csv()
        try:
            write_summary_csv(csv_path, csv_rows)
            root_logger.info(f"CSV 파일 생성: {csv_path}")
        except OutputError as e:
            error_handler.handle_error(e, source=csv_path.name, stage="요약 CSV 저장")
            csv_failed = True

    # 최종 요약
    print_section_header("처리 완료")

    record_total = len(csv_rows)
    record_ok = sum(1 for r in csv_rows if r["success"] == "TRUE")
    root_logger.info(
        f"파일 {len(statuses)}개 (성공 {statuses.count('SUCCESS')}, 실패 {statuses.count('FAILED')}, "
        f"없음 {statuses.count('MISSING')}) / 레코드 {record_total}건 중 {record_ok}건 성공"
    )

    # 에러 리포트
    if error_handler.has_errors():
        error_summary = error_handler.get_error_summary()
        root_logger.warning(f"총 에러: {error_summary['total']}개 (치명적: {error_summary['critical']}개)")

        error_report_path = args.log_dir / FileNamingConvention.error_report()
        write_text(error_report_path, error_handler.generate_error_report())
        root_logger.info(f"에러 리포트: {error_report_path}")

    if csv_failed:
        return 1
    return 0 if all(s == "SUCCESS" for s in statuses) else 1


if __name__ == "__main__":
    sys.exit(main())
