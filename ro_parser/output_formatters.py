from __future__ import annotations

import csv
from pathlib import Path
from typing import List, Optional

from .config import Constants
from .error_handler import OutputError
from .schema import BatchResult, Diagnostic, ParseResult, ParseSuccess
from .schemas import (
    BatchResponseSchema,
    CSVRowSchema,
    DiagnosticSchema,
    RequestErrorSchema,
    SingleResponseSchema,
)


# 파일명 규칙
class FileNamingConvention:
    """파일명 규칙"""

    @staticmethod
    def parse_result(stem: str) -> str:
        """파싱 결과(JSON 응답) 파일명"""
        return f"{stem}_parsed.json"

    @staticmethod
    def report(stem: str) -> str:
        """사람이 읽는 리포트 파일명"""
        return f"{stem}_report.txt"

    @staticmethod
    def summary_csv() -> str:
        """전체 요약 CSV 파일명"""
        return "summary.csv"

    @staticmethod
    def error_report() -> str:
        return "error_report.txt"


CSV_FIELDNAMES = [
    "source",
    "index",
    "success",
    "dealer_id",
    "ro_number",
    "open_date",
    "operation_count",
    "part_line_count",
    "error_count",
    "warning_count",
    "errors",
    "warnings",
]


# 응답 포맷터
def format_diagnostics(diagnostics: List[Diagnostic]) -> List[DiagnosticSchema]:
    return [d.model_dump(mode="json") for d in diagnostics]


def format_single_response(result: ParseResult) -> SingleResponseSchema:
    """
    단건 응답 포맷
    - 성공: {success, data, warnings}
    - 실패: {success, errors, warnings}
    """
    response: SingleResponseSchema = {"success": result.success}
    if isinstance(result, ParseSuccess):
        response["data"] = result.record.model_dump(mode="json")
    else:
        response["errors"] = format_diagnostics(result.errors)
    response["warnings"] = format_diagnostics(result.warnings)
    return response


def format_batch_response(batch: BatchResult) -> BatchResponseSchema:
    """배치 응답 포맷 (실패 결과의 raw는 DMS 컬럼명으로 직렬화)"""
    return {
        "success": True,
        "batchResult": batch.model_dump(mode="json", by_alias=True),
    }


def format_request_error(message: str) -> RequestErrorSchema:
    """요청 봉투 오류 포맷"""
    return {
        "success": False,
        "error": message,
    }


# CSV 변환
def format_csv_row(
    source: str,
    index: int,
    result: ParseResult
) -> CSVRowSchema:
    """파싱 결과를 CSV 행으로 변환"""

    def safe_str(value: Optional[object]) -> str:
        """None-safe 문자열 변환"""
        return str(value) if value is not None else ""

    def join_diagnostics(items: List[Diagnostic]) -> str:
        """진단을 세미콜론으로 연결"""
        return "; ".join(f"{d.field}: {d.message}" for d in items)

    if isinstance(result, ParseSuccess):
        record = result.record
        dealer_id = record.dealer_id
        ro_number = record.ro_number
        open_date = record.open_date.isoformat()
        operation_count = len(record.operations)
        part_line_count = sum(len(op.parts) for op in record.operations)
        errors: List[Diagnostic] = []
    else:
        dealer_id = result.raw.dealer_id
        ro_number = result.raw.ro_number
        open_date = result.raw.open_date
        operation_count = None
        part_line_count = None
        errors = result.errors

    return {
        "source": source,
        "index": str(index),
        "success": "TRUE" if result.success else "FALSE",
        "dealer_id": safe_str(dealer_id),
        "ro_number": safe_str(ro_number),
        "open_date": safe_str(open_date),
        "operation_count": safe_str(operation_count),
        "part_line_count": safe_str(part_line_count),
        "error_count": str(len(errors)),
        "warning_count": str(len(result.warnings)),
        "errors": join_diagnostics(errors),
        "warnings": join_diagnostics(result.warnings),
    }


def write_summary_csv(
    output_path: Path,
    rows: List[CSVRowSchema]
) -> None:
    if not rows:
        return

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", newline="", encoding=Constants.DEFAULT_ENCODING) as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDNAMES)
            writer.writeheader()
            writer.writerows(rows)
    except OSError as e:
        raise OutputError(f"CSV 쓰기 실패: {output_path}") from e
