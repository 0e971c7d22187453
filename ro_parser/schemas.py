from __future__ import annotations

from typing import Any, Dict, List, TypedDict


# 진단 출력 스키마
class DiagnosticSchema(TypedDict):
    severity: str
    field: str
    code: str
    message: str


# 단건 응답 스키마 (data / errors 는 결과에 따라 생략)
class SingleResponseSchema(TypedDict, total=False):
    success: bool
    data: Dict[str, Any]
    errors: List[DiagnosticSchema]
    warnings: List[DiagnosticSchema]


class BatchSummarySchema(TypedDict):
    """배치 요약 스키마"""
    total_operations: int
    total_part_lines: int
    dealers: List[str]


class BatchResultSchema(TypedDict):
    """배치 결과 스키마 (results는 입력 순서)"""
    results: List[Dict[str, Any]]
    total: int
    succeeded: int
    failed: int
    warningCount: int
    summary: BatchSummarySchema


class BatchResponseSchema(TypedDict):
    success: bool
    batchResult: BatchResultSchema


# 요청 봉투 오류 (파싱 진단과 구분)
class RequestErrorSchema(TypedDict):
    success: bool
    error: str


# CSV 출력 스키마
class CSVRowSchema(TypedDict):
    source: str
    index: str
    success: str
    dealer_id: str
    ro_number: str
    open_date: str
    operation_count: str
    part_line_count: str
    error_count: str
    warning_count: str
    errors: str
    warnings: str


# 스키마 검증 함수
def validate_diagnostic(data: dict) -> bool:
    """진단 스키마 검증"""
    required_keys = {"severity", "field", "code", "message"}
    return all(k in data for k in required_keys)


def validate_single_response(data: dict) -> bool:
    """
    단건 응답 스키마 검증
    - 성공이면 data, 실패면 errors 필수
    """
    if "success" not in data or "warnings" not in data:
        return False

    key = "data" if data["success"] else "errors"
    if key not in data:
        return False

    for d in data.get("errors", []) + data.get("warnings", []):
        if not validate_diagnostic(d):
            return False

    return True


def validate_batch_response(data: dict) -> bool:
    """배치 응답 스키마 검증"""
    if data.get("success") is not True or "batchResult" not in data:
        return False

    batch = data["batchResult"]
    required_keys = {"results", "total", "succeeded", "failed", "warningCount"}
    if not all(k in batch for k in required_keys):
        return False

    # 카운트 일관성
    return (
        batch["succeeded"] + batch["failed"] == batch["total"]
        and len(batch["results"]) == batch["total"]
    )


# 스키마 템플릿 (빈 데이터)
def get_empty_batch_response() -> BatchResponseSchema:
    """빈 배치 응답 템플릿"""
    return {
        "success": True,
        "batchResult": {
            "results": [],
            "total": 0,
            "succeeded": 0,
            "failed": 0,
            "warningCount": 0,
            "summary": {
                "total_operations": 0,
                "total_part_lines": 0,
                "dealers": [],
            },
        },
    }
