"""
파싱 결과를 운영 로그용 텍스트로 포맷

부수 효과 없음: 문자열만 만든다. 로그로 남길지는 호출 측이 정한다.
진단은 개수와 상관없이 하나도 생략하지 않는다.
"""
from __future__ import annotations

from typing import List, Optional

from .schema import BatchResult, Diagnostic, ParseFailure, ParseResult, ParseSuccess
from .utils import format_hours, format_money, format_quantity, summarize_diagnostics


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """'[ERROR] ro_number: ro number is required (missing_required_field)'"""
    return (
        f"[{diagnostic.severity.value.upper()}] {diagnostic.field}: "
        f"{diagnostic.message} ({diagnostic.code})"
    )


def _diagnostic_lines(title: str, diagnostics: List[Diagnostic], indent: str) -> List[str]:
    lines = [f"{indent}- {title}: {len(diagnostics)}개"]
    for d in diagnostics:
        lines.append(f"{indent}    · {format_diagnostic(d)}")
    return lines


def _format_success(result: ParseSuccess, prefix: str) -> List[str]:
    record = result.record
    lines = [f"{prefix}✓ RO {record.ro_number} [딜러 {record.dealer_id}] 파싱 성공"]
    lines.append(f"  - 입고일: {record.open_date.isoformat()}")
    lines.append(f"  - 출고일: {record.close_date.isoformat() if record.close_date else '(없음)'}")
    if record.vehicle.vin:
        lines.append(f"  - VIN: {record.vehicle.vin}")
    lines.append(f"  - 오퍼레이션: {len(record.operations)}개")
    for i, op in enumerate(record.operations):
        lines.append(
            f"    [{i}] {op.code} {op.description or ''} / 공임 {format_hours(op.labor_hours)} / 파트 {len(op.parts)}개"
        )
        for part in op.parts:
            lines.append(
                f"        · {part.part_number} x{format_quantity(part.quantity)} "
                f"원가 {format_money(part.unit_cost)} / 판매가 {format_money(part.unit_sale)}"
            )
    lines.extend(_diagnostic_lines("경고", result.warnings, "  "))
    return lines


def _format_failure(result: ParseFailure, prefix: str) -> List[str]:
    raw = result.raw
    lines = [f"{prefix}✗ RO {raw.ro_number or '(번호 없음)'} [딜러 {raw.dealer_id or '(없음)'}] 파싱 실패"]
    lines.extend(_diagnostic_lines("오류", result.errors, "  "))
    lines.extend(_diagnostic_lines("경고", result.warnings, "  "))
    return lines


def format_result(result: ParseResult, index: Optional[int] = None) -> str:
    """레코드 한 건의 결과 요약"""
    prefix = f"[레코드 {index}] " if index is not None else ""
    if isinstance(result, ParseSuccess):
        return "\n".join(_format_success(result, prefix))
    return "\n".join(_format_failure(result, prefix))


def format_batch(batch: BatchResult) -> str:
    """배치 결과 요약 + 레코드별 결과"""
    lines = []
    lines.append(f"\n{'='*60}")
    lines.append(f"배치 파싱 결과: {batch.succeeded} / {batch.total} 성공")
    lines.append(f"{'='*60}")
    lines.append(f"  - 전체:   {batch.total}건")
    lines.append(f"  - 성공:   {batch.succeeded}건")
    lines.append(f"  - 실패:   {batch.failed}건")
    lines.append(f"  - 경고:   {batch.warning_count}개 (성공 레코드 기준)")

    summary = batch.summary
    lines.append(f"  - 오퍼레이션 합계: {summary.total_operations}개")
    lines.append(f"  - 파트 라인 합계: {summary.total_part_lines}개")
    lines.append(f"  - 딜러: {', '.join(summary.dealers) if summary.dealers else '(없음)'}")

    all_diagnostics: List[Diagnostic] = []
    for r in batch.results:
        all_diagnostics.extend(r.warnings)
        if isinstance(r, ParseFailure):
            all_diagnostics.extend(r.errors)
    if all_diagnostics:
        by_code = summarize_diagnostics(all_diagnostics)["by_code"]
        lines.append(f"  - 진단 코드별: {by_code}")

    if batch.results:
        lines.append(f"\n{'-'*60}")
        for i, result in enumerate(batch.results):
            lines.append(format_result(result, index=i))

    lines.append(f"{'='*60}")
    return "\n".join(lines)
