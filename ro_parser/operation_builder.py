from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Tuple

from .config import DiagnosticCodes, OperationLayout, ValidationPolicy
from .decoder import segment
from .normalizers import normalize_decimal, normalize_money, normalize_text
from .schema import Diagnostic, Operation, PartGroup, PartLine, error, warning


def _operation_path(index: int) -> str:
    return f"operations[{index}]"


def _part_path(op_index: int, part_index: int) -> str:
    return f"{_operation_path(op_index)}.parts[{part_index}]"


def _parse_non_negative(
    raw: str,
    path: str,
    label: str,
    diagnostics: List[Diagnostic],
    money: bool = False,
) -> Optional[Decimal]:
    """
    숫자 필드 하나를 해석
    - 빈 값 -> None (진단 없음)
    - 해석 불가 / 음수 -> 오류 기록 후 None
    오류가 나도 호출 측은 나머지 필드를 계속 해석한다.
    """
    value, code = normalize_money(raw) if money else normalize_decimal(raw)
    if code:
        diagnostics.append(error(path, code, f"{label} is not a number: {raw.strip()!r}"))
        return None
    if value is not None and value < 0:
        diagnostics.append(
            error(path, DiagnosticCodes.NEGATIVE_VALUE, f"{label} must be non-negative: {raw.strip()!r}")
        )
        return None
    return value


def _build_part_line(group: PartGroup, op_index: int, diagnostics: List[Diagnostic]) -> Optional[PartLine]:
    """
    완전한 파트 그룹 -> PartLine
    part_number / quantity 오류가 있으면 PartLine을 만들지 않는다.
    """
    path = _part_path(op_index, group.index)
    usable = True

    part_number = normalize_text(group.part_number)
    if part_number is None:
        diagnostics.append(
            error(f"{path}.part_number", DiagnosticCodes.MISSING_PART_NUMBER, "part number is required")
        )
        usable = False

    quantity_raw = group.quantity
    if normalize_text(quantity_raw) is None:
        quantity_raw = ValidationPolicy.DEFAULT_PART_QUANTITY
        diagnostics.append(
            warning(
                f"{path}.quantity",
                DiagnosticCodes.DEFAULTED_QUANTITY,
                f"quantity missing, defaulted to {ValidationPolicy.DEFAULT_PART_QUANTITY}",
            )
        )
    quantity = _parse_non_negative(quantity_raw, f"{path}.quantity", "quantity", diagnostics)
    if quantity is None:
        usable = False

    unit_cost = _parse_non_negative(group.unit_cost, f"{path}.unit_cost", "unit cost", diagnostics, money=True)

    # 판매가 토큰이 비어 있으면 원가로 대체
    if normalize_text(group.unit_sale) is None:
        unit_sale = unit_cost
    else:
        unit_sale = _parse_non_negative(group.unit_sale, f"{path}.unit_sale", "unit sale", diagnostics, money=True)

    if not usable:
        return None

    return PartLine(
        part_number=part_number,
        quantity=quantity,
        unit_cost=unit_cost,
        unit_sale=unit_sale,
    )


def build_operation(tokens: List[str], index: int = 0) -> Tuple[Operation, List[Diagnostic]]:
    """
    서브필드 시퀀스 -> Operation + 진단 목록

    매핑 규칙:
    1. [0] code (필수, 비면 오류)
    2. [1] description (선택, 비어도 진단 없음)
    3. [2] labor_hours (빈 값 = 공임 없음, 해석 불가/음수 = 오류)
    4. 이후 4개씩 PartLine (part_number, quantity, unit_cost, unit_sale)

    모양 문제:
    - 헤더 슬롯 부족 -> 슬롯마다 경고, 값은 없음으로 채움
    - 그룹 크기에 못 미치는 꼬리 -> 경고 후 버림

    오류가 있어도 best-effort Operation을 반환한다. 레코드 거부 여부는 호출 측이 판단.
    """
    diagnostics: List[Diagnostic] = []
    op_path = _operation_path(index)
    token = segment(tokens, index)

    for slot in token.missing_fields:
        diagnostics.append(
            warning(
                f"{op_path}.{slot}",
                DiagnosticCodes.MISSING_SUBFIELD,
                f"operation has {len(tokens)} sub-field(s); {slot} is absent",
            )
        )

    # 1. code
    code = normalize_text(token.code) or ""
    if not code:
        diagnostics.append(
            error(f"{op_path}.code", DiagnosticCodes.MISSING_OPERATION_CODE, "operation code is required")
        )

    # 2. description
    description = normalize_text(token.description)

    # 3. labor hours
    labor_hours = None
    if token.labor_hours is not None:
        labor_hours = _parse_non_negative(token.labor_hours, f"{op_path}.labor_hours", "labor hours", diagnostics)

    # 4. parts
    parts: List[PartLine] = []
    for group in token.part_groups:
        part = _build_part_line(group, index, diagnostics)
        if part is not None:
            parts.append(part)

    if token.partial_group is not None:
        partial = token.partial_group
        diagnostics.append(
            warning(
                _part_path(index, partial.index),
                DiagnosticCodes.PARTIAL_PART_GROUP,
                f"incomplete part group discarded ({len(partial.tokens)} of "
                f"{OperationLayout.PART_GROUP_SIZE} tokens: {partial.tokens!r})",
            )
        )

    operation = Operation(
        code=code,
        description=description,
        labor_hours=labor_hours,
        parts=parts,
    )
    return operation, diagnostics
