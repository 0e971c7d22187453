"""
복합 필드 토큰 분해 (2단계 구분자)

    "OPC1^Brake Pad^1.5^PN100^2^10.00^12.00|OPC2^Oil Change^0.5"
      -> [["OPC1", "Brake Pad", "1.5", "PN100", "2", "10.00", "12.00"],
          ["OPC2", "Oil Change", "0.5"]]

업무 의미 해석은 하지 않는다. 분해는 실패하지 않으며, 모양이 어긋난 입력은
그대로 넘겨 Operation Builder가 진단을 남기도록 한다.
"""
from __future__ import annotations

from typing import List, Optional

from .config import Delimiters, OperationLayout
from .schema import OperationToken, PartGroup, PartialPartGroup


def split_operations(composite: Optional[str]) -> List[str]:
    """
    '|'로 분리, 빈 세그먼트(연속/앞뒤 구분자, 공백만 있는 세그먼트)는 버린다
    """
    if not composite:
        return []
    return [seg for seg in composite.split(Delimiters.OPERATION) if seg.strip()]


def split_subfields(segment: str) -> List[str]:
    """
    '^'로 분리, 내부 빈 토큰은 보존 (위치가 의미이므로)
    """
    return segment.split(Delimiters.INTRA_OPERATION)


def decode(composite: Optional[str]) -> List[List[str]]:
    """복합 필드 -> 오퍼레이션별 서브필드 시퀀스"""
    return [split_subfields(seg) for seg in split_operations(composite)]


def segment(tokens: List[str], index: int = 0) -> OperationToken:
    """
    서브필드 시퀀스를 위치 규칙으로 나눈다 (형 변환 없음)
    - [0] code, [1] description, [2] labor_hours
    - 이후 PART_GROUP_SIZE개씩 PartGroup, 남는 꼬리는 PartialPartGroup
    """
    header = tokens[:OperationLayout.HEADER_SIZE]
    slots: List[Optional[str]] = list(header) + [None] * (OperationLayout.HEADER_SIZE - len(header))

    op = OperationToken(
        index=index,
        tokens=list(tokens),
        code=slots[OperationLayout.CODE],
        description=slots[OperationLayout.DESCRIPTION],
        labor_hours=slots[OperationLayout.LABOR_HOURS],
        missing_fields=OperationLayout.HEADER_SLOTS[len(header):],
    )

    rest = tokens[OperationLayout.HEADER_SIZE:]
    size = OperationLayout.PART_GROUP_SIZE
    full_count = len(rest) // size

    for g in range(full_count):
        part_number, quantity, unit_cost, unit_sale = rest[g * size:(g + 1) * size]
        op.part_groups.append(
            PartGroup(
                index=g,
                part_number=part_number,
                quantity=quantity,
                unit_cost=unit_cost,
                unit_sale=unit_sale,
            )
        )

    tail = rest[full_count * size:]
    if tail:
        op.partial_group = PartialPartGroup(index=full_count, tokens=tail)

    return op
