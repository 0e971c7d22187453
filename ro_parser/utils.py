from __future__ import annotations

from collections import Counter
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from .schema import Diagnostic


def format_money(value: Optional[Decimal]) -> str:
    """
    금액을 가독성 높은 형식으로 포맷
    예시:
        - format_money(Decimal("6929.96")) => '$6,929.96'
        - format_money(None) => '(없음)'
    """
    if value is None:
        return "(없음)"
    try:
        return f"${Decimal(value):,.2f}"
    except (ArithmeticError, ValueError, TypeError):
        return str(value)


def format_hours(value: Optional[Decimal]) -> str:
    """
    공임 시간 포맷
    예시:
        - format_hours(Decimal("1.5")) => '1.5h'
        - format_hours(None) => '(미청구)'
    """
    if value is None:
        return "(미청구)"
    return f"{value.normalize():f}h" if isinstance(value, Decimal) else f"{value}h"


def format_quantity(value: Any) -> str:
    if isinstance(value, Decimal):
        return f"{value.normalize():f}"
    return str(value)


# 진단 목록을 요약 통계로 변환
def summarize_diagnostics(diagnostics: Iterable[Diagnostic]) -> Dict[str, Any]:
    severity_counter: Counter = Counter()
    code_counter: Counter = Counter()

    for d in diagnostics:
        severity_counter[d.severity.value] += 1
        code_counter[d.code] += 1

    return {
        "total": sum(severity_counter.values()),
        "by_severity": dict(severity_counter),
        "by_code": dict(code_counter),
    }
