from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from .config import Delimiters, DiagnosticCodes, ValidationPolicy
from .normalizers import (
    normalize_date,
    normalize_integer,
    normalize_money,
    normalize_text,
    normalize_vin,
)
from .schema import (
    CustomerInfo,
    Diagnostic,
    Operation,
    ParsedServiceRecord,
    RawRORecord,
    VehicleInfo,
    error,
    warning,
)


@dataclass
class ValidationResult:
    # 검증 결과: 통과하면 record, 아니면 errors
    is_valid: bool
    record: Optional[ParsedServiceRecord] = None
    errors: List[Diagnostic] = field(default_factory=list)
    warnings: List[Diagnostic] = field(default_factory=list)


def _required_text(raw: RawRORecord, name: str, errors: List[Diagnostic]) -> Optional[str]:
    # 필수 필드는 공백뿐이어도 누락으로 본다
    if normalize_text(getattr(raw, name)) is None:
        errors.append(
            error(name, DiagnosticCodes.MISSING_REQUIRED_FIELD, f"{name.replace('_', ' ')} is required")
        )
        return None
    return getattr(raw, name)


def _check_dealer_scope(dealer_id: str, errors: List[Diagnostic]) -> None:
    # 구분자가 섞인 딜러 ID는 컬럼이 밀린 행으로 본다
    if any(d in dealer_id for d in Delimiters.all()):
        errors.append(
            error(
                "dealer_id",
                DiagnosticCodes.INVALID_DEALER_ID,
                f"dealer id contains a field delimiter: {dealer_id!r}",
            )
        )


def _check_dates(
    raw: RawRORecord,
    errors: List[Diagnostic],
    warnings: List[Diagnostic],
) -> Tuple[Optional[date], Optional[date]]:
    open_date = None
    if normalize_text(raw.open_date) is not None:
        open_date, code = normalize_date(raw.open_date)
        if code:
            errors.append(
                error("open_date", code, f"open date is not a recognized date: {raw.open_date!r}")
            )

    close_date, code = normalize_date(raw.close_date)
    if code:
        warnings.append(
            warning("close_date", code, f"close date is not a recognized date: {raw.close_date!r}")
        )

    # DMS 내보내기에 실제로 존재하는 케이스라 경고로만 남긴다
    if open_date is not None and close_date is not None and close_date < open_date:
        warnings.append(
            warning(
                "close_date",
                DiagnosticCodes.CLOSE_BEFORE_OPEN,
                f"close date {close_date.isoformat()} precedes open date {open_date.isoformat()}",
            )
        )

    return open_date, close_date


def _check_vehicle(raw: RawRORecord, warnings: List[Diagnostic]) -> VehicleInfo:
    vin = normalize_vin(raw.vin)
    if vin is not None and len(vin) != ValidationPolicy.VIN_LENGTH:
        warnings.append(
            warning(
                "vin",
                DiagnosticCodes.INVALID_VIN_LENGTH,
                f"VIN should be {ValidationPolicy.VIN_LENGTH} characters, got {len(vin)}: {vin!r}",
            )
        )

    mileage, code = normalize_integer(raw.mileage)
    if code:
        warnings.append(warning("mileage", code, f"mileage is not an integer: {raw.mileage!r}"))
    elif mileage is not None and mileage < 0:
        warnings.append(
            warning("mileage", DiagnosticCodes.NEGATIVE_VALUE, f"mileage must be non-negative: {mileage}")
        )
        mileage = None

    return VehicleInfo(
        vin=vin,
        year=normalize_text(raw.year),
        make=normalize_text(raw.make),
        model=normalize_text(raw.model),
        mileage=mileage,
    )


def _check_total(raw_value: Optional[str], name: str, warnings: List[Diagnostic]) -> Optional[Decimal]:
    # 합계는 형태만 확인하고 재계산하지 않는다
    value, code = normalize_money(raw_value)
    if code:
        warnings.append(
            warning(name, code, f"{name.replace('_', ' ')} is not a monetary amount: {raw_value!r}")
        )
    return value


def validate_record(
    raw: RawRORecord,
    operations: List[Operation],
    diagnostics: Optional[List[Diagnostic]] = None,
) -> ValidationResult:
    """
    레코드 단위 검증

    검증 규칙:
    1. 필수 필드 (dealer_id, ro_number, open_date) 존재 및 open_date 해석
    2. dealer_id에 구분자가 섞이면 오류
    3. close_date < open_date 는 경고
    4. VIN 길이(17) 불일치는 경고 (체크섬 미검사)
    5. 주행거리/합계 형식 오류는 경고
    6. 오퍼레이션 0개는 경고

    판정:
    - 이전 단계(Operation Builder)의 오류를 포함해 오류가 하나라도 있으면 레코드 전체 거부
    - 아니면 경고를 담은 ParsedServiceRecord 생성
    """
    errors: List[Diagnostic] = []
    warnings: List[Diagnostic] = []

    for d in diagnostics or []:
        (errors if d.is_error else warnings).append(d)

    # 1. 필수 필드
    required = {name: _required_text(raw, name, errors) for name in ValidationPolicy.REQUIRED_FIELDS}
    dealer_id = required["dealer_id"]
    ro_number = required["ro_number"]

    # 2. 딜러 스코프
    if dealer_id is not None:
        _check_dealer_scope(dealer_id, errors)

    # 3. 날짜
    open_date, close_date = _check_dates(raw, errors, warnings)

    # 4~5. 차량/합계
    vehicle = _check_vehicle(raw, warnings)
    total_cost = _check_total(raw.total_cost, "total_cost", warnings)
    total_sale = _check_total(raw.total_sale, "total_sale", warnings)

    # 6. 오퍼레이션
    if not operations:
        warnings.append(warning("operations", DiagnosticCodes.NO_OPERATIONS, "no operations present"))

    if errors:
        return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

    record = ParsedServiceRecord(
        dealer_id=dealer_id,
        vendor_dealer_id=normalize_text(raw.vendor_dealer_id),
        dms_type=normalize_text(raw.dms_type),
        ro_number=normalize_text(ro_number),
        open_date=open_date,
        close_date=close_date,
        ro_status=normalize_text(raw.ro_status),
        service_advisor=normalize_text(raw.service_advisor),
        vehicle=vehicle,
        customer=CustomerInfo(
            customer_number=normalize_text(raw.customer_number),
            name=normalize_text(raw.customer_name),
        ),
        total_cost=total_cost,
        total_sale=total_sale,
        operations=list(operations),
        diagnostics=warnings,
    )

    return ValidationResult(is_valid=True, record=record, warnings=warnings)
