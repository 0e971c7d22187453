from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .config import RawFields


# ============================================================================
# 입력 모델
# ============================================================================

class RawRORecord(BaseModel):
    """
    DMS가 내보낸 RO 한 건 (타입 미확정 원문)
    - 수신 후 변경하지 않는다. 실패 결과에는 그대로 첨부된다.
    - DMS 컬럼명(alias) 또는 snake_case 필드명 모두로 생성 가능
    - 모르는 컬럼은 extra로 보존
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    # 딜러/테넌트
    dealer_id: Optional[str] = Field(None, alias=RawFields.DEALER_ID, description="딜러 ID (그대로 복사, 추론하지 않음)")
    vendor_dealer_id: Optional[str] = Field(None, alias=RawFields.VENDOR_DEALER_ID)
    dms_type: Optional[str] = Field(None, alias=RawFields.DMS_TYPE)

    # RO 헤더
    ro_number: Optional[str] = Field(None, alias=RawFields.RO_NUMBER)
    open_date: Optional[str] = Field(None, alias=RawFields.OPEN_DATE)
    close_date: Optional[str] = Field(None, alias=RawFields.CLOSE_DATE)
    ro_status: Optional[str] = Field(None, alias=RawFields.RO_STATUS)
    service_advisor: Optional[str] = Field(None, alias=RawFields.SERVICE_ADVISOR)

    # 차량
    vin: Optional[str] = Field(None, alias=RawFields.VIN)
    year: Optional[str] = Field(None, alias=RawFields.YEAR)
    make: Optional[str] = Field(None, alias=RawFields.MAKE)
    model: Optional[str] = Field(None, alias=RawFields.MODEL)
    mileage: Optional[str] = Field(None, alias=RawFields.MILEAGE)

    # 고객
    customer_number: Optional[str] = Field(None, alias=RawFields.CUSTOMER_NUMBER)
    customer_name: Optional[str] = Field(None, alias=RawFields.CUSTOMER_NAME)

    # 합계 (콤마 포함 문자열)
    total_cost: Optional[str] = Field(None, alias=RawFields.TOTAL_COST)
    total_sale: Optional[str] = Field(None, alias=RawFields.TOTAL_SALE)

    # 복합 필드: 오퍼레이션은 '|', 오퍼레이션 내부는 '^'
    operations: Optional[str] = Field(None, alias=RawFields.OPERATIONS)


# ============================================================================
# Decoder 중간 모델
# ============================================================================

@dataclass
class PartGroup:
    """
    헤더 슬롯 이후의 완전한 파트 토큰 묶음 (4개)
    - 위치가 곧 의미: part_number, quantity, unit_cost, unit_sale
    """
    index: int
    part_number: str
    quantity: str
    unit_cost: str
    unit_sale: str


@dataclass
class PartialPartGroup:
    """그룹 크기에 못 미치는 꼬리 토큰 (경고 후 버림)"""
    index: int
    tokens: List[str] = field(default_factory=list)


@dataclass
class OperationToken:
    """
    서브필드 시퀀스 하나를 위치 규칙에 따라 나눈 결과
    - 헤더 슬롯 값은 원문 문자열, 슬롯 자체가 없으면 None
    - missing_fields: 토큰 수가 모자라 비어 있는 헤더 슬롯 이름
    """
    index: int
    tokens: List[str]
    code: Optional[str] = None
    description: Optional[str] = None
    labor_hours: Optional[str] = None
    part_groups: List[PartGroup] = field(default_factory=list)
    partial_group: Optional[PartialPartGroup] = None
    missing_fields: List[str] = field(default_factory=list)


# ============================================================================
# 진단
# ============================================================================

class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """필드 단위 경고/오류. 결과에 붙으며 조용히 버려지지 않는다."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    field: str = Field(..., description="필드 경로 (예: operations[0].parts[1].quantity)")
    code: str = Field(..., description="기계 판독용 코드 (예: missing_required_field)")
    message: str

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


def error(field_path: str, code: str, message: str) -> Diagnostic:
    return Diagnostic(severity=Severity.ERROR, field=field_path, code=code, message=message)


def warning(field_path: str, code: str, message: str) -> Diagnostic:
    return Diagnostic(severity=Severity.WARNING, field=field_path, code=code, message=message)


# ============================================================================
# 출력 모델
# ============================================================================

class PartLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    part_number: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., ge=0)
    unit_cost: Optional[Decimal] = Field(None, ge=0)
    unit_sale: Optional[Decimal] = Field(
        None, ge=0, description="판매 단가 (토큰이 비면 unit_cost)"
    )


class Operation(BaseModel):
    """
    해석된 오퍼레이션 한 줄
    - labor_hours None은 공임 미청구
    - code는 Builder의 best-effort 결과에서 비어 있을 수 있으나, 그 경우 레코드는 거부된다
    """

    model_config = ConfigDict(frozen=True)

    code: str
    description: Optional[str] = None
    labor_hours: Optional[Decimal] = Field(None, ge=0)
    parts: List[PartLine] = Field(default_factory=list)


class VehicleInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    vin: Optional[str] = None
    year: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    mileage: Optional[int] = None


class CustomerInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer_number: Optional[str] = None
    name: Optional[str] = None


class ParsedServiceRecord(BaseModel):
    """
    검증을 통과한 서비스 레코드
    - Validator 통과 시에만 생성
    - diagnostics: 성공이어도 경고는 유지
    """

    model_config = ConfigDict(frozen=True)

    dealer_id: str
    vendor_dealer_id: Optional[str] = None
    dms_type: Optional[str] = None
    ro_number: str
    open_date: date
    close_date: Optional[date] = None
    ro_status: Optional[str] = None
    service_advisor: Optional[str] = None

    vehicle: VehicleInfo = Field(default_factory=VehicleInfo)
    customer: CustomerInfo = Field(default_factory=CustomerInfo)

    total_cost: Optional[Decimal] = None
    total_sale: Optional[Decimal] = None

    operations: List[Operation] = Field(default_factory=list)
    diagnostics: List[Diagnostic] = Field(default_factory=list)


class ParseSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    record: ParsedServiceRecord
    warnings: List[Diagnostic] = Field(default_factory=list)


class ParseFailure(BaseModel):
    """거부된 레코드. 운영자 확인용으로 원문을 보존한다."""

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    errors: List[Diagnostic]
    warnings: List[Diagnostic] = Field(default_factory=list)
    raw: RawRORecord


ParseResult = Union[ParseSuccess, ParseFailure]


class BatchSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_operations: int = 0
    total_part_lines: int = 0
    dealers: List[str] = Field(default_factory=list)


class BatchResult(BaseModel):
    """
    배치 파싱 결과
    - results[i]는 입력[i]에 대응 (호출 측이 원본과 매칭하는 데 사용)
    - succeeded + failed == total
    """

    model_config = ConfigDict(frozen=True)

    results: List[Union[ParseSuccess, ParseFailure]] = Field(default_factory=list)
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    warning_count: int = Field(0, serialization_alias="warningCount")
    summary: BatchSummary = Field(default_factory=BatchSummary)
