"""
RO 파싱 파이프라인 설정 및 정책 상수
"""
from __future__ import annotations
import re
from typing import Dict, List

# ============================================================================
# 와이어 포맷 구분자 (Decoder)
# ============================================================================

class Delimiters:
    """DMS 복합 필드 구분자 (요청 단위로 바꿀 수 없는 고정값)"""

    OPERATION = "|"  # 오퍼레이션 사이
    INTRA_OPERATION = "^"  # 오퍼레이션 내부 서브필드 사이

    @classmethod
    def all(cls) -> List[str]:
        return [cls.OPERATION, cls.INTRA_OPERATION]


# ============================================================================
# 오퍼레이션 서브필드 배치 (Operation Builder)
# ============================================================================

class OperationLayout:
    """서브필드 위치 규칙"""

    # 고정 위치 헤더 슬롯
    CODE = 0
    DESCRIPTION = 1
    LABOR_HOURS = 2
    HEADER_SLOTS = ["code", "description", "labor_hours"]
    HEADER_SIZE = 3

    # 헤더 이후 파트 라인 그룹 (part_number, quantity, unit_cost, unit_sale)
    PART_FIELDS = ["part_number", "quantity", "unit_cost", "unit_sale"]
    PART_GROUP_SIZE = 4


# ============================================================================
# 검증 정책 (Validator)
# ============================================================================

class ValidationPolicy:
    """도메인 검증 정책"""

    # 필수 필드
    REQUIRED_FIELDS = ["dealer_id", "ro_number", "open_date"]

    # VIN 길이 (체크섬은 검사하지 않음)
    VIN_LENGTH = 17

    # 수량 토큰이 비어 있을 때 기본값
    DEFAULT_PART_QUANTITY = "1"


# ============================================================================
# 날짜 포맷 (Normalizer)
# ============================================================================

class DateFormats:
    """DMS 내보내기에서 관찰되는 날짜 포맷 (앞에서부터 시도)"""

    FORMATS = [
        "%Y-%m-%d",
        "%m/%d/%Y",
        "%m/%d/%y",
        "%Y/%m/%d",
        "%Y%m%d",
        "%m-%d-%Y",
    ]


# ============================================================================
# 정규식 패턴 (Normalizer)
# ============================================================================

class Patterns:
    """토큰 정규화를 위한 정규식 패턴"""

    # 날짜 뒤에 붙은 시간 꼬리
    # 예: 2024-01-01T10:15:00 / 2024-01-01 10:15 / 01/15/2024 08:00:00 AM
    DATE_TIME_TAIL = re.compile(
        r"^(?P<date>[^\sT]+)(?:[T\s]\d{1,2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:\s*[AaPp][Mm])?(?:Z|[+-]\d{2}:?\d{2})?)$"
    )

    # 금액 (천단위 콤마, 선행 $ 허용)
    # 예: 6,929.96 / $12.00 / -3.50 / 1234
    MONEY = re.compile(
        r"^(?P<sign>-)?\$?(?P<num>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d*\.?\d+)$"
    )

    # 소수 (시간, 수량)
    DECIMAL = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)$")

    # 정수 (주행거리 등, 천단위 콤마 허용)
    INTEGER = re.compile(r"^-?\d{1,3}(?:,\d{3})+$|^-?\d+$")


# ============================================================================
# DMS 원본 컬럼명 (RawRORecord alias)
# ============================================================================

class RawFields:
    """DMS 내보내기 컬럼명"""

    DEALER_ID = "DV Dealer ID"
    VENDOR_DEALER_ID = "Vendor Dealer ID"
    DMS_TYPE = "DMS Type"
    RO_NUMBER = "RO Number"
    OPEN_DATE = "Open Date"
    CLOSE_DATE = "Close Date"
    RO_STATUS = "RO Status"
    SERVICE_ADVISOR = "Service Advisor Name"
    VIN = "VIN"
    YEAR = "Year"
    MAKE = "Make"
    MODEL = "Model"
    MILEAGE = "RO Mileage"
    CUSTOMER_NUMBER = "Customer Number"
    CUSTOMER_NAME = "Full Name"
    TOTAL_COST = "Total Cost"
    TOTAL_SALE = "Total Sale"
    OPERATIONS = "Operations"

    @classmethod
    def as_dict(cls) -> Dict[str, str]:
        """필드명 -> 컬럼명 딕셔너리"""
        return {
            "dealer_id": cls.DEALER_ID,
            "vendor_dealer_id": cls.VENDOR_DEALER_ID,
            "dms_type": cls.DMS_TYPE,
            "ro_number": cls.RO_NUMBER,
            "open_date": cls.OPEN_DATE,
            "close_date": cls.CLOSE_DATE,
            "ro_status": cls.RO_STATUS,
            "service_advisor": cls.SERVICE_ADVISOR,
            "vin": cls.VIN,
            "year": cls.YEAR,
            "make": cls.MAKE,
            "model": cls.MODEL,
            "mileage": cls.MILEAGE,
            "customer_number": cls.CUSTOMER_NUMBER,
            "customer_name": cls.CUSTOMER_NAME,
            "total_cost": cls.TOTAL_COST,
            "total_sale": cls.TOTAL_SALE,
            "operations": cls.OPERATIONS,
        }


# ============================================================================
# 진단 코드
# ============================================================================

class DiagnosticCodes:
    """Diagnostic.code 값"""

    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_DATE = "invalid_date"
    INVALID_NUMBER = "invalid_number"
    NEGATIVE_VALUE = "negative_value"
    INVALID_DEALER_ID = "invalid_dealer_id"
    CLOSE_BEFORE_OPEN = "close_before_open"
    INVALID_VIN_LENGTH = "invalid_vin_length"
    NO_OPERATIONS = "no_operations"
    MISSING_SUBFIELD = "missing_subfield"
    MISSING_OPERATION_CODE = "missing_operation_code"
    MISSING_PART_NUMBER = "missing_part_number"
    PARTIAL_PART_GROUP = "partial_part_group"
    DEFAULTED_QUANTITY = "defaulted_quantity"


# ============================================================================
# 기타 상수
# ============================================================================

class Constants:
    """기타 파이프라인 상수"""

    # Batch
    DEFAULT_MAX_WORKERS = 1  # 1 이하이면 순차 처리

    # 파일 출력
    DEFAULT_ENCODING = "utf-8"
    JSON_INDENT = 2
