import logging

import pytest
from typing import Any, Callable, Dict

from ro_parser.schema import RawRORecord


SCENARIO_COMPOSITE = "OPC1^Brake Pad^1.5^PN100^2^10.00^12.00|OPC2^Oil Change^0.5"


@pytest.fixture(autouse=True)
def reset_package_logger():
    # setup_logger가 붙인 핸들러가 다음 테스트로 새지 않도록 정리
    yield
    pkg_logger = logging.getLogger("ro_parser")
    for handler in list(pkg_logger.handlers):
        handler.close()
        pkg_logger.removeHandler(handler)


@pytest.fixture
def scenario_composite() -> str:
    # 브레이크 패드(파트 1개) + 오일 교환(파트 없음)
    return SCENARIO_COMPOSITE


@pytest.fixture
def make_raw() -> Callable[..., RawRORecord]:
    # 필수 필드가 채워진 RawRORecord 팩토리, 키워드로 덮어쓰기
    def _make(**overrides: Any) -> RawRORecord:
        fields: Dict[str, Any] = {
            "dealer_id": "D1",
            "ro_number": "1001",
            "open_date": "2024-01-01",
            "operations": SCENARIO_COMPOSITE,
        }
        fields.update(overrides)
        return RawRORecord(**fields)

    return _make


@pytest.fixture
def sample_dms_row() -> Dict[str, Any]:
    # DMS 내보내기 컬럼명 그대로의 한 행
    return {
        "File Type": "RO",
        "DV Dealer ID": "D100",
        "Vendor Dealer ID": "V-778",
        "DMS Type": "CDK",
        "RO Number": 58123,
        "Open Date": "01/15/2024",
        "Close Date": "01/16/2024",
        "RO Status": "C",
        "Service Advisor Name": "KIM, J",
        "VIN": "1hgcm82633a004352",
        "Year": 2019,
        "Make": "HONDA",
        "Model": "ACCORD",
        "RO Mileage": "45,210",
        "Customer Number": "C-001",
        "Full Name": "DOE, JANE",
        "Total Cost": "6,929.96",
        "Total Sale": "8,120.00",
        "Operations": "BRK01^Front brake pads^1.5^PN100^2^10.00^12.00|LOF^Oil change^0.5^OF-22^1^4.10^",
    }
