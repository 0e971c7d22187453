"""
operation_builder.py 모듈 단위 테스트
- build_operation: 서브필드 시퀀스 -> Operation + 진단
"""
from decimal import Decimal

import pytest
from ro_parser.operation_builder import build_operation
from ro_parser.schema import Severity


def _errors(diagnostics):
    return [d for d in diagnostics if d.severity == Severity.ERROR]


def _warnings(diagnostics):
    return [d for d in diagnostics if d.severity == Severity.WARNING]


class TestHeaderFields:

    def test_scenario_brake_pad(self):
        """코드/설명/공임 + 파트 1개, 진단 없음"""
        op, diagnostics = build_operation(["OPC1", "Brake Pad", "1.5", "PN100", "2", "10.00", "12.00"])

        assert op.code == "OPC1"
        assert op.description == "Brake Pad"
        assert op.labor_hours == Decimal("1.5")
        assert len(op.parts) == 1
        part = op.parts[0]
        assert part.part_number == "PN100"
        assert part.quantity == Decimal("2")
        assert part.unit_cost == Decimal("10.00")
        assert part.unit_sale == Decimal("12.00")
        assert diagnostics == []

    def test_scenario_oil_change_no_parts(self):
        """파트 없는 오퍼레이션"""
        op, diagnostics = build_operation(["OPC2", "Oil Change", "0.5"])

        assert op.code == "OPC2"
        assert op.labor_hours == Decimal("0.5")
        assert op.parts == []
        assert diagnostics == []

    def test_empty_labor_means_not_billed(self):
        """빈 공임 = 미청구, 진단 없음"""
        op, diagnostics = build_operation(["OPC1", "Desc", ""])

        assert op.labor_hours is None
        assert diagnostics == []

    def test_unparsable_labor_is_field_error(self):
        """공임 해석 실패 -> 오류, 나머지 필드는 계속 해석"""
        op, diagnostics = build_operation(["OPC1", "Desc", "abc", "PN1", "1", "2.00", "3.00"])

        errors = _errors(diagnostics)
        assert len(errors) == 1
        assert errors[0].field == "operations[0].labor_hours"
        assert errors[0].code == "invalid_number"
        assert op.labor_hours is None
        assert op.code == "OPC1"
        assert len(op.parts) == 1

    def test_negative_labor_is_error(self):
        """음수 공임 -> 오류"""
        op, diagnostics = build_operation(["OPC1", "Desc", "-1.0"])

        assert op.labor_hours is None
        assert [d.code for d in _errors(diagnostics)] == ["negative_value"]

    def test_empty_code_is_error(self):
        """코드 없음 -> 오류 (best-effort Operation은 반환)"""
        op, diagnostics = build_operation(["", "Desc", "1.0"])

        assert op.code == ""
        assert op.labor_hours == Decimal("1.0")
        errors = _errors(diagnostics)
        assert len(errors) == 1
        assert errors[0].field == "operations[0].code"
        assert errors[0].code == "missing_operation_code"

    def test_whitespace_code_is_error(self):
        _, diagnostics = build_operation(["   ", "Desc", "1.0"])
        assert _errors(diagnostics)[0].code == "missing_operation_code"

    def test_empty_description_allowed(self):
        """설명 없음 -> None, 진단 없음"""
        op, diagnostics = build_operation(["OPC1", "", "1.0"])

        assert op.description is None
        assert diagnostics == []

    def test_values_are_trimmed(self):
        op, _ = build_operation([" OPC1 ", " Brake Pad ", " 1.5 "])

        assert op.code == "OPC1"
        assert op.description == "Brake Pad"
        assert op.labor_hours == Decimal("1.5")


class TestMissingSubfields:

    def test_code_only(self):
        """서브필드 1개 -> description, labor_hours 각각 경고"""
        op, diagnostics = build_operation(["OPC1"])

        assert op.code == "OPC1"
        assert op.description is None
        assert op.labor_hours is None
        assert _errors(diagnostics) == []
        warnings = _warnings(diagnostics)
        assert [w.field for w in warnings] == [
            "operations[0].description",
            "operations[0].labor_hours",
        ]
        assert all(w.code == "missing_subfield" for w in warnings)

    def test_code_and_description(self):
        """서브필드 2개 -> labor_hours 경고 1개"""
        _, diagnostics = build_operation(["OPC1", "Desc"])

        assert [w.field for w in _warnings(diagnostics)] == ["operations[0].labor_hours"]

    def test_index_prefixes_field_paths(self):
        """index가 필드 경로에 반영"""
        _, diagnostics = build_operation(["OPC1"], index=3)

        assert all(d.field.startswith("operations[3].") for d in diagnostics)


class TestPartLines:

    def test_partial_group_discarded_with_warning(self):
        """그룹 크기 미만 꼬리 -> 경고 후 버림"""
        op, diagnostics = build_operation(["OPC1", "D", "1", "PN1", "2"])

        assert op.parts == []
        warnings = _warnings(diagnostics)
        assert len(warnings) == 1
        assert warnings[0].code == "partial_part_group"
        assert warnings[0].field == "operations[0].parts[0]"
        assert _errors(diagnostics) == []

    def test_full_group_then_partial(self):
        """완전한 그룹은 유지, 꼬리만 버림"""
        op, diagnostics = build_operation(
            ["OPC1", "D", "1", "PN1", "1", "2.00", "3.00", "PN2", "1", "5.00"]
        )

        assert [p.part_number for p in op.parts] == ["PN1"]
        assert [w.field for w in _warnings(diagnostics)] == ["operations[0].parts[1]"]

    @pytest.mark.parametrize("extra", [1, 2, 3, 5, 6, 7])
    def test_remainder_never_builds_partial_part_line(self, extra):
        """그룹 크기 배수가 아닌 만큼은 항상 버려진다"""
        tail = ["PN", "1", "1.00", "1.00", "PN", "1", "1.00"][:extra]
        op, diagnostics = build_operation(["OPC1", "D", "1"] + tail)

        assert len(op.parts) == extra // 4
        assert all(p.part_number and p.quantity is not None for p in op.parts)
        assert [d.code for d in diagnostics].count("partial_part_group") == 1

    def test_sale_defaults_to_cost(self):
        """판매가 비면 원가"""
        op, diagnostics = build_operation(["OPC1", "D", "1", "PN1", "2", "10.00", ""])

        assert op.parts[0].unit_sale == Decimal("10.00")
        assert diagnostics == []

    def test_money_with_thousands_separator(self):
        op, diagnostics = build_operation(["OPC1", "D", "1", "ENG-1", "1", "1,250.00", "$1,500.00"])

        assert op.parts[0].unit_cost == Decimal("1250.00")
        assert op.parts[0].unit_sale == Decimal("1500.00")
        assert diagnostics == []

    def test_missing_part_number_is_error(self):
        """파트 번호 없음 -> 오류, PartLine 없음"""
        op, diagnostics = build_operation(["OPC1", "D", "1", "", "2", "10.00", "12.00"])

        assert op.parts == []
        errors = _errors(diagnostics)
        assert [e.field for e in errors] == ["operations[0].parts[0].part_number"]
        assert errors[0].code == "missing_part_number"

    def test_missing_quantity_defaults_to_one(self):
        """수량 없음 -> 1로 채우고 경고"""
        op, diagnostics = build_operation(["OPC1", "D", "1", "PN1", "", "10.00", "12.00"])

        assert op.parts[0].quantity == Decimal("1")
        warnings = _warnings(diagnostics)
        assert [w.code for w in warnings] == ["defaulted_quantity"]
        assert warnings[0].field == "operations[0].parts[0].quantity"

    def test_invalid_quantity_is_error(self):
        """수량 해석 실패 -> 오류, PartLine 없음"""
        op, diagnostics = build_operation(["OPC1", "D", "1", "PN1", "two", "10.00", "12.00"])

        assert op.parts == []
        assert [e.field for e in _errors(diagnostics)] == ["operations[0].parts[0].quantity"]

    def test_invalid_cost_is_error_but_part_kept(self):
        """원가 오류는 필드 단위: PartLine은 만들어지고 unit_cost는 None"""
        op, diagnostics = build_operation(["OPC1", "D", "1", "PN1", "1", "ten", "12.00"])

        assert op.parts[0].unit_cost is None
        assert op.parts[0].unit_sale == Decimal("12.00")
        assert [e.field for e in _errors(diagnostics)] == ["operations[0].parts[0].unit_cost"]

    def test_negative_quantity_is_error(self):
        op, diagnostics = build_operation(["OPC1", "D", "1", "PN1", "-2", "10.00", "12.00"])

        assert op.parts == []
        assert [e.code for e in _errors(diagnostics)] == ["negative_value"]

    def test_second_group_paths(self):
        """두 번째 그룹 진단 경로는 parts[1]"""
        _, diagnostics = build_operation(
            ["OPC1", "D", "1", "PN1", "1", "1.00", "1.00", "", "1", "1.00", "1.00"], index=1
        )

        assert [d.field for d in diagnostics] == ["operations[1].parts[1].part_number"]
