"""
reporter.py 모듈 테스트
"""
from ro_parser.batch import parse_batch
from ro_parser.pipeline import parse_record
from ro_parser.reporter import format_batch, format_diagnostic, format_result
from ro_parser.schema import error, warning


class TestFormatDiagnostic:

    def test_error_line(self):
        d = error("ro_number", "missing_required_field", "ro number is required")

        assert format_diagnostic(d) == "[ERROR] ro_number: ro number is required (missing_required_field)"

    def test_warning_line(self):
        d = warning("operations", "no_operations", "no operations present")

        assert format_diagnostic(d) == "[WARNING] operations: no operations present (no_operations)"


class TestFormatResult:

    def test_success(self, make_raw):
        text = format_result(parse_record(make_raw()))

        assert "✓ RO 1001 [딜러 D1] 파싱 성공" in text
        assert "오퍼레이션: 2개" in text
        assert "OPC1 Brake Pad / 공임 1.5h / 파트 1개" in text
        assert "PN100 x2 원가 $10.00 / 판매가 $12.00" in text
        assert "- 경고: 0개" in text

    def test_failure_lists_every_diagnostic(self, make_raw):
        """진단은 하나도 생략하지 않는다"""
        result = parse_record(make_raw(ro_number=None, open_date="bad", vin="SHORT"))
        text = format_result(result)

        assert "✗ RO (번호 없음) [딜러 D1] 파싱 실패" in text
        assert "- 오류: 2개" in text
        assert "- 경고: 1개" in text
        for d in result.errors + result.warnings:
            assert format_diagnostic(d) in text

    def test_index_prefix(self, make_raw):
        text = format_result(parse_record(make_raw()), index=3)

        assert text.startswith("[레코드 3] ")

    def test_unbilled_labor(self, make_raw):
        text = format_result(parse_record(make_raw(operations="OPC9^Inspect^")))

        assert "공임 (미청구)" in text


class TestFormatBatch:

    def test_batch_summary(self, make_raw):
        batch = parse_batch([make_raw(), make_raw(ro_number=None), make_raw(operations="")])
        text = format_batch(batch)

        assert "배치 파싱 결과: 2 / 3 성공" in text
        assert "실패:   1건" in text
        assert "경고:   1개" in text
        assert "딜러: D1" in text
        assert "[레코드 0]" in text
        assert "[레코드 2]" in text
        assert "missing_required_field" in text

    def test_empty_batch(self):
        text = format_batch(parse_batch([]))

        assert "배치 파싱 결과: 0 / 0 성공" in text
        assert "딜러: (없음)" in text
        assert "[레코드" not in text
