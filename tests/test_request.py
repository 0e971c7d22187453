"""
request.py 모듈 테스트
- parse_request: 봉투 -> RawRORecord / List[RawRORecord]
- handle_request: (상태 코드, 응답 본문)
"""
import pytest
from ro_parser.error_handler import RequestError
from ro_parser.request import HTTP_BAD_REQUEST, HTTP_OK, handle_request, parse_request
from ro_parser.schema import RawRORecord
from ro_parser.schemas import validate_batch_response, validate_single_response


class TestParseRequest:

    def test_single_record(self, sample_dms_row):
        parsed = parse_request({"record": sample_dms_row})

        assert isinstance(parsed, RawRORecord)
        assert parsed.dealer_id == "D100"
        assert parsed.ro_number == "58123"

    def test_batch_records(self, sample_dms_row):
        parsed = parse_request({"records": [sample_dms_row, {"RO Number": "2"}]})

        assert isinstance(parsed, list)
        assert [r.ro_number for r in parsed] == ["58123", "2"]

    def test_records_wins_over_record(self, sample_dms_row):
        """records 배열이 있으면 배치"""
        parsed = parse_request({"record": sample_dms_row, "records": []})

        assert parsed == []

    def test_snake_case_keys_accepted(self):
        parsed = parse_request({"record": {"dealer_id": "D1", "ro_number": "7"}})

        assert parsed.dealer_id == "D1"

    def test_unknown_columns_preserved(self, sample_dms_row):
        parsed = parse_request({"record": sample_dms_row})

        assert parsed.model_extra["File Type"] == "RO"

    @pytest.mark.parametrize("body", [None, [], "text", 3])
    def test_body_not_object(self, body):
        with pytest.raises(RequestError, match="request body must be an object"):
            parse_request(body)

    def test_neither_key(self):
        with pytest.raises(RequestError, match="'record' or 'records'"):
            parse_request({"rows": []})

    def test_records_not_array(self):
        with pytest.raises(RequestError, match="'records' must be an array"):
            parse_request({"records": {"RO Number": "1"}})

    def test_record_not_object(self):
        with pytest.raises(RequestError, match="record must be an object"):
            parse_request({"record": "D1|1001"})

    def test_batch_item_not_object(self):
        """배치 항목 위치를 메시지에 포함"""
        with pytest.raises(RequestError, match=r"records\[1\] must be an object"):
            parse_request({"records": [{}, 42]})

    def test_invalid_column_value(self):
        """컬럼 값이 객체/배열이면 봉투 오류"""
        with pytest.raises(RequestError, match="invalid column values"):
            parse_request({"record": {"RO Number": {"nested": True}}})


class TestHandleRequest:

    def test_single_success(self, sample_dms_row):
        status, body = handle_request({"record": sample_dms_row})

        assert status == HTTP_OK
        assert body["success"] is True
        assert body["data"]["ro_number"] == "58123"
        assert body["warnings"] == []
        assert "errors" not in body
        assert validate_single_response(body)

    def test_single_failure_is_still_200(self):
        """레코드 거부는 파싱 결과이지 요청 오류가 아니다"""
        status, body = handle_request({"record": {"DV Dealer ID": "D1"}})

        assert status == HTTP_OK
        assert body["success"] is False
        assert {e["field"] for e in body["errors"]} == {"ro_number", "open_date"}
        assert "data" not in body
        assert validate_single_response(body)

    def test_batch(self, sample_dms_row):
        status, body = handle_request({"records": [sample_dms_row, {"DV Dealer ID": "D1"}]})

        assert status == HTTP_OK
        assert body["success"] is True
        batch = body["batchResult"]
        assert batch["total"] == 2
        assert batch["succeeded"] == 1
        assert batch["failed"] == 1
        assert batch["results"][1]["raw"]["DV Dealer ID"] == "D1"
        assert validate_batch_response(body)

    def test_empty_batch(self):
        status, body = handle_request({"records": []})

        assert status == HTTP_OK
        assert body["batchResult"]["total"] == 0
        assert body["batchResult"]["results"] == []

    def test_envelope_error_is_400(self):
        status, body = handle_request({"nothing": 1})

        assert status == HTTP_BAD_REQUEST
        assert body["success"] is False
        assert "'record' or 'records'" in body["error"]

    def test_concurrent_batch(self, sample_dms_row):
        rows = [dict(sample_dms_row, **{"RO Number": str(n)}) for n in range(8)]
        _, sequential = handle_request({"records": rows})
        _, concurrent = handle_request({"records": rows}, max_workers=4)

        assert concurrent == sequential
