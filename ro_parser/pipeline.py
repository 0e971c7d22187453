from __future__ import annotations

from typing import List

from .decoder import decode
from .logger import get_logger
from .operation_builder import build_operation
from .schema import Diagnostic, Operation, ParseFailure, ParseResult, ParseSuccess, RawRORecord
from .validators import validate_record

logger = get_logger(__name__)


def parse_record(raw: RawRORecord) -> ParseResult:
    """
    RO 한 건 파싱: Decoder -> Operation Builder -> Validator

    - 입력 외의 상태를 쓰지 않는다 (같은 입력이면 같은 결과)
    - 잘못된 입력은 예외가 아니라 ParseFailure로 표현한다
    - 실패 시에만 원문을 결과에 붙인다
    """
    operations: List[Operation] = []
    diagnostics: List[Diagnostic] = []

    for i, tokens in enumerate(decode(raw.operations)):
        operation, op_diagnostics = build_operation(tokens, index=i)
        operations.append(operation)
        diagnostics.extend(op_diagnostics)

    validation = validate_record(raw, operations, diagnostics)

    if not validation.is_valid:
        logger.debug(
            f"RO {raw.ro_number!r} 거부: 오류 {len(validation.errors)}개, 경고 {len(validation.warnings)}개"
        )
        return ParseFailure(
            errors=validation.errors,
            warnings=validation.warnings,
            raw=raw,
        )

    logger.debug(
        f"RO {validation.record.ro_number} 파싱 완료: 오퍼레이션 {len(operations)}개, "
        f"경고 {len(validation.warnings)}개"
    )
    return ParseSuccess(record=validation.record, warnings=validation.warnings)
