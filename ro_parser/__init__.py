"""DMS 리페어 오더(RO) 레코드 파서"""
from .batch import parse_batch
from .pipeline import parse_record
from .schema import BatchResult, ParseFailure, ParseResult, ParseSuccess, RawRORecord

__all__ = [
    "parse_batch",
    "parse_record",
    "BatchResult",
    "ParseFailure",
    "ParseResult",
    "ParseSuccess",
    "RawRORecord",
]
