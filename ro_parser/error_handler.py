from __future__ import annotations

import traceback
from typing import Optional, Dict, Any, List
from dataclasses import dataclass


# 커스텀 예외 클래스
class ROParserError(Exception):
    """RO 파서 기본 예외"""
    pass


class RequestError(ROParserError):
    """요청 봉투(envelope) 형식 오류 - 파싱 시작 전에 거부"""
    pass


class FileReadError(ROParserError):
    """입력 파일 읽기 실패"""
    pass


class OutputError(ROParserError):
    """출력 파일 생성 실패"""
    pass


# 에러 정보 데이터 클래스
@dataclass
class ErrorInfo:
    error_type: str
    error_message: str
    source: str
    stage: str = ""
    cause: Optional[str] = None
    traceback_str: Optional[str] = None
    recoverable: bool = False


# 파일 단위 에러 수집기 (CLI용, 레코드 단위 문제는 Diagnostic으로 표현)
class ErrorHandler:

    def __init__(self, logger=None):
        self.logger = logger
        self.errors: List[ErrorInfo] = []

    def handle_error(
        self,
        error: Exception,
        source: str,
        stage: str = "",
        recoverable: bool = False,
    ) -> ErrorInfo:
        """
        에러 기록 + 로깅

        Args:
            error: 발생한 예외 (ROParserError 계열)
            source: 입력 파일명
            stage: 실패한 단계 (예: "요청 읽기", "결과 저장")
            recoverable: True면 해당 파일만 건너뛰고 나머지는 계속 처리 가능
        """
        tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        error_info = ErrorInfo(
            error_type=type(error).__name__,
            error_message=str(error),
            source=source,
            stage=stage,
            cause=repr(error.__cause__) if error.__cause__ is not None else None,
            traceback_str=tb,
            recoverable=recoverable,
        )

        self.errors.append(error_info)

        if self.logger:
            where = f"{source} / {stage}" if stage else source
            if recoverable:
                self.logger.warning(f"건너뜀 [{where}]: {error_info.error_type} - {error_info.error_message}")
            else:
                self.logger.error(f"처리 실패 [{where}]: {error_info.error_type} - {error_info.error_message}")
            self.logger.debug(f"스택 트레이스:\n{error_info.traceback_str}")

        return error_info

    def get_error_summary(self) -> Dict[str, Any]:
        """에러 요약 정보 반환"""
        by_type: Dict[str, int] = {}
        sources: List[str] = []
        for e in self.errors:
            by_type[e.error_type] = by_type.get(e.error_type, 0) + 1
            if e.source not in sources:
                sources.append(e.source)

        recoverable_count = sum(1 for e in self.errors if e.recoverable)
        return {
            "total": len(self.errors),
            "recoverable": recoverable_count,
            "critical": len(self.errors) - recoverable_count,
            "by_type": by_type,
            "sources": sources,
        }

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_critical_errors(self) -> bool:
        return any(not e.recoverable for e in self.errors)

    def clear_errors(self) -> None:
        self.errors.clear()

    def generate_error_report(self) -> str:
        """파일별로 묶은 에러 리포트"""
        if not self.errors:
            return "에러 없음"

        summary = self.get_error_summary()
        lines = [
            "=" * 60,
            "RO 파싱 에러 리포트",
            "=" * 60,
            f"실패 파일: {len(summary['sources'])}개 / 에러: {summary['total']}개 "
            f"(치명적 {summary['critical']}개)",
        ]
        for error_type, count in summary["by_type"].items():
            lines.append(f"  - {error_type}: {count}개")

        for source in summary["sources"]:
            lines.append("")
            lines.append(f"[{source}]")
            for e in (e for e in self.errors if e.source == source):
                stage = f" ({e.stage})" if e.stage else ""
                lines.append(f"  {e.error_type}{stage}: {e.error_message}")
                if e.cause:
                    lines.append(f"    원인: {e.cause}")

        lines.append("=" * 60)
        return "\n".join(lines)
