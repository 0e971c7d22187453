from __future__ import annotations

import sys
from typing import Optional, TextIO


# 색상 상수
class Colors:
    """ANSI 색상 코드"""
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    RESET = "\033[0m"


class ProgressBar:
    """입력 파일 진행률 (실패 파일 수를 함께 표시)"""

    def __init__(
        self,
        total: int,
        prefix: str = "",
        width: int = 40,
        stream: Optional[TextIO] = None
    ):
        self.total = total
        self.prefix = prefix
        self.width = width
        self.stream = stream or sys.stdout
        self.current = 0
        self.failed = 0

    def update(self, step: int = 1, failed: bool = False) -> None:
        self.current = min(self.total, self.current + step)
        if failed:
            self.failed += 1
        self.render()

    def render(self) -> None:
        if self.total == 0:
            return

        filled = int(self.width * self.current / self.total)
        bar = "█" * filled + "░" * (self.width - filled)
        percent = int(100 * self.current / self.total)

        line = f"\r{self.prefix} |{bar}| {percent}% ({self.current}/{self.total})"
        if self.failed:
            line += f" 실패 {self.failed}"
        self.stream.write(line)

        # 완료 시 줄바꿈
        if self.current >= self.total:
            self.stream.write("\n")
        self.stream.flush()

    def finish(self) -> None:
        self.current = self.total
        self.render()


def print_section_header(title: str, width: int = 60) -> None:
    """섹션 헤더 출력"""
    border = "=" * width
    print(f"\n{border}\n{title:^{width}}\n{border}")


def print_status(
    symbol: str,
    status: str,
    detail: str = "",
    color: Optional[str] = None
) -> None:
    output = f"{symbol} {status}"
    if detail:
        output += f": {detail}"
    if color:
        output = f"{color}{output}{Colors.RESET}"
    print(f"  {output}")


def print_file_status(name: str, status: str, record_count: int = 0, rejected: int = 0) -> None:
    """
    파일 처리 결과 한 줄
    - SUCCESS: 레코드 거부가 있으면 노란색
    - MISSING / FAILED: 파일 단위 문제
    """
    if status == "SUCCESS" and rejected:
        print_status("✗", name, f"{record_count}건 중 {rejected}건 거부", Colors.YELLOW)
    elif status == "SUCCESS":
        print_status("✓", name, f"{record_count}건 성공", Colors.GREEN)
    elif status == "MISSING":
        print_status("!", name, "파일 없음", Colors.YELLOW)
    else:
        print_status("✗", name, "처리 실패", Colors.RED)
