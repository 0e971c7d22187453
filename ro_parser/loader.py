import json
from pathlib import Path
from typing import Any

from .config import Constants
from .error_handler import FileReadError


def load_request_json(path: str) -> Any:
    """
    요청 본문 JSON 파일 읽기
    - 봉투 구조 확인은 request.parse_request에서 한다
    """
    p = Path(path)
    try:
        with p.open("r", encoding=Constants.DEFAULT_ENCODING) as f:
            return json.load(f)
    except OSError as e:
        raise FileReadError(f"파일을 읽을 수 없음: {p}") from e
    except UnicodeDecodeError as e:
        raise FileReadError(f"인코딩 오류: {p} ({Constants.DEFAULT_ENCODING} 아님, byte {e.start})") from e
    except json.JSONDecodeError as e:
        raise FileReadError(f"JSON 형식 오류: {p} (line {e.lineno}, col {e.colno})") from e
