"""Share code generation and format checks (4 digits, leading zeros kept)."""

from __future__ import annotations

import re
import secrets
from typing import Any

SHARE_CODE_LENGTH = 4
_SHARE_CODE_RE = re.compile(r"[0-9]{4}")


def generate_share_code() -> str:
    """Random code in 0000-9999."""
    return f"{secrets.randbelow(10 ** SHARE_CODE_LENGTH):0{SHARE_CODE_LENGTH}d}"


def validate_share_code_format(code: Any) -> bool:
    return isinstance(code, str) and _SHARE_CODE_RE.fullmatch(code) is not None


def normalize_share_code(code: Any) -> str:
    """Trim user input; anything that is not a string becomes ''."""
    if not isinstance(code, str):
        return ""
    return code.strip()
