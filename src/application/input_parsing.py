"""
src/application/input_parsing.py
Raw text input → number (caller 측 parsing)

원칙:
- 빈 문자열 / 파싱 실패 / NaN → None (예외 없음)
- Leverage 는 정수, [1, 125] clamp
- 금액/비율 입력은 음수 → 0

Exports:
- parse_float_input()
- parse_non_negative()
- parse_leverage()
"""

import math
from typing import Optional, Union

MIN_LEVERAGE = 1
MAX_LEVERAGE = 125

RawInput = Union[str, int, float, None]


def parse_float_input(value: RawInput) -> Optional[float]:
    """
    Float 파싱

    Returns:
        float, 또는 None (None / 공백 / 숫자 아님 / NaN / inf)
        "12abc" 처럼 앞부분만 숫자인 문자열도 None (부분 파싱 안 함)
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def parse_non_negative(value: RawInput) -> float:
    """Account size / fixed margin / risk % 용: 파싱 실패 또는 음수 → 0"""
    parsed = parse_float_input(value)
    if parsed is None or parsed < 0:
        return 0.0
    return parsed


def parse_leverage(value: RawInput) -> int:
    """
    Leverage 파싱 (정수, [1, 125] clamp)

    Example:
        "52" → 52, "200" → 125, "0" → 1, "abc" → 1, "10.7" → 10
    """
    parsed = parse_float_input(value)
    if parsed is None:
        return MIN_LEVERAGE
    return max(MIN_LEVERAGE, min(MAX_LEVERAGE, int(parsed)))
