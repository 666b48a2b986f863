"""
src/application/formatting.py
표시용 숫자 포맷 (CLI / UI 공용)

Sentinel:
- None / NaN → "N/A"
- +inf (SHORT leverage 1 청산가) → "∞" (format_price 만)
- "-0.00" → "0.00"
"""

import math
from typing import Optional

from application.safe_math import is_defined

NOT_AVAILABLE = "N/A"
INFINITY_LABEL = "∞"


def _fixed(num: float, decimals: int) -> str:
    text = f"{num:.{decimals}f}"
    if text == "-0." + "0" * decimals or (decimals == 0 and text == "-0"):
        return text[1:]
    return text


def format_number(num: Optional[float], decimals: int = 2) -> str:
    if not is_defined(num):
        return NOT_AVAILABLE
    return _fixed(num, decimals)


def format_high_precision(num: Optional[float], decimals: int = 6) -> str:
    """수량 표시용. 0 < |num| < 1e-4 이면 8자리"""
    if not is_defined(num):
        return NOT_AVAILABLE
    if 0 < abs(num) < 1e-4:
        decimals = 8
    return _fixed(num, decimals)


def format_price(num: Optional[float]) -> str:
    """
    가격 표시

    - num < 1   → 6자리
    - num < 100 → 4자리
    - 그 외     → 2자리
    """
    if num is None or math.isnan(num):
        return NOT_AVAILABLE
    if math.isinf(num):
        return INFINITY_LABEL if num > 0 else NOT_AVAILABLE

    decimals = 2
    if 0 < num < 1:
        decimals = 6
    elif 0 < num < 100:
        decimals = 4
    return _fixed(num, decimals)


def format_ratio(num: Optional[float]) -> str:
    """R/R 표시 (undefined → "N/A", 그 외 "1:2.50")"""
    if not is_defined(num):
        return NOT_AVAILABLE
    return f"1:{_fixed(num, 2)}"
