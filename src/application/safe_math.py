"""
src/application/safe_math.py
Numeric helpers shared by sizing / fees / liquidation

Exports:
- safe_divide(): divisor 0, NaN, non-finite → 0
- is_defined(): finite 여부 (NaN/inf 구분용)
- clamp(): [low, high] 범위 제한
"""

import math


def safe_divide(numerator: float, denominator: float) -> float:
    """
    Safe division (금액 계산용)

    Rules:
        - denominator == 0, NaN, ±inf → 0.0
        - 결과가 NaN/±inf → 0.0

    Note:
        R/R, 청산가처럼 "undefined" 가 의미 있는 값은 이 함수로 0 을 만들지 말고
        호출부에서 NaN 을 직접 반환해야 한다.
    """
    if not denominator or math.isnan(denominator) or math.isinf(denominator):
        return 0.0
    result = numerator / denominator
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def is_defined(value: float | None) -> bool:
    """None, NaN, ±inf 가 아니면 True"""
    return value is not None and math.isfinite(value)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
