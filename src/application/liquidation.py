"""
src/application/liquidation.py
Liquidation price estimate (Linear USDT, 보수적 근사)

Purpose:
- Isolated 청산가: 투입 margin 만 buffer
- Real 청산가: 계좌 전체 잔고를 buffer (cross 스타일)

Note:
- MMR 0.005 고정. 실제 거래소 tiered MMR 표와 다름 (추정치, 거래소 값과 차이 있음)
- leverage 1: LONG 0 (가격 0 까지 버팀), SHORT +inf (단순화 규칙)

Exports:
- MAINTENANCE_MARGIN_RATE
- LiquidationEstimate
- estimate_liquidation_prices()
"""

import math
from dataclasses import dataclass

from domain.trade import Direction
from application.safe_math import safe_divide

MAINTENANCE_MARGIN_RATE = 0.005


@dataclass
class LiquidationEstimate:
    """청산가 추정 결과 (undefined → NaN)"""
    isolated_price: float
    real_price: float


def estimate_liquidation_prices(
    entry_price: float,
    quantity: float,
    margin: float,
    position_size: float,
    leverage: float,
    account_size: float,
    direction: Direction,
) -> LiquidationEstimate:
    """
    청산가 계산

    LONG (leverage > 1):
        isolated = max(0, (qty × entry - margin) / (qty × (1 - MMR)))
        real     = max(0, (qty × entry - account) / (qty × (1 - MMR)))

    SHORT (leverage > 1):
        isolated = (margin + qty × entry) / (qty × (1 + MMR))
        real     = (account + qty × entry) / (qty × (1 + MMR))

    Args:
        entry_price: 진입가
        quantity: 수량
        margin: 투입 margin (0 이면 position_size / leverage 사용)
        position_size: notional (USDT)
        leverage: 레버리지
        account_size: 계좌 잔고 (real 청산가 buffer)
        direction: LONG / SHORT

    Returns:
        LiquidationEstimate (leverage <= 0, qty <= 0 → NaN)

    Example:
        entry = 100000, qty = 0.1, margin = 1000 (10x), LONG
        isolated = (10000 - 1000) / (0.1 × 0.995) = 90452.26
    """
    mmr = MAINTENANCE_MARGIN_RATE

    if leverage > 1 and quantity > 0 and entry_price > 0:
        initial_margin = margin if margin > 0 else safe_divide(position_size, leverage)
        notional = quantity * entry_price

        if direction == Direction.LONG:
            denominator = quantity * (1 - mmr)
            isolated = max(0.0, safe_divide(notional - initial_margin, denominator))
            real = max(0.0, safe_divide(notional - account_size, denominator))
        else:
            denominator = quantity * (1 + mmr)
            isolated = safe_divide(initial_margin + notional, denominator)
            real = safe_divide(account_size + notional, denominator)

        return LiquidationEstimate(isolated_price=isolated, real_price=real)

    if leverage == 1:
        price = 0.0 if direction == Direction.LONG else math.inf
        return LiquidationEstimate(isolated_price=price, real_price=price)

    return LiquidationEstimate(isolated_price=math.nan, real_price=math.nan)
