"""
src/application/sizing.py
Position sizing: Linear USDT futures

Purpose:
- Stop-loss 유효성 + 거리 계산
- Effective sizing mode 결정 (RISK_PERCENT → FIXED_MARGIN fallback)
- Qty / Margin / Position size 계산
- Margin > account 경고 (FIXED_MARGIN 에서는 보정 안 함)

Design Decisions:
- Linear 공식: loss_usdt = qty × |entry - stop|
- RISK_PERCENT 는 valid stop 없으면 정의 불가 → FIXED_MARGIN 으로 fallback
- FIXED_MARGIN margin 은 사용자가 선택한 값 → account 초과해도 clamp 하지 않음

Exports:
- evaluate_stop_loss(): StopLossEvaluation (valid, distance)
- resolve_sizing_mode(): effective SizingMode
- size_position(): SizingResult
"""

import logging
from dataclasses import dataclass

from domain.trade import Direction, SizingMode, StopLossConfig
from application.price_resolution import is_loss_side
from application.safe_math import safe_divide

logger = logging.getLogger(__name__)


@dataclass
class StopLossEvaluation:
    """
    Stop-loss 검증 결과

    Attributes:
        valid: enabled + price > 0 + 손실 방향
        distance: |entry - stop| (invalid 이면 0)
    """
    valid: bool
    distance: float = 0.0


@dataclass
class SizingParams:
    """
    Sizing 파라미터 (Linear USDT)

    Attributes:
        account_size: 계좌 잔고 (USDT)
        leverage: 레버리지 (1~125)
        entry_price: 진입가
        sizing_mode: effective mode (resolve_sizing_mode 결과)
        fixed_margin_amount: FIXED_MARGIN 모드 margin (USDT)
        risk_percent: RISK_PERCENT 모드 위험 비율 (%, 예: 10 = 10%)
        stop_distance: |entry - stop| (invalid 이면 0)
        stop_valid: stop-loss 유효 여부
    """
    account_size: float
    leverage: float
    entry_price: float
    sizing_mode: SizingMode
    fixed_margin_amount: float
    risk_percent: float
    stop_distance: float
    stop_valid: bool


@dataclass
class SizingResult:
    """
    Sizing 결과

    Attributes:
        quantity: 수량 (base asset, 예: BTC)
        margin: 투입 margin (USDT)
        position_size: notional (USDT)
        risk_amount: stop 도달 시 gross 손실 (FIXED_MARGIN 에서는 정보용)
        exceeds_account: margin > account_size
        required_margin: 표시용 margin (초과해도 그대로)
    """
    quantity: float
    margin: float
    position_size: float
    risk_amount: float
    exceeds_account: bool
    required_margin: float


def evaluate_stop_loss(
    entry_price: float, stop_loss: StopLossConfig, direction: Direction
) -> StopLossEvaluation:
    """
    Stop-loss 유효성 검증

    Invalid 조건 (에러 아님, "no stop-loss" 로 degrade):
        - disabled
        - price None 또는 <= 0
        - 이익 방향 (LONG: stop >= entry, SHORT: stop <= entry)
        - stop == entry (거리 0)
    """
    if not stop_loss.enabled:
        return StopLossEvaluation(valid=False)

    price = stop_loss.price
    if price is None or price <= 0 or entry_price <= 0:
        return StopLossEvaluation(valid=False)

    if not is_loss_side(entry_price, price, direction):
        logger.debug(
            "Stop-loss %.8f on wrong side of entry %.8f (%s), treating as no stop-loss",
            price, entry_price, direction.value,
        )
        return StopLossEvaluation(valid=False)

    return StopLossEvaluation(valid=True, distance=abs(entry_price - price))


def resolve_sizing_mode(requested: SizingMode, stop_valid: bool) -> SizingMode:
    """
    Effective sizing mode

    RISK_PERCENT 는 valid stop-loss 가 있어야만 적용 (stop 거리로 qty 를 나누기 때문).
    """
    if requested == SizingMode.RISK_PERCENT and not stop_valid:
        logger.debug("RISK_PERCENT requested without valid stop-loss, falling back to FIXED_MARGIN")
        return SizingMode.FIXED_MARGIN
    return requested


def size_position(params: SizingParams) -> SizingResult:
    """
    Qty / Margin / Position size 계산

    RISK_PERCENT:
        risk_amount = account × risk% / 100
        qty = risk_amount / stop_distance
        position_size = qty × entry
        margin = position_size / leverage

    FIXED_MARGIN:
        margin = fixed_margin_amount
        position_size = margin × leverage
        qty = position_size / entry
        risk_amount = qty × stop_distance (stop valid 일 때만)

    Example (FIXED_MARGIN):
        margin = 100 USDT, leverage = 52, entry = 84882
        position_size = 5200 USDT
        qty = 5200 / 84882 = 0.06126 BTC
    """
    if params.sizing_mode == SizingMode.RISK_PERCENT:
        risk_amount = params.account_size * (params.risk_percent / 100)
        quantity = safe_divide(risk_amount, params.stop_distance)
        position_size = quantity * params.entry_price
        margin = safe_divide(position_size, params.leverage)
    else:
        margin = params.fixed_margin_amount
        position_size = margin * params.leverage
        quantity = safe_divide(position_size, params.entry_price)
        if params.stop_valid:
            risk_amount = quantity * params.stop_distance
        else:
            risk_amount = 0.0

    return SizingResult(
        quantity=quantity,
        margin=margin,
        position_size=position_size,
        risk_amount=risk_amount,
        exceeds_account=margin > params.account_size,
        required_margin=margin,
    )
