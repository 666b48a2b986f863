"""
src/application/trade_calculator.py
Trade calculator: TradeInputs → CalculationResult (순수 함수)

Purpose:
- Sizing, fees, TP profit, SL loss, R/R, 청산가를 한 번에 계산
- 상태 없음, I/O 없음 (재호출/병렬 호출 안전)

계산 순서 (데이터 의존성, 재배치 금지):
    1. Stop-loss 유효성
    2. Effective sizing mode
    3. Qty / Margin / Position size
    4. Fees
    5. TP 슬롯별 profit
    6. SL loss
    7. R/R
    8. 청산가

Exports:
- calculate(): 전체 계산
- calculate_take_profits(): TP 슬롯별 profit + weighted 합계
"""

import logging
import math
from dataclasses import dataclass
from typing import List

from domain.trade import (
    CalculationResult,
    Direction,
    ExchangeFeeSchedule,
    TakeProfitResult,
    TakeProfitSlot,
    TradeInputs,
)
from application import fees
from application.liquidation import estimate_liquidation_prices
from application.safe_math import safe_divide
from application.sizing import (
    SizingParams,
    evaluate_stop_loss,
    resolve_sizing_mode,
    size_position,
)

logger = logging.getLogger(__name__)


@dataclass
class TakeProfitTotals:
    """TP 계산 결과 (슬롯별 + 합계)"""
    results: List[TakeProfitResult]
    weighted_gross_profit: float
    weighted_net_profit: float
    exit_fee_total: float


def _price_delta(direction: Direction, entry_price: float, exit_price: float) -> float:
    """방향 기준 signed delta (양수 = 이익)"""
    if direction == Direction.LONG:
        return exit_price - entry_price
    return entry_price - exit_price


def calculate_take_profits(
    slots: List[TakeProfitSlot],
    direction: Direction,
    entry_price: float,
    quantity: float,
    position_size: float,
    account_size: float,
    entry_fee: float,
    schedule: ExchangeFeeSchedule,
) -> TakeProfitTotals:
    """
    TP 슬롯별 profit

    대상: enabled + target_price > 0 + weight > 0 + quantity > 0

        portion_qty = qty × weight / 100
        gross = portion_qty × delta
        net = gross - entry_fee × weight / 100 - exit_fee_portion
        % = profit / account × 100 (account 0 → 0)

    나머지 슬롯은 0 결과.
    """
    results: List[TakeProfitResult] = []
    weighted_gross = 0.0
    weighted_net = 0.0
    exit_fee_total = 0.0

    for slot in slots:
        if not (
            slot.enabled
            and slot.target_price is not None
            and slot.target_price > 0
            and slot.weight_percent > 0
            and quantity > 0
        ):
            results.append(TakeProfitResult())
            continue

        share = slot.weight_percent / 100
        delta = _price_delta(direction, entry_price, slot.target_price)
        is_profit_target = delta > 0

        gross = quantity * share * delta
        exit_fee = fees.take_profit_exit_fee(
            position_size, slot.weight_percent, is_profit_target, schedule
        )
        net = gross - entry_fee * share - exit_fee

        results.append(
            TakeProfitResult(
                gross_profit=gross,
                gross_profit_percent=safe_divide(gross, account_size) * 100,
                net_profit=net,
                net_profit_percent=safe_divide(net, account_size) * 100,
                exit_fee=exit_fee,
                is_loss_target=not is_profit_target,
            )
        )
        weighted_gross += gross
        weighted_net += net
        exit_fee_total += exit_fee

    return TakeProfitTotals(
        results=results,
        weighted_gross_profit=weighted_gross,
        weighted_net_profit=weighted_net,
        exit_fee_total=exit_fee_total,
    )


def calculate(inputs: TradeInputs) -> CalculationResult:
    """
    전체 계산

    Args:
        inputs: 파싱/resolve 완료된 TradeInputs

    Returns:
        CalculationResult
        - entry <= 0 또는 leverage < 1 → CalculationResult.neutral() (idle 상태, 에러 아님)

    Sentinel:
        - R/R: valid stop + loss > 0 일 때만 정의, 그 외 NaN
        - 청산가: leverage <= 0 / qty <= 0 → NaN, leverage 1 SHORT → inf
    """
    if inputs.entry_price <= 0 or inputs.leverage < 1:
        return CalculationResult.neutral(len(inputs.take_profits))

    account_size = max(inputs.account_size, 0.0)
    entry_price = inputs.entry_price
    leverage = inputs.leverage
    schedule = inputs.fee_schedule

    # 1. Stop-loss 유효성
    stop = evaluate_stop_loss(entry_price, inputs.stop_loss, inputs.direction)

    # 2. Effective sizing mode
    sizing_mode = resolve_sizing_mode(inputs.sizing_mode, stop.valid)

    # 3. Qty / Margin / Position size
    sizing = size_position(
        SizingParams(
            account_size=account_size,
            leverage=leverage,
            entry_price=entry_price,
            sizing_mode=sizing_mode,
            fixed_margin_amount=max(inputs.fixed_margin_amount, 0.0),
            risk_percent=max(inputs.risk_percent, 0.0),
            stop_distance=stop.distance,
            stop_valid=stop.valid,
        )
    )
    if sizing.exceeds_account:
        logger.debug(
            "Margin %.2f exceeds account size %.2f", sizing.margin, account_size
        )

    # 4. Fees
    entry_fee = fees.entry_fee(sizing.position_size, schedule)
    exit_fee_sl = fees.stop_loss_exit_fee(sizing.position_size, stop.valid, schedule)

    # 5. TP profit
    tp = calculate_take_profits(
        inputs.take_profits,
        inputs.direction,
        entry_price,
        sizing.quantity,
        sizing.position_size,
        account_size,
        entry_fee,
        schedule,
    )

    # 6. SL loss
    gross_loss = 0.0
    net_loss = 0.0
    if stop.valid and sizing.quantity > 0:
        gross_loss = sizing.quantity * stop.distance
        net_loss = gross_loss + entry_fee + exit_fee_sl

    # 7. R/R (undefined → NaN, 0 과 구분)
    if stop.valid and net_loss > 0:
        net_rr = safe_divide(tp.weighted_net_profit, net_loss)
    else:
        net_rr = math.nan
    if stop.valid and gross_loss > 0:
        gross_rr = safe_divide(tp.weighted_gross_profit, gross_loss)
    else:
        gross_rr = math.nan

    # 8. 청산가
    liquidation = estimate_liquidation_prices(
        entry_price=entry_price,
        quantity=sizing.quantity,
        margin=sizing.margin,
        position_size=sizing.position_size,
        leverage=leverage,
        account_size=account_size,
        direction=inputs.direction,
    )

    return CalculationResult(
        quantity=sizing.quantity,
        margin=sizing.margin,
        position_size=sizing.position_size,
        risk_amount=sizing.risk_amount,
        effective_sizing_mode=sizing_mode,
        stop_loss_valid=stop.valid,
        stop_loss_distance=stop.distance,
        entry_fee=entry_fee,
        exit_fee_tp=tp.exit_fee_total,
        exit_fee_sl=exit_fee_sl,
        take_profits=tp.results,
        weighted_gross_profit=tp.weighted_gross_profit,
        weighted_net_profit=tp.weighted_net_profit,
        gross_loss=gross_loss,
        gross_loss_percent=safe_divide(gross_loss, account_size) * 100,
        net_loss=net_loss,
        net_loss_percent=safe_divide(net_loss, account_size) * 100,
        gross_risk_reward=gross_rr,
        net_risk_reward=net_rr,
        liquidation_price=liquidation.isolated_price,
        real_liquidation_price=liquidation.real_price,
        exceeds_account=sizing.exceeds_account,
        required_margin=sizing.required_margin,
        account_size=account_size,
    )
