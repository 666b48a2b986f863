"""
src/application/fees.py
Trading fee estimation (Linear USDT)

Purpose:
- Entry fee: 항상 taker (market entry)
- TP exit fee: 이익 방향 목표 → maker (limit), 손실 방향 목표 → taker (market exit)
- SL exit fee: taker, valid stop 일 때만
- Fee = notional × fee_rate (단위: USDT)

Exports:
- estimate_fee_usdt(): notional × rate
- entry_fee(), take_profit_exit_fee(), stop_loss_exit_fee()
- fee_percent_of_position(): 총 수수료 / position size × 100
"""

from domain.trade import ExchangeFeeSchedule
from application.safe_math import safe_divide


def estimate_fee_usdt(notional_usdt: float, fee_rate: float) -> float:
    """
    Fee 예상 (Linear USDT)

        fee_usdt = notional × fee_rate

    Example:
        notional = 5200 USDT, fee_rate = 0.0004 (Binance taker)
        fee = 2.08 USDT
    """
    return notional_usdt * fee_rate


def entry_fee(position_size: float, schedule: ExchangeFeeSchedule) -> float:
    """Entry fee (taker)"""
    return estimate_fee_usdt(position_size, schedule.taker_rate)


def exit_fee_rate(is_profit_target: bool, schedule: ExchangeFeeSchedule) -> float:
    """
    TP exit fee rate

    이익 방향 목표는 limit 청산 (maker), 손실 방향 목표는 market 청산 (taker)
    """
    if is_profit_target:
        return schedule.maker_rate
    return schedule.taker_rate


def take_profit_exit_fee(
    position_size: float,
    weight_percent: float,
    is_profit_target: bool,
    schedule: ExchangeFeeSchedule,
) -> float:
    """
    TP 슬롯 exit fee

        exit_fee = (position_size × weight / 100) × exit_fee_rate
    """
    portion = position_size * (weight_percent / 100)
    return estimate_fee_usdt(portion, exit_fee_rate(is_profit_target, schedule))


def stop_loss_exit_fee(
    position_size: float, stop_valid: bool, schedule: ExchangeFeeSchedule
) -> float:
    """SL exit fee (taker, 전체 position). Invalid stop → 0"""
    if not stop_valid:
        return 0.0
    return estimate_fee_usdt(position_size, schedule.taker_rate)


def fee_percent_of_position(total_fees: float, position_size: float) -> float:
    """총 수수료가 position size 에서 차지하는 비율 (%). position 0 → 0"""
    return safe_divide(total_fees, position_size) * 100
