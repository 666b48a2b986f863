"""
src/application/price_resolution.py
TP/SL Percent ↔ Price resolution

Purpose:
- percent(entry 대비 거리, magnitude) 와 absolute price 는 같은 offset 의 두 표현
- source 필드(사용자가 마지막으로 입력한 쪽)를 기준으로 나머지 필드를 재계산
- Unresolved 는 None (0 으로 취급 금지)

Direction 규칙:
    LONG profit / SHORT loss  → price = entry × (1 + p/100)
    LONG loss   / SHORT profit → price = entry × (1 - p/100)

Exports:
- price_from_percent(), percent_from_price(): 단일 변환
- is_loss_side(): stop-loss 방향 검증
- resolve_take_profit(), resolve_stop_loss(), resolve_inputs(): 스냅샷 재계산
"""

from dataclasses import replace
from typing import Optional

from domain.trade import (
    Direction,
    PriceSource,
    StopLossConfig,
    TakeProfitSlot,
    TradeInputs,
)


def price_from_percent(
    entry: float,
    percent: Optional[float],
    direction: Direction,
    is_profit: bool,
) -> Optional[float]:
    """
    Percent → Price

    Args:
        entry: 진입가
        percent: entry 대비 거리 (%, magnitude)
        direction: LONG / SHORT
        is_profit: True = TP, False = SL

    Returns:
        price, 또는 None (entry <= 0, percent <= 0, 결과 price <= 0)

    Example:
        entry=80000, percent=2, LONG, profit → 81600
        entry=80000, percent=2, SHORT, loss  → 81600
    """
    if entry is None or entry <= 0 or percent is None or percent <= 0:
        return None

    upward = (direction == Direction.LONG) == is_profit
    sign = 1 if upward else -1
    price = entry * (1 + sign * percent / 100)
    if price <= 0:
        return None
    return price


def percent_from_price(
    entry: float,
    price: Optional[float],
    direction: Direction,
    is_profit: bool,
) -> Optional[float]:
    """
    Price → Percent (항상 non-negative magnitude)

    percent = |price - entry| / entry × 100

    direction / is_profit 은 결과 magnitude 에 영향 없음 (price_from_percent 와 signature 대칭).
    방향 검증은 is_loss_side() 가 담당.
    """
    if entry is None or entry <= 0 or price is None or price <= 0:
        return None
    return abs(price - entry) / entry * 100


def is_loss_side(entry: float, price: float, direction: Direction) -> bool:
    """
    Price 가 손실 방향인지 (entry 와 같으면 False)

    LONG: price < entry
    SHORT: price > entry
    """
    if direction == Direction.LONG:
        return price < entry
    return price > entry


def resolve_take_profit(
    entry: float, slot: TakeProfitSlot, direction: Direction
) -> TakeProfitSlot:
    """
    TP 슬롯의 price/percent 를 source 기준으로 재계산 (새 객체 반환)

    Note:
        손실 방향 TP(LONG인데 entry 아래)는 허용 → calculator 가 taker exit 로 처리
    """
    if slot.source == PriceSource.PERCENT:
        price = price_from_percent(entry, slot.percent_from_entry, direction, is_profit=True)
        percent = slot.percent_from_entry if price is not None else None
        return replace(slot, target_price=price, percent_from_entry=percent)

    percent = percent_from_price(entry, slot.target_price, direction, is_profit=True)
    price = slot.target_price if percent is not None else None
    return replace(slot, target_price=price, percent_from_entry=percent)


def resolve_stop_loss(
    entry: float, stop_loss: StopLossConfig, direction: Direction
) -> StopLossConfig:
    """
    SL 의 price/percent 를 source 기준으로 재계산 (새 객체 반환)

    Wrong side (이익 방향) 또는 entry 와 동일 → price/percent 모두 None ("no stop-loss")
    """
    if stop_loss.source == PriceSource.PERCENT:
        price = price_from_percent(entry, stop_loss.percent_from_entry, direction, is_profit=False)
    else:
        price = stop_loss.price

    if price is None or entry is None or entry <= 0 or price <= 0:
        return replace(stop_loss, price=None, percent_from_entry=None)
    if not is_loss_side(entry, price, direction):
        return replace(stop_loss, price=None, percent_from_entry=None)

    percent = percent_from_price(entry, price, direction, is_profit=False)
    return replace(stop_loss, price=price, percent_from_entry=percent)


def resolve_inputs(inputs: TradeInputs) -> TradeInputs:
    """
    전체 스냅샷 재계산 (entry price / direction 변경 시)

    PERCENT source 슬롯은 price 가 이동하고, PRICE source 슬롯은 percent 가 이동한다.
    entry <= 0 (입력 중) 이면 스냅샷을 그대로 반환.
    """
    if inputs.entry_price is None or inputs.entry_price <= 0:
        return inputs

    take_profits = [
        resolve_take_profit(inputs.entry_price, slot, inputs.direction)
        for slot in inputs.take_profits
    ]
    stop_loss = resolve_stop_loss(inputs.entry_price, inputs.stop_loss, inputs.direction)
    return replace(inputs, take_profits=take_profits, stop_loss=stop_loss)
