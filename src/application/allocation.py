"""
src/application/allocation.py
Take-profit quantity allocation (weight 재분배)

Purpose:
- Enabled TP 슬롯 weight 합 = 정확히 100 유지
- Toggle (enable/disable) → 균등 분배
- 수동 weight 편집 → 나머지를 다른 enabled 슬롯에 비례 분배

원칙:
1. 순수 함수: 입력 슬롯을 mutate 하지 않고 새 리스트 반환
2. Disabled 슬롯 weight = 0
3. 단일 enabled 슬롯은 항상 100
4. NaN 은 들어오지 않음 (input_parsing 단계에서 거절)

Exports:
- on_toggle(): enabled flip + 균등 재분배
- on_weight_edit(): weight 편집 + 비례 재분배
- redistribute(): 공통 재분배 정책
"""

import math
from dataclasses import replace
from typing import List, Optional

from domain.trade import TakeProfitSlot
from application.safe_math import clamp

TOTAL_WEIGHT = 100


def _round_half_up(value: float) -> int:
    # UI 와 동일한 반올림 (0.5 → 1), Python round() 의 banker's rounding 회피
    return math.floor(value + 0.5)


def _check_index(slots: List[TakeProfitSlot], index: int) -> None:
    if index < 0 or index >= len(slots):
        raise IndexError(f"Invalid take-profit index: {index} (slots={len(slots)})")


def _split_evenly(slots: List[TakeProfitSlot], enabled: List[int]) -> None:
    """
    floor(100 / n) 씩 배정, 나머지(100 mod n)는 앞쪽 슬롯부터 1씩

    Example:
        n=3 → 34 / 33 / 33
    """
    base = TOTAL_WEIGHT // len(enabled)
    remainder = TOTAL_WEIGHT % len(enabled)
    for idx in enabled:
        amount = base + (1 if remainder > 0 else 0)
        remainder = max(0, remainder - 1)
        slots[idx].weight_percent = float(amount)


def _split_proportionally(
    slots: List[TakeProfitSlot], others: List[int], to_distribute: float
) -> None:
    """
    to_distribute 를 others 의 현재 weight 비율로 분배

    - others 합계가 0 이면 균등 비율
    - 각 share 는 반올림, 마지막 슬롯이 잔여분을 가져감
    - 그래도 합이 맞지 않으면 _absorb_residual() 가 보정
    """
    remaining_sum = sum(slots[idx].weight_percent for idx in others)
    distributed = 0.0

    for loop_idx, idx in enumerate(others):
        if remaining_sum > 0:
            proportion = slots[idx].weight_percent / remaining_sum
        else:
            proportion = 1 / len(others)

        amount = _round_half_up(to_distribute * proportion)
        if loop_idx == len(others) - 1:
            amount = to_distribute - distributed

        slots[idx].weight_percent = float(max(0, amount))
        distributed += slots[idx].weight_percent


def _absorb_residual(
    slots: List[TakeProfitSlot], others: List[int], residual: float
) -> None:
    """
    반올림 잔여분을 others 순서대로 흡수 ([0, 100] clamp)

    첫 슬롯이 clamp 로 다 흡수하지 못하면 다음 슬롯으로 넘김.

    Example:
        [99.4, 0, 1, 0] (합 100.4) → 잔여 -0.4
        slot 1 은 0 이라 흡수 불가 → slot 2 가 0.6
    """
    for idx in others:
        if residual == 0:
            break
        before = slots[idx].weight_percent
        after = clamp(before + residual, 0, TOTAL_WEIGHT)
        slots[idx].weight_percent = after
        residual -= after - before


def redistribute(
    slots: List[TakeProfitSlot],
    changed_index: Optional[int] = None,
    new_weight: Optional[float] = None,
) -> List[TakeProfitSlot]:
    """
    공통 재분배 정책

    Args:
        slots: 현재 슬롯 (mutate 안 함)
        changed_index: 수동 편집된 슬롯 (None = toggle 후 균등 분배)
        new_weight: 편집된 weight (changed_index 와 함께 사용)

    Returns:
        새 슬롯 리스트 (enabled weight 합 = 100 또는 전체 0)

    Rules:
        0 enabled  → 전체 0
        1 enabled  → 해당 슬롯 100
        편집       → clamp 후 나머지 비례 분배
        toggle     → 균등 분배
        disabled 슬롯 편집 → enabled 슬롯 weight 유지
    """
    next_slots = [replace(slot) for slot in slots]
    enabled = [i for i, slot in enumerate(next_slots) if slot.enabled]

    if not enabled:
        for slot in next_slots:
            slot.weight_percent = 0.0
        return next_slots

    if len(enabled) == 1:
        for i, slot in enumerate(next_slots):
            slot.weight_percent = float(TOTAL_WEIGHT) if i == enabled[0] else 0.0
        return next_slots

    if changed_index is not None and new_weight is not None:
        if changed_index in enabled:
            clamped = clamp(new_weight, 0, TOTAL_WEIGHT)
            next_slots[changed_index].weight_percent = clamped
            others = [i for i in enabled if i != changed_index]
            _split_proportionally(next_slots, others, TOTAL_WEIGHT - clamped)

            total = sum(next_slots[i].weight_percent for i in enabled)
            _absorb_residual(next_slots, others, TOTAL_WEIGHT - total)
    else:
        _split_evenly(next_slots, enabled)

    for slot in next_slots:
        if not slot.enabled:
            slot.weight_percent = 0.0
    return next_slots


def on_toggle(slots: List[TakeProfitSlot], index: int) -> List[TakeProfitSlot]:
    """
    Enabled flip + 균등 재분배

    Example:
        [60, 40] 에서 두 번째 disable → [100, 0]
        [100, 0, 0] 에서 세 번째 enable → [50, 0, 50]
    """
    _check_index(slots, index)
    toggled = [replace(slot) for slot in slots]
    toggled[index].enabled = not toggled[index].enabled
    return redistribute(toggled)


def on_weight_edit(
    slots: List[TakeProfitSlot], index: int, new_weight: float
) -> List[TakeProfitSlot]:
    """
    Weight 수동 편집 + 비례 재분배

    Example:
        [50, 30, 20] 에서 slot 0 → 10
        남은 90 을 30:20 비율로 → [10, 54, 36]
    """
    _check_index(slots, index)
    return redistribute(slots, changed_index=index, new_weight=new_weight)
