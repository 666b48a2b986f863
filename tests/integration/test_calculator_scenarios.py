"""
tests/integration/test_calculator_scenarios.py
End-to-end scenarios: resolve → allocate → calculate

Test Coverage:
1. scenario_risk_percent_with_percent_stop (entry 80220, 50x, risk 50%, SL 4.5%)
2. scenario_fixed_margin_binance (entry 84882, 52x, margin 100, SL 84551)
3. scenario_disable_second_target (60/40 → 100/0)
4. scenario_edit_first_target (50/30/20 → 10/54/36)
5. percent_price_round_trip
6. allocation_sum_after_sequence_feeds_calculator
"""

import math

import pytest

from domain.trade import (
    Direction,
    PriceSource,
    SizingMode,
    StopLossConfig,
    TakeProfitSlot,
)
from application.allocation import on_toggle, on_weight_edit
from application.price_resolution import (
    percent_from_price,
    price_from_percent,
    resolve_inputs,
)
from application.trade_calculator import calculate


def test_scenario_risk_percent_with_percent_stop(make_inputs):
    """
    entry 80220, LONG, 50x, account 30000, RISK_PERCENT 50%, SL 4.5% 아래

    SL price = 80220 × 0.955 = 76610.1
    qty = 15000 / 3609.9
    margin = qty × 80220 / 50 ≈ 6666.7 (< 30000 → exceeds_account False)
    """
    inputs = resolve_inputs(
        make_inputs(
            account_size=30000.0,
            leverage=50,
            entry_price=80220.0,
            sizing_mode=SizingMode.RISK_PERCENT,
            risk_percent=50.0,
            stop_loss=StopLossConfig(
                enabled=True, percent_from_entry=4.5, source=PriceSource.PERCENT
            ),
            take_profits=[
                TakeProfitSlot(
                    enabled=True,
                    percent_from_entry=2.0,
                    weight_percent=100.0,
                    source=PriceSource.PERCENT,
                ),
            ],
        )
    )

    assert inputs.stop_loss.price == pytest.approx(76610.1)
    assert inputs.take_profits[0].target_price == pytest.approx(81824.4)

    result = calculate(inputs)

    qty = 15000.0 / 3609.9
    assert result.effective_sizing_mode == SizingMode.RISK_PERCENT
    assert result.quantity == pytest.approx(qty)
    assert math.isfinite(result.quantity) and result.quantity > 0
    assert result.margin == pytest.approx(qty * 80220.0 / 50)
    assert result.exceeds_account is False
    assert result.gross_loss == pytest.approx(15000.0)
    assert math.isfinite(result.net_risk_reward)
    assert result.gross_risk_reward == pytest.approx(1604.4 / 3609.9)
    assert result.liquidation_price < 80220.0


def test_scenario_fixed_margin_binance(make_inputs):
    """
    entry 84882, LONG, 52x, account 500, FIXED_MARGIN 100, SL 84551 (Binance)

    qty = 5200 / 84882
    gross loss = qty × 331
    net loss = gross loss + 2.08 + 2.08
    """
    result = calculate(resolve_inputs(make_inputs()))

    qty = (100.0 * 52) / 84882.0
    assert result.quantity == pytest.approx(qty)
    assert result.gross_loss == pytest.approx(qty * 331.0)
    assert result.net_loss == pytest.approx(qty * 331.0 + result.entry_fee + result.exit_fee_sl)
    assert result.entry_fee == pytest.approx(2.08)
    assert result.exit_fee_sl == pytest.approx(2.08)


def test_scenario_disable_second_target():
    """60/40 두 슬롯, 두 번째 disable → 100/0"""
    slots = [
        TakeProfitSlot(enabled=True, target_price=85500.0, weight_percent=60.0),
        TakeProfitSlot(enabled=True, target_price=86500.0, weight_percent=40.0),
    ]

    updated = on_toggle(slots, 1)

    assert [s.weight_percent for s in updated] == [100.0, 0.0]
    assert updated[1].enabled is False


def test_scenario_edit_first_target():
    """50/30/20, slot 0 → 10 → 10/54/36 (합 100)"""
    slots = [
        TakeProfitSlot(enabled=True, weight_percent=50.0),
        TakeProfitSlot(enabled=True, weight_percent=30.0),
        TakeProfitSlot(enabled=True, weight_percent=20.0),
    ]

    updated = on_weight_edit(slots, 0, 10.0)

    assert [s.weight_percent for s in updated] == [10.0, 54.0, 36.0]
    assert sum(s.weight_percent for s in updated) == 100.0


@pytest.mark.parametrize("direction", [Direction.LONG, Direction.SHORT])
@pytest.mark.parametrize("is_profit", [True, False])
@pytest.mark.parametrize("percent", [0.5, 2.0, 4.5, 12.5, 50.0])
def test_percent_price_round_trip(direction, is_profit, percent):
    entry = 84882.0
    price = price_from_percent(entry, percent, direction, is_profit)

    assert percent_from_price(entry, price, direction, is_profit) == pytest.approx(percent)


def test_allocation_sum_after_sequence_feeds_calculator(make_inputs):
    """
    Toggle / edit 시퀀스 후에도 weight 합 100 → 전체 position 청산
    (exit_fee_tp = position × maker, 모든 목표가 이익 방향)
    """
    slots = [
        TakeProfitSlot(enabled=True, target_price=85500.0),
        TakeProfitSlot(enabled=False, target_price=86000.0),
        TakeProfitSlot(enabled=False, target_price=87000.0),
    ]
    slots = on_toggle(slots, 1)
    slots = on_toggle(slots, 2)
    slots = on_weight_edit(slots, 1, 45.0)
    slots = on_toggle(slots, 0)
    slots = on_toggle(slots, 0)

    enabled_sum = sum(s.weight_percent for s in slots if s.enabled)
    assert enabled_sum == 100.0

    result = calculate(make_inputs(take_profits=slots))

    assert result.exit_fee_tp == pytest.approx(result.position_size * 0.0002)
    assert all(not tp.is_loss_target for tp in result.take_profits)
