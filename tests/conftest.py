"""
tests/conftest.py
Shared fixtures (fee schedule, TradeInputs builder)
"""

import pytest

from domain.trade import (
    Direction,
    ExchangeFeeSchedule,
    PriceSource,
    SizingMode,
    StopLossConfig,
    TakeProfitSlot,
    TradeInputs,
)


@pytest.fixture
def binance_fees():
    """Binance USDT-M: maker 0.02%, taker 0.04%"""
    return ExchangeFeeSchedule(name="Binance", maker_rate=0.0002, taker_rate=0.0004)


@pytest.fixture
def make_inputs(binance_fees):
    """
    TradeInputs builder

    기본값: account 500, 52x LONG, entry 84882, FIXED_MARGIN 100 USDT,
    SL 84551 (valid), TP 1개 85500 (100%)
    """

    def _make(**overrides):
        params = dict(
            account_size=500.0,
            leverage=52,
            entry_price=84882.0,
            direction=Direction.LONG,
            take_profits=[
                TakeProfitSlot(enabled=True, target_price=85500.0, weight_percent=100.0),
                TakeProfitSlot(enabled=False),
                TakeProfitSlot(enabled=False),
            ],
            stop_loss=StopLossConfig(enabled=True, price=84551.0, source=PriceSource.PRICE),
            sizing_mode=SizingMode.FIXED_MARGIN,
            fixed_margin_amount=100.0,
            risk_percent=20.0,
            fee_schedule=binance_fees,
        )
        params.update(overrides)
        return TradeInputs(**params)

    return _make
