"""
src/application/scenario_table.py
CalculationResult → DataFrame (시나리오 표)

Purpose:
- TP 슬롯별 결과 표
- TP / SL 시나리오 요약 표
- Leverage sweep (preset leverage 별 재계산 비교)

Note:
- NaN / inf 는 그대로 유지 (표시 변환은 formatting 담당)
"""

from dataclasses import replace
from typing import Iterable

import pandas as pd

from domain.trade import CalculationResult, TradeInputs
from application.fees import fee_percent_of_position
from application.trade_calculator import calculate

TAKE_PROFIT_COLUMNS = [
    "target",
    "enabled",
    "price",
    "percent",
    "weight",
    "gross_profit",
    "gross_profit_pct",
    "net_profit",
    "net_profit_pct",
    "exit_fee",
    "is_loss_target",
]

SWEEP_COLUMNS = [
    "leverage",
    "quantity",
    "margin",
    "position_size",
    "exceeds_account",
    "liquidation_price",
    "real_liquidation_price",
    "net_risk_reward",
]


def take_profit_frame(inputs: TradeInputs, result: CalculationResult) -> pd.DataFrame:
    """
    TP 슬롯별 결과 DataFrame

    Args:
        inputs: 계산에 사용한 입력 (price / weight 표시용)
        result: calculate() 결과

    Returns:
        pd.DataFrame: 슬롯당 1 row (TAKE_PROFIT_COLUMNS)
    """
    records = []
    for index, (slot, tp) in enumerate(zip(inputs.take_profits, result.take_profits), start=1):
        records.append({
            "target": f"TP{index}",
            "enabled": slot.enabled,
            "price": slot.target_price,
            "percent": slot.percent_from_entry,
            "weight": slot.weight_percent,
            "gross_profit": tp.gross_profit,
            "gross_profit_pct": tp.gross_profit_percent,
            "net_profit": tp.net_profit,
            "net_profit_pct": tp.net_profit_percent,
            "exit_fee": tp.exit_fee,
            "is_loss_target": tp.is_loss_target,
        })

    if not records:
        return pd.DataFrame(columns=TAKE_PROFIT_COLUMNS)
    return pd.DataFrame(records, columns=TAKE_PROFIT_COLUMNS)


def scenario_summary(result: CalculationResult) -> pd.DataFrame:
    """
    TP (전체 청산) / SL 시나리오 요약

    Columns: scenario, gross, net, fees, fee_pct_of_position
    """
    return pd.DataFrame(
        [
            {
                "scenario": "take_profit",
                "gross": result.weighted_gross_profit,
                "net": result.weighted_net_profit,
                "fees": result.total_fees_tp,
                "fee_pct_of_position": fee_percent_of_position(
                    result.total_fees_tp, result.position_size
                ),
            },
            {
                "scenario": "stop_loss",
                "gross": -result.gross_loss,
                "net": -result.net_loss,
                "fees": result.total_fees_sl,
                "fee_pct_of_position": fee_percent_of_position(
                    result.total_fees_sl, result.position_size
                ),
            },
        ]
    )


def leverage_sweep(inputs: TradeInputs, leverages: Iterable[int]) -> pd.DataFrame:
    """
    Leverage 별 재계산

    Example:
        leverage_sweep(inputs, [5, 10, 20]) → 3 rows
    """
    records = []
    for leverage in leverages:
        result = calculate(replace(inputs, leverage=leverage))
        records.append({
            "leverage": leverage,
            "quantity": result.quantity,
            "margin": result.margin,
            "position_size": result.position_size,
            "exceeds_account": result.exceeds_account,
            "liquidation_price": result.liquidation_price,
            "real_liquidation_price": result.real_liquidation_price,
            "net_risk_reward": result.net_risk_reward,
        })

    if not records:
        return pd.DataFrame(columns=SWEEP_COLUMNS)
    return pd.DataFrame(records, columns=SWEEP_COLUMNS)
