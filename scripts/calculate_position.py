#!/usr/bin/env python3
"""
scripts/calculate_position.py
Futures position calculator CLI

Usage:
    # Fixed margin (Binance), SL price
    python scripts/calculate_position.py --account 500 --leverage 52 --entry 84882 \\
        --mode fixed --margin 100 --sl-price 84551 --tp 85500

    # Risk %, SL percent, 2 TP targets (percent, weight)
    python scripts/calculate_position.py --account 30000 --leverage 50 --entry 80220 \\
        --mode risk --risk 50 --sl-percent 4.5 --tp-percent 2:60 --tp-percent 5:40

    # Leverage preset sweep / JSON log record
    python scripts/calculate_position.py ... --sweep
    python scripts/calculate_position.py ... --json
"""

import sys
import argparse
import logging
import math
import time
from pathlib import Path
from typing import List, Optional, Tuple

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv

from domain.trade import (
    Direction,
    PriceSource,
    SizingMode,
    StopLossConfig,
    TakeProfitSlot,
    TradeInputs,
)
from application.allocation import on_weight_edit, redistribute
from application.formatting import (
    format_high_precision,
    format_number,
    format_price,
    format_ratio,
)
from application.input_parsing import (
    parse_float_input,
    parse_leverage,
    parse_non_negative,
)
from application.price_resolution import resolve_inputs
from application.scenario_table import leverage_sweep, scenario_summary, take_profit_frame
from application.trade_calculator import calculate
from infrastructure.config import (
    ConfigError,
    get_fee_schedule,
    load_fee_schedules,
    load_presets,
    load_settings,
)
from infrastructure.logging.calculation_logger import log_calculation, to_json

logger = logging.getLogger(__name__)


def parse_target(text: str) -> Tuple[Optional[float], Optional[float]]:
    """
    "VALUE[:WEIGHT]" 파싱

    Returns:
        (value, weight), weight 미지정 시 None

    Raises:
        ValueError: VALUE 파싱 실패
    """
    value_text, _, weight_text = text.partition(":")
    value = parse_float_input(value_text)
    if value is None:
        raise ValueError(f"Invalid target: {text}")
    weight = parse_float_input(weight_text) if weight_text else None
    return value, weight


def price_target(text: str) -> Tuple[PriceSource, str]:
    return PriceSource.PRICE, text


def percent_target(text: str) -> Tuple[PriceSource, str]:
    return PriceSource.PERCENT, text


def build_take_profits(targets: List[Tuple[PriceSource, str]]) -> List[TakeProfitSlot]:
    """
    TP 슬롯 생성 (명령행 순서 = TP1, TP2, ...)

    Weight 규칙:
        - 모든 슬롯이 [0, 100] weight 지정 + 합 100 → 그대로 사용
        - 그 외 → 균등 분배 후 지정된 weight 만 순서대로 편집 적용
          (나중 편집이 앞 슬롯을 비례 재분배할 수 있음)

    Example:
        --tp-percent 1:50 --tp-percent 2:30 --tp-percent 3:20 → [50, 30, 20]
    """
    slots: List[TakeProfitSlot] = []
    weights: List[Optional[float]] = []

    for source, text in targets:
        value, weight = parse_target(text)
        if source == PriceSource.PRICE:
            slots.append(TakeProfitSlot(enabled=True, target_price=value, source=source))
        else:
            slots.append(TakeProfitSlot(enabled=True, percent_from_entry=value, source=source))
        weights.append(weight)

    explicit = all(w is not None and 0 <= w <= 100 for w in weights)
    if slots and explicit and math.isclose(sum(weights), 100):
        for slot, weight in zip(slots, weights):
            slot.weight_percent = float(weight)
        return slots

    slots = redistribute(slots)
    for index, weight in enumerate(weights):
        if weight is not None:
            slots = on_weight_edit(slots, index, weight)
    return slots


def build_stop_loss(args: argparse.Namespace) -> StopLossConfig:
    if args.no_sl:
        return StopLossConfig(enabled=False)
    if args.sl_percent is not None:
        return StopLossConfig(
            enabled=True,
            percent_from_entry=parse_float_input(args.sl_percent),
            source=PriceSource.PERCENT,
        )
    if args.sl_price is not None:
        return StopLossConfig(
            enabled=True,
            price=parse_float_input(args.sl_price),
            source=PriceSource.PRICE,
        )
    return StopLossConfig(enabled=False)


def build_inputs(args: argparse.Namespace, fee_schedules: dict, exchange: str) -> TradeInputs:
    """argparse 결과 → resolve 완료된 TradeInputs"""
    inputs = TradeInputs(
        account_size=parse_non_negative(args.account),
        leverage=parse_leverage(args.leverage),
        entry_price=parse_non_negative(args.entry),
        direction=Direction(args.direction.upper()),
        take_profits=build_take_profits(args.targets or []),
        stop_loss=build_stop_loss(args),
        sizing_mode=SizingMode.RISK_PERCENT if args.mode == "risk" else SizingMode.FIXED_MARGIN,
        fixed_margin_amount=parse_non_negative(args.margin),
        risk_percent=parse_non_negative(args.risk),
        fee_schedule=get_fee_schedule(exchange, fee_schedules),
    )
    return resolve_inputs(inputs)


def print_report(inputs: TradeInputs, result) -> None:
    """계산 결과 출력"""
    fee = inputs.fee_schedule
    print("=" * 60)
    print(f"Futures Calculator ({fee.name}, {inputs.direction.value} {inputs.leverage}x)")
    print("=" * 60)

    print(f"\n📊 Position ({result.effective_sizing_mode.value}):")
    if result.effective_sizing_mode != inputs.sizing_mode:
        print("   - ⚠️  RISK_PERCENT requires a valid stop-loss, using FIXED_MARGIN")
    print(f"   - Quantity:        {format_high_precision(result.quantity)}")
    print(f"   - Position Size:   {format_number(result.position_size)} USDT")
    print(f"   - Margin:          {format_number(result.margin)} USDT")
    print(f"   - Risk Amount:     {format_number(result.risk_amount)} USDT")
    if result.exceeds_account:
        print(
            f"   - ⚠️  Required margin {format_number(result.required_margin)} USDT "
            f"exceeds account {format_number(inputs.account_size)} USDT"
        )

    print(f"\n💸 Fees ({fee.maker_rate * 100:.2f}% / {fee.taker_rate * 100:.2f}%):")
    print(f"   - Entry (Taker):   {format_number(result.entry_fee)} USDT")
    print(f"   - Exit TP / SL:    {format_number(result.exit_fee_tp)} / {format_number(result.exit_fee_sl)} USDT")

    print("\n🎯 Take Profit:")
    print(take_profit_frame(inputs, result).to_string(index=False))
    print(f"   - Combined Gross:  {format_number(result.weighted_gross_profit)} USDT")
    print(f"   - Combined Net:    {format_number(result.weighted_net_profit)} USDT")

    print("\n🛑 Stop Loss:")
    if result.stop_loss_valid:
        print(f"   - Price:           {format_price(inputs.stop_loss.price)}")
        print(f"   - Gross Loss:      {format_number(result.gross_loss)} USDT ({format_number(result.gross_loss_percent)}%)")
        print(f"   - Net Loss:        {format_number(result.net_loss)} USDT ({format_number(result.net_loss_percent)}%)")
    else:
        print("   - No valid stop loss. Max loss determined by liquidation.")

    print("\n⚖️  Risk/Reward:")
    print(f"   - Net:             {format_ratio(result.net_risk_reward)}")
    print(f"   - Gross:           {format_ratio(result.gross_risk_reward)}")

    print("\n💥 Liquidation (estimate, MMR 0.5%):")
    print(f"   - Isolated:        {format_price(result.liquidation_price)}")
    print(f"   - With Balance:    {format_price(result.real_liquidation_price)}")
    print(f"   - Buffer:          {format_number(result.liquidation_buffer)} USDT")

    print("\n📋 Scenarios:")
    print(scenario_summary(result).to_string(index=False))


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Futures Position Calculator")
    parser.add_argument("--account", required=True, help="Account size (USDT)")
    parser.add_argument("--leverage", required=True, help="Leverage (1-125)")
    parser.add_argument("--entry", required=True, help="Entry price")
    parser.add_argument("--direction", choices=["long", "short", "LONG", "SHORT"], default="long")
    parser.add_argument("--mode", choices=["fixed", "risk"], default="fixed", help="Sizing mode")
    parser.add_argument("--margin", default="0", help="Fixed margin (USDT, --mode fixed)")
    parser.add_argument("--risk", default="0", help="Risk percent of account (--mode risk)")
    parser.add_argument("--sl-price", help="Stop-loss price")
    parser.add_argument("--sl-percent", help="Stop-loss distance (%%)")
    parser.add_argument("--no-sl", action="store_true", help="Disable stop-loss")
    parser.add_argument(
        "--tp", dest="targets", action="append", type=price_target,
        help="TP price[:weight] (repeatable, kept in command-line order)",
    )
    parser.add_argument(
        "--tp-percent", dest="targets", action="append", type=percent_target,
        help="TP percent[:weight] (repeatable, kept in command-line order)",
    )
    parser.add_argument("--exchange", help="Exchange fee schedule (default: CALC_DEFAULT_EXCHANGE)")
    parser.add_argument("--sweep", action="store_true", help="Print leverage preset sweep")
    parser.add_argument("--json", action="store_true", help="Print calculation log record (JSON)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    args = create_parser().parse_args(argv)

    try:
        fee_schedules = load_fee_schedules(settings.fee_config_path)
        presets = load_presets(settings.preset_config_path)
        inputs = build_inputs(args, fee_schedules, args.exchange or settings.default_exchange)
    except (ConfigError, KeyError, ValueError, FileNotFoundError) as e:
        logger.error("Invalid input: %s", e)
        print(f"❌ {e}")
        return 1

    result = calculate(inputs)

    if args.json:
        print(to_json(log_calculation(time.time(), inputs, result)))
        return 0

    print_report(inputs, result)

    if args.sweep:
        print("\n🔁 Leverage Sweep:")
        print(leverage_sweep(inputs, presets.leverage).to_string(index=False))

    return 0


if __name__ == "__main__":
    sys.exit(main())
