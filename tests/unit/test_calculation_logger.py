"""
tests/unit/test_calculation_logger.py
Unit tests for calculation logger (입력 + 결과 스냅샷)

Purpose:
- 재현 가능성 (입력 전체 기록)
- NaN / inf sentinel → strict JSON
- Schema validation (필수 필드 누락 시 실패)

Test Coverage:
1. log_calculation_includes_required_fields
2. log_calculation_serializes_enums_and_sentinels
3. log_calculation_includes_derived_totals
4. validate_schema_rejects_missing_field
5. to_json_is_strict
"""

import json

import pytest

from domain.trade import Direction, StopLossConfig
from application.trade_calculator import calculate
from infrastructure.logging.calculation_logger import (
    SCHEMA_VERSION,
    CalculationLogValidationError,
    log_calculation,
    to_json,
    validate_calculation_schema,
)


def test_log_calculation_includes_required_fields(make_inputs):
    inputs = make_inputs()
    log_entry = log_calculation(1705593600.0, inputs, calculate(inputs))

    assert log_entry["timestamp"] == 1705593600.0
    assert log_entry["schema_version"] == SCHEMA_VERSION
    assert log_entry["inputs"]["entry_price"] == 84882.0
    assert log_entry["inputs"]["leverage"] == 52
    assert log_entry["inputs"]["fee_schedule"]["taker_rate"] == 0.0004
    assert len(log_entry["inputs"]["take_profits"]) == 3
    assert log_entry["result"]["position_size"] == pytest.approx(5200.0)


def test_log_calculation_serializes_enums_and_sentinels(make_inputs):
    """
    SHORT leverage 1, stop 없음
    → direction "SHORT", 청산가 "Infinity", R/R None
    """
    inputs = make_inputs(
        direction=Direction.SHORT,
        leverage=1,
        stop_loss=StopLossConfig(enabled=False),
    )
    log_entry = log_calculation(0.0, inputs, calculate(inputs))

    assert log_entry["inputs"]["direction"] == "SHORT"
    assert log_entry["inputs"]["sizing_mode"] == "FIXED_MARGIN"
    assert log_entry["result"]["effective_sizing_mode"] == "FIXED_MARGIN"
    assert log_entry["result"]["liquidation_price"] == "Infinity"
    assert log_entry["result"]["net_risk_reward"] is None


def test_log_calculation_includes_derived_totals(make_inputs):
    inputs = make_inputs()
    log_entry = log_calculation(0.0, inputs, calculate(inputs))

    assert log_entry["result"]["total_fees_tp"] == pytest.approx(3.12)
    assert log_entry["result"]["total_fees_sl"] == pytest.approx(4.16)
    assert log_entry["result"]["liquidation_buffer"] == pytest.approx(400.0)


def test_validate_schema_rejects_missing_field():
    with pytest.raises(CalculationLogValidationError, match="result"):
        validate_calculation_schema({
            "timestamp": 0.0,
            "schema_version": SCHEMA_VERSION,
            "inputs": {},
        })

    with pytest.raises(CalculationLogValidationError, match="quantity"):
        validate_calculation_schema({
            "timestamp": 0.0,
            "schema_version": SCHEMA_VERSION,
            "inputs": {},
            "result": {"margin": 0.0},
        })


def test_to_json_is_strict(make_inputs):
    """NaN 이 남아 있으면 json.dumps(allow_nan=False) 가 실패하므로 sanitize 확인"""
    inputs = make_inputs(entry_price=0.0)
    text = to_json(log_calculation(0.0, inputs, calculate(inputs)))

    parsed = json.loads(text)
    assert parsed["result"]["liquidation_price"] is None
    assert parsed["result"]["quantity"] == 0.0
