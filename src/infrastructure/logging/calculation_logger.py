"""
src/infrastructure/logging/calculation_logger.py
Calculation Logger: 입력 스냅샷 + 결과 스냅샷 (재현 가능성)

원칙:
1. 동일 입력으로 동일 결과를 재현할 수 있도록 입력 전체를 기록
2. NaN → None, ±inf → "Infinity" / "-Infinity" (strict JSON)
3. Schema validation: 필수 필드 누락 시 CalculationLogValidationError

Exports:
- log_calculation(): 로그 엔트리 생성
- validate_calculation_schema(): 필수 필드 검증
- to_json(): strict JSON 직렬화
- CalculationLogValidationError
"""

import json
import math
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict

from domain.trade import CalculationResult, TradeInputs

SCHEMA_VERSION = "1.0"

REQUIRED_FIELDS = ["timestamp", "schema_version", "inputs", "result"]

REQUIRED_RESULT_FIELDS = [
    "quantity",
    "margin",
    "position_size",
    "net_risk_reward",
    "liquidation_price",
    "exceeds_account",
]


class CalculationLogValidationError(Exception):
    """Calculation log schema validation 실패"""

    pass


def _sanitize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return value
    if isinstance(value, dict):
        return {key: _sanitize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize(item) for item in value]
    return value


def log_calculation(
    timestamp: float,
    inputs: TradeInputs,
    result: CalculationResult,
) -> Dict[str, Any]:
    """
    Calculation 로그 생성

    Args:
        timestamp: 계산 시각 (UNIX timestamp)
        inputs: 계산 입력
        result: calculate() 결과

    Returns:
        log_entry (dict, JSON 직렬화 가능)

    Derived fields (result 에 추가):
        - total_fees_tp, total_fees_sl, liquidation_buffer
    """
    result_snapshot = asdict(result)
    result_snapshot["total_fees_tp"] = result.total_fees_tp
    result_snapshot["total_fees_sl"] = result.total_fees_sl
    result_snapshot["liquidation_buffer"] = result.liquidation_buffer

    log_entry = {
        "timestamp": timestamp,
        "schema_version": SCHEMA_VERSION,
        "inputs": _sanitize(asdict(inputs)),
        "result": _sanitize(result_snapshot),
    }

    validate_calculation_schema(log_entry)

    return log_entry


def validate_calculation_schema(log_entry: Dict[str, Any]) -> None:
    """
    Calculation log schema validation

    Raises:
        CalculationLogValidationError: 필수 필드 누락 / 타입 불일치
    """
    for field in REQUIRED_FIELDS:
        if field not in log_entry:
            raise CalculationLogValidationError(f"Missing required field: {field}")

    if not isinstance(log_entry.get("inputs"), dict):
        raise CalculationLogValidationError("inputs must be a dict")

    result = log_entry.get("result")
    if not isinstance(result, dict):
        raise CalculationLogValidationError("result must be a dict")

    for field in REQUIRED_RESULT_FIELDS:
        if field not in result:
            raise CalculationLogValidationError(f"Missing required result field: {field}")


def to_json(log_entry: Dict[str, Any]) -> str:
    """Strict JSON (NaN 금지)"""
    return json.dumps(log_entry, ensure_ascii=False, allow_nan=False)
