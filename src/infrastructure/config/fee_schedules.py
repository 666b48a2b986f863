"""
src/infrastructure/config/fee_schedules.py
Exchange fee schedule 로딩 (config/fee_schedules.yaml)

Purpose:
- 거래소별 maker/taker 수수료율 (static configuration)
- YAML 경로 미지정 시 built-in 표 사용

Exports:
- DEFAULT_FEE_SCHEDULES: built-in (Binance, Bybit)
- load_fee_schedules(): YAML → Dict[str, ExchangeFeeSchedule]
- get_fee_schedule(): 거래소 key 로 조회
- ConfigError, FeeConfigError, UnknownExchangeError
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from domain.trade import ExchangeFeeSchedule

logger = logging.getLogger(__name__)

DEFAULT_FEE_SCHEDULES: Dict[str, ExchangeFeeSchedule] = {
    "binance": ExchangeFeeSchedule(name="Binance", maker_rate=0.0002, taker_rate=0.0004),
    "bybit": ExchangeFeeSchedule(name="Bybit", maker_rate=0.0001, taker_rate=0.0006),
}


class ConfigError(Exception):
    """Config 파일 형식 오류"""

    pass


class FeeConfigError(ConfigError):
    """Fee config 형식 오류 (필수 필드 누락, 음수 수수료율 등)"""

    pass


class UnknownExchangeError(KeyError):
    """등록되지 않은 거래소 key"""

    pass


def _parse_rate(exchange: str, entry: Dict[str, Any], key: str) -> float:
    if key not in entry:
        raise FeeConfigError(f"Missing '{key}' rate for exchange: {exchange}")
    try:
        rate = float(entry[key])
    except (TypeError, ValueError):
        raise FeeConfigError(f"Invalid '{key}' rate for exchange {exchange}: {entry[key]!r}")
    if rate < 0:
        raise FeeConfigError(f"Negative '{key}' rate for exchange {exchange}: {rate}")
    return rate


def parse_fee_schedules(data: Any) -> Dict[str, ExchangeFeeSchedule]:
    """
    YAML 로드 결과 → ExchangeFeeSchedule dict

    Expected:
        exchanges:
          binance: {name: Binance, maker: 0.0002, taker: 0.0004}

    Raises:
        FeeConfigError: exchanges 섹션 없음 / rate 누락 / 음수

    exchanges 외 최상위 key 는 경고 후 무시 (기본 거래소는 CALC_DEFAULT_EXCHANGE)
    """
    if not isinstance(data, dict) or not isinstance(data.get("exchanges"), dict):
        raise FeeConfigError("Fee config must contain an 'exchanges' mapping")

    for key in data:
        if key != "exchanges":
            logger.warning("Ignoring unknown fee config key: %s", key)

    schedules: Dict[str, ExchangeFeeSchedule] = {}
    for key, entry in data["exchanges"].items():
        if not isinstance(entry, dict):
            raise FeeConfigError(f"Exchange entry must be a mapping: {key}")
        exchange = str(key).lower()
        schedules[exchange] = ExchangeFeeSchedule(
            name=str(entry.get("name", key)),
            maker_rate=_parse_rate(exchange, entry, "maker"),
            taker_rate=_parse_rate(exchange, entry, "taker"),
        )
    return schedules


def load_fee_schedules(
    path: Optional[Union[str, Path]] = None,
) -> Dict[str, ExchangeFeeSchedule]:
    """
    Fee schedule 로드

    Args:
        path: YAML 경로 (None → DEFAULT_FEE_SCHEDULES)

    Returns:
        Dict[str, ExchangeFeeSchedule] (key: 소문자 거래소 이름)

    Raises:
        FileNotFoundError: path 가 존재하지 않으면
        FeeConfigError: 형식 오류
    """
    if path is None:
        return dict(DEFAULT_FEE_SCHEDULES)

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Fee config not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    schedules = parse_fee_schedules(data)
    logger.info("Loaded %d fee schedules from %s", len(schedules), config_path)
    return schedules


def get_fee_schedule(
    exchange: str,
    schedules: Optional[Dict[str, ExchangeFeeSchedule]] = None,
) -> ExchangeFeeSchedule:
    """
    거래소 key 로 fee schedule 조회 (대소문자 무시)

    Raises:
        UnknownExchangeError: 등록되지 않은 거래소
    """
    table = schedules if schedules is not None else DEFAULT_FEE_SCHEDULES
    key = exchange.lower()
    if key not in table:
        raise UnknownExchangeError(
            f"Unknown exchange: {exchange} (available: {', '.join(sorted(table))})"
        )
    return table[key]
