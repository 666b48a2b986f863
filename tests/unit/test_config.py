"""
tests/unit/test_config.py
Fee schedule / preset / settings 로딩 테스트

Test Coverage:
1. default_fee_schedules (built-in)
2. repo_fee_config_matches_defaults / has_only_exchanges / unknown_key_warned
3. load_fee_schedules_from_yaml
4. missing_rate_raises_fee_config_error
5. unknown_exchange_raises_key_error
6. load_presets_partial_override
7. load_presets_rejects_non_list
8. load_settings_from_mapping
"""

import logging
from pathlib import Path

import pytest
import yaml

from infrastructure.config import (
    DEFAULT_FEE_SCHEDULES,
    ConfigError,
    FeeConfigError,
    Presets,
    UnknownExchangeError,
    get_fee_schedule,
    load_fee_schedules,
    load_presets,
    load_settings,
)

REPO_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


def test_default_fee_schedules():
    assert load_fee_schedules() == DEFAULT_FEE_SCHEDULES
    binance = get_fee_schedule("Binance")
    assert binance.maker_rate == 0.0002
    assert binance.taker_rate == 0.0004
    bybit = get_fee_schedule("bybit")
    assert bybit.maker_rate == 0.0001
    assert bybit.taker_rate == 0.0006


def test_repo_fee_config_matches_defaults():
    schedules = load_fee_schedules(REPO_CONFIG_DIR / "fee_schedules.yaml")

    assert schedules == DEFAULT_FEE_SCHEDULES


def test_repo_fee_config_has_only_exchanges():
    """기본 거래소는 CALC_DEFAULT_EXCHANGE 에서만 결정 (YAML 에 죽은 key 없음)"""
    with open(REPO_CONFIG_DIR / "fee_schedules.yaml", "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    assert list(data) == ["exchanges"]


def test_unknown_fee_config_key_warned(tmp_path, caplog):
    config_file = tmp_path / "fees.yaml"
    config_file.write_text(
        yaml.safe_dump({
            "default_exchange": "bybit",
            "exchanges": {"bybit": {"maker": 0.0001, "taker": 0.0006}},
        }),
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING):
        schedules = load_fee_schedules(config_file)

    assert list(schedules) == ["bybit"]
    assert "default_exchange" in caplog.text


def test_load_fee_schedules_from_yaml(tmp_path):
    config_file = tmp_path / "fees.yaml"
    config_file.write_text(
        yaml.safe_dump({
            "exchanges": {
                "OKX": {"name": "OKX", "maker": 0.0002, "taker": 0.0005},
            }
        }),
        encoding="utf-8",
    )

    schedules = load_fee_schedules(config_file)

    assert list(schedules) == ["okx"]
    assert get_fee_schedule("okx", schedules).taker_rate == 0.0005


def test_missing_rate_raises_fee_config_error(tmp_path):
    config_file = tmp_path / "fees.yaml"
    config_file.write_text(
        yaml.safe_dump({"exchanges": {"binance": {"maker": 0.0002}}}),
        encoding="utf-8",
    )

    with pytest.raises(FeeConfigError, match="taker"):
        load_fee_schedules(config_file)


def test_negative_rate_and_bad_layout_rejected(tmp_path):
    negative = tmp_path / "negative.yaml"
    negative.write_text(
        yaml.safe_dump({"exchanges": {"x": {"maker": -0.1, "taker": 0.1}}}),
        encoding="utf-8",
    )
    no_exchanges = tmp_path / "empty.yaml"
    no_exchanges.write_text("default_exchange: binance\n", encoding="utf-8")

    with pytest.raises(FeeConfigError):
        load_fee_schedules(negative)
    with pytest.raises(ConfigError):
        load_fee_schedules(no_exchanges)
    with pytest.raises(FileNotFoundError):
        load_fee_schedules(tmp_path / "missing.yaml")


def test_unknown_exchange_raises_key_error():
    with pytest.raises(UnknownExchangeError):
        get_fee_schedule("kraken")
    with pytest.raises(KeyError):
        get_fee_schedule("kraken")


def test_load_presets_defaults_and_repo_file():
    assert load_presets() == Presets()
    assert load_presets(REPO_CONFIG_DIR / "presets.yaml") == Presets()


def test_load_presets_partial_override(tmp_path):
    config_file = tmp_path / "presets.yaml"
    config_file.write_text(
        yaml.safe_dump({"leverage": [10, 20], "unknown_key": [1]}),
        encoding="utf-8",
    )

    presets = load_presets(config_file)

    assert presets.leverage == [10, 20]
    assert presets.risk_percent == Presets().risk_percent


def test_load_presets_rejects_non_list(tmp_path):
    config_file = tmp_path / "presets.yaml"
    config_file.write_text("leverage: 10\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_presets(config_file)


def test_load_settings_from_mapping():
    settings = load_settings({
        "CALC_FEE_CONFIG": "config/fee_schedules.yaml",
        "CALC_DEFAULT_EXCHANGE": "Bybit",
        "CALC_LOG_LEVEL": "debug",
    })

    assert settings.fee_config_path == "config/fee_schedules.yaml"
    assert settings.preset_config_path is None
    assert settings.default_exchange == "bybit"
    assert settings.log_level == "DEBUG"


def test_load_settings_defaults():
    settings = load_settings({})

    assert settings.fee_config_path is None
    assert settings.default_exchange == "binance"
    assert settings.log_level == "INFO"
