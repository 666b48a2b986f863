"""
src/infrastructure/config/presets.py
Preset 목록 로딩 (config/presets.yaml)

Exports:
- Presets
- load_presets(): YAML → Presets (None → built-in)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import yaml

from infrastructure.config.fee_schedules import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class Presets:
    """UI/CLI preset 값 목록"""
    leverage: List[int] = field(
        default_factory=lambda: [5, 10, 15, 20, 25, 35, 45, 50, 60, 75, 100]
    )
    take_profit_percent: List[float] = field(
        default_factory=lambda: [1, 2, 3, 5, 6, 7, 9, 10, 12.5, 15]
    )
    stop_loss_percent: List[float] = field(
        default_factory=lambda: [
            1, 1.5, 2, 2.5, 3, 3.5, 4, 4.5, 5, 5.5, 6, 6.5,
            7, 7.5, 8, 8.5, 9, 9.5, 10, 11, 12, 13, 14, 15,
        ]
    )
    risk_percent: List[float] = field(
        default_factory=lambda: [5, 10, 15, 20, 25, 30, 40, 50]
    )
    fixed_margin_usdt: List[float] = field(
        default_factory=lambda: [
            100, 200, 250, 300, 400, 500, 600, 800, 1000, 1250,
            1500, 1750, 2000, 2250, 2500, 3000, 3500, 4000, 4500, 5000,
        ]
    )


def load_presets(path: Optional[Union[str, Path]] = None) -> Presets:
    """
    Preset 로드

    누락된 key 는 built-in 값 유지. 알 수 없는 key 는 무시.

    Raises:
        FileNotFoundError: path 가 존재하지 않으면
        ConfigError: 최상위가 mapping 이 아니거나 값이 list 가 아니면
    """
    presets = Presets()
    if path is None:
        return presets

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Preset config not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"Preset config must be a mapping: {config_path}")

    for key, values in data.items():
        if not hasattr(presets, key):
            logger.warning("Ignoring unknown preset key: %s", key)
            continue
        if not isinstance(values, list):
            raise ConfigError(f"Preset '{key}' must be a list")
        setattr(presets, key, values)

    logger.info("Loaded presets from %s", config_path)
    return presets
