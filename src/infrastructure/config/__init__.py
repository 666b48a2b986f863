"""
src/infrastructure/config/__init__.py
Configuration (fee schedules, presets, env settings)

Exports:
- load_fee_schedules / get_fee_schedule: Exchange fee schedule
- load_presets / Presets: Preset 목록
- load_settings / Settings: 환경변수 설정
- ConfigError / FeeConfigError / UnknownExchangeError
"""

from .fee_schedules import (
    DEFAULT_FEE_SCHEDULES,
    ConfigError,
    FeeConfigError,
    UnknownExchangeError,
    get_fee_schedule,
    load_fee_schedules,
)
from .presets import Presets, load_presets
from .settings import Settings, load_settings

__all__ = [
    "DEFAULT_FEE_SCHEDULES",
    "ConfigError",
    "FeeConfigError",
    "UnknownExchangeError",
    "get_fee_schedule",
    "load_fee_schedules",
    "Presets",
    "load_presets",
    "Settings",
    "load_settings",
]
