"""
src/infrastructure/config/settings.py
환경변수 기반 설정

Env:
- CALC_FEE_CONFIG: fee schedule YAML 경로 (미설정 → built-in)
- CALC_PRESET_CONFIG: preset YAML 경로 (미설정 → built-in)
- CALC_DEFAULT_EXCHANGE: 기본 거래소 (default: binance)
- CALC_LOG_LEVEL: logging level (default: INFO)

Note:
- .env 로딩(load_dotenv)은 진입점(scripts/)에서 수행
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass
class Settings:
    fee_config_path: Optional[str] = None
    preset_config_path: Optional[str] = None
    default_exchange: str = "binance"
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    환경변수 → Settings

    Args:
        environ: 테스트용 env mapping (None → os.environ)
    """
    env = os.environ if environ is None else environ
    return Settings(
        fee_config_path=env.get("CALC_FEE_CONFIG") or None,
        preset_config_path=env.get("CALC_PRESET_CONFIG") or None,
        default_exchange=(env.get("CALC_DEFAULT_EXCHANGE") or "binance").lower(),
        log_level=(env.get("CALC_LOG_LEVEL") or "INFO").upper(),
    )
