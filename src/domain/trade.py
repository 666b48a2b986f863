"""
Domain Trade Models

계산기 입력/출력 스냅샷 정의 (도메인 계약)

원칙:
- TradeInputs → CalculationResult 는 순수 함수 (application.trade_calculator)
- 모든 객체는 transient value object (계산 간 참조 유지 안 함)
- "undefined" 상태는 float('nan'), SHORT leverage 1 청산가는 float('inf')
"""

import math
from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional

__all__ = [
    'Direction',
    'SizingMode',
    'PriceSource',
    'ExchangeFeeSchedule',
    'TakeProfitSlot',
    'TakeProfitResult',
    'StopLossConfig',
    'TradeInputs',
    'CalculationResult',
]


class Direction(Enum):
    """포지션 방향"""
    LONG = "LONG"
    SHORT = "SHORT"


class SizingMode(Enum):
    """
    Position sizing 모드

    - FIXED_MARGIN: 사용자가 지정한 margin (USDT) × leverage
    - RISK_PERCENT: account × risk% 를 stop 거리로 나눠 qty 산출
      (valid stop-loss 없으면 FIXED_MARGIN 으로 fallback)
    """
    FIXED_MARGIN = "FIXED_MARGIN"
    RISK_PERCENT = "RISK_PERCENT"


class PriceSource(Enum):
    """TP/SL 의 single source of truth (사용자가 마지막으로 입력한 필드)"""
    PRICE = "PRICE"
    PERCENT = "PERCENT"


@dataclass(frozen=True)
class ExchangeFeeSchedule:
    """
    거래소 수수료율 (fraction, 예: 0.0004 = 0.04%)

    Entry 는 항상 taker, TP exit 는 maker, SL exit 는 taker.
    """
    name: str
    maker_rate: float
    taker_rate: float


@dataclass
class TakeProfitSlot:
    """
    Take-profit 슬롯 (부분 청산 목표)

    - target_price: 절대 청산가 (None = unresolved)
    - percent_from_entry: entry 대비 거리 (항상 non-negative magnitude)
    - weight_percent: 전체 qty 중 이 목표에서 청산되는 비율 (0~100)
    - source: 재계산 시 기준이 되는 필드

    Invariant: enabled 슬롯 weight 합 = 100, disabled 슬롯 weight = 0
    """
    enabled: bool
    target_price: Optional[float] = None
    percent_from_entry: Optional[float] = None
    weight_percent: float = 0.0
    source: PriceSource = PriceSource.PRICE


@dataclass
class TakeProfitResult:
    """
    슬롯별 계산 결과 (TradeCalculator 만 작성)

    is_loss_target: 목표가가 손실 방향 (LONG인데 entry 아래 등) → taker exit
    """
    gross_profit: float = 0.0
    gross_profit_percent: float = 0.0
    net_profit: float = 0.0
    net_profit_percent: float = 0.0
    exit_fee: float = 0.0
    is_loss_target: bool = False


@dataclass
class StopLossConfig:
    """
    Stop-loss 설정

    enabled 이지만 price 가 손실 방향이 아니면 invalid (에러 아님, "no stop-loss" 로 degrade)
    """
    enabled: bool
    price: Optional[float] = None
    percent_from_entry: Optional[float] = None
    source: PriceSource = PriceSource.PRICE


@dataclass
class TradeInputs:
    """
    계산 입력 스냅샷

    Caller(UI/CLI) 책임:
    - raw text → number 파싱 (application.input_parsing)
    - leverage [1, 125] clamp
    - TP/SL price↔percent resolve (application.price_resolution)
    """
    account_size: float
    leverage: int
    entry_price: float
    direction: Direction
    take_profits: List[TakeProfitSlot]
    stop_loss: StopLossConfig
    sizing_mode: SizingMode
    fixed_margin_amount: float
    risk_percent: float
    fee_schedule: ExchangeFeeSchedule


@dataclass
class CalculationResult:
    """
    계산 결과 스냅샷

    Sentinel 규칙:
    - 금액 필드: division by zero → 0
    - R/R, 청산가: undefined → NaN (0 과 구분)
    - SHORT leverage 1 청산가 → +inf
    """
    # Sizing
    quantity: float = 0.0
    margin: float = 0.0
    position_size: float = 0.0
    risk_amount: float = 0.0
    effective_sizing_mode: SizingMode = SizingMode.FIXED_MARGIN
    stop_loss_valid: bool = False
    stop_loss_distance: float = 0.0

    # Fees
    entry_fee: float = 0.0
    exit_fee_tp: float = 0.0
    exit_fee_sl: float = 0.0

    # Profit (TP)
    take_profits: List[TakeProfitResult] = field(default_factory=list)
    weighted_gross_profit: float = 0.0
    weighted_net_profit: float = 0.0

    # Loss (SL)
    gross_loss: float = 0.0
    gross_loss_percent: float = 0.0
    net_loss: float = 0.0
    net_loss_percent: float = 0.0

    # R/R
    gross_risk_reward: float = math.nan
    net_risk_reward: float = math.nan

    # Liquidation
    liquidation_price: float = math.nan
    real_liquidation_price: float = math.nan

    # Warning
    exceeds_account: bool = False
    required_margin: float = 0.0
    account_size: float = 0.0

    @classmethod
    def neutral(cls, slot_count: int = 0) -> "CalculationResult":
        """Idle 상태 (entry <= 0 또는 leverage < 1)"""
        return cls(take_profits=[TakeProfitResult() for _ in range(slot_count)])

    @property
    def total_fees_tp(self) -> float:
        """TP 시나리오 총 수수료 (entry + TP exits)"""
        return self.entry_fee + self.exit_fee_tp

    @property
    def total_fees_sl(self) -> float:
        """SL 시나리오 총 수수료 (entry + SL exit)"""
        return self.entry_fee + self.exit_fee_sl

    @property
    def liquidation_buffer(self) -> float:
        """Margin 외 계좌 잔액 (real 청산가 추정의 추가 buffer)"""
        return max(0.0, self.account_size - self.margin)
