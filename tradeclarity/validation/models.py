"""
Pydantic Validation Models

Validate the camelCase payloads handed over by the analytics layer and
convert them into the core domain models.
"""

import logging
from datetime import datetime
from typing import Annotated, Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from ..core.errors import ErrorCodes, InsightDataError, InsightValidationError
from ..core.models import (
    AnalyticsSnapshot,
    PsychologyAssessment,
    PsychologyWeakness,
    SymbolStats,
    Trade,
    TradeStats,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Custom Field Types with Annotated
# =============================================================================

# Percentage field (0-100)
Percentage = Annotated[
    float,
    Field(ge=0, le=100, description="Percentage value between 0 and 100"),
]

# Non-negative count
CountField = Annotated[
    int,
    Field(ge=0, description="Non-negative count"),
]

# Impact level used by psychology weaknesses and insights
ImpactField = Annotated[
    int,
    Field(ge=1, le=4, description="Impact level 1-4"),
]

# Raw timestamp as produced by exchanges and CSV imports
RawTimestamp = Optional[Union[int, float, str, datetime]]


class TradeClarityBaseModel(BaseModel):
    """Base model for all inbound payloads."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore",  # Payloads carry UI-only fields
        populate_by_name=True,
    )


# =============================================================================
# Input Models
# =============================================================================


class TradeInput(TradeClarityBaseModel):
    """Single trade record."""

    pnl: Optional[float] = None
    realized_pnl: Optional[float] = Field(default=None, alias="realizedPnl")
    commission: Optional[float] = None
    symbol: Optional[str] = None
    timestamp: RawTimestamp = None
    time: RawTimestamp = None
    qty: Optional[float] = None
    quantity: Optional[float] = None
    price: Optional[float] = None
    realized: Optional[float] = None

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: Optional[str]) -> Optional[str]:
        """Upper-case symbols so per-symbol groupings line up."""
        return v.upper() if v else v

    def to_domain(self) -> Trade:
        return Trade(
            pnl=self.pnl if self.pnl is not None else self.realized_pnl,
            commission=self.commission,
            symbol=self.symbol,
            timestamp=self.timestamp,
            time=self.time,
            qty=self.qty if self.qty is not None else self.quantity,
            price=self.price,
            realized=self.realized,
        )


class SymbolStatsInput(TradeClarityBaseModel):
    """Per-symbol aggregate."""

    trades: CountField = 0
    realized: Optional[float] = None
    net_pnl: Optional[float] = Field(default=None, alias="netPnL")
    win_rate: Optional[Percentage] = Field(default=None, alias="winRate")

    def to_domain(self) -> SymbolStats:
        return SymbolStats(
            trades=self.trades,
            realized=self.realized,
            net_pnl=self.net_pnl,
            win_rate=self.win_rate,
        )


class AnalyticsInput(TradeClarityBaseModel):
    """Precomputed analytics snapshot."""

    win_rate: Optional[Percentage] = Field(default=None, alias="winRate")
    profit_factor: Optional[float] = Field(default=None, ge=0, alias="profitFactor")
    avg_win: Optional[float] = Field(default=None, alias="avgWin")
    avg_loss: Optional[float] = Field(default=None, alias="avgLoss")
    total_pnl: Optional[float] = Field(default=None, alias="totalPnL")
    total_commission: Optional[float] = Field(default=None, alias="totalCommission")
    total_trades: Optional[CountField] = Field(default=None, alias="totalTrades")
    winning_trades: Optional[CountField] = Field(default=None, alias="winningTrades")
    losing_trades: Optional[CountField] = Field(default=None, alias="losingTrades")
    symbols: Dict[str, SymbolStatsInput] = Field(default_factory=dict)
    all_trades: List[TradeInput] = Field(default_factory=list, alias="allTrades")
    trading_period_days: Optional[float] = Field(
        default=None, ge=0, alias="tradingPeriodDays"
    )
    metadata: Dict[str, Any] = Field(default_factory=dict)
    spot_pnl: Optional[float] = Field(default=None, alias="spotPnL")
    spot_win_rate: Optional[Percentage] = Field(default=None, alias="spotWinRate")
    futures_pnl: Optional[float] = Field(default=None, alias="futuresPnL")
    futures_win_rate: Optional[Percentage] = Field(default=None, alias="futuresWinRate")

    @field_validator("symbols", "all_trades", "metadata", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any, info) -> Any:
        """Treat explicit nulls as empty collections."""
        if v is None:
            return [] if info.field_name == "all_trades" else {}
        return v

    def to_domain(self) -> AnalyticsSnapshot:
        period_days = self.trading_period_days
        if period_days is None:
            period_days = self.metadata.get("tradingPeriodDays")

        return AnalyticsSnapshot(
            win_rate=self.win_rate,
            profit_factor=self.profit_factor,
            avg_win=self.avg_win or 0.0,
            avg_loss=self.avg_loss or 0.0,
            total_pnl=self.total_pnl or 0.0,
            total_commission=self.total_commission or 0.0,
            total_trades=self.total_trades or 0,
            winning_trades=self.winning_trades,
            losing_trades=self.losing_trades,
            symbols={
                symbol.upper(): stats.to_domain()
                for symbol, stats in self.symbols.items()
            },
            all_trades=[t.to_domain() for t in self.all_trades],
            trading_period_days=period_days,
            spot_pnl=self.spot_pnl,
            spot_win_rate=self.spot_win_rate,
            futures_pnl=self.futures_pnl,
            futures_win_rate=self.futures_win_rate,
        )


class PsychologyWeaknessInput(TradeClarityBaseModel):
    """Single weakness from the psychology analyzer."""

    title: Optional[str] = None
    message: str = ""
    severity: Optional[str] = None
    impact: Optional[ImpactField] = None

    @field_validator("severity")
    @classmethod
    def normalize_severity(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    def to_domain(self) -> PsychologyWeakness:
        return PsychologyWeakness(
            title=self.title,
            message=self.message,
            severity=self.severity,
            impact=self.impact,
        )


class PsychologyInput(TradeClarityBaseModel):
    """Psychology assessment."""

    weaknesses: List[PsychologyWeaknessInput] = Field(default_factory=list)
    health_score: Optional[float] = Field(default=None, ge=0, le=100, alias="healthScore")
    patterns: List[Dict[str, Any]] = Field(default_factory=list)

    def to_domain(self) -> PsychologyAssessment:
        return PsychologyAssessment(
            weaknesses=[w.to_domain() for w in self.weaknesses],
            health_score=self.health_score,
            patterns=list(self.patterns),
        )


class TradeStatsInput(TradeClarityBaseModel):
    """Trade counts from the trade store."""

    total_trades: CountField = Field(default=0, alias="totalTrades")
    spot_trades: CountField = Field(default=0, alias="spotTrades")
    futures_income: CountField = Field(default=0, alias="futuresIncome")
    futures_positions: CountField = Field(default=0, alias="futuresPositions")

    def to_domain(self) -> TradeStats:
        return TradeStats(
            total_trades=self.total_trades,
            spot_trades=self.spot_trades,
            futures_income=self.futures_income,
            futures_positions=self.futures_positions,
        )


# =============================================================================
# Parsing Helpers
# =============================================================================


def _raise_validation_error(error: ValidationError, payload_name: str) -> None:
    first = error.errors()[0] if error.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    raise InsightValidationError(
        detail=f"{payload_name}: {first.get('msg', str(error))}",
        field=location or None,
        error_code=ErrorCodes.VALIDATION_INVALID_PAYLOAD,
        original_error=error,
    ) from error


def _require_trade_records(records: Iterable[Any], payload_name: str) -> List[Any]:
    """Reject trade entries that are not key/value records at all."""
    records = list(records)
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise InsightDataError(
                detail=f"{payload_name}[{index}] is a {type(record).__name__}, not a trade record",
                context={"index": index},
            )
    return records


def parse_trades(raw_trades: Optional[Iterable[Mapping[str, Any]]]) -> List[Trade]:
    """
    Validate a list of raw trade dictionaries.

    Args:
        raw_trades: Trade dictionaries (camelCase or snake_case keys)

    Returns:
        List of Trade domain objects

    Raises:
        InsightDataError: If an entry is not a mapping
        InsightValidationError: If any trade fails validation
    """
    if not raw_trades:
        return []
    records = _require_trade_records(raw_trades, "trades")
    try:
        return [TradeInput.model_validate(t).to_domain() for t in records]
    except ValidationError as e:
        _raise_validation_error(e, "trades")


def parse_analytics(raw: Mapping[str, Any]) -> AnalyticsSnapshot:
    """
    Validate an analytics payload, including its embedded ``allTrades``.

    Raises:
        InsightDataError: If an ``allTrades`` entry is not a mapping
        InsightValidationError: If the payload fails validation
    """
    if isinstance(raw, Mapping):
        embedded = raw.get("allTrades", raw.get("all_trades"))
        if isinstance(embedded, (list, tuple)):
            _require_trade_records(embedded, "allTrades")
    try:
        snapshot = AnalyticsInput.model_validate(raw or {}).to_domain()
    except ValidationError as e:
        _raise_validation_error(e, "analytics")

    logger.debug(
        f"Parsed analytics: {snapshot.total_trades} trades, "
        f"{len(snapshot.all_trades)} trade records, {len(snapshot.symbols)} symbols"
    )
    return snapshot


def parse_psychology(raw: Optional[Mapping[str, Any]]) -> PsychologyAssessment:
    """
    Validate a psychology payload. Missing payloads give an empty assessment.

    Raises:
        InsightValidationError: If the payload fails validation
    """
    if not raw:
        return PsychologyAssessment()
    try:
        return PsychologyInput.model_validate(raw).to_domain()
    except ValidationError as e:
        _raise_validation_error(e, "psychology")


def parse_trade_stats(raw: Optional[Mapping[str, Any]]) -> Optional[TradeStats]:
    """Validate trade-store counts. Missing payloads give None."""
    if not raw:
        return None
    try:
        return TradeStatsInput.model_validate(raw).to_domain()
    except ValidationError as e:
        _raise_validation_error(e, "tradeStats")
