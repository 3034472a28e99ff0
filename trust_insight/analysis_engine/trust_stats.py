"""
Shared trust statistics: fixed-point parsing, display thresholds and formatting.

build_trust_stats composes them into the per-triple stats block the insight
pipeline attaches to account and origin insights.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from trust_insight.analysis_engine.concentration import nakamoto, positive_values

DEFAULT_DECIMALS = 18
# Fractional digits kept when scaling fixed-point amounts to floats
SIGNIFICANT_DECIMALS = 6

MIN_STAKERS_FOR_CONFIDENCE = 3
TOP_STAKER_CONCERN_THRESHOLD = 25.0
MIN_STAKERS_FOR_NAKAMOTO = 5
NAKAMOTO_WELL_DISTRIBUTED_RATIO = 0.4

TRUSTWORTHY_GREEN_MIN = 90.0
TRUSTWORTHY_YELLOW_MIN = 70.0


def parse_shares(value: Any) -> int:
    """Exact integer from a decimal-string fixed-point amount; 0 when unparsable or negative."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return 0
    return max(0, parsed)


def string_to_decimal(value: Any, decimals: int = DEFAULT_DECIMALS) -> float:
    """
    Scale a fixed-point decimal string to native units.

    Integer division is exact; the fractional part is truncated to
    SIGNIFICANT_DECIMALS digits before converting to float.

    >>> string_to_decimal("1500000000000000000")
    1.5
    """
    num = parse_shares(value)
    divisor = 10**decimals
    quotient, remainder = divmod(num, divisor)
    fraction = str(remainder).rjust(decimals, "0")[:SIGNIFICANT_DECIMALS]
    return float(f"{quotient}.{fraction or '0'}")


def _shares_of(position: Any) -> Any:
    if isinstance(position, Mapping):
        return position.get("shares")
    return getattr(position, "shares", None)


def positions_to_shares(positions: Iterable | None) -> list[float]:
    """Float share amounts of positions, positive only."""
    return positive_values(_shares_of(p) for p in positions or ())


def calculate_top1_percent(shares: Iterable) -> float:
    """Percentage held by the single largest position."""
    values = positive_values(shares)
    if not values:
        return 0.0
    total = sum(values)
    return max(values) / total * 100 if total else 0.0


def format_market_cap(value: float, currency_symbol: str) -> str:
    """Format a native-unit amount like "49,375.12 TRUST"."""
    integer_part = int(value // 1)
    fractional_part = round((value - integer_part) * 100)
    if fractional_part >= 100:
        integer_part += 1
        fractional_part = 0
    formatted = f"{integer_part:,}"
    if fractional_part > 0:
        formatted = f"{formatted}.{fractional_part:02d}"
    return f"{formatted} {currency_symbol}"


def trustworthy_icon(trust_percent: float) -> str:
    if trust_percent >= TRUSTWORTHY_GREEN_MIN:
        return "🟢"
    if trust_percent >= TRUSTWORTHY_YELLOW_MIN:
        return "🟡"
    return "🔴"


def top_staker_icon(top_staker_percent: float) -> str:
    return "🟡" if top_staker_percent >= TOP_STAKER_CONCERN_THRESHOLD else ""


def trust_summary(trust_percent: float, total_stakers: int, top_staker_percent: float) -> str | None:
    """
    Advisory sentence when trust data has concerns; None when all signals are healthy.

    Concerns: disputed (< 90%), sparse (< 3 stakers), concentrated (top staker >= 25%).
    """
    disputed = trust_percent < TRUSTWORTHY_GREEN_MIN
    sparse = total_stakers < MIN_STAKERS_FOR_CONFIDENCE
    concentrated = top_staker_percent >= TOP_STAKER_CONCERN_THRESHOLD

    if disputed and sparse and concentrated:
        return "Disputed, limited, and concentrated"
    if disputed and sparse:
        return "Disputed with limited data"
    if disputed and concentrated:
        return "Disputed and dominated by one staker"
    if sparse and concentrated:
        return "Limited data, dominated by one staker"
    if disputed:
        return "Trustworthiness is actively disputed"
    if sparse:
        return "Limited trust data available"
    if concentrated:
        return "Trust signal dominated by one staker"
    return None


def nakamoto_display(shares: Iterable) -> str | None:
    """
    "N of M stakers" when majority control is notably concentrated.

    Suppressed below MIN_STAKERS_FOR_NAKAMOTO stakers, or when N/M exceeds
    NAKAMOTO_WELL_DISTRIBUTED_RATIO (unremarkable).
    """
    values = positive_values(shares)
    if len(values) < MIN_STAKERS_FOR_NAKAMOTO:
        return None
    n = nakamoto(values)
    if n == 0:
        return None
    if n / len(values) > NAKAMOTO_WELL_DISTRIBUTED_RATIO:
        return None
    return f"{n} of {len(values)} stakers"


@dataclass
class TrustStats:
    """
    Display-ready trust statistics for one trust triple.

    trust_percent is computed from vault market caps scaled to native units;
    top staker and Nakamoto figures use the FOR positions only. When nothing
    is staked, has_stakes is False and the icon/summary fields are empty.
    """

    has_stakes: bool
    trust_percent: float
    trust_icon: str
    top_staker_percent: float | None
    top_staker_icon: str
    nakamoto_display: str | None
    total_staked: float
    total_staked_display: str
    for_count: int
    against_count: int
    summary: str | None

    @property
    def total_stakers(self) -> int:
        return self.for_count + self.against_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_stakes": self.has_stakes,
            "trust_percent": self.trust_percent,
            "trust_icon": self.trust_icon,
            "top_staker_percent": self.top_staker_percent,
            "top_staker_icon": self.top_staker_icon,
            "nakamoto_display": self.nakamoto_display,
            "total_staked": self.total_staked,
            "total_staked_display": self.total_staked_display,
            "for_count": self.for_count,
            "against_count": self.against_count,
            "summary": self.summary,
        }


def build_trust_stats(
    support_market_cap: Any,
    oppose_market_cap: Any,
    positions: Iterable | None,
    counter_positions: Iterable | None,
    currency_symbol: str,
    decimals: int = DEFAULT_DECIMALS,
) -> TrustStats:
    """
    Trust stats block from raw vault market caps (fixed-point strings) and positions.

    >>> build_trust_stats("9000000000000000000", "1000000000000000000", [], [], "TRUST").trust_percent
    90.0
    """
    positions = list(positions or ())
    counter_positions = list(counter_positions or ())
    support = string_to_decimal(support_market_cap, decimals)
    oppose = string_to_decimal(oppose_market_cap, decimals)
    total = support + oppose
    has_stakes = total > 0
    trust_percent = support * 100 / total if has_stakes else 0.0

    for_shares = positions_to_shares(positions)
    top_staker_percent = calculate_top1_percent(for_shares) if for_shares else None
    for_count = len(positions)
    against_count = len(counter_positions)

    return TrustStats(
        has_stakes=has_stakes,
        trust_percent=trust_percent,
        trust_icon=trustworthy_icon(trust_percent) if has_stakes else "",
        top_staker_percent=top_staker_percent,
        top_staker_icon=top_staker_icon(top_staker_percent) if top_staker_percent is not None else "",
        nakamoto_display=nakamoto_display(for_shares),
        total_staked=total,
        total_staked_display=format_market_cap(total, currency_symbol),
        for_count=for_count,
        against_count=against_count,
        summary=(
            trust_summary(trust_percent, for_count + against_count, top_staker_percent or 0.0)
            if has_stakes
            else None
        ),
    )
