"""Timeline filter over node creation timestamps.

The slider runs from 0 (as far back as the data goes) to 100 (today).
Each position maps to a historical cutoff date; nodes created after the
cutoff did not exist yet at that point and are flagged ``new``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

from depgraph.graph.models import GraphNode, TimelineStatus

SLIDER_MIN = 0
SLIDER_MAX = 100
MIN_RANGE_DAYS = 7

_SECONDS_PER_DAY = 24 * 3600


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def parse_created_at(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; ``None`` for absent or unparseable input.

    Timestamps without an offset are read as UTC.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def oldest_created_at(nodes: Sequence[GraphNode], now: datetime) -> datetime:
    """Earliest parseable ``created_at`` among *nodes*, else *now*."""
    dates = [d for d in (parse_created_at(n.created_at) for n in nodes) if d is not None]
    if not dates:
        return now
    return min(dates)


def effective_range_days(oldest: datetime, now: datetime) -> int:
    """Whole days spanned by the data, never less than a week."""
    span = math.ceil((now - oldest).total_seconds() / _SECONDS_PER_DAY)
    return max(span, MIN_RANGE_DAYS)


def days_back(range_days: int, slider: int) -> float:
    return range_days * (SLIDER_MAX - slider) / SLIDER_MAX


def cutoff_date(now: datetime, back: float) -> datetime:
    """``now`` minus *back* days, clamped to the earliest representable time."""
    try:
        return now - timedelta(days=back)
    except OverflowError:
        return datetime.min.replace(tzinfo=timezone.utc)


def classify_node(node: GraphNode, cutoff: datetime) -> TimelineStatus:
    created = parse_created_at(node.created_at)
    if created is not None and created > cutoff:
        return TimelineStatus.NEW
    return TimelineStatus.UNCHANGED


def timeline_label(back: float) -> str:
    """Human-readable distance for a ``days_back`` value."""
    days = _round_half_up(back)
    if days == 0:
        return "Today"
    if days == 1:
        return "1 Day Ago"
    if days < 7:
        return f"{days} Days Ago"
    if days < 14:
        return "1 Week Ago"
    if days < 30:
        return f"{_round_half_up(days / 7)} Weeks Ago"
    if days < 60:
        return "1 Month Ago"
    return f"{_round_half_up(days / 30)} Months Ago"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimelineResult:
    slider: int
    range_days: int
    days_back: float
    cutoff: datetime
    label: str
    statuses: dict[str, TimelineStatus] = field(default_factory=dict)

    def status_of(self, node_id: str) -> TimelineStatus:
        return self.statuses.get(node_id, TimelineStatus.UNCHANGED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.slider,
            "rangeDays": self.range_days,
            "daysBack": self.days_back,
            "cutoff": self.cutoff.isoformat(),
            "label": self.label,
            "newCount": sum(1 for s in self.statuses.values() if s is TimelineStatus.NEW),
        }


def evaluate_timeline(
    nodes: Sequence[GraphNode],
    slider: int,
    now: datetime | None = None,
) -> TimelineResult:
    """Classify every node for the given slider position.

    Args:
        nodes: Snapshot nodes; ``created_at`` may be absent or malformed.
        slider: Integer position in ``0..100``.
        now: Reference time, defaults to the current UTC time.

    Raises:
        ValueError: If *slider* is outside ``0..100``.
    """
    if not SLIDER_MIN <= slider <= SLIDER_MAX:
        raise ValueError(f"Timeline position must be within 0-100, got {slider}")

    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    range_days = effective_range_days(oldest_created_at(nodes, now), now)
    back = days_back(range_days, slider)
    cutoff = cutoff_date(now, back)

    return TimelineResult(
        slider=slider,
        range_days=range_days,
        days_back=back,
        cutoff=cutoff,
        label=timeline_label(back),
        statuses={node.id: classify_node(node, cutoff) for node in nodes},
    )


def apply_timeline(nodes: Sequence[GraphNode], result: TimelineResult) -> list[GraphNode]:
    return [replace(node, timeline_status=result.status_of(node.id)) for node in nodes]
