"""Attendance aggregation for charts, the dashboard and export summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Protocol, Tuple

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import AttendanceStatus


class HasDateAndStatus(Protocol):
    date: date
    status: AttendanceStatus


def empty_status_counts() -> Dict[AttendanceStatus, int]:
    return {status: 0 for status in AttendanceStatus}


@dataclass(frozen=True)
class DailyTrend:
    date: date
    counts: Dict[AttendanceStatus, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> dict:
        data: dict = {"date": isoformat_or_none(self.date)}
        data.update({status.value: count for status, count in self.counts.items()})
        data["total"] = self.total
        return data


@dataclass
class ChartData:
    status_counts: Dict[AttendanceStatus, int] = field(default_factory=empty_status_counts)
    daily: Dict[date, Dict[AttendanceStatus, int]] = field(default_factory=dict)

    @property
    def trends(self) -> List[DailyTrend]:
        # dicts keep insertion order, so this is first-seen date order
        return [DailyTrend(date=d, counts=dict(counts)) for d, counts in self.daily.items()]

    def to_dict(self) -> dict:
        return {
            "statusCounts": {s.value: c for s, c in self.status_counts.items()},
            "daily": {
                d.isoformat(): {s.value: c for s, c in counts.items()}
                for d, counts in self.daily.items()
            },
            "trends": [t.to_dict() for t in self.trends],
        }


def aggregate_attendance(rows: Iterable[HasDateAndStatus]) -> ChartData:
    """Tally rows per status overall and per date.

    Dates without rows do not appear in the output (no zero-filling).
    """

    chart = ChartData()
    for row in rows:
        chart.status_counts[row.status] += 1
        day = chart.daily.get(row.date)
        if day is None:
            day = empty_status_counts()
            chart.daily[row.date] = day
        day[row.status] += 1
    return chart


def attendance_rate(present: int, absent: int) -> int:
    """Present share of (present + absent) as a whole percentage; 0 when nothing was taken."""

    denominator = present + absent
    if denominator <= 0:
        return 0
    ratio = Decimal(present * 100) / Decimal(denominator)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def chart_window(days: int, *, today: date) -> Tuple[date, date]:
    """Inclusive window covering the previous `days` days up to and including today."""

    return today - timedelta(days=int(days)), today
