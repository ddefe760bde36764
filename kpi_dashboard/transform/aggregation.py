from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from ..models.report import ChartPoint
from .columns import MONTH_COUNT

"""Aggregation helpers shared by the report pipelines.

Group totals are pandas Series indexed by category key. Ranking orders by
value descending, then key ascending.
"""

__all__ = [
    "MONTH_LABELS",
    "UNKNOWN_KEY",
    "NO_DATA",
    "category_key",
    "sum_by_month",
    "monthly_series",
    "group_totals",
    "rank_frame",
    "rank_groups",
    "top_group",
    "top_month_label",
    "percent_change",
]

MONTH_LABELS: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
UNKNOWN_KEY = "Unknown"
NO_DATA = "N/A"


def category_key(value: str) -> str:
    """Blank categories are bucketed under ``Unknown``."""
    return value if value and value.strip() else UNKNOWN_KEY


def sum_by_month(monthly_rows: Iterable[Sequence[float]]) -> list[float]:
    grid = np.array([list(months[:MONTH_COUNT]) for months in monthly_rows], dtype=float)
    return grid.reshape(-1, MONTH_COUNT).sum(axis=0).tolist()


def monthly_series(totals: Sequence[float]) -> list[ChartPoint]:
    """Twelve points labelled Jan..Dec in slot order."""
    return [ChartPoint(name=MONTH_LABELS[i], value=totals[i]) for i in range(MONTH_COUNT)]


def group_totals(pairs: Iterable[tuple[str, float]]) -> pd.Series:
    frame = pd.DataFrame(list(pairs), columns=["key", "value"])
    frame["key"] = frame["key"].map(category_key)
    return frame.groupby("key", sort=False)["value"].sum()


def rank_frame(frame: pd.DataFrame, value: str, key: str, limit: int | None = None) -> pd.DataFrame:
    ordered = frame.sort_values([value, key], ascending=[False, True])
    return ordered if limit is None else ordered.head(limit)


def rank_groups(totals: pd.Series | Mapping[str, float], limit: int | None = None) -> list[ChartPoint]:
    if len(totals) == 0:
        return []
    series = totals if isinstance(totals, pd.Series) else pd.Series(totals)
    ranked = rank_frame(series.rename_axis("key").reset_index(name="value"), "value", "key", limit)
    return [ChartPoint(name=k, value=v) for k, v in zip(ranked["key"].tolist(), ranked["value"].tolist())]


def top_group(totals: pd.Series | Mapping[str, float]) -> str:
    ranked = rank_groups(totals, limit=1)
    return ranked[0].name if ranked else NO_DATA


def top_month_label(totals: Sequence[float]) -> str:
    # 同値の場合は最初の月
    best = max(range(MONTH_COUNT), key=lambda i: (totals[i], -i))
    return MONTH_LABELS[best]


def percent_change(current: float, previous: float) -> float:
    """``(current - previous) / previous * 100``; 100 when previous is 0 and current > 0, else 0."""
    if previous != 0:
        return (current - previous) / previous * 100
    return 100.0 if current > 0 else 0.0
