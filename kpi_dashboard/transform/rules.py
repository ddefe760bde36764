from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .cells import leading_number
from .formatting import format_percentage, format_plain_number

"""Title keyword rule tables for KPI cards.

Rules are evaluated top to bottom; the first matching predicate wins and a
default applies when nothing matches. Titles arrive in English or Thai.
"""

__all__ = [
    "TitleRule",
    "DEFAULT_ICON",
    "ICON_RULES",
    "KPI_COLORS",
    "is_forklift_availability",
    "kpi_icon",
    "kpi_color",
    "score_as_percentage",
    "transform_kpi_score",
]

TitlePredicate = Callable[[str], bool]


@dataclass(frozen=True)
class TitleRule:
    predicate: TitlePredicate
    category: str


def _all_of(*words: str) -> TitlePredicate:
    return lambda title: all(w in title for w in words)


def _any_of(*predicates: TitlePredicate) -> TitlePredicate:
    return lambda title: any(p(title) for p in predicates)


def _contains(word: str) -> TitlePredicate:
    return lambda title: word in title


_FORKLIFT = _any_of(
    _all_of("availability", "forklift"),
    _contains("ความพร้อมของรถยก"),
    _contains("avaliability"),  # 元データの綴り誤りも拾う
)

DEFAULT_ICON = "ChartBarIcon"

ICON_RULES: tuple[TitleRule, ...] = (
    TitleRule(_FORKLIFT, "CubeIcon"),
    TitleRule(
        _any_of(
            _all_of("initiative", "carbon"),
            _contains("โครงการลดการปล่อยก๊าซคาร์บอน"),
            _all_of("carbon", "emission"),
        ),
        "SparklesIcon",
    ),
    TitleRule(
        _any_of(
            _all_of("อัตราการเกิดอุบัติเหตุ", "ifr"),
            _all_of("ifr", "2024"),
            _all_of("accident", "ifr"),
        ),
        "ShieldCheckIcon",
    ),
    TitleRule(
        _any_of(
            _all_of("lean", "management"),
            _contains("กำหนดแผนพัฒนา"),
            _contains("lean mamagement system"),
        ),
        "ChartPieIcon",
    ),
    TitleRule(
        _any_of(
            _all_of("idp", "implementation"),
            _contains("idp implementation succeed g4-g7"),
            _contains("โดยให้พนักงานในแผนก"),
        ),
        "AcademicCapIcon",
    ),
)

KPI_COLORS: tuple[str, ...] = (
    "text-brand-primary",
    "text-brand-secondary",
    "text-brand-success",
    "text-brand-danger",
    "text-brand-warning",
)

_PLACEHOLDER_SCORES = {"", "N/A", "-"}


def _first_match(title: str, rules: tuple[TitleRule, ...], default: str) -> str:
    lowered = str(title).lower()
    for rule in rules:
        if rule.predicate(lowered):
            return rule.category
    return default


def is_forklift_availability(title: str) -> bool:
    return _FORKLIFT(str(title).lower())


def kpi_icon(title: str) -> str:
    return _first_match(title, ICON_RULES, DEFAULT_ICON)


def kpi_color(index: int) -> str:
    return KPI_COLORS[index % len(KPI_COLORS)]


def score_as_percentage(score: str) -> str:
    """Fractions in (0, 1] are scaled by 100; other numbers are taken as-is."""
    if score in _PLACEHOLDER_SCORES:
        return score
    numeric = leading_number(score)
    if numeric is None:
        return score
    percentage = numeric * 100 if 0 < numeric <= 1 else numeric
    # 0.85 * 100 の浮動小数誤差を吸収
    return format_percentage(round(percentage, 9))


def transform_kpi_score(title: str, score: str) -> str:
    """Display value for a KPI card.

    Forklift availability is reported in days, so its score stays a raw
    number; every other KPI is shown as a percentage.
    """
    if score in _PLACEHOLDER_SCORES:
        return score
    if is_forklift_availability(title):
        numeric = leading_number(score)
        return format_plain_number(numeric) if numeric is not None else score
    return score_as_percentage(score)
