"""
Insights module.

Descriptive statistics over the full echo snapshot for the
dashboard and the insights report. Shows patterns, never advice.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from echocollector.core.snapshot import EchoSnapshot, ToneSnapshot
from echocollector.core.utils import (
    format_years_ago,
    utcnow,
    whole_days_between,
    whole_years_between,
)
from echocollector.review.chains import longest_chain

logger = logging.getLogger(__name__)

TREND_WINDOW = 5
MAX_THEMES = 15
MIN_THEME_WORD_LENGTH = 5

DECISION_KEYWORDS = [
    "spending",
    "saving",
    "investment",
    "debt",
    "budget",
    "purchase",
    "loan",
    "credit",
]

STOP_WORDS = frozenset([
    "this", "that", "with", "from", "have", "been", "will", "would",
    "could", "should", "about", "their", "there", "these", "those",
])

_WORD_RE = re.compile(r"[^\W_]+")


class StrengthTrend(str, Enum):
    """Direction of connection strength over time."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient data"


@dataclass
class Insights:
    """Dashboard statistics for one echo snapshot."""
    total_count: int = 0
    resolved_count: int = 0
    resolution_rate: float = 0.0
    average_strength: float = 0.0
    strength_trend: StrengthTrend = StrengthTrend.INSUFFICIENT_DATA
    longest_unresolved: Optional[EchoSnapshot] = None
    longest_unresolved_years: Optional[int] = None
    most_echoed_decision: Optional[Tuple[str, int]] = None
    frequency_by_year: List[Tuple[int, int]] = field(default_factory=list)
    recurring_themes: List[Tuple[str, int]] = field(default_factory=list)
    last_echo_days_ago: Optional[int] = None
    longest_chain: int = 0


def _creation_order(echoes: Iterable[EchoSnapshot]) -> List[EchoSnapshot]:
    return sorted(echoes, key=lambda e: e.created_at or datetime.min)


def _mean_strength(echoes: List[EchoSnapshot]) -> float:
    if not echoes:
        return 0.0
    return sum(e.connection_strength or 0 for e in echoes) / len(echoes)


def resolution_rate(echoes: Iterable[EchoSnapshot]) -> float:
    """Percent of echoes resolved (0 when empty)."""
    echoes = list(echoes)
    if not echoes:
        return 0.0
    resolved = sum(1 for e in echoes if e.is_resolved)
    return resolved / len(echoes) * 100


def average_strength(echoes: Iterable[EchoSnapshot]) -> float:
    """Mean connection strength (0 when empty)."""
    return _mean_strength(list(echoes))


def strength_trend(echoes: Iterable[EchoSnapshot]) -> StrengthTrend:
    """
    Compare the newest echoes against the oldest by creation order.

    With fewer than 2 * TREND_WINDOW echoes the two windows overlap.
    """
    ordered = _creation_order(echoes)
    if len(ordered) < 2:
        return StrengthTrend.INSUFFICIENT_DATA

    recent_avg = _mean_strength(ordered[-TREND_WINDOW:])
    older_avg = _mean_strength(ordered[:TREND_WINDOW])

    if recent_avg > older_avg:
        return StrengthTrend.INCREASING
    if recent_avg < older_avg:
        return StrengthTrend.DECREASING
    return StrengthTrend.STABLE


def longest_unresolved(
    echoes: Iterable[EchoSnapshot],
    now: Optional[datetime] = None,
) -> Optional[Tuple[EchoSnapshot, int]]:
    """
    Unresolved echo whose past decision is oldest, in whole years.

    Ties go to the earliest-created echo. Returns (echo, years) or None.
    """
    now = now or utcnow()

    best: Optional[Tuple[EchoSnapshot, int]] = None
    for echo in _creation_order(echoes):
        if echo.is_resolved or echo.past_date is None:
            continue
        years = whole_years_between(echo.past_date, now)
        if best is None or years > best[1]:
            best = (echo, years)
    return best


def most_echoed_decision(echoes: Iterable[EchoSnapshot]) -> Optional[Tuple[str, int]]:
    """
    Most frequent financial decision keyword.

    Each echo counts once per keyword found in its past situation or
    title. Ties go to the keyword listed first.
    """
    counts = Counter()
    for echo in echoes:
        text = f"{echo.past_situation or ''} {echo.title or ''}".lower()
        for keyword in DECISION_KEYWORDS:
            if keyword in text:
                counts[keyword] += 1

    best: Optional[Tuple[str, int]] = None
    for keyword in DECISION_KEYWORDS:
        count = counts.get(keyword, 0)
        if count and (best is None or count > best[1]):
            best = (keyword, count)
    return best


def frequency_by_year(echoes: Iterable[EchoSnapshot]) -> List[Tuple[int, int]]:
    """Echo count per calendar year of creation, oldest year first."""
    counts = Counter(e.created_at.year for e in echoes if e.created_at is not None)
    return sorted(counts.items())


def tokenize(text: str) -> List[str]:
    """Lowercase alphanumeric words."""
    return _WORD_RE.findall(text.lower())


def recurring_themes(
    echoes: Iterable[EchoSnapshot],
    limit: int = MAX_THEMES,
) -> List[Tuple[str, int]]:
    """
    Words that keep coming back across echoes.

    Stop words and words shorter than five letters are dropped; only
    words seen more than once are kept. Most frequent first, ties in
    order of first appearance.
    """
    counts = Counter()
    for echo in echoes:
        text = " ".join([
            echo.title or "",
            echo.past_situation or "",
            echo.current_trigger or "",
        ])
        for word in tokenize(text):
            if len(word) >= MIN_THEME_WORD_LENGTH and word not in STOP_WORDS:
                counts[word] += 1

    repeated = [(word, count) for word, count in counts.items() if count > 1]
    repeated.sort(key=lambda item: item[1], reverse=True)
    return repeated[:limit]


def last_echo_days_ago(
    echoes: Iterable[EchoSnapshot],
    now: Optional[datetime] = None,
) -> Optional[int]:
    """Whole days since the newest echo was created."""
    created = [e.created_at for e in echoes if e.created_at is not None]
    if not created:
        return None
    return whole_days_between(max(created), now or utcnow())


def tone_frequency(
    echoes: Iterable[EchoSnapshot],
    tones: Iterable[ToneSnapshot],
) -> List[Tuple[ToneSnapshot, int]]:
    """
    Tagged-echo count per tone, most used first.

    Unused tones and ids without a matching tone are left out.
    """
    by_id = {t.id: t for t in tones}
    counts = Counter()
    for echo in echoes:
        for tone_id in echo.tone_ids:
            if tone_id in by_id:
                counts[tone_id] += 1

    ranked = sorted(counts.items(), key=lambda item: (-item[1], by_id[item[0]].name))
    return [(by_id[tone_id], count) for tone_id, count in ranked]


def most_common_tone(
    echoes: Iterable[EchoSnapshot],
    tones: Iterable[ToneSnapshot],
) -> Optional[Tuple[ToneSnapshot, int]]:
    ranked = tone_frequency(echoes, tones)
    return ranked[0] if ranked else None


def compute_insights(
    echoes: Iterable[EchoSnapshot],
    now: Optional[datetime] = None,
) -> Insights:
    """
    Calculate every dashboard statistic for a snapshot.

    Pure: the snapshot is only read.
    """
    snapshot = list(echoes)
    now = now or utcnow()

    if not snapshot:
        return Insights()

    resolved_count = sum(1 for e in snapshot if e.is_resolved)
    unresolved = longest_unresolved(snapshot, now)

    insights = Insights(
        total_count=len(snapshot),
        resolved_count=resolved_count,
        resolution_rate=resolution_rate(snapshot),
        average_strength=average_strength(snapshot),
        strength_trend=strength_trend(snapshot),
        longest_unresolved=unresolved[0] if unresolved else None,
        longest_unresolved_years=unresolved[1] if unresolved else None,
        most_echoed_decision=most_echoed_decision(snapshot),
        frequency_by_year=frequency_by_year(snapshot),
        recurring_themes=recurring_themes(snapshot),
        last_echo_days_ago=last_echo_days_ago(snapshot, now),
        longest_chain=longest_chain(snapshot),
    )

    logger.debug(
        f"Insights: {insights.total_count} echoes, "
        f"{insights.resolution_rate:.0f}% resolved, trend={insights.strength_trend.value}"
    )
    return insights


def format_insights(insights: Insights) -> str:
    """
    Format insights as plain text.
    """
    lines = [
        "Financial Echo Collector - Insights & Patterns",
        "",
    ]

    if insights.total_count == 0:
        lines.extend([
            "No echoes recorded yet.",
            "",
            "Reflection prompts:",
            "- Which past money decision still comes to mind?",
            "- What happened this week that reminded you of it?",
        ])
        return "\n".join(lines)

    lines.extend([
        f"Echoes: {insights.total_count}",
        f"Resolved: {insights.resolved_count} ({insights.resolution_rate:.0f}%)",
        f"Average strength: {insights.average_strength:.1f}/10",
        f"Strength trend: {insights.strength_trend.value.capitalize()}",
        f"Longest chain: {insights.longest_chain}",
    ])

    if insights.last_echo_days_ago is not None:
        lines.append(f"Last echo: {insights.last_echo_days_ago} day(s) ago")
    lines.append("")

    if insights.most_echoed_decision:
        keyword, count = insights.most_echoed_decision
        lines.append(f"Most echoed decision: {keyword.capitalize()} ({count} times)")

    if insights.longest_unresolved:
        lines.append(
            f"Longest unresolved: {insights.longest_unresolved.title} "
            f"({format_years_ago(insights.longest_unresolved_years or 0)})"
        )
    lines.append("")

    if insights.frequency_by_year:
        lines.append("Echoes per year:")
        for year, count in insights.frequency_by_year:
            lines.append(f"  {year}: {'#' * count} {count}")
        lines.append("")

    if insights.recurring_themes:
        lines.append("Recurring themes:")
        lines.append(
            "  " + ", ".join(f"{word.capitalize()} ({count})" for word, count in insights.recurring_themes)
        )
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
