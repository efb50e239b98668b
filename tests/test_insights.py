"""
Unit tests for the insights engine.

Covers each dashboard statistic on hand-built snapshots.
"""

import pytest
import sys
from datetime import date, datetime
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from echocollector.core.snapshot import EchoSnapshot, ToneSnapshot
from echocollector.review.insights import (
    StrengthTrend,
    compute_insights,
    format_insights,
    frequency_by_year,
    last_echo_days_ago,
    longest_unresolved,
    most_common_tone,
    most_echoed_decision,
    recurring_themes,
    resolution_rate,
    strength_trend,
    tone_frequency,
)

NOW = datetime(2026, 10, 18, 12, 0)


def _echo(
    echo_id,
    strength=5,
    resolved=False,
    title="Echo",
    past_situation="",
    current_trigger="",
    past_date=date(2020, 1, 1),
    created_at=None,
    tone_ids=(),
    parent_id=None,
):
    return EchoSnapshot(
        id=echo_id,
        title=title,
        past_date=past_date,
        past_situation=past_situation,
        current_trigger=current_trigger,
        connection_strength=strength,
        is_resolved=resolved,
        resolved_date=NOW if resolved else None,
        created_at=created_at or datetime(2025, 1, 1, 0, echo_id),
        tone_ids=frozenset(tone_ids),
        parent_id=parent_id,
    )


class TestEmptySnapshot:
    """Test statistics with no echoes."""

    def test_zero_defaults(self):
        """Empty journal yields zeros and insufficient data."""
        insights = compute_insights([], now=NOW)

        assert insights.resolution_rate == 0
        assert insights.average_strength == 0
        assert insights.strength_trend == StrengthTrend.INSUFFICIENT_DATA
        assert insights.strength_trend.value == "insufficient data"
        assert insights.longest_unresolved is None
        assert insights.most_echoed_decision is None
        assert insights.frequency_by_year == []
        assert insights.recurring_themes == []
        assert insights.last_echo_days_ago is None
        assert insights.longest_chain == 0

    def test_format_empty(self):
        text = format_insights(compute_insights([], now=NOW))
        assert "No echoes recorded yet." in text


class TestResolutionRate:
    """Test resolution rate."""

    def test_none_resolved(self):
        echoes = [_echo(1), _echo(2)]
        assert resolution_rate(echoes) == 0

    def test_all_resolved(self):
        echoes = [_echo(1, resolved=True), _echo(2, resolved=True)]
        assert resolution_rate(echoes) == 100

    def test_partial(self):
        echoes = [_echo(1, resolved=True), _echo(2), _echo(3), _echo(4)]
        assert resolution_rate(echoes) == 25

    def test_strength_does_not_matter(self):
        """Changing strengths leaves the rate alone."""
        weak = [_echo(1, strength=1, resolved=True), _echo(2, strength=1)]
        strong = [_echo(1, strength=10, resolved=True), _echo(2, strength=10)]
        assert resolution_rate(weak) == resolution_rate(strong)


class TestAverageStrength:
    """Test mean connection strength."""

    def test_mean(self):
        echoes = [_echo(1, strength=2), _echo(2, strength=4), _echo(3, strength=9)]
        assert compute_insights(echoes, now=NOW).average_strength == pytest.approx(5.0)


class TestStrengthTrend:
    """Test first-five vs last-five trend comparison."""

    def test_single_echo_insufficient(self):
        assert strength_trend([_echo(1)]) == StrengthTrend.INSUFFICIENT_DATA

    def test_two_equal_is_stable(self):
        assert strength_trend([_echo(1, strength=5), _echo(2, strength=5)]) == StrengthTrend.STABLE

    def test_increasing(self):
        """Last five average 2.8 vs first five average 1."""
        echoes = [_echo(i, strength=1) for i in range(1, 6)] + [_echo(6, strength=10)]
        assert strength_trend(echoes) == StrengthTrend.INCREASING

    def test_decreasing(self):
        echoes = [_echo(i, strength=s) for i, s in enumerate([9, 9, 9, 9, 9, 2, 2, 2, 2, 2], start=1)]
        assert strength_trend(echoes) == StrengthTrend.DECREASING

    def test_uses_creation_order_not_input_order(self):
        """Echoes are ordered by created_at before windowing."""
        echoes = [_echo(i, strength=s) for i, s in enumerate([9, 9, 9, 9, 9, 2, 2, 2, 2, 2], start=1)]
        assert strength_trend(list(reversed(echoes))) == StrengthTrend.DECREASING

    def test_overlapping_windows_with_few_echoes(self):
        """With three echoes both windows hold all three, so the trend is stable."""
        echoes = [_echo(1, strength=1), _echo(2, strength=5), _echo(3, strength=10)]
        assert strength_trend(echoes) == StrengthTrend.STABLE


class TestLongestUnresolved:
    """Test the oldest open decision."""

    def test_picks_oldest_past_date(self):
        echoes = [
            _echo(1, past_date=date(2021, 5, 1)),
            _echo(2, past_date=date(2012, 5, 1)),
            _echo(3, past_date=date(2001, 5, 1), resolved=True),
        ]

        echo, years = longest_unresolved(echoes, now=NOW)

        assert echo.id == 2
        assert years == 14

    def test_missing_past_date_skipped(self):
        echoes = [_echo(1, past_date=None)]
        assert longest_unresolved(echoes, now=NOW) is None

    def test_all_resolved(self):
        echoes = [_echo(1, resolved=True)]
        assert compute_insights(echoes, now=NOW).longest_unresolved is None

    def test_tie_goes_to_earliest_created(self):
        echoes = [
            _echo(2, past_date=date(2015, 1, 1)),
            _echo(1, past_date=date(2015, 6, 1)),
        ]
        echo, _ = longest_unresolved(echoes, now=NOW)
        assert echo.id == 1


class TestMostEchoedDecision:
    """Test financial keyword frequency."""

    def test_most_frequent_keyword(self):
        echoes = [
            _echo(1, title="Car loan", past_situation="Took a loan for a car"),
            _echo(2, past_situation="Student LOAN refinancing"),
            _echo(3, past_situation="Impulse purchase at the mall"),
        ]

        assert most_echoed_decision(echoes) == ("loan", 2)

    def test_counted_once_per_echo(self):
        """Repeating a keyword within one echo counts once."""
        echoes = [_echo(1, title="debt", past_situation="debt debt debt")]
        assert most_echoed_decision(echoes) == ("debt", 1)

    def test_tie_uses_vocabulary_order(self):
        echoes = [_echo(1, past_situation="credit"), _echo(2, past_situation="spending")]
        assert most_echoed_decision(echoes) == ("spending", 1)

    def test_no_keywords(self):
        echoes = [_echo(1, title="Holiday", past_situation="Went to the beach")]
        assert most_echoed_decision(echoes) is None

    def test_trigger_not_scanned(self):
        """Only the title and past situation are tokenized."""
        echoes = [_echo(1, current_trigger="credit card bill arrived")]
        assert most_echoed_decision(echoes) is None


class TestFrequencyByYear:
    """Test echoes-per-year counts."""

    def test_sorted_by_year(self):
        echoes = [
            _echo(1, created_at=datetime(2024, 3, 1)),
            _echo(2, created_at=datetime(2022, 3, 1)),
            _echo(3, created_at=datetime(2024, 7, 1)),
        ]

        assert frequency_by_year(echoes) == [(2022, 1), (2024, 2)]


class TestRecurringThemes:
    """Test recurring word extraction."""

    def test_repeated_long_words_only(self):
        echoes = [
            _echo(1, title="Mortgage", past_situation="The mortgage felt heavy"),
            _echo(2, title="Car", past_situation="Heavy payments on the car", current_trigger="Mortgage renewal"),
        ]

        themes = dict(recurring_themes(echoes))

        assert themes == {"mortgage": 3, "heavy": 2}

    def test_stop_words_dropped(self):
        echoes = [_echo(1, title="would would would", past_situation="should should there there")]
        assert recurring_themes(echoes) == []

    def test_short_words_dropped(self):
        echoes = [_echo(1, title="cash cash cash cash")]
        assert recurring_themes(echoes) == []

    def test_punctuation_splits_words(self):
        echoes = [_echo(1, title="savings,savings;SAVINGS")]
        assert recurring_themes(echoes) == [("savings", 3)]

    def test_top_fifteen(self):
        words = " ".join(f"theme{chr(97 + i)} theme{chr(97 + i)}" for i in range(20))
        echoes = [_echo(1, past_situation=words)]

        themes = recurring_themes(echoes)

        assert len(themes) == 15

    def test_ordered_by_count(self):
        echoes = [_echo(1, past_situation="alpha1 bravo2 bravo2 bravo2 alpha1 charlie3 charlie3")]
        assert recurring_themes(echoes) == [("bravo2", 3), ("alpha1", 2), ("charlie3", 2)]


class TestDashboardExtras:
    """Test last-echo age, chain depth and tone frequency."""

    def test_last_echo_days_ago(self):
        echoes = [
            _echo(1, created_at=datetime(2026, 10, 1, 12, 0)),
            _echo(2, created_at=datetime(2026, 10, 15, 12, 0)),
        ]
        assert last_echo_days_ago(echoes, now=NOW) == 3

    def test_longest_chain(self):
        echoes = [_echo(1), _echo(2, parent_id=1), _echo(3, parent_id=2)]
        assert compute_insights(echoes, now=NOW).longest_chain == 3

    def test_tone_frequency(self):
        tones = [ToneSnapshot(1, "Regret"), ToneSnapshot(2, "Hope"), ToneSnapshot(3, "Pride")]
        echoes = [
            _echo(1, tone_ids=[1, 2]),
            _echo(2, tone_ids=[1]),
            _echo(3, tone_ids=[1, 99]),
        ]

        ranked = tone_frequency(echoes, tones)

        assert [(t.name, n) for t, n in ranked] == [("Regret", 3), ("Hope", 1)]
        assert most_common_tone(echoes, tones)[0].name == "Regret"

    def test_most_common_tone_none(self):
        assert most_common_tone([_echo(1)], [ToneSnapshot(1, "Regret")]) is None


class TestFormatInsights:
    """Test the plain text report."""

    def test_report_sections(self):
        echoes = [
            _echo(1, title="Credit card", past_situation="Credit card spree", strength=4, resolved=True),
            _echo(2, title="Credit again", past_situation="Another credit spree", strength=8),
        ]

        text = format_insights(compute_insights(echoes, now=NOW))

        assert "Echoes: 2" in text
        assert "Resolved: 1 (50%)" in text
        assert "Most echoed decision: Credit (2 times)" in text
        assert "Spree (2)" in text
        assert "Strength trend: Stable" in text
