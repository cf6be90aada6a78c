"""
Unit tests for the metric aggregator.

Covers free-text reps parsing, volume load, ISO-week and rolling
bucketing, ACWR, volume trend and exercise frequency ranking.
"""

import datetime

import pytest

from app.adaptive.metrics import (
    acwr,
    exercise_frequency,
    iso_week_key,
    outcome_volume,
    parse_reps,
    rolling_weekly_volumes,
    round_half_up,
    rounded_mean,
    session_volume,
    volume_trend,
    weekly_volumes,
)
from fakes import make_outcome, make_session


# ======================================================================
# Volume load
# ======================================================================


class TestParseReps:

    @pytest.mark.parametrize("value,expected", [
        ("10", 10),
        ("8-10", 8),
        (" 12 ", 12),
        ("5 each side", 5),
        ("AMRAP", 0),
        ("", 0),
        (None, 0),
    ])
    def test_leading_integer(self, value, expected):
        assert parse_reps(value) == expected


class TestOutcomeVolume:

    def test_sets_reps_load(self):
        assert outcome_volume(make_outcome(sets=3, reps="10", weight=50.0)) == 1500.0

    def test_amrap_contributes_zero(self):
        assert outcome_volume(make_outcome(sets=3, reps="AMRAP", weight=50.0)) == 0.0

    @pytest.mark.parametrize("sets,reps,weight", [
        (None, "10", 50.0),
        (3, None, 50.0),
        (3, "10", None),
        (0, "10", 50.0),
    ])
    def test_missing_factor_is_zero(self, sets, reps, weight):
        assert outcome_volume(make_outcome(sets=sets, reps=reps, weight=weight)) == 0.0

    def test_session_volume_sums_results(self):
        session = make_session(1, datetime.datetime(2026, 1, 7), results=[
            make_outcome(sets=3, reps="10", weight=50.0),
            make_outcome(name="Bench Press", sets=5, reps="5", weight=80.0),
        ])
        assert session_volume(session) == 3500.0


# ======================================================================
# Bucketing
# ======================================================================


class TestIsoWeekKey:

    def test_week_one_holds_first_thursday(self):
        # 2026-01-01 is a Thursday
        assert iso_week_key(datetime.date(2026, 1, 1)) == "2026-W01"

    def test_early_january_belongs_to_previous_year(self):
        assert iso_week_key(datetime.date(2021, 1, 1)) == "2020-W53"

    def test_accepts_datetime(self):
        assert iso_week_key(datetime.datetime(2026, 1, 14, 18, 30)) == "2026-W03"


class TestWeeklyVolumes:

    def test_sums_sessions_in_same_week(self):
        sessions = [
            make_session(1, datetime.datetime(2026, 1, 12), results=[make_outcome(weight=10.0)]),
            make_session(2, datetime.datetime(2026, 1, 15), results=[make_outcome(weight=20.0)]),
        ]
        assert weekly_volumes(sessions) == {"2026-W03": 900.0}

    def test_window_zero_fills_empty_weeks(self):
        sessions = [make_session(1, datetime.datetime(2026, 1, 14), results=[make_outcome()])]
        weekly = weekly_volumes(sessions, datetime.date(2026, 1, 5), datetime.date(2026, 1, 25))
        assert weekly == {"2026-W02": 0.0, "2026-W03": 1500.0, "2026-W04": 0.0}

    def test_chronological_order(self):
        sessions = [
            make_session(1, datetime.datetime(2026, 2, 4), results=[make_outcome()]),
            make_session(2, datetime.datetime(2026, 1, 7), results=[make_outcome()]),
        ]
        assert list(weekly_volumes(sessions)) == ["2026-W02", "2026-W06"]

    def test_no_sessions(self):
        assert weekly_volumes([]) == {}


class TestRollingWeeklyVolumes:

    AS_OF = datetime.datetime(2026, 3, 1, 12, 0)

    def _at(self, days_ago: float):
        return make_session(1, self.AS_OF - datetime.timedelta(days=days_ago), results=[make_outcome()])

    def test_buckets_oldest_first(self):
        sessions = [self._at(1), self._at(8), self._at(27)]
        assert rolling_weekly_volumes(sessions, self.AS_OF) == [1500.0, 0.0, 1500.0, 1500.0]

    def test_bucket_end_is_exclusive(self):
        assert rolling_weekly_volumes([self._at(0)], self.AS_OF) == [0.0, 0.0, 0.0, 0.0]

    def test_bucket_start_is_inclusive(self):
        assert rolling_weekly_volumes([self._at(28)], self.AS_OF) == [1500.0, 0.0, 0.0, 0.0]

    def test_aware_reference_is_normalised(self):
        aware = self.AS_OF.replace(tzinfo=datetime.timezone.utc)
        assert rolling_weekly_volumes([self._at(1)], aware) == [0.0, 0.0, 0.0, 1500.0]


# ======================================================================
# ACWR / trend
# ======================================================================


class TestAcwr:

    def test_requires_four_loaded_weeks(self):
        assert acwr([0, 100, 100, 100]) is None
        assert acwr([100, 100, 100]) is None

    def test_steady_load_is_one(self):
        assert acwr([100, 100, 100, 100]) == pytest.approx(1.0)

    def test_spike(self):
        assert acwr([100, 100, 100, 200]) == pytest.approx(1.6)

    def test_chronic_uses_last_four_loaded_weeks(self):
        # chronic = mean(100, 100, 200, 200), acute = 200
        assert acwr([1000, 100, 100, 200, 200]) == pytest.approx(200 / 150)

    def test_empty_acute_week(self):
        assert acwr([100, 100, 100, 100, 0]) == pytest.approx(0.0)

    def test_accepts_mapping(self):
        weekly = {"2026-W01": 100, "2026-W02": 100, "2026-W03": 100, "2026-W04": 100}
        assert acwr(weekly) == pytest.approx(1.0)


class TestVolumeTrend:

    @pytest.mark.parametrize("weekly,expected", [
        ([100, 100, 200, 200], "increasing"),
        ([100, 100, 100, 100], "stable"),
        ([200, 200, 100, 100], "decreasing"),
        ([100, 100, 105, 105], "stable"),
        ([100, 500, 900], "stable"),
        ([0, 0, 100, 100], "stable"),
    ])
    def test_trend(self, weekly, expected):
        assert volume_trend(weekly) == expected

    def test_odd_length_puts_extra_point_in_second_half(self):
        # first = mean(100, 100); second = mean(100, 100, 130) is exactly +10%
        assert volume_trend([100, 100, 100, 100, 130]) == "stable"
        assert volume_trend([100, 100, 100, 100, 140]) == "increasing"


# ======================================================================
# Exercise frequency / means
# ======================================================================


class TestExerciseFrequency:

    def test_ranked_by_frequency_with_best_load(self):
        sessions = [
            make_session(1, datetime.datetime(2026, 1, 5), results=[
                make_outcome(name="Bench Press", weight=80.0),
                make_outcome(name="Back Squat", weight=100.0),
            ]),
            make_session(2, datetime.datetime(2026, 1, 7), results=[
                make_outcome(name="Back Squat", weight=110.0),
            ]),
        ]
        top = exercise_frequency(sessions)
        assert [(e.name, e.frequency, e.best_load) for e in top] == [
            ("Back Squat", 2, 110.0),
            ("Bench Press", 1, 80.0),
        ]

    def test_ties_keep_first_seen_order(self):
        session = make_session(1, datetime.datetime(2026, 1, 5), results=[
            make_outcome(name="Row"), make_outcome(name="Dip"), make_outcome(name="Curl"),
        ])
        assert [e.name for e in exercise_frequency([session])] == ["Row", "Dip", "Curl"]

    def test_bodyweight_has_no_best_load(self):
        session = make_session(1, datetime.datetime(2026, 1, 5), results=[make_outcome(name="Pull-up", weight=None)])
        assert exercise_frequency([session])[0].best_load is None

    def test_limit(self):
        session = make_session(1, datetime.datetime(2026, 1, 5), results=[
            make_outcome(name=f"Exercise {i}") for i in range(12)
        ])
        assert len(exercise_frequency([session])) == 8
        assert len(exercise_frequency([session], limit=3)) == 3


class TestRoundedMean:

    def test_skips_missing(self):
        assert rounded_mean([7.0, None, 8.0]) == 7.5

    def test_empty(self):
        assert rounded_mean([]) is None
        assert rounded_mean([None, None]) is None

    def test_digits(self):
        assert rounded_mean([1, 2, 2], digits=2) == 1.67

    def test_half_rounds_up(self):
        # 7.25 would round to 7.2 with round()
        assert rounded_mean([7.0, 7.5]) == 7.3


class TestRoundHalfUp:

    @pytest.mark.parametrize("value, digits, expected", [
        (2.5, 0, 3),
        (0.5, 0, 1),
        (7.25, 1, 7.3),
        (1.125, 2, 1.13),
        (1.124, 2, 1.12),
    ])
    def test_round_half_up(self, value, digits, expected):
        assert round_half_up(value, digits) == expected
