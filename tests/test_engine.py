"""Unit tests for the engine (matching, resolving, ranges, durations, totals)."""

import time
import pytest
from datetime import date, datetime, timedelta

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from timelog.data.defaults import default_categories
from timelog.data.models import Bounds, Category, Entry, local_wall, make_label, parse_timestamp
from timelog.engine.aggregator import TotalsView, aggregate, human_hm, to_local_hm
from timelog.engine.durations import compute_durations
from timelog.engine.fuzzy import fuzzy_score
from timelog.engine.ranges import (
    RangeUnit, bounds, end_of_month, same_day, start_of_week,
)
from timelog.engine.resolver import category_score, resolve, suggest

DAY = date(2026, 10, 21)  # a Wednesday


def at(hh: int, mm: int, d: date = DAY, ss: int = 0) -> datetime:
    return datetime(d.year, d.month, d.day, hh, mm, ss)


def cat(cid: str, ticket: str, description: str, non_work: bool = False) -> Category:
    return Category(id=cid, ticket=ticket, description=description,
                    label=make_label(ticket, description), non_work=non_work)


def entry(ts: datetime, category: Category, eid: str = "") -> Entry:
    e = Entry.create(ts, category)
    return Entry(id=eid or e.id, ts=e.ts, raw_text=e.raw_text,
                 category_id=e.category_id, label=e.label)


@pytest.fixture
def cats():
    return default_categories()


@pytest.fixture
def uk_time(monkeypatch):
    """Local zone with a DST switch at 01:00 UTC on 2026-03-29."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "GMT0BST,M3.5.0/1,M10.5.0")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def by_id(categories, cid):
    return next(c for c in categories if c.id == cid)


class TestFuzzyScore:
    @pytest.mark.parametrize("text", ["85n", "STANDUP", "Sprint demo", "a"])
    def test_identical_is_100(self, text):
        assert fuzzy_score(text, text) == 100

    def test_normalizes_case_and_whitespace(self):
        assert fuzzy_score("  STANDUP ", "standup") == 100

    def test_empty_scores_zero(self):
        assert fuzzy_score("", "85n") == 0
        assert fuzzy_score("85n", "") == 0
        assert fuzzy_score("   ", "85n") == 0

    def test_substring_token_and_prefix(self):
        # contained: floor(3/12*80+10)=30, shared token +7, prefix +10
        assert fuzzy_score("api", "API — Ticket") == 47

    def test_token_overlap_without_containment(self):
        assert fuzzy_score("daily review", "Daily stand-up") == 7

    def test_capped_at_100(self):
        assert fuzzy_score("sprint review demo", "sprint review demo!") == 100

    def test_not_symmetric(self):
        assert fuzzy_score("85n", "85n — API epic") == 44
        assert fuzzy_score("85n — API epic", "85n") == 7

    def test_no_relation(self):
        assert fuzzy_score("zzqqxx", "85n — API epic") == 0


class TestResolver:
    def test_matches_existing_ticket(self, cats):
        result = resolve("85n", cats)
        assert result.is_new is False
        assert result.category.id == "cat-85n"

    def test_trims_and_ignores_case(self, cats):
        assert resolve("  standup  ", cats).category.id == "cat-standup"

    def test_unmatched_text_proposes_adhoc(self, cats):
        result = resolve("zzqqxx", cats)
        assert result.is_new is True
        assert result.category.ticket == "zzqqxx"
        assert result.category.description == "Ad-hoc"
        assert result.category.label == "zzqqxx"
        assert result.category.non_work is False
        assert result.category.id.startswith("cat-")

    def test_resolve_has_no_side_effects(self, cats):
        before = list(cats)
        resolve("zzqqxx", cats)
        assert cats == before

    def test_below_threshold_creates_new(self, cats):
        # best is "API epic" description at 57
        assert category_score("epic", by_id(cats, "cat-85n")) == 57
        assert resolve("epic", cats).is_new is True
        assert resolve("epic", cats, threshold=50).category.id == "cat-85n"

    def test_ties_go_to_first_listed(self):
        first = cat("c1", "X", "one")
        second = cat("c2", "X", "two")
        assert resolve("x", [first, second]).category.id == "c1"

    def test_blank_text_rejected(self, cats):
        with pytest.raises(ValueError):
            resolve("   ", cats)

    def test_no_categories(self):
        assert resolve("anything", []).is_new is True


class TestSuggest:
    def test_blank_query_gives_nothing(self, cats):
        assert suggest("", cats) == []
        assert suggest("   ", cats) == []

    def test_sorted_and_stable(self, cats):
        ids = [c.id for c in suggest("85", cats)]
        assert ids == ["cat-85n", "cat-85h", "cat-85i"]

    def test_limit(self, cats):
        assert [c.id for c in suggest("85", cats, limit=2)] == ["cat-85n", "cat-85h"]

    def test_zero_scores_dropped(self, cats):
        assert suggest("zzqqxx", cats) == []

    def test_best_match_first(self, cats):
        assert suggest("standup", cats)[0].id == "cat-standup"

    def test_equal_scores_keep_list_order(self, cats):
        # "Break" is Lunch's description and Break's ticket; both score 100
        assert [c.id for c in suggest("break", cats)][:2] == ["cat-lunch", "cat-break"]


class TestRanges:
    def test_day(self):
        b = bounds(at(14, 30), RangeUnit.DAY)
        assert b.start == datetime(2026, 10, 21, 0, 0)
        assert b.end == datetime(2026, 10, 21, 23, 59, 59, 999000)

    def test_week_from_midweek(self):
        b = bounds(at(14, 30), RangeUnit.WEEK)
        assert b.start == datetime(2026, 10, 19)
        assert b.end == datetime(2026, 10, 25, 23, 59, 59, 999000)

    def test_week_from_sunday_backs_up_six_days(self):
        b = bounds(datetime(2026, 10, 25, 22, 0), RangeUnit.WEEK)
        assert b.start == datetime(2026, 10, 19)

    def test_week_from_monday(self):
        assert bounds(datetime(2026, 10, 19, 0, 0), RangeUnit.WEEK).start == datetime(2026, 10, 19)

    def test_week_always_starts_monday_midnight(self):
        ref = datetime(2026, 1, 1, 12, 0)
        for i in range(60):
            d = ref + timedelta(days=i)
            b = bounds(d, RangeUnit.WEEK)
            assert b.start.isoweekday() == 1
            assert b.start.time() == datetime.min.time()
            assert b.start <= d <= b.end
            assert start_of_week(d) == b.start

    @pytest.mark.parametrize("ref,last", [
        (datetime(2024, 2, 10), 29),
        (datetime(2026, 2, 1), 28),
        (datetime(2026, 12, 31, 23, 0), 31),
        (datetime(2026, 4, 15), 30),
    ])
    def test_month(self, ref, last):
        b = bounds(ref, RangeUnit.MONTH)
        assert b.start == datetime(ref.year, ref.month, 1)
        assert b.end == datetime(ref.year, ref.month, last, 23, 59, 59, 999000)
        assert end_of_month(ref) == b.end

    def test_accepts_plain_date(self):
        assert bounds(DAY, RangeUnit.DAY).start == datetime(2026, 10, 21)

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            bounds(DAY, "year")

    def test_same_day(self):
        assert same_day(at(0, 0), at(23, 59))
        assert not same_day(at(23, 59), at(0, 1, DAY + timedelta(days=1)))


class TestDurations:
    def test_gap_to_next_entry(self, cats):
        a, b = by_id(cats, "cat-85n"), by_id(cats, "cat-standup")
        rows = compute_durations([entry(at(9, 0), a), entry(at(9, 30), b)],
                                 bounds(DAY, RangeUnit.DAY))
        assert [r.minutes for r in rows] == [30, 0]

    def test_last_entry_of_day_is_zero(self, cats):
        a = by_id(cats, "cat-85n")
        next_day = DAY + timedelta(days=1)
        entries = [entry(at(17, 0), a), entry(at(23, 59), a), entry(at(0, 1, next_day), a)]
        rows = compute_durations(entries, bounds(DAY, RangeUnit.WEEK))
        assert [r.minutes for r in rows] == [419, 0, 0]

    def test_filters_to_bounds_inclusive(self, cats):
        a = by_id(cats, "cat-85n")
        b = bounds(DAY, RangeUnit.DAY)
        entries = [
            entry(at(23, 0, DAY - timedelta(days=1)), a),
            entry(b.start, a),
            entry(b.end, a),
            entry(at(0, 0, DAY + timedelta(days=1)), a),
        ]
        rows = compute_durations(entries, b)
        assert [local_wall(r.ts) for r in rows] == [b.start, b.end]
        assert rows[0].minutes == 1440

    def test_identical_timestamps(self, cats):
        a = by_id(cats, "cat-85n")
        entries = [entry(at(9, 0), a, "first"), entry(at(9, 0), a, "second"),
                   entry(at(9, 20), a, "third")]
        rows = compute_durations(entries, bounds(DAY, RangeUnit.DAY))
        assert [(r.id, r.minutes) for r in rows] == [("first", 0), ("second", 20), ("third", 0)]

    def test_output_sorted_and_input_untouched(self, cats):
        a = by_id(cats, "cat-85n")
        entries = [entry(at(11, 0), a), entry(at(9, 0), a), entry(at(10, 0), a)]
        snapshot = list(entries)
        rows = compute_durations(entries, bounds(DAY, RangeUnit.DAY))
        assert [r.ts.hour for r in rows] == [9, 10, 11]
        assert [r.minutes for r in rows] == [60, 60, 0]
        assert entries == snapshot

    def test_half_minutes_round_up(self, cats):
        a = by_id(cats, "cat-85n")
        rows = compute_durations(
            [entry(at(9, 0), a), entry(at(9, 2, ss=30), a), entry(at(9, 2, ss=59), a)],
            bounds(DAY, RangeUnit.DAY))
        assert [r.minutes for r in rows] == [3, 0, 0]

    def test_empty(self):
        assert compute_durations([], bounds(DAY, RangeUnit.DAY)) == []

    def test_gap_across_dst_switch_is_elapsed_time(self, cats, uk_time):
        a = by_id(cats, "cat-85n")
        first = Entry("e1", parse_timestamp("2026-03-29T00:30:00Z"), "85n", a.id, a.label)
        second = Entry("e2", parse_timestamp("2026-03-29T01:30:00Z"), "85n", a.id, a.label)
        assert [local_wall(e.ts).hour for e in (first, second)] == [0, 2]

        rows = compute_durations([first, second], bounds(date(2026, 3, 29), RangeUnit.DAY))
        assert [r.minutes for r in rows] == [60, 0]

    def test_wall_clock_entries_across_dst_switch(self, cats, uk_time):
        a = by_id(cats, "cat-85n")
        spring = date(2026, 3, 29)
        rows = compute_durations([entry(at(0, 30, spring), a), entry(at(2, 30, spring), a)],
                                 bounds(spring, RangeUnit.DAY))
        assert [r.minutes for r in rows] == [60, 0]


class TestAggregator:
    def _rows(self, cats, pairs):
        entries = [entry(ts, by_id(cats, cid)) for ts, cid in pairs]
        return compute_durations(entries, bounds(DAY, RangeUnit.DAY))

    def test_empty(self, cats):
        totals = aggregate([], cats)
        assert totals.rows == []
        assert totals.total == 0

    def test_work_view_excludes_non_work(self, cats):
        rows = self._rows(cats, [(at(9, 0), "cat-85n"), (at(12, 0), "cat-lunch"),
                                 (at(12, 30), "cat-85n"), (at(13, 0), "cat-eod")])
        work = aggregate(rows, cats, TotalsView.WORK)
        assert [(r.label, r.minutes) for r in work.rows] == [("85n — API epic", 210)]
        assert work.total == 210

        everything = aggregate(rows, cats, TotalsView.ALL)
        assert [(r.label, r.minutes) for r in everything.rows] == [
            ("85n — API epic", 210), ("Lunch — Break", 30), ("EoD — Marker", 0)]
        assert everything.total == 240

    def test_dangling_category_skipped(self, cats):
        rows = self._rows(cats, [(at(9, 0), "cat-85n"), (at(10, 0), "cat-retro"),
                                 (at(11, 0), "cat-85n")])
        remaining = [c for c in cats if c.id != "cat-retro"]
        totals = aggregate(rows, remaining, TotalsView.ALL)
        assert [(r.label, r.minutes) for r in totals.rows] == [("85n — API epic", 60)]
        assert totals.total == 60

    def test_same_label_merges(self):
        one = cat("c1", "Sync", "Meeting")
        two = cat("c2", "Sync", "Meeting")
        rows = compute_durations(
            [entry(at(9, 0), one), entry(at(9, 10), two), entry(at(9, 30), one)],
            bounds(DAY, RangeUnit.DAY))
        totals = aggregate(rows, [one, two])
        assert [(r.label, r.minutes) for r in totals.rows] == [("Sync — Meeting", 30)]

    def test_ties_keep_first_appearance(self):
        a, b = cat("a", "A", "x"), cat("b", "B", "y")
        rows = compute_durations(
            [entry(at(9, 0), b), entry(at(9, 10), a), entry(at(9, 20), b)],
            bounds(DAY, RangeUnit.DAY))
        assert [r.label for r in aggregate(rows, [a, b]).rows] == ["B — y", "A — x"]

    def test_hm_rendered(self, cats):
        rows = self._rows(cats, [(at(9, 0), "cat-85n"), (at(10, 5), "cat-eod")])
        assert aggregate(rows, cats).rows[0].hm == "1h 05m"

    def test_unknown_view(self, cats):
        with pytest.raises(ValueError):
            aggregate([], cats, "billable")

    @pytest.mark.parametrize("minutes,text", [(0, "0h 00m"), (5, "0h 05m"),
                                               (65, "1h 05m"), (600, "10h 00m")])
    def test_human_hm(self, minutes, text):
        assert human_hm(minutes) == text

    def test_to_local_hm(self):
        assert to_local_hm(at(9, 5)) == "09:05"


class TestStandupScenario:
    def test_durations_and_work_totals(self, cats):
        entries = [
            entry(at(9, 0), resolve("85n", cats).category),
            entry(at(9, 45), resolve("STANDUP", cats).category),
            entry(at(10, 0), resolve("85n", cats).category),
        ]
        rows = compute_durations(entries, bounds(DAY, RangeUnit.DAY))
        assert [r.minutes for r in rows] == [45, 15, 0]

        totals = aggregate(rows, cats, TotalsView.WORK)
        assert [(r.label, r.minutes) for r in totals.rows] == [
            ("85n — API epic", 45), ("STANDUP — Daily stand-up", 15)]
        assert totals.total == 60
