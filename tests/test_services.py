"""Unit tests for the service layer."""

import sqlite3
import time
import pytest
from datetime import datetime

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from timelog.config import DEFAULT_CONFIG
from timelog.data.database import SCHEMA_SQL
from timelog.data.repository import CATEGORIES_KEY, ENTRIES_KEY, Repository
from timelog.engine.aggregator import TotalsView
from timelog.engine.ranges import RangeUnit
from timelog.services.log_service import LogService


def at(hh: int, mm: int, day: int = 21) -> datetime:
    return datetime(2026, 10, day, hh, mm)


@pytest.fixture
def repo():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA_SQL)
    conn.commit()
    return Repository(conn)


@pytest.fixture
def svc(repo):
    return LogService(repo, DEFAULT_CONFIG.copy())


class TestSubmit:
    def test_blank_is_noop(self, svc, repo):
        assert svc.submit("   ", at(9, 0)) is None
        assert svc.entries == []
        assert repo.get(CATEGORIES_KEY) is None

    def test_existing_category(self, svc, repo):
        entry = svc.submit("85n", at(9, 0))
        assert entry.category_id == "cat-85n"
        assert entry.raw_text == "85n"
        assert entry.label == "85n — API epic"
        assert [e.id for e in repo.load_entries()] == [entry.id]
        assert repo.get(CATEGORIES_KEY) is None  # defaults untouched, nothing to save

    def test_stores_resolved_ticket_not_typed_text(self, svc):
        assert svc.submit("  standup ", at(9, 0)).raw_text == "STANDUP"

    def test_adhoc_category_committed_once(self, svc, repo):
        first = svc.submit("zzqqxx", at(9, 0))
        cats = svc.categories
        assert len(cats) == 15
        assert cats[-1].ticket == "zzqqxx"
        assert cats[-1].description == "Ad-hoc"
        assert first.category_id == cats[-1].id

        second = svc.submit("zzqqxx", at(10, 0))
        assert second.category_id == first.category_id
        assert len(svc.categories) == 15
        assert len(repo.load_categories()) == 15

    def test_entries_kept_sorted(self, svc):
        svc.submit("85n", at(11, 0))
        svc.submit("85n", at(9, 0))
        svc.submit("STANDUP", at(10, 0))
        assert [e.ts.hour for e in svc.entries] == [9, 10, 11]

    def test_add_entry_for_picked_category(self, svc):
        cat = svc.get_category("cat-retro")
        entry = svc.add_entry_for(cat, at(15, 0))
        assert (entry.category_id, entry.raw_text) == ("cat-retro", "Retro")


class TestEditDelete:
    def test_edit_re_resolves_and_resorts(self, svc):
        a = svc.submit("85n", at(9, 0))
        svc.submit("STANDUP", at(10, 0))
        edited = svc.edit_entry(a.id, "retro", at(11, 0))
        assert edited.id == a.id
        assert edited.category_id == "cat-retro"
        assert edited.label == "Retro — Sprint retrospective"
        assert [e.id for e in svc.entries][-1] == a.id

    def test_edit_blank_is_noop(self, svc):
        a = svc.submit("85n", at(9, 0))
        assert svc.edit_entry(a.id, "  ", at(12, 0)) is None
        assert svc.entries == [a]

    def test_edit_unknown(self, svc):
        with pytest.raises(KeyError):
            svc.edit_entry("e-missing", "85n", at(9, 0))

    def test_edit_to_new_text_creates_adhoc(self, svc):
        a = svc.submit("85n", at(9, 0))
        edited = svc.edit_entry(a.id, "zzqqxx", at(9, 0))
        assert svc.get_category(edited.category_id).ticket == "zzqqxx"

    def test_edit_to_picked_category(self, svc):
        a = svc.submit("85n", at(9, 0))
        picked = svc.get_category("cat-break")
        edited = svc.edit_entry_to(a.id, picked, at(9, 30))
        assert edited.id == a.id
        assert (edited.category_id, edited.raw_text) == ("cat-break", "Break")
        assert edited.label == "Break — Short break"
        assert svc.entries[0].category_id == "cat-break"
        assert len(svc.categories) == 14

    def test_edit_to_picked_category_wins_over_tied_text(self, svc):
        # "Break" also matches Lunch's description, and Lunch is listed first
        a = svc.submit("85n", at(9, 0))
        assert svc.edit_entry(a.id, "Break", at(9, 0)).category_id == "cat-lunch"
        picked = svc.get_category("cat-break")
        assert svc.edit_entry_to(a.id, picked, at(9, 0)).category_id == "cat-break"

    def test_edit_to_unknown(self, svc):
        with pytest.raises(KeyError):
            svc.edit_entry_to("e-missing", svc.get_category("cat-break"), at(9, 0))

    def test_delete(self, svc):
        a = svc.submit("85n", at(9, 0))
        assert svc.delete_entry(a.id) is True
        assert svc.delete_entry(a.id) is False
        assert svc.entries == []


class TestCategories:
    def test_add_category_prepended(self, svc):
        cat = svc.add_category("  PROJ-7 ", "  Migration ")
        assert svc.categories[0] == cat
        assert cat.label == "PROJ-7 — Migration"
        assert cat.non_work is False

    def test_add_category_defaults(self, svc):
        assert svc.add_category("X", "").description == "Custom category"
        assert svc.add_category("  ") is None

    def test_update_rederives_label(self, svc):
        updated = svc.update_category("cat-85n", description="Billing API")
        assert updated.label == "85n — Billing API"
        updated = svc.update_category("cat-85n", ticket="86n")
        assert updated.label == "86n — Billing API"

    def test_update_non_work_keeps_label(self, svc):
        updated = svc.update_category("cat-eod", non_work=False)
        assert updated.label == "EoD — Marker"
        assert updated.non_work is False

    def test_adhoc_label_gets_separator_after_edit(self, svc):
        entry = svc.submit("zzqqxx", at(9, 0))
        updated = svc.update_category(entry.category_id, description="Research")
        assert updated.label == "zzqqxx — Research"

    def test_update_unknown(self, svc):
        with pytest.raises(KeyError):
            svc.update_category("cat-missing", ticket="X")

    def test_delete_does_not_cascade(self, svc):
        svc.submit("85n", at(9, 0))
        svc.submit("retro", at(10, 0))
        svc.submit("85n", at(11, 0))
        assert svc.delete_category("cat-retro") is True
        assert svc.delete_category("cat-retro") is False
        assert len(svc.entries) == 3

        retro_entry = svc.entries[1]
        assert svc.category_for(retro_entry) is None

        view = svc.view(at(12, 0), RangeUnit.DAY, TotalsView.ALL)
        assert [(r.label, r.minutes) for r in view.totals.rows] == [("85n — API epic", 60)]

    def test_bulk_delete(self, svc):
        removed = svc.delete_categories(["cat-85h", "cat-85i", "cat-nope"])
        assert removed == 2
        assert len(svc.categories) == 12


class TestReset:
    def test_reset_restores_defaults(self, svc, repo):
        svc.submit("zzqqxx", at(9, 0))
        svc.delete_category("cat-85n")
        svc.reset_all_data()
        assert svc.entries == []
        assert len(svc.categories) == 14
        assert repo.get(CATEGORIES_KEY) is None
        assert repo.get(ENTRIES_KEY) is None

    def test_reset_reaches_other_service(self, repo):
        calls = []
        main = LogService(repo, on_change=lambda: calls.append("main"))
        quick = LogService(repo)
        quick.submit("85n", at(9, 0))
        assert len(main.entries) == 1
        calls.clear()

        quick.reset_all_data()
        assert main.entries == []
        assert calls == ["main", "main"]


class TestView:
    def test_standup_scenario(self, svc):
        svc.submit("85n", at(9, 0))
        svc.submit("STANDUP", at(9, 45))
        svc.submit("85n", at(10, 0))
        svc.submit("85n", at(9, 0, day=22))

        view = svc.view(at(18, 0), RangeUnit.DAY, TotalsView.WORK)
        assert [r.minutes for r in view.rows] == [45, 15, 0]
        assert [(r.label, r.minutes) for r in view.totals.rows] == [
            ("85n — API epic", 45), ("STANDUP — Daily stand-up", 15)]
        assert view.totals.total == 60

        week = svc.view(at(18, 0), RangeUnit.WEEK, TotalsView.WORK)
        assert len(week.rows) == 4
        assert week.totals.total == 60

    def test_non_work_only_in_all_view(self, svc):
        svc.submit("85n", at(9, 0))
        svc.submit("lunch", at(12, 0))
        svc.submit("85n", at(13, 0))
        assert svc.view(at(18, 0), totals_view=TotalsView.WORK).totals.total == 180
        assert svc.view(at(18, 0), totals_view=TotalsView.ALL).totals.total == 240

    def test_suggest_uses_config_limit(self, repo):
        cfg = DEFAULT_CONFIG.copy()
        cfg["dropdown_max_items"] = 2
        svc = LogService(repo, cfg)
        assert len(svc.suggest("85")) == 2
        assert len(svc.suggest("85", limit=5)) == 3
        assert svc.suggest("") == []

    def test_suggest_zero_limit(self, svc):
        assert svc.suggest("85", limit=0) == []

    def test_gap_across_dst_switch(self, repo, monkeypatch):
        if not hasattr(time, "tzset"):
            pytest.skip("time.tzset is not available on this platform")
        monkeypatch.setenv("TZ", "GMT0BST,M3.5.0/1,M10.5.0")
        time.tzset()
        try:
            repo.set(ENTRIES_KEY, [
                {"id": "e1", "tsISO": "2026-03-29T00:30:00.000Z", "rawText": "85n",
                 "categoryId": "cat-85n", "label": "85n — API epic"},
                {"id": "e2", "tsISO": "2026-03-29T01:30:00.000Z", "rawText": "STANDUP",
                 "categoryId": "cat-standup", "label": "STANDUP — Daily stand-up"},
            ])
            view = LogService(repo).view(datetime(2026, 3, 29, 12, 0), RangeUnit.DAY)
            assert [r.minutes for r in view.rows] == [60, 0]
            assert view.totals.total == 60
        finally:
            monkeypatch.undo()
            time.tzset()


class TestMultipleWindows:
    def test_writes_reach_other_service(self, repo):
        calls = {"main": 0, "quick": 0}
        main = LogService(repo, on_change=lambda: calls.__setitem__("main", calls["main"] + 1))
        quick = LogService(repo, on_change=lambda: calls.__setitem__("quick", calls["quick"] + 1))
        assert main.entries == []

        entry = quick.submit("85n", at(9, 0))
        assert calls == {"main": 1, "quick": 1}
        assert [e.id for e in main.entries] == [entry.id]

    def test_adhoc_from_quick_entry_visible_in_main(self, repo):
        main = LogService(repo)
        quick = LogService(repo)
        assert len(main.categories) == 14
        quick.submit("zzqqxx", at(9, 0))
        assert main.categories[-1].ticket == "zzqqxx"

    def test_closed_service_stops_listening(self, repo):
        calls = []
        main = LogService(repo, on_change=lambda: calls.append(1))
        main.close()
        LogService(repo).submit("85n", at(9, 0))
        assert calls == []
