import json
from datetime import date, time

from skillsession.domain.schema import SlotStatus
from skillsession.jobs import expire_slots

from conftest import make_slot


def test_run_sweeps_given_store(settings, store, slot_repository) -> None:
    slot_repository.add_many([make_slot("S1", day=date(2000, 1, 1), end=time(10, 0))])

    summary = expire_slots.run(settings, store)

    assert summary == {
        "message": "Expired slots processed successfully",
        "results": {"processed": 1, "expired": 1, "failed": 0},
    }
    assert slot_repository.get("S1").status is SlotStatus.EXPIRED


def test_main_prints_summary_and_exits_zero(monkeypatch, capsys) -> None:
    monkeypatch.setenv("DB_BACKEND", "memory")

    assert expire_slots.main() == 0

    out = json.loads(capsys.readouterr().out)
    assert out["results"] == {"processed": 0, "expired": 0, "failed": 0}


def test_main_reports_unreadable_slot_and_exits_one(monkeypatch, capsys, settings, store) -> None:
    store.put(settings.tables.slots, {"id": "S1", "date": "2024-01-01", "startTime": "09:00"})
    monkeypatch.setattr(expire_slots, "build_document_store", lambda _settings: store)

    assert expire_slots.main() == 1

    out = json.loads(capsys.readouterr().out)
    assert out["message"] == "Error processing expired slots"
    assert "S1" in out["error"]
