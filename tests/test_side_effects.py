from registrar.audit_logs.service import LogEntry, log_service, record_log
from registrar.common.side_effects import run_side_effect
from registrar.models import AuditLog


def test_retries_until_the_write_succeeds(db):
    calls = []

    def flaky(session, entry):
        calls.append(entry.name)
        if len(calls) < 3:
            raise RuntimeError("store unavailable")
        log_service.create_log(session, entry)

    assert run_side_effect("flaky log", flaky, LogEntry("Test", "retry", "tester")) is True
    assert len(calls) == 3
    assert db.query(AuditLog).count() == 1


def test_gives_up_without_raising(db):
    def broken(session):
        raise RuntimeError("store unavailable")

    assert run_side_effect("broken", broken) is False


def test_record_log_writes_one_entry(db):
    assert record_log(log_service.system_action("Backup", "Nightly backup finished", "system")) is True
    entry = db.query(AuditLog).one()
    assert entry.student_id == "SYSTEM"
    assert entry.logs_by == "system"
