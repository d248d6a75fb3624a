import logging

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from mediconnect.core.config import settings
from mediconnect.main import app
from mediconnect.models import Appointment


def test_store_failure_is_a_generic_500(client, db, patient, doctor, monkeypatch, caplog):
    def broken_commit(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(Session, "commit", broken_commit)
    with caplog.at_level(logging.ERROR, logger="mediconnect.core.db"):
        res = client.post(
            "/appointments",
            json={"doctor_id": doctor["profile"]["id"], "appointment_date": "2025-01-10T10:00:00"},
            headers=patient["headers"],
        )

    assert res.status_code == 500
    assert res.json() == {"detail": "Internal server error"}
    # the cause stays in the server log, not in the response
    assert "disk I/O error" not in res.text
    records = [r for r in caplog.records if r.name == "mediconnect.core.db"]
    assert records
    assert "create an appointment" in records[0].getMessage()
    assert records[0].exc_info[0] is OperationalError
    assert "disk I/O error" in caplog.text

    monkeypatch.undo()
    assert db.query(Appointment).count() == 0


def test_unknown_payment_status_is_refused_by_the_store(client, db, patient, doctor):
    appointment_id = client.post(
        "/appointments",
        json={"doctor_id": doctor["profile"]["id"], "appointment_date": "2025-01-10T10:00:00"},
        headers=patient["headers"],
    ).json()["id"]
    appointment = db.get(Appointment, appointment_id)
    appointment.payment_status = "refunded"
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_debug_is_off_unless_configured():
    assert settings.DEBUG is False
    assert app.debug is False
