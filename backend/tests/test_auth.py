import pytest

from conftest import Wallet, auth, register
from mediconnect.core import security
from mediconnect.core.config import settings
from mediconnect.models import Doctor, Patient, User


def _payload(wallet, role, signature=None, **extra):
    body = {
        "wallet_address": wallet.address,
        "role": role,
        "signature": signature or wallet.login_signature(role),
        "full_name": "Someone",
        "email": "someone@example.com",
        "phone": "555-0100",
    }
    body.update(extra)
    return body


def test_message_is_checksummed(client):
    wallet = Wallet()
    res = client.get("/auth/message", params={"wallet_address": wallet.address.lower(), "role": "doctor"})
    assert res.status_code == 200
    assert res.json()["message"] == f"Sign in to MediConnect as Doctor with wallet: {wallet.address}"


def test_message_rejects_bad_address(client):
    res = client.get("/auth/message", params={"wallet_address": "0x1234", "role": "patient"})
    assert res.status_code == 422


def test_register_patient_creates_user_and_empty_profile(client, db):
    wallet, session = register(client, "patient")
    assert session["user"]["wallet_address"] == wallet.address
    assert session["user"]["user_type"] == "patient"
    assert session["token"]

    user = db.query(User).filter(User.wallet_address == wallet.address).one()
    patient = db.query(Patient).filter(Patient.user_id == user.id).one()
    assert patient.blood_group is None
    assert db.query(Doctor).count() == 0


def test_register_doctor_creates_default_profile(client, db):
    wallet, _ = register(client, "doctor")
    doctor = db.query(Doctor).one()
    assert doctor.user.wallet_address == wallet.address
    assert doctor.specialization == ""
    assert doctor.consultation_fee == 0
    assert doctor.is_available is True


def test_lowercase_address_is_stored_checksummed(client, db):
    wallet = Wallet()
    body = _payload(wallet, "patient")
    body["wallet_address"] = wallet.address.lower()
    res = client.post("/auth/register", json=body)
    assert res.status_code == 201
    assert db.query(User).one().wallet_address == wallet.address


@pytest.mark.parametrize("first,second", [
    ("patient", "patient"),
    ("patient", "doctor"),
    ("doctor", "patient"),
    ("doctor", "doctor"),
])
def test_second_registration_conflicts_whatever_the_role(client, db, first, second):
    wallet, _ = register(client, first)
    res = client.post("/auth/register", json=_payload(wallet, second))
    assert res.status_code == 409
    assert db.query(User).count() == 1
    assert db.query(User).one().user_type == first


def test_register_rejects_signature_from_another_wallet(client, db):
    wallet, other = Wallet(), Wallet()
    res = client.post("/auth/register", json=_payload(wallet, "patient", signature=other.login_signature("patient")))
    assert res.status_code == 401
    assert db.query(User).count() == 0


def test_register_rejects_signature_for_other_role(client):
    wallet = Wallet()
    res = client.post("/auth/register", json=_payload(wallet, "patient", signature=wallet.login_signature("doctor")))
    assert res.status_code == 401


def test_register_rejects_garbage_signature(client):
    res = client.post("/auth/register", json=_payload(Wallet(), "patient", signature="0xdeadbeef"))
    assert res.status_code == 401


def test_register_requires_contact_fields(client):
    res = client.post("/auth/register", json=_payload(Wallet(), "patient", full_name="  "))
    assert res.status_code == 422
    res = client.post("/auth/register", json=_payload(Wallet(), "patient", email="not-an-email"))
    assert res.status_code == 422


def test_login_returns_working_session(client):
    wallet, _ = register(client, "doctor")
    res = client.post("/auth/login", json={
        "wallet_address": wallet.address, "role": "doctor", "signature": wallet.login_signature("doctor"),
    })
    assert res.status_code == 200
    me = client.get("/auth/me", headers=auth(res.json()["token"]))
    assert me.status_code == 200
    assert me.json()["wallet_address"] == wallet.address
    assert me.json()["user_type"] == "doctor"


def test_login_unknown_wallet_is_not_found(client):
    wallet = Wallet()
    res = client.post("/auth/login", json={
        "wallet_address": wallet.address, "role": "patient", "signature": wallet.login_signature("patient"),
    })
    assert res.status_code == 404


def test_login_with_other_role_is_forbidden(client):
    wallet, _ = register(client, "patient")
    res = client.post("/auth/login", json={
        "wallet_address": wallet.address, "role": "doctor", "signature": wallet.login_signature("doctor"),
    })
    assert res.status_code == 403


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Token abc"}).status_code == 401
    assert client.get("/auth/me", headers=auth("not-a-token")).status_code == 401


def test_token_for_unregistered_wallet_is_not_found(client):
    token = security.issue_token(Wallet().address)
    assert client.get("/auth/me", headers=auth(token)).status_code == 404


def test_expired_token_is_rejected(client, monkeypatch):
    _, session = register(client, "patient")
    monkeypatch.setattr(settings, "ACCESS_TOKEN_EXPIRE_MINUTES", -1)
    assert client.get("/auth/me", headers=auth(session["token"])).status_code == 401


def test_role_cannot_change_after_registration(client, db):
    register(client, "patient")
    user = db.query(User).one()
    with pytest.raises(ValueError):
        user.user_type = "doctor"
    user.user_type = "patient"


def test_registration_race_is_caught_by_unique_address(client, db, monkeypatch):
    from mediconnect.services.identity import IdentityService

    # both requests pass the existence check, as two concurrent ones would
    monkeypatch.setattr(IdentityService, "resolve", lambda self, wallet_address: None)
    wallet = Wallet()
    assert client.post("/auth/register", json=_payload(wallet, "patient")).status_code == 201
    res = client.post("/auth/register", json=_payload(wallet, "doctor"))
    assert res.status_code == 409
    assert res.json() == {"detail": "Wallet already registered"}
    assert db.query(User).count() == 1
    assert db.query(Doctor).count() == 0
