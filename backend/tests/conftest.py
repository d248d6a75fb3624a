import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["VERIFY_PAYMENTS_ONCHAIN"] = "false"
os.environ["DEBUG"] = "false"

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from fastapi.testclient import TestClient

from mediconnect.core.db import Base, SessionLocal, engine
from mediconnect.core.wallet import login_message
from mediconnect.main import app
import mediconnect.models  # noqa: F401


class Wallet:
    """A throwaway key pair standing in for the browser wallet."""

    def __init__(self):
        self.account = Account.create()
        self.address = self.account.address

    def sign(self, message: str) -> str:
        signed = Account.sign_message(encode_defunct(text=message), private_key=self.account.key)
        sig = signed.signature.hex()
        return sig if sig.startswith("0x") else "0x" + sig

    def login_signature(self, role: str) -> str:
        return self.sign(login_message(role, self.address))


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, role: str, wallet: Wallet = None, full_name: str = None):
    wallet = wallet or Wallet()
    res = client.post(
        "/auth/register",
        json={
            "wallet_address": wallet.address,
            "role": role,
            "signature": wallet.login_signature(role),
            "full_name": full_name or f"Test {role.title()}",
            "email": f"{role}@example.com",
            "phone": "+15550100",
        },
    )
    assert res.status_code == 201, res.text
    return wallet, res.json()


@pytest.fixture
def patient(client):
    wallet, session = register(client, "patient", full_name="Pat Patient")
    return {"wallet": wallet, "headers": auth(session["token"]), "user": session["user"]}


@pytest.fixture
def doctor(client):
    """A registered doctor charging 50 (ether) for cardiology."""
    wallet, session = register(client, "doctor", full_name="Dr. Dana")
    headers = auth(session["token"])
    res = client.put(
        "/doctors/me",
        json={"specialization": "Cardiology", "consultation_fee": "50", "experience_years": 12},
        headers=headers,
    )
    assert res.status_code == 200, res.text
    return {"wallet": wallet, "headers": headers, "user": session["user"], "profile": res.json()}


@pytest.fixture
def make_doctor(client):
    def _make(specialization="General", fee="10", full_name=None):
        wallet, session = register(client, "doctor", full_name=full_name)
        headers = auth(session["token"])
        res = client.put(
            "/doctors/me",
            json={"specialization": specialization, "consultation_fee": fee},
            headers=headers,
        )
        assert res.status_code == 200, res.text
        return {"wallet": wallet, "headers": headers, "profile": res.json()}

    return _make


@pytest.fixture
def make_patient(client):
    def _make(full_name=None):
        wallet, session = register(client, "patient", full_name=full_name)
        return {"wallet": wallet, "headers": auth(session["token"])}

    return _make
