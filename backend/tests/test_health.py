def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["service"] == "MediConnect"


def test_health_db(client):
    assert client.get("/health/db").json() == {"database": "ok", "error": None}


def test_reset_db_script_empties_tables(client, db):
    from conftest import register
    from mediconnect.models import User
    from mediconnect.scripts import reset_db

    register(client, "patient")
    assert db.query(User).count() == 1
    reset_db.main()
    assert db.query(User).count() == 0
