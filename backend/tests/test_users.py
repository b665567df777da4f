from __future__ import annotations

import uuid

from sqlalchemy.exc import OperationalError
from sqlmodel import func, select

from nfj_gateway import crud
from nfj_gateway.models import User


def test_register_creates_user(client):
    r = client.post("/api/register", json={"email": "erik@example.com"})
    assert r.status_code == 200
    body = r.json()
    assert uuid.UUID(body["id"])
    assert body["email"] == "erik@example.com"
    assert body["points"] == 0
    assert body["level"] == 1
    assert body["isPremium"] is False


def test_register_same_email_twice(client, db):
    r1 = client.post("/api/register", json={"email": "same@example.com"})
    r2 = client.post("/api/register", json={"email": "same@example.com"})
    assert r1.status_code == 200
    assert r2.status_code == 200
    assert r1.json()["id"] == r2.json()["id"]

    count = db.exec(select(func.count()).select_from(User).where(User.email == "same@example.com")).one()
    assert count == 1


def test_register_missing_email(client):
    for kwargs in ({"json": {}}, {"json": {"email": ""}}, {"json": {"email": "   "}}, {}):
        r = client.post("/api/register", **kwargs)
        assert r.status_code == 400
        assert r.json()["code"] == 400401


def test_register_blank_email_creates_no_row_and_padding_is_trimmed(client, db):
    r = client.post("/api/register", json={"email": " \t "})
    assert r.status_code == 400
    assert db.exec(select(func.count()).select_from(User)).one() == 0

    r = client.post("/api/register", json={"email": "  padded@example.com "})
    assert r.status_code == 200
    assert r.json()["email"] == "padded@example.com"


def test_register_storage_error(client, monkeypatch):
    def boom(**kwargs):  # type: ignore[no-untyped-def]
        raise OperationalError("INSERT INTO users", {}, Exception("connection refused"))

    monkeypatch.setattr(crud, "register_user_by_email", boom)
    r = client.post("/api/register", json={"email": "down@example.com"})
    assert r.status_code == 500
    body = r.json()
    assert body == {"code": 500401, "message": "db error", "data": None}


def test_me_returns_user(client):
    user_id = client.post("/api/register", json={"email": "me@example.com"}).json()["id"]

    r = client.get(f"/api/me/{user_id}")
    assert r.status_code == 200
    assert r.json()["email"] == "me@example.com"
    assert r.json()["isPremium"] is False


def test_me_unknown_or_invalid_id_returns_null(client):
    r = client.get(f"/api/me/{uuid.uuid4()}")
    assert r.status_code == 200
    assert r.json() is None

    r = client.get("/api/me/not-a-uuid")
    assert r.status_code == 200
    assert r.json() is None


def test_me_storage_error(client, monkeypatch):
    def boom(**kwargs):  # type: ignore[no-untyped-def]
        raise OperationalError("SELECT", {}, Exception("timeout"))

    monkeypatch.setattr(crud, "get_user", boom)
    r = client.get(f"/api/me/{uuid.uuid4()}")
    assert r.status_code == 500
    assert r.json()["code"] == 500401


def test_crud_register_returns_existing_on_conflict(db):
    first = crud.register_user_by_email(session=db, email="crud@example.com")
    second = crud.register_user_by_email(session=db, email="crud@example.com")
    assert first.id == second.id


def test_crud_grant_premium_is_idempotent(db):
    user = crud.register_user_by_email(session=db, email="vip@example.com")
    crud.grant_premium(session=db, user=user)
    db.commit()
    updated_at = user.updated_at

    crud.grant_premium(session=db, user=user)
    db.commit()
    db.refresh(user)
    assert user.is_premium is True
    assert user.updated_at == updated_at
