"""Tests de l'authentification: connexion, profil courant et erreurs de jeton."""

from __future__ import annotations

from datetime import timedelta

from shelter.core.container import container
from shelter.core.http_constants import HTTP_OK, HTTP_UNAUTHORIZED
from shelter.domain.auth import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from shelter.domain.statuses import utc_now
from shelter.infra.repo.db import session_scope
from shelter.infra.repo.models import UserORM
from tests.helpers import DEFAULT_PASSWORD, auth_headers


def test_password_hashing() -> None:
    h = hash_password("pw")
    assert verify_password("pw", h)
    assert not verify_password("other", h)
    assert not verify_password("pw", "not-a-hash")


def test_token_round_trip_to_caller() -> None:
    token = create_access_token("k", "HS256", 5, {"sub": "42", "is_admin": True})
    caller = decode_token(token, "k", "HS256").to_caller()
    assert caller.user_id == 42 and caller.is_admin
    assert decode_token(token, "other-key", "HS256") is None


def test_login_with_username_or_email(client, seed) -> None:
    seed.user("alice")
    for login in ("alice", "ALICE@shelter.test"):
        r = client.post("/auth/login", json={"username": login, "password": DEFAULT_PASSWORD})
        assert r.status_code == HTTP_OK
        assert r.json()["token_type"] == "bearer"


def test_login_bad_password(client, seed) -> None:
    seed.user("alice")
    r = client.post("/auth/login", json={"username": "alice", "password": "nope"})
    assert r.status_code == HTTP_UNAUTHORIZED
    body = r.json()
    assert body["code"] == "UNAUTHORIZED"
    assert body["message"] == "invalid_credentials"


def test_locked_user_cannot_login(client, seed, session_factory) -> None:
    user = seed.user("bob")
    with session_scope(session_factory) as s:
        s.get(UserORM, user.id).locked_until = utc_now() + timedelta(hours=1)
    r = client.post("/auth/login", json={"username": "bob", "password": DEFAULT_PASSWORD})
    assert r.status_code == HTTP_UNAUTHORIZED


def test_deleted_user_token_rejected(client, seed, session_factory) -> None:
    user = seed.user("carol")
    headers = auth_headers(user)
    with session_scope(session_factory) as s:
        s.get(UserORM, user.id).deleted_at = utc_now()
    r = client.get("/auth/me", headers=headers)
    assert r.status_code == HTTP_UNAUTHORIZED
    assert r.json()["message"] == "user_not_found"


def test_me_lists_groups(client, seed) -> None:
    user = seed.user("dave", first_name="Dave")
    gid = seed.group("dogs")
    seed.member(user, gid, is_group_admin=True)
    r = client.get("/auth/me", headers=auth_headers(user))
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["username"] == "dave"
    assert body["first_name"] == "Dave"
    assert body["groups"] == [{"group_id": gid, "group_name": "dogs", "is_group_admin": True}]


def test_missing_and_invalid_tokens(client) -> None:
    r = client.get("/auth/me")
    assert r.status_code == HTTP_UNAUTHORIZED
    assert r.json()["message"] == "missing_token"
    r = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == HTTP_UNAUTHORIZED
    assert r.json()["message"] == "invalid_token"


def test_expired_token(client, seed) -> None:
    user = seed.user("erin")
    token = create_access_token(
        container.settings.JWT_SECRET, container.settings.JWT_ALG, -1, {"sub": str(user.id)}
    )
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == HTTP_UNAUTHORIZED
