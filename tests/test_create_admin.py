"""Tests du script de création d'administrateur."""

from unittest.mock import patch

import pytest

from shelter.domain.auth import verify_password
from shelter.infra.repo.accounts_repo import UserRepo
from shelter.infra.repo.db import session_scope
from shelter.scripts import create_admin as script


def test_create_admin_account(session_factory) -> None:
    user_id = script.create_admin(
        session_factory,
        script.AdminPayload(username="root", email="Root@Shelter.org", password="pw"),
    )
    with session_scope(session_factory) as s:
        user = UserRepo(s).get(user_id)
    assert user.is_admin
    assert user.email == "root@shelter.org"
    assert verify_password("pw", user.password_hash)


def test_duplicate_admin_is_rejected(session_factory) -> None:
    payload = script.AdminPayload(username="root", email="root@shelter.org", password="pw")
    script.create_admin(session_factory, payload)
    with pytest.raises(ValueError):
        script.create_admin(session_factory, payload)


def test_main_uses_container_factory(session_factory, capsys) -> None:
    with patch.object(script.container, "session_factory", session_factory):
        assert script.main(["root", "root@shelter.org", "--password", "pw"]) == 0
        assert script.main(["root2", "not-an-email", "--password", "pw"]) == 1
    assert "created admin" in capsys.readouterr().out
