"""Helpers de peuplement et d'authentification pour les tests d'API."""

from __future__ import annotations

from sqlalchemy.orm import sessionmaker

from shelter.core.container import container
from shelter.domain.auth import create_access_token, hash_password
from shelter.domain.entities import Animal, UserAccount
from shelter.infra.repo.accounts_repo import GroupRepo, MembershipRepo, UserRepo
from shelter.infra.repo.animal_repo import AnimalRepo
from shelter.infra.repo.db import session_scope

DEFAULT_PASSWORD = "s3cret-pass"


class Seeder:
    """Peuple la base du test; chaque appel est validé immédiatement."""

    def __init__(self, factory: sessionmaker) -> None:
        self.factory = factory

    def user(self, username: str, is_admin: bool = False, **extra) -> UserAccount:
        with session_scope(self.factory) as s:
            return UserRepo(s).create(
                username,
                f"{username}@shelter.test",
                hash_password(DEFAULT_PASSWORD),
                is_admin=is_admin,
                **extra,
            )

    def group(self, name: str) -> int:
        with session_scope(self.factory) as s:
            return GroupRepo(s).create(name)

    def member(self, user: UserAccount, group_id: int, is_group_admin: bool = False) -> None:
        with session_scope(self.factory) as s:
            MembershipRepo(s).add(user.id, group_id, is_group_admin)

    def animal(self, group_id: int, name: str, status: str = "available", **fields) -> Animal:
        with session_scope(self.factory) as s:
            return AnimalRepo(s).create({"group_id": group_id, "name": name, "status": status, **fields})

    def reload(self, animal_id: int) -> Animal | None:
        with session_scope(self.factory) as s:
            return AnimalRepo(s).get(animal_id)


def auth_headers(user: UserAccount) -> dict[str, str]:
    """En-tête `Authorization` avec un jeton valide pour `user`."""
    token = create_access_token(
        secret=container.settings.JWT_SECRET,
        alg=container.settings.JWT_ALG,
        expires_min=5,
        payload={"sub": str(user.id), "is_admin": user.is_admin},
    )
    return {"Authorization": f"Bearer {token}"}
