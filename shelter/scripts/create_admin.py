"""
Création d'un administrateur du site.

Usage: `python -m shelter.scripts.create_admin <username> <email> --password <mot de passe>`
(le mot de passe peut aussi venir de la variable `SHELTER_ADMIN_PASSWORD`). La base utilisée est
celle de `DATABASE_URL`.
"""

from __future__ import annotations

import argparse
import os
import sys

from pydantic import BaseModel, EmailStr

from shelter.core.container import container
from shelter.domain.auth import hash_password
from shelter.infra.repo.accounts_repo import UserRepo
from shelter.infra.repo.db import session_scope


class AdminPayload(BaseModel):
    """Identifiants du compte à créer."""

    username: str
    email: EmailStr
    password: str


def create_admin(session_factory, payload: AdminPayload) -> int:
    """Crée le compte administrateur; retourne son identifiant.

    Lève `ValueError` si le nom d'utilisateur ou l'email est déjà pris.
    """
    with session_scope(session_factory) as session:
        repo = UserRepo(session)
        if repo.get_by_login(payload.username) or repo.get_by_login(str(payload.email)):
            raise ValueError("username or email already exists")
        user = repo.create(
            payload.username, str(payload.email), hash_password(payload.password), is_admin=True
        )
        return user.id


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a site administrator account")
    parser.add_argument("username")
    parser.add_argument("email")
    parser.add_argument("--password", default=os.getenv("SHELTER_ADMIN_PASSWORD"))
    args = parser.parse_args(argv)
    if not args.password:
        parser.error("a password is required (--password or SHELTER_ADMIN_PASSWORD)")

    try:
        payload = AdminPayload(username=args.username, email=args.email, password=args.password)
        user_id = create_admin(container.session_factory, payload)
    except ValueError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    print(f"created admin id={user_id} username={args.username}")
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry
    sys.exit(main())
