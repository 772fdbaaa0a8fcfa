"""
Dépôts SQL des comptes: utilisateurs, groupes et adhésions.

Les adhésions ne sont lues que pour la portée d'autorisation; les groupes supprimés logiquement
n'accordent aucun droit.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from shelter.domain.entities import Group, GroupMember, Membership, UserAccount

from .models import GroupORM, UserGroupORM, UserORM


def _account(row: UserORM) -> UserAccount:
    return UserAccount(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        is_admin=bool(row.is_admin),
        first_name=row.first_name or "",
        last_name=row.last_name or "",
        locked_until=row.locked_until,
    )


def _group(row: GroupORM) -> Group:
    return Group(id=row.id, name=row.name, description=row.description or "")


class UserRepo:
    """Lecture/création des comptes utilisateurs actifs."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: int) -> UserAccount | None:
        stmt = select(UserORM).where(UserORM.id == user_id, UserORM.deleted_at.is_(None))
        row = self._session.execute(stmt).scalars().first()
        return _account(row) if row else None

    def get_by_login(self, login: str) -> UserAccount | None:
        """Recherche par nom d'utilisateur ou email (insensible à la casse pour l'email)."""
        stmt = select(UserORM).where(
            UserORM.deleted_at.is_(None),
            or_(UserORM.username == login, UserORM.email == login.lower()),
        )
        row = self._session.execute(stmt).scalars().first()
        return _account(row) if row else None

    def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        is_admin: bool = False,
        first_name: str = "",
        last_name: str = "",
    ) -> UserAccount:
        row = UserORM(
            username=username,
            email=email.lower(),
            password_hash=password_hash,
            is_admin=is_admin,
            first_name=first_name,
            last_name=last_name,
        )
        self._session.add(row)
        self._session.flush()
        return _account(row)


class GroupRepo:
    """Groupes actifs (les groupes supprimés logiquement sont ignorés)."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def exists(self, group_id: int) -> bool:
        stmt = select(GroupORM.id).where(GroupORM.id == group_id, GroupORM.deleted_at.is_(None))
        return self._session.execute(stmt).first() is not None

    def get(self, group_id: int) -> Group | None:
        row = self._session.execute(self._live().where(GroupORM.id == group_id)).scalars().first()
        return _group(row) if row else None

    def name_taken(self, name: str) -> bool:
        stmt = select(GroupORM.id).where(func.lower(GroupORM.name) == name.lower())
        return self._session.execute(stmt).first() is not None

    def list_groups(self, group_ids: Iterable[int] | None = None) -> list[Group]:
        """Groupes actifs triés par nom, restreints à `group_ids` si fourni."""
        stmt = self._live()
        if group_ids is not None:
            stmt = stmt.where(GroupORM.id.in_(list(group_ids)))
        return [_group(r) for r in self._session.execute(stmt.order_by(GroupORM.name)).scalars()]

    def create(self, name: str, description: str = "") -> int:
        row = GroupORM(name=name, description=description)
        self._session.add(row)
        self._session.flush()
        return row.id

    def _live(self):
        return select(GroupORM).where(GroupORM.deleted_at.is_(None))


class MembershipRepo:
    """Adhésions d'un utilisateur aux groupes actifs."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_for_user(self, user_id: int) -> list[Membership]:
        stmt = (
            select(UserGroupORM.group_id, GroupORM.name, UserGroupORM.is_group_admin)
            .join(GroupORM, GroupORM.id == UserGroupORM.group_id)
            .where(UserGroupORM.user_id == user_id, GroupORM.deleted_at.is_(None))
            .order_by(GroupORM.name)
        )
        return [
            Membership(group_id=gid, group_name=name, is_group_admin=bool(admin))
            for gid, name, admin in self._session.execute(stmt).all()
        ]

    def add(self, user_id: int, group_id: int, is_group_admin: bool = False) -> Membership:
        self._session.add(
            UserGroupORM(user_id=user_id, group_id=group_id, is_group_admin=is_group_admin)
        )
        self._session.flush()
        return Membership(group_id=group_id, is_group_admin=is_group_admin)

    def get(self, user_id: int, group_id: int) -> Membership | None:
        row = self._session.get(UserGroupORM, (user_id, group_id))
        if row is None:
            return None
        return Membership(group_id=group_id, is_group_admin=bool(row.is_group_admin))

    def remove(self, user_id: int, group_id: int) -> bool:
        stmt = delete(UserGroupORM).where(
            UserGroupORM.user_id == user_id, UserGroupORM.group_id == group_id
        )
        return self._session.execute(stmt).rowcount > 0

    def set_group_admin(self, user_id: int, group_id: int, is_group_admin: bool) -> None:
        row = self._session.get(UserGroupORM, (user_id, group_id))
        if row is not None:
            row.is_group_admin = is_group_admin
            self._session.flush()

    def list_members(self, group_id: int) -> list[GroupMember]:
        """Membres actifs du groupe, administrateurs de groupe en tête puis par nom."""
        stmt = (
            select(UserORM.id, UserORM.username, UserORM.email, UserGroupORM.is_group_admin)
            .join(UserGroupORM, UserGroupORM.user_id == UserORM.id)
            .where(UserGroupORM.group_id == group_id, UserORM.deleted_at.is_(None))
            .order_by(UserGroupORM.is_group_admin.desc(), UserORM.username)
        )
        return [
            GroupMember(user_id=uid, username=name, email=email, is_group_admin=bool(admin))
            for uid, name, email, admin in self._session.execute(stmt).all()
        ]
