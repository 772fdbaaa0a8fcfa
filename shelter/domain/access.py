"""
Résolution de la portée d'accès d'un appelant.

Trois profils: administrateur du site (accès total), administrateur de groupe (droits de
mutation limités aux groupes qu'il administre) et membre (lecture/écriture dans ses groupes).
Couche de requêtes sans état au-dessus des adhésions persistées.
"""

from __future__ import annotations

from typing import Protocol

from shelter.domain.entities import Caller, Membership
from shelter.domain.errors import Forbidden, Unauthenticated


class MembershipSource(Protocol):
    def list_for_user(self, user_id: int) -> list[Membership]: ...


class AccessScopeResolver:
    """Calcule les droits de lecture et de mutation d'un appelant."""

    def __init__(self, memberships: MembershipSource) -> None:
        self.memberships = memberships

    def can_access_group(self, caller: Caller | None, group_id: int) -> bool:
        """Vrai pour un administrateur du site ou un membre (tout rôle) du groupe."""
        if caller is None:
            return False
        if caller.is_admin:
            return True
        return any(m.group_id == group_id for m in self.memberships.list_for_user(caller.user_id))

    def is_group_admin_for_any_group(self, caller: Caller | None) -> bool:
        if caller is None:
            return False
        return any(m.is_group_admin for m in self.memberships.list_for_user(caller.user_id))

    def administered_group_ids(self, caller: Caller | None) -> set[int]:
        """Groupes administrés par l'appelant; ensemble vide pour un simple membre.

        Non consulté pour un administrateur du site, qui n'est soumis à aucune portée.
        """
        if caller is None:
            return set()
        return {m.group_id for m in self.memberships.list_for_user(caller.user_id) if m.is_group_admin}

    def require_group_access(self, caller: Caller | None, group_id: int) -> None:
        """Lève `Unauthenticated`/`Forbidden` si l'appelant ne peut accéder au groupe."""
        if caller is None:
            raise Unauthenticated("authentication required")
        if not self.can_access_group(caller, group_id):
            raise Forbidden("access denied")

    def require_group_admin(self, caller: Caller | None, group_id: int, message: str) -> None:
        """Administrateur du site ou administrateur de ce groupe précis, sinon `Forbidden(message)`."""
        if caller is None:
            raise Unauthenticated("authentication required")
        if caller.is_admin:
            return
        if group_id not in self.administered_group_ids(caller):
            raise Forbidden(message)
