"""
Service métier des groupes et de leurs adhésions.

Responsabilités:
- Création et liste des groupes (création réservée à l'administrateur du site).
- Ajout/retrait d'un membre (administrateur du site).
- Promotion/rétrogradation d'un administrateur de groupe (administrateur du site ou du groupe).
- Liste des membres d'un groupe (tout membre du groupe).
"""

from __future__ import annotations

import structlog

from shelter.domain.access import AccessScopeResolver
from shelter.domain.entities import Caller, Group, GroupMember, GroupRequest
from shelter.domain.errors import (
    BadRequest,
    Conflict,
    Forbidden,
    NotFound,
    Unauthenticated,
    write_guard,
)

log = structlog.get_logger(__name__)


def _require_site_admin(caller: Caller | None) -> Caller:
    if caller is None:
        raise Unauthenticated("authentication required")
    if not caller.is_admin:
        raise Forbidden("admin privileges required")
    return caller


class GroupService:
    """Gestion des groupes.

    Paramètres:
    - groups: dépôt de groupes (`GroupRepo`).
    - memberships: dépôt d'adhésions (`MembershipRepo`).
    - users: dépôt d'utilisateurs (`UserRepo`).
    - access: résolveur de portée d'accès.
    """

    def __init__(self, groups, memberships, users, access: AccessScopeResolver) -> None:
        self.groups = groups
        self.memberships = memberships
        self.users = users
        self.access = access

    def list_groups(self, caller: Caller | None) -> list[Group]:
        """Tous les groupes pour l'administrateur du site, sinon ceux de l'appelant."""
        if caller is None:
            raise Unauthenticated("authentication required")
        if caller.is_admin:
            return self.groups.list_groups()
        ids = [m.group_id for m in self.memberships.list_for_user(caller.user_id)]
        return self.groups.list_groups(ids)

    def create_group(self, caller: Caller | None, req: GroupRequest) -> Group:
        _require_site_admin(caller)
        if self.groups.name_taken(req.name):
            raise Conflict("group name already exists")
        with write_guard("failed to create group"):
            group_id = self.groups.create(req.name, req.description)
        log.info("group_created", group_id=group_id, name=req.name)
        return Group(id=group_id, name=req.name, description=req.description)

    def list_members(self, caller: Caller | None, group_id: int) -> list[GroupMember]:
        self.access.require_group_access(caller, group_id)
        self._require_group(group_id)
        return self.memberships.list_members(group_id)

    def add_member(self, caller: Caller | None, group_id: int, user_id: int) -> None:
        _require_site_admin(caller)
        self._require_user_and_group(user_id, group_id)
        if self.memberships.get(user_id, group_id) is not None:
            raise Conflict("user is already a member of this group")
        with write_guard("failed to add user to group"):
            self.memberships.add(user_id, group_id)
        log.info("group_member_added", group_id=group_id, user_id=user_id)

    def remove_member(self, caller: Caller | None, group_id: int, user_id: int) -> None:
        _require_site_admin(caller)
        self._require_user_and_group(user_id, group_id)
        with write_guard("failed to remove user from group"):
            removed = self.memberships.remove(user_id, group_id)
        if not removed:
            raise NotFound("user is not a member of this group")
        log.info("group_member_removed", group_id=group_id, user_id=user_id)

    def set_group_admin(
        self, caller: Caller | None, group_id: int, user_id: int, is_group_admin: bool
    ) -> None:
        """Promeut (`True`) ou rétrograde (`False`) un membre existant du groupe."""
        verb = "promote" if is_group_admin else "demote"
        self.access.require_group_admin(
            caller, group_id, f"you must be a site admin or group admin to {verb} users"
        )
        self._require_user_and_group(user_id, group_id)
        membership = self.memberships.get(user_id, group_id)
        if membership is None:
            raise BadRequest("user is not a member of this group")
        if membership.is_group_admin == is_group_admin:
            raise BadRequest(
                "user is already a group admin" if is_group_admin else "user is not a group admin"
            )
        with write_guard(f"failed to {verb} group admin"):
            self.memberships.set_group_admin(user_id, group_id, is_group_admin)
        log.info(
            "group_admin_changed",
            group_id=group_id,
            user_id=user_id,
            is_group_admin=is_group_admin,
            by=caller.user_id,
        )

    def _require_group(self, group_id: int) -> None:
        if not self.groups.exists(group_id):
            raise NotFound("group not found")

    def _require_user_and_group(self, user_id: int, group_id: int) -> None:
        if self.users.get(user_id) is None:
            raise NotFound("user not found")
        self._require_group(group_id)
