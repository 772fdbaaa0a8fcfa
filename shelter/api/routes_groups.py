"""
Routes des groupes et de leurs adhésions.

- `GET /groups`: groupes visibles par l'appelant.
- `POST /groups`: création (administrateur du site).
- `GET /groups/{group_id}/members`: membres du groupe (tout membre).
- `POST|DELETE /groups/{group_id}/members/{user_id}`: ajout/retrait (administrateur du site).
- `POST|DELETE /groups/{group_id}/admins/{user_id}`: promotion/rétrogradation d'un membre
  (administrateur du site ou du groupe).
"""

from fastapi import APIRouter, Depends

from shelter.api.deps import get_current_caller, get_group_service
from shelter.api.schemas import GroupMemberOut, GroupOut
from shelter.core.http_constants import HTTP_CREATED
from shelter.domain.entities import Caller, GroupRequest
from shelter.domain.groups import GroupService

router = APIRouter(prefix="/groups", tags=["groups"])
current_caller_dep = Depends(get_current_caller)
service_dep = Depends(get_group_service)


@router.get("", response_model=list[GroupOut])
def list_groups(caller: Caller = current_caller_dep, service: GroupService = service_dep):
    return [GroupOut.model_validate(g) for g in service.list_groups(caller)]


@router.post("", response_model=GroupOut, status_code=HTTP_CREATED)
def create_group(
    payload: GroupRequest, caller: Caller = current_caller_dep, service: GroupService = service_dep
):
    return GroupOut.model_validate(service.create_group(caller, payload))


@router.get("/{group_id}/members", response_model=list[GroupMemberOut])
def list_members(group_id: int, caller: Caller = current_caller_dep, service: GroupService = service_dep):
    return [GroupMemberOut.model_validate(m) for m in service.list_members(caller, group_id)]


@router.post("/{group_id}/members/{user_id}")
def add_member(
    group_id: int, user_id: int, caller: Caller = current_caller_dep, service: GroupService = service_dep
):
    service.add_member(caller, group_id, user_id)
    return {"message": "User added to group successfully"}


@router.delete("/{group_id}/members/{user_id}")
def remove_member(
    group_id: int, user_id: int, caller: Caller = current_caller_dep, service: GroupService = service_dep
):
    service.remove_member(caller, group_id, user_id)
    return {"message": "User removed from group successfully"}


@router.post("/{group_id}/admins/{user_id}")
def promote_group_admin(
    group_id: int, user_id: int, caller: Caller = current_caller_dep, service: GroupService = service_dep
):
    service.set_group_admin(caller, group_id, user_id, True)
    return {"message": "User promoted to group admin"}


@router.delete("/{group_id}/admins/{user_id}")
def demote_group_admin(
    group_id: int, user_id: int, caller: Caller = current_caller_dep, service: GroupService = service_dep
):
    service.set_group_admin(caller, group_id, user_id, False)
    return {"message": "User demoted from group admin"}
