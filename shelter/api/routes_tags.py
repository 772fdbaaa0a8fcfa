"""
Routes des étiquettes d'animaux d'un groupe.

Lecture pour tout membre; écriture et affectation pour l'administrateur du site ou un
administrateur du groupe. L'affectation remplace toutes les étiquettes de l'animal.
"""

from fastapi import APIRouter, Depends

from shelter.api.deps import get_current_caller, get_tag_service
from shelter.api.schemas import AnimalOut, TagOut
from shelter.core.http_constants import HTTP_CREATED
from shelter.domain.entities import AnimalTagRequest, Caller, TagAssignment
from shelter.domain.tags import AnimalTagService

router = APIRouter(prefix="/groups/{group_id}", tags=["tags"])
current_caller_dep = Depends(get_current_caller)
service_dep = Depends(get_tag_service)


@router.get("/animal-tags", response_model=list[TagOut])
def list_tags(group_id: int, caller: Caller = current_caller_dep, service: AnimalTagService = service_dep):
    return [TagOut.model_validate(t) for t in service.list_tags(caller, group_id)]


@router.post("/animal-tags", response_model=TagOut, status_code=HTTP_CREATED)
def create_tag(
    group_id: int,
    payload: AnimalTagRequest,
    caller: Caller = current_caller_dep,
    service: AnimalTagService = service_dep,
):
    return TagOut.model_validate(service.create_tag(caller, group_id, payload))


@router.put("/animal-tags/{tag_id}", response_model=TagOut)
def update_tag(
    group_id: int,
    tag_id: int,
    payload: AnimalTagRequest,
    caller: Caller = current_caller_dep,
    service: AnimalTagService = service_dep,
):
    return TagOut.model_validate(service.update_tag(caller, group_id, tag_id, payload))


@router.delete("/animal-tags/{tag_id}")
def delete_tag(
    group_id: int, tag_id: int, caller: Caller = current_caller_dep, service: AnimalTagService = service_dep
):
    service.delete_tag(caller, group_id, tag_id)
    return {"message": "Animal tag deleted successfully"}


@router.post("/animals/{animal_id}/tags", response_model=AnimalOut)
def assign_tags(
    group_id: int,
    animal_id: int,
    payload: TagAssignment,
    caller: Caller = current_caller_dep,
    service: AnimalTagService = service_dep,
):
    """Remplace les étiquettes de l'animal; les identifiants d'un autre groupe sont ignorés."""
    return AnimalOut.from_domain(service.assign_tags(caller, group_id, animal_id, payload.tag_ids))
