"""
Routes d'édition groupée des animaux.

Accessibles à tout appelant authentifié: le coordinateur vérifie lui-même que l'appelant est
administrateur du site ou d'au moins un groupe, et que toutes les cibles sont dans sa portée.
"""

from fastapi import APIRouter, Depends, Query

from shelter.api.deps import get_animal_service, get_bulk_coordinator, get_current_caller
from shelter.api.schemas import AnimalOut, BulkUpdateResponse
from shelter.app.metrics import ANIMAL_BULK_UPDATES
from shelter.domain.animals import AnimalService
from shelter.domain.bulk import BulkMutationCoordinator
from shelter.domain.entities import BulkMutationRequest, Caller
from shelter.domain.errors import ShelterError

router = APIRouter(prefix="/bulk-animals", tags=["bulk"])
current_caller_dep = Depends(get_current_caller)


def run_bulk_update(
    coordinator: BulkMutationCoordinator, caller: Caller, payload: BulkMutationRequest
) -> BulkUpdateResponse:
    """Exécute la mutation groupée et compte son issue (`applied` ou code d'erreur)."""
    try:
        result = coordinator.bulk_update(caller, payload)
    except ShelterError as err:
        ANIMAL_BULK_UPDATES.labels(err.code.lower()).inc()
        raise
    ANIMAL_BULK_UPDATES.labels("applied").inc()
    return BulkUpdateResponse(message=result.message, count=result.count)


@router.get("", response_model=list[AnimalOut])
def list_all_animals(
    status: str | None = Query(None),
    group_id: int | None = Query(None),
    name: str | None = Query(None),
    caller: Caller = current_caller_dep,
    service: AnimalService = Depends(get_animal_service),
):
    """Animaux de tous les groupes visibles par l'appelant, triés par groupe puis nom."""
    animals = service.list_all_animals(caller, status, group_id, name)
    return [AnimalOut.from_domain(a) for a in animals]


@router.post("/bulk-update", response_model=BulkUpdateResponse)
def bulk_update(
    payload: BulkMutationRequest,
    caller: Caller = current_caller_dep,
    coordinator: BulkMutationCoordinator = Depends(get_bulk_coordinator),
):
    """Applique un groupe et/ou un statut à une liste d'animaux, tout ou rien."""
    return run_bulk_update(coordinator, caller, payload)
