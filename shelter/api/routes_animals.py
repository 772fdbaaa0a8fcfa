"""
Routes des animaux d'un groupe.

Ce module regroupe les endpoints `/groups/{group_id}/animals`: liste filtrable, lecture,
création, modification (chemin membre), suppression logique et détection de doublons de nom.
Le contrôle d'accès au groupe est fait par le service métier.
"""

from fastapi import APIRouter, Depends, Query

from shelter.api.deps import get_animal_service, get_current_caller
from shelter.api.schemas import AnimalOut, DuplicateNamesResponse
from shelter.core.http_constants import HTTP_CREATED
from shelter.domain.animals import AnimalService
from shelter.domain.entities import AnimalRequest, Caller

router = APIRouter(prefix="/groups/{group_id}/animals", tags=["animals"])
current_caller_dep = Depends(get_current_caller)
service_dep = Depends(get_animal_service)


@router.get("", response_model=list[AnimalOut])
def list_animals(
    group_id: int,
    status: str | None = Query(None),
    name: str | None = Query(None),
    caller: Caller = current_caller_dep,
    service: AnimalService = service_dep,
):
    """
    Liste les animaux du groupe.

    Paramètres:
    - status: absent -> `available` et `bite_quarantine`; `all` -> tous; sinon liste séparée
      par des virgules.
    - name: sous-chaîne du nom, insensible à la casse.
    """
    return [AnimalOut.from_domain(a) for a in service.list_animals(caller, group_id, status, name)]


@router.get("/check-duplicates", response_model=DuplicateNamesResponse)
def check_duplicates(
    group_id: int,
    name: str = Query(""),
    caller: Caller = current_caller_dep,
    service: AnimalService = service_dep,
):
    """Animaux du groupe portant déjà ce nom (tous statuts confondus)."""
    result = service.check_duplicate_names(caller, group_id, name)
    return DuplicateNamesResponse(
        name=result["name"],
        count=result["count"],
        animals=[AnimalOut.from_domain(a) for a in result["animals"]],
        has_duplicates=result["has_duplicates"],
    )


@router.get("/{animal_id}", response_model=AnimalOut)
def get_animal(
    group_id: int,
    animal_id: int,
    caller: Caller = current_caller_dep,
    service: AnimalService = service_dep,
):
    return AnimalOut.from_domain(service.get_animal(caller, group_id, animal_id))


@router.post("", response_model=AnimalOut, status_code=HTTP_CREATED)
def create_animal(
    group_id: int,
    payload: AnimalRequest,
    caller: Caller = current_caller_dep,
    service: AnimalService = service_dep,
):
    """Crée un animal dans le groupe; le statut par défaut est `available`."""
    return AnimalOut.from_domain(service.create_animal(caller, group_id, payload))


@router.put("/{animal_id}", response_model=AnimalOut)
def update_animal(
    group_id: int,
    animal_id: int,
    payload: AnimalRequest,
    caller: Caller = current_caller_dep,
    service: AnimalService = service_dep,
):
    """Remplace les champs descriptifs et applique la transition de statut demandée."""
    return AnimalOut.from_domain(service.update_animal(caller, group_id, animal_id, payload))


@router.delete("/{animal_id}")
def delete_animal(
    group_id: int,
    animal_id: int,
    caller: Caller = current_caller_dep,
    service: AnimalService = service_dep,
):
    service.delete_animal(caller, group_id, animal_id)
    return {"message": "Animal deleted successfully"}
