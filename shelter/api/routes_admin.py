"""
Routes d'administration du site sur les animaux.

Endpoints réservés aux administrateurs du site: mise à jour partielle d'un animal (tous groupes),
mise à jour groupée, export et import CSV.
"""

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from shelter.api.deps import (
    get_animal_service,
    get_bulk_coordinator,
    get_csv_importer,
    require_site_admin,
)
from shelter.api.routes_bulk import run_bulk_update
from shelter.api.schemas import AnimalOut, BulkUpdateResponse, ImportResponse
from shelter.domain.animal_csv import AnimalCsvImporter, export_animals_csv
from shelter.domain.animals import AnimalService
from shelter.domain.bulk import BulkMutationCoordinator
from shelter.domain.entities import AnimalRequest, BulkMutationRequest, Caller
from shelter.domain.errors import BadRequest

router = APIRouter(prefix="/admin/animals", tags=["admin"])
site_admin_dep = Depends(require_site_admin)


@router.put("/{animal_id}", response_model=AnimalOut)
def admin_update_animal(
    animal_id: int,
    payload: AnimalRequest,
    caller: Caller = site_admin_dep,
    service: AnimalService = Depends(get_animal_service),
):
    """
    Mise à jour partielle d'un animal, quel que soit son groupe.

    Seuls les champs non vides s'appliquent. Retour: l'animal relu, tags inclus.
    """
    return AnimalOut.from_domain(service.admin_update_animal(caller, animal_id, payload))


@router.post("/bulk-update", response_model=BulkUpdateResponse)
def bulk_update(
    payload: BulkMutationRequest,
    caller: Caller = site_admin_dep,
    coordinator: BulkMutationCoordinator = Depends(get_bulk_coordinator),
):
    return run_bulk_update(coordinator, caller, payload)


@router.get("/export.csv")
def export_csv(
    group_id: int | None = Query(None),
    caller: Caller = site_admin_dep,
    service: AnimalService = Depends(get_animal_service),
):
    """Export CSV de tous les animaux (ou d'un groupe), tous statuts."""
    animals = service.list_all_animals(caller, "all", group_id)
    return Response(
        content=export_animals_csv(animals),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=animals.csv"},
    )


@router.post("/import", response_model=ImportResponse)
async def import_csv(
    request: Request,
    caller: Caller = site_admin_dep,
    importer: AnimalCsvImporter = Depends(get_csv_importer),
):
    """Import CSV (corps `text/csv`); les lignes invalides sont renvoyées en avertissements.

    La création des animaux (SQL bloquant) s'exécute dans le pool de threads.
    """
    raw = await request.body()
    if not raw:
        raise BadRequest("no CSV content provided")
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as err:
        raise BadRequest("CSV must be UTF-8 encoded") from err
    report = await run_in_threadpool(importer.run, text)
    return ImportResponse(
        message=f"Successfully imported {report.imported} animals",
        count=report.imported,
        warnings=report.errors,
    )
