"""
Coordination des mutations groupées d'animaux.

Une requête groupée applique le même changement (groupe et/ou statut) à une liste d'animaux.
L'autorisation porte sur l'ensemble des cibles: un seul animal hors des groupes administrés
rejette toute la requête avant écriture. L'écriture est une unique instruction ensembliste.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import structlog
from sqlalchemy.exc import SQLAlchemyError

from shelter.domain.access import AccessScopeResolver
from shelter.domain.entities import BulkMutationRequest, Caller
from shelter.domain.errors import BadRequest, Forbidden, InternalError, Unauthenticated
from shelter.domain.statuses import StatusTransitionEngine

log = structlog.get_logger(__name__)


class BulkAnimalStore(Protocol):
    def count_in_groups(self, animal_ids: list[int], group_ids: set[int]) -> int: ...

    def bulk_update(self, animal_ids: list[int], fields: dict[str, object]) -> int: ...


@dataclass(frozen=True)
class BulkUpdateResult:
    count: int

    @property
    def message(self) -> str:
        return f"Successfully updated {self.count} animals"


class BulkMutationCoordinator:
    """Applique une mutation groupée après vérification des droits sur toutes les cibles."""

    def __init__(
        self,
        animals: BulkAnimalStore,
        access: AccessScopeResolver,
        engine: StatusTransitionEngine | None = None,
    ) -> None:
        self.animals = animals
        self.access = access
        self.engine = engine or StatusTransitionEngine()

    def bulk_update(self, caller: Caller | None, request: BulkMutationRequest) -> BulkUpdateResult:
        """Exécute la mutation groupée ou lève une erreur métier sans aucune écriture partielle.

        Étapes:
        1. appelant absent -> `Unauthenticated`;
        2. ni administrateur du site ni administrateur d'un groupe -> `Forbidden`;
        3. liste vide ou aucun champ à modifier -> `BadRequest`;
        4. administrateur de groupe: toutes les cibles doivent appartenir à ses groupes;
        5. une seule instruction UPDATE sur toutes les cibles (statut/groupe bruts).
        """
        if caller is None:
            raise Unauthenticated("authentication required")
        if not caller.is_admin and not self.access.is_group_admin_for_any_group(caller):
            raise Forbidden("admin or group admin privileges required")

        animal_ids = request.unique_ids()
        if not animal_ids:
            raise BadRequest("no animal ids provided")
        updates = request.field_updates()
        if not updates:
            raise BadRequest("no updates provided")
        if request.status is not None:
            self.engine.validate(request.status)

        if not caller.is_admin:
            group_ids = self.access.administered_group_ids(caller)
            in_scope = self.animals.count_in_groups(animal_ids, group_ids)
            if in_scope < len(animal_ids):
                log.warning(
                    "bulk_update_forbidden",
                    user_id=caller.user_id,
                    requested=len(animal_ids),
                    in_scope=in_scope,
                )
                raise Forbidden("you can only update animals in groups you administer")

        try:
            self.animals.bulk_update(animal_ids, updates)
        except SQLAlchemyError as err:
            log.error("bulk_update_failed", user_id=caller.user_id, error=type(err).__name__)
            raise InternalError("failed to update animals") from err

        log.info(
            "bulk_update_applied",
            user_id=caller.user_id,
            count=len(animal_ids),
            group_id=request.group_id,
            status=request.status,
        )
        return BulkUpdateResult(count=len(animal_ids))
