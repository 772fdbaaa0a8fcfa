"""
Service métier des animaux d'un groupe.

Responsabilités:
- Lecture/création/modification/suppression logique des animaux d'un groupe, après contrôle
  d'accès de l'appelant.
- Chemin administrateur de mise à jour partielle (seuls les champs non vides s'appliquent).
- Délégation au moteur de transitions pour les dates dérivées du statut.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from shelter.domain.access import AccessScopeResolver
from shelter.domain.entities import Animal, AnimalRequest, Caller
from shelter.domain.errors import BadRequest, Forbidden, NotFound, Unauthenticated, write_guard
from shelter.domain.statuses import (
    DEFAULT_VISIBLE_STATUSES,
    STATUS_ARCHIVED,
    STATUS_AVAILABLE,
    StatusTransitionEngine,
    utc_now,
)

log = structlog.get_logger(__name__)

_DESCRIPTIVE_FIELDS = ("name", "species", "breed", "description", "image_url")


def parse_status_filter(status: str | None) -> list[str] | None:
    """Traduit le paramètre `status` d'une liste en filtre.

    - absent/vide: statuts visibles par défaut (`available`, `bite_quarantine`);
    - `all`: aucun filtre (None);
    - valeur séparée par des virgules: plusieurs statuts.
    """
    if not status:
        return list(DEFAULT_VISIBLE_STATUSES)
    if status == "all":
        return None
    return [s.strip() for s in status.split(",") if s.strip()]


class AnimalService:
    """Opérations unitaires sur les animaux.

    Paramètres:
    - animals: dépôt d'animaux (`AnimalRepo`).
    - groups: dépôt de groupes, pour vérifier l'existence d'un groupe cible.
    - access: résolveur de portée d'accès.
    - engine: moteur de transitions de statut.
    - clock: source d'horodatage (UTC naïf).
    - on_transition: rappel optionnel `(ancien, nouveau)` après un changement de statut persisté.
    """

    def __init__(
        self,
        animals,
        groups,
        access: AccessScopeResolver,
        engine: StatusTransitionEngine | None = None,
        clock: Callable[[], datetime] = utc_now,
        on_transition: Callable[[str, str], None] | None = None,
    ) -> None:
        self.animals = animals
        self.groups = groups
        self.access = access
        self.engine = engine or StatusTransitionEngine()
        self.clock = clock
        self.on_transition = on_transition

    def list_animals(
        self, caller: Caller | None, group_id: int, status: str | None = None, name: str | None = None
    ) -> list[Animal]:
        self.access.require_group_access(caller, group_id)
        return self.animals.list_for_group(group_id, parse_status_filter(status), name)

    def get_animal(self, caller: Caller | None, group_id: int, animal_id: int) -> Animal:
        self.access.require_group_access(caller, group_id)
        animal = self.animals.get(animal_id, group_id=group_id)
        if animal is None:
            raise NotFound("animal not found")
        return animal

    def create_animal(self, caller: Caller | None, group_id: int, req: AnimalRequest) -> Animal:
        """Crée un animal dans le groupe avec les dates initiales de son statut."""
        self.access.require_group_access(caller, group_id)
        if not req.name:
            raise BadRequest("name is required")
        if not self.groups.exists(group_id):
            raise NotFound("group not found")
        fields: dict[str, Any] = {k: getattr(req, k) for k in _DESCRIPTIVE_FIELDS}
        fields["age"] = req.age
        fields["group_id"] = group_id
        fields["is_returned"] = bool(req.is_returned)
        fields.update(
            self.engine.initial_fields(
                req.status or STATUS_AVAILABLE, req.quarantine_start_date, self.clock()
            )
        )
        animal = self._write(lambda: self.animals.create(fields), "failed to create animal")
        log.info("animal_created", animal_id=animal.id, group_id=group_id, status=animal.status)
        return animal

    def update_animal(
        self, caller: Caller | None, group_id: int, animal_id: int, req: AnimalRequest
    ) -> Animal:
        """Chemin membre: remplace les champs descriptifs et applique la transition de statut.

        Un retour `archived -> available` incrémente `return_count`.
        """
        self.access.require_group_access(caller, group_id)
        if not req.name:
            raise BadRequest("name is required")
        current = self.animals.get(animal_id, group_id=group_id)
        if current is None:
            raise NotFound("animal not found")

        changes = self.engine.compute_transition(
            current.status,
            req.status,
            req.quarantine_start_date,
            now=self.clock(),
            override_after_transition=False,
        )
        if changes.get("status") == STATUS_AVAILABLE and current.status == STATUS_ARCHIVED:
            changes["return_count"] = current.return_count + 1
        for key in _DESCRIPTIVE_FIELDS:
            changes[key] = getattr(req, key)
        changes["age"] = req.age
        if req.is_returned is not None:
            changes["is_returned"] = req.is_returned

        animal = self._write(
            lambda: self.animals.update_fields(animal_id, changes), "failed to update animal"
        )
        log.info("animal_updated", animal_id=animal_id, fields=sorted(changes))
        self._notify(current.status, changes)
        return animal

    def admin_update_animal(self, caller: Caller | None, animal_id: int, req: AnimalRequest) -> Animal:
        """Chemin administrateur: mise à jour partielle, sans contrôle de groupe.

        Seuls les champs non vides/non nuls s'appliquent; un changement de statut passe par le
        moteur de transitions. Aucun champ reconnu -> `BadRequest`.
        """
        if caller is None:
            raise Unauthenticated("authentication required")
        if not caller.is_admin:
            raise Forbidden("admin privileges required")
        current = self.animals.get(animal_id)
        if current is None:
            raise NotFound("animal not found")

        changes: dict[str, Any] = {k: getattr(req, k) for k in _DESCRIPTIVE_FIELDS if getattr(req, k)}
        if req.age > 0:
            changes["age"] = req.age
        if req.group_id:
            if not self.groups.exists(req.group_id):
                raise NotFound("group not found")
            changes["group_id"] = req.group_id
        if req.is_returned is not None:
            changes["is_returned"] = req.is_returned
        changes.update(
            self.engine.compute_transition(
                current.status, req.status, req.quarantine_start_date, now=self.clock()
            )
        )
        if not changes:
            raise BadRequest("no updates provided")

        animal = self._write(
            lambda: self.animals.update_fields(animal_id, changes), "failed to update animal"
        )
        log.info("animal_admin_updated", animal_id=animal_id, fields=sorted(changes))
        self._notify(current.status, changes)
        return animal

    def delete_animal(self, caller: Caller | None, group_id: int, animal_id: int) -> None:
        """Suppression logique (l'animal reste en base pour l'historique)."""
        self.access.require_group_access(caller, group_id)
        deleted = self._write(
            lambda: self.animals.soft_delete(animal_id, group_id=group_id),
            "failed to delete animal",
        )
        if not deleted:
            raise NotFound("animal not found")
        log.info("animal_deleted", animal_id=animal_id, group_id=group_id)

    def check_duplicate_names(self, caller: Caller | None, group_id: int, name: str) -> dict[str, Any]:
        """Animaux du groupe portant le même nom, tous statuts confondus."""
        self.access.require_group_access(caller, group_id)
        if not name or not name.strip():
            raise BadRequest("name parameter is required")
        matches = self.animals.find_by_name(group_id, name.strip())
        return {
            "name": name,
            "count": len(matches),
            "animals": matches,
            "has_duplicates": len(matches) > 1,
        }

    def list_all_animals(
        self,
        caller: Caller | None,
        status: str | None = None,
        group_id: int | None = None,
        name: str | None = None,
    ) -> list[Animal]:
        """Liste transverse pour l'édition groupée.

        L'administrateur du site voit tous les groupes; un administrateur de groupe ne voit que
        les groupes qu'il administre.
        """
        if caller is None:
            raise Unauthenticated("authentication required")
        statuses = None if not status or status == "all" else parse_status_filter(status)
        if caller.is_admin:
            scope = None
        else:
            scope = self.access.administered_group_ids(caller)
            if not scope:
                raise Forbidden("admin or group admin privileges required")
        if group_id is not None:
            if scope is not None and group_id not in scope:
                raise Forbidden("access denied")
            scope = {group_id}
        return self.animals.list_all(scope, statuses, name)

    def _notify(self, previous: str, changes: dict[str, Any]) -> None:
        if self.on_transition is not None and "status" in changes:
            self.on_transition(previous, changes["status"])

    @staticmethod
    def _write(op: Callable[[], Any], message: str) -> Any:
        with write_guard(message):
            return op()
