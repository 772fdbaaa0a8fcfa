"""
Étiquettes d'animaux propres à un groupe.

Lecture pour tout membre du groupe; création, modification, suppression et affectation réservées
à l'administrateur du site ou à un administrateur du groupe. Une affectation remplace le jeu
complet d'étiquettes de l'animal; les identifiants d'un autre groupe sont ignorés.
"""

from __future__ import annotations

import structlog

from shelter.domain.access import AccessScopeResolver
from shelter.domain.entities import Animal, AnimalTag, AnimalTagRequest, Caller
from shelter.domain.errors import Conflict, NotFound, write_guard

log = structlog.get_logger(__name__)


class AnimalTagService:
    def __init__(self, tags, animals, access: AccessScopeResolver) -> None:
        self.tags = tags
        self.animals = animals
        self.access = access

    def list_tags(self, caller: Caller | None, group_id: int) -> list[AnimalTag]:
        self.access.require_group_access(caller, group_id)
        return self.tags.list_for_group(group_id)

    def create_tag(self, caller: Caller | None, group_id: int, req: AnimalTagRequest) -> AnimalTag:
        self.access.require_group_admin(caller, group_id, "only group admins can create tags")
        if self.tags.name_taken(group_id, req.name):
            raise Conflict("tag name already exists in this group")
        with write_guard("failed to create animal tag"):
            tag = self.tags.create(group_id, req.name, req.category, req.color)
        log.info("animal_tag_created", tag_id=tag.id, group_id=group_id, name=tag.name)
        return tag

    def update_tag(
        self, caller: Caller | None, group_id: int, tag_id: int, req: AnimalTagRequest
    ) -> AnimalTag:
        self.access.require_group_admin(caller, group_id, "only group admins can update tags")
        if self.tags.get(tag_id, group_id) is None:
            raise NotFound("animal tag not found in this group")
        if self.tags.name_taken(group_id, req.name, exclude_id=tag_id):
            raise Conflict("tag name already exists in this group")
        with write_guard("failed to update animal tag"):
            tag = self.tags.update(tag_id, group_id, req.name, req.category, req.color)
        log.info("animal_tag_updated", tag_id=tag_id, group_id=group_id)
        return tag

    def delete_tag(self, caller: Caller | None, group_id: int, tag_id: int) -> None:
        self.access.require_group_admin(caller, group_id, "only group admins can delete tags")
        with write_guard("failed to delete animal tag"):
            deleted = self.tags.delete(tag_id, group_id)
        if not deleted:
            raise NotFound("animal tag not found in this group")
        log.info("animal_tag_deleted", tag_id=tag_id, group_id=group_id)

    def assign_tags(
        self, caller: Caller | None, group_id: int, animal_id: int, tag_ids: list[int]
    ) -> Animal:
        """Remplace les étiquettes de l'animal; retourne l'animal relu."""
        self.access.require_group_admin(caller, group_id, "only group admins can assign tags")
        if self.animals.get(animal_id, group_id=group_id) is None:
            raise NotFound("animal not found in this group")
        kept = self.tags.ids_in_group(list(dict.fromkeys(tag_ids)), group_id)
        with write_guard("failed to assign tags"):
            animal = self.animals.replace_tags(animal_id, kept)
        log.info("animal_tags_assigned", animal_id=animal_id, group_id=group_id, tag_count=len(kept))
        return animal
