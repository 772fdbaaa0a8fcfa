# ============================================================
# Module : shelter/infra/repo/tag_repo.py
# Objet  : Accès SQL aux étiquettes d'animaux, propres à chaque groupe.
# ============================================================

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from shelter.domain.entities import AnimalTag

from .models import AnimalTagORM, animal_animal_tags


def _tag(row: AnimalTagORM) -> AnimalTag:
    return AnimalTag(
        id=row.id, name=row.name, category=row.category, color=row.color, group_id=row.group_id
    )


class TagRepo:
    """CRUD des étiquettes d'un groupe."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _row(self, tag_id: int, group_id: int) -> AnimalTagORM | None:
        stmt = select(AnimalTagORM).where(
            AnimalTagORM.id == tag_id, AnimalTagORM.group_id == group_id
        )
        return self._session.execute(stmt).scalars().first()

    def list_for_group(self, group_id: int) -> list[AnimalTag]:
        """Étiquettes du groupe, triées par catégorie puis nom."""
        stmt = (
            select(AnimalTagORM)
            .where(AnimalTagORM.group_id == group_id)
            .order_by(AnimalTagORM.category, AnimalTagORM.name)
        )
        return [_tag(r) for r in self._session.execute(stmt).scalars().all()]

    def get(self, tag_id: int, group_id: int) -> AnimalTag | None:
        row = self._row(tag_id, group_id)
        return _tag(row) if row else None

    def name_taken(self, group_id: int, name: str, exclude_id: int | None = None) -> bool:
        """Vrai si le nom (insensible à la casse) est déjà utilisé dans le groupe."""
        stmt = select(AnimalTagORM.id).where(
            AnimalTagORM.group_id == group_id, func.lower(AnimalTagORM.name) == name.lower()
        )
        if exclude_id is not None:
            stmt = stmt.where(AnimalTagORM.id != exclude_id)
        return self._session.execute(stmt).first() is not None

    def ids_in_group(self, tag_ids: list[int], group_id: int) -> list[int]:
        """Sous-ensemble de `tag_ids` appartenant au groupe."""
        if not tag_ids:
            return []
        stmt = select(AnimalTagORM.id).where(
            AnimalTagORM.id.in_(tag_ids), AnimalTagORM.group_id == group_id
        )
        return list(self._session.execute(stmt).scalars().all())

    def create(self, group_id: int, name: str, category: str, color: str) -> AnimalTag:
        row = AnimalTagORM(group_id=group_id, name=name, category=category, color=color)
        self._session.add(row)
        self._session.flush()
        return _tag(row)

    def update(self, tag_id: int, group_id: int, name: str, category: str, color: str) -> AnimalTag | None:
        row = self._row(tag_id, group_id)
        if row is None:
            return None
        row.name, row.category, row.color = name, category, color
        self._session.flush()
        return _tag(row)

    def delete(self, tag_id: int, group_id: int) -> bool:
        """Supprime l'étiquette et ses associations aux animaux."""
        row = self._row(tag_id, group_id)
        if row is None:
            return False
        self._session.execute(
            delete(animal_animal_tags).where(animal_animal_tags.c.animal_tag_id == tag_id)
        )
        self._session.delete(row)
        self._session.flush()
        return True
