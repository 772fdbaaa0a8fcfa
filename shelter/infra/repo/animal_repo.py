# ============================================================
# Module : shelter/infra/repo/animal_repo.py
# Objet  : Accès SQL aux animaux (lecture, écriture, mise à jour groupée).
# Notes  : les lignes supprimées logiquement sont toujours exclues.
# ============================================================

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from shelter.domain.entities import Animal, AnimalTag
from shelter.domain.statuses import utc_now

from .models import AnimalORM, AnimalTagORM

_WRITABLE = frozenset(
    {
        "group_id",
        "name",
        "species",
        "breed",
        "age",
        "description",
        "image_url",
        "status",
        "arrival_date",
        "foster_start_date",
        "quarantine_start_date",
        "archived_date",
        "last_status_change",
        "return_count",
        "is_returned",
    }
)


def _to_domain(row: AnimalORM) -> Animal:
    return Animal(
        id=row.id,
        group_id=row.group_id,
        name=row.name,
        species=row.species or "",
        breed=row.breed or "",
        age=row.age or 0,
        description=row.description or "",
        image_url=row.image_url or "",
        status=row.status,
        arrival_date=row.arrival_date,
        foster_start_date=row.foster_start_date,
        quarantine_start_date=row.quarantine_start_date,
        archived_date=row.archived_date,
        last_status_change=row.last_status_change,
        return_count=row.return_count or 0,
        is_returned=bool(row.is_returned),
        created_at=row.created_at,
        updated_at=row.updated_at,
        tags=[
            AnimalTag(id=t.id, name=t.name, category=t.category, color=t.color, group_id=t.group_id)
            for t in row.tags
        ],
    )


class AnimalRepo:
    """CRUD des animaux et mise à jour groupée ensembliste."""

    def __init__(self, session: Session) -> None:
        """Construit le repo avec une session (SQLAlchemy)."""
        self._session = session

    def _live(self):
        return (
            select(AnimalORM)
            .where(AnimalORM.deleted_at.is_(None))
            .options(selectinload(AnimalORM.tags))
        )

    def _row(self, animal_id: int, group_id: int | None = None) -> AnimalORM | None:
        stmt = self._live().where(AnimalORM.id == animal_id)
        if group_id is not None:
            stmt = stmt.where(AnimalORM.group_id == group_id)
        return self._session.execute(stmt).scalars().first()

    def get(self, animal_id: int, group_id: int | None = None) -> Animal | None:
        """Retourne l'animal `animal_id` (restreint à `group_id` si fourni), ou None."""
        row = self._row(animal_id, group_id)
        return _to_domain(row) if row else None

    def list_for_group(
        self, group_id: int, statuses: Iterable[str] | None = None, name: str | None = None
    ) -> list[Animal]:
        """Animaux d'un groupe, filtrables par statuts et sous-chaîne du nom (insensible à la casse)."""
        stmt = self._live().where(AnimalORM.group_id == group_id)
        stmt = self._filter(stmt, statuses, name)
        rows = self._session.execute(stmt.order_by(AnimalORM.name)).scalars().all()
        return [_to_domain(r) for r in rows]

    def list_all(
        self,
        group_ids: Iterable[int] | None = None,
        statuses: Iterable[str] | None = None,
        name: str | None = None,
    ) -> list[Animal]:
        """Animaux de tous les groupes (ou de `group_ids`), triés par groupe puis nom."""
        stmt = self._live()
        if group_ids is not None:
            stmt = stmt.where(AnimalORM.group_id.in_(list(group_ids)))
        stmt = self._filter(stmt, statuses, name)
        rows = self._session.execute(stmt.order_by(AnimalORM.group_id, AnimalORM.name)).scalars()
        return [_to_domain(r) for r in rows.all()]

    def find_by_name(self, group_id: int, name: str) -> list[Animal]:
        """Animaux d'un groupe portant exactement ce nom (insensible à la casse), tous statuts."""
        stmt = self._live().where(
            AnimalORM.group_id == group_id, func.lower(AnimalORM.name) == name.lower()
        )
        return [_to_domain(r) for r in self._session.execute(stmt).scalars().all()]

    @staticmethod
    def _filter(stmt, statuses: Iterable[str] | None, name: str | None):
        if statuses is not None:
            stmt = stmt.where(AnimalORM.status.in_(list(statuses)))
        if name:
            stmt = stmt.where(func.lower(AnimalORM.name).like(f"%{name.lower()}%"))
        return stmt

    def create(self, fields: dict[str, Any]) -> Animal:
        """Insère un animal et le renvoie relu (identifiant et valeurs par défaut inclus)."""
        row = AnimalORM(**{k: v for k, v in fields.items() if k in _WRITABLE})
        self._session.add(row)
        self._session.flush()
        return self.get(row.id)

    def update_fields(self, animal_id: int, changes: dict[str, Any]) -> Animal | None:
        """Applique `changes` à un animal puis le relit."""
        row = self._row(animal_id)
        if row is None:
            return None
        for key, value in changes.items():
            if key not in _WRITABLE:
                raise KeyError(f"unknown_animal_field:{key}")
            setattr(row, key, value)
        self._session.flush()
        return _to_domain(row)

    def bulk_update(self, animal_ids: list[int], fields: dict[str, Any]) -> int:
        """Met à jour toutes les lignes ciblées en une seule instruction UPDATE.

        Retourne le nombre de lignes effectivement modifiées par la base.
        """
        values = {k: v for k, v in fields.items() if k in _WRITABLE}
        values["updated_at"] = utc_now()
        stmt = (
            update(AnimalORM)
            .where(AnimalORM.id.in_(animal_ids), AnimalORM.deleted_at.is_(None))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        self._session.expire_all()
        return result.rowcount

    def count_in_groups(self, animal_ids: list[int], group_ids: Iterable[int]) -> int:
        """Compte les animaux de `animal_ids` dont le groupe courant est dans `group_ids`."""
        group_ids = list(group_ids)
        if not animal_ids or not group_ids:
            return 0
        stmt = select(func.count(AnimalORM.id)).where(
            AnimalORM.id.in_(animal_ids),
            AnimalORM.group_id.in_(group_ids),
            AnimalORM.deleted_at.is_(None),
        )
        return int(self._session.execute(stmt).scalar_one())

    def soft_delete(self, animal_id: int, group_id: int | None = None) -> bool:
        """Marque l'animal comme supprimé; retourne False s'il est introuvable."""
        row = self._row(animal_id, group_id)
        if row is None:
            return False
        row.deleted_at = utc_now()
        self._session.flush()
        return True

    def replace_tags(self, animal_id: int, tag_ids: list[int]) -> Animal | None:
        """Remplace toutes les étiquettes de l'animal par `tag_ids` puis le relit."""
        row = self._row(animal_id)
        if row is None:
            return None
        tags = []
        if tag_ids:
            stmt = select(AnimalTagORM).where(AnimalTagORM.id.in_(tag_ids))
            tags = list(self._session.execute(stmt).scalars().all())
        row.tags = tags
        self._session.flush()
        self._session.expire(row, ["tags"])
        return self.get(animal_id)
