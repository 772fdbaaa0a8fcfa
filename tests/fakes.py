"""
Fakes pour les tests unitaires du cœur métier.

Implémentations en mémoire des sources d'adhésions et du stockage des animaux, pour tester le
résolveur d'accès et le coordinateur groupé sans base de données.
"""

from __future__ import annotations

from sqlalchemy.exc import OperationalError

from shelter.domain.entities import Membership


class FakeMemberships:
    """Adhésions indexées par utilisateur."""

    def __init__(self, rows: dict[int, list[Membership]] | None = None) -> None:
        self.rows = rows or {}

    def list_for_user(self, user_id: int) -> list[Membership]:
        return list(self.rows.get(user_id, []))


class FakeAnimalStore:
    """Animaux réduits à `{id: {"group_id": .., "status": ..}}`; compte les écritures."""

    def __init__(self, animals: dict[int, dict[str, object]], fail: bool = False) -> None:
        self.animals = animals
        self.fail = fail
        self.writes: list[tuple[list[int], dict[str, object]]] = []

    def count_in_groups(self, animal_ids: list[int], group_ids: set[int]) -> int:
        return sum(
            1 for i in animal_ids if i in self.animals and self.animals[i]["group_id"] in group_ids
        )

    def bulk_update(self, animal_ids: list[int], fields: dict[str, object]) -> int:
        if self.fail:
            raise OperationalError("UPDATE animals", {}, Exception("database is locked"))
        self.writes.append((list(animal_ids), dict(fields)))
        count = 0
        for i in animal_ids:
            if i in self.animals:
                self.animals[i].update(fields)
                count += 1
        return count
