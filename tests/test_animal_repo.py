"""Tests du dépôt SQL des animaux (mise à jour groupée, portée, suppression logique)."""

from __future__ import annotations

from sqlalchemy import event

from shelter.infra.repo.accounts_repo import GroupRepo
from shelter.infra.repo.animal_repo import AnimalRepo
from shelter.infra.repo.models import AnimalORM, AnimalTagORM


def _setup(session):
    groups = GroupRepo(session)
    g1, g2 = groups.create("dogs"), groups.create("cats")
    repo = AnimalRepo(session)
    a = repo.create({"group_id": g1, "name": "A"})
    b = repo.create({"group_id": g1, "name": "B"})
    c = repo.create({"group_id": g2, "name": "C"})
    return repo, g1, g2, a, b, c


def test_bulk_update_is_a_single_statement(session) -> None:
    repo, g1, g2, a, b, c = _setup(session)
    statements: list[str] = []

    def _capture(conn, cursor, statement, params, context, executemany):
        statements.append(statement)

    engine = session.get_bind()
    event.listen(engine, "before_cursor_execute", _capture)
    try:
        count = repo.bulk_update([a.id, b.id, c.id], {"status": "archived"})
    finally:
        event.remove(engine, "before_cursor_execute", _capture)

    assert count == 3
    updates = [s for s in statements if s.lstrip().upper().startswith("UPDATE")]
    assert len(updates) == 1
    assert all(repo.get(i).status == "archived" for i in (a.id, b.id, c.id))
    # Chemin groupé: aucune date dérivée n'est calculée.
    assert repo.get(a.id).archived_date is None


def test_bulk_update_refreshes_loaded_rows(session) -> None:
    repo, g1, g2, a, b, c = _setup(session)
    repo.get(a.id)
    repo.bulk_update([a.id], {"group_id": g2})
    assert repo.get(a.id).group_id == g2


def test_count_in_groups(session) -> None:
    repo, g1, g2, a, b, c = _setup(session)
    assert repo.count_in_groups([a.id, b.id, c.id], {g1}) == 2
    assert repo.count_in_groups([a.id, b.id, c.id], {g1, g2}) == 3
    assert repo.count_in_groups([a.id], set()) == 0
    assert repo.count_in_groups([9999], {g1}) == 0


def test_soft_deleted_animals_are_hidden(session) -> None:
    repo, g1, g2, a, b, c = _setup(session)
    assert repo.soft_delete(a.id, group_id=g1)
    assert repo.get(a.id) is None
    assert [x.name for x in repo.list_for_group(g1)] == ["B"]
    assert repo.count_in_groups([a.id], {g1}) == 0
    assert repo.bulk_update([a.id], {"status": "foster"}) == 0
    assert session.get(AnimalORM, a.id).deleted_at is not None


def test_soft_delete_respects_group(session) -> None:
    repo, g1, g2, a, b, c = _setup(session)
    assert not repo.soft_delete(c.id, group_id=g1)
    assert repo.get(c.id) is not None


def test_tags_are_loaded(session) -> None:
    repo, g1, g2, a, b, c = _setup(session)
    row = session.get(AnimalORM, a.id)
    row.tags.append(AnimalTagORM(group_id=g1, name="friendly", category="behavior", color="#0a0"))
    session.flush()
    tags = repo.get(a.id).tags
    assert [(t.name, t.category) for t in tags] == [("friendly", "behavior")]
