"""Tests de l'import/export CSV des animaux."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from shelter.domain.animal_csv import EXPORT_COLUMNS, AnimalCsvImporter, export_animals_csv
from shelter.domain.entities import Animal
from shelter.domain.errors import BadRequest, InternalError
from shelter.infra.repo.accounts_repo import GroupRepo
from shelter.infra.repo.animal_repo import AnimalRepo

NOW = datetime(2024, 6, 3, 9, 0, 0)


def _importer(session, max_rows: int = 1000) -> tuple[AnimalCsvImporter, AnimalRepo, int]:
    group_id = GroupRepo(session).create("dogs")
    repo = AnimalRepo(session)
    return AnimalCsvImporter(repo, GroupRepo(session), max_rows=max_rows, clock=lambda: NOW), repo, group_id


def test_export_writes_header_and_rows() -> None:
    text = export_animals_csv(
        [Animal(id=1, group_id=2, name="Rex, the dog", species="dog", age=3, status="foster")]
    )
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == EXPORT_COLUMNS
    assert rows[1][:3] == ["1", "2", "Rex, the dog"]
    assert rows[1][EXPORT_COLUMNS.index("status")] == "foster"


def test_import_creates_valid_rows_and_reports_errors(session) -> None:
    importer, repo, gid = _importer(session)
    text = (
        "group_id,name,species,age,status\n"
        f"{gid},Rex,dog,4,foster\n"
        "abc,Bad,dog,1,\n"
        f"{gid},,cat,2,\n"
        "999,Ghost,cat,2,\n"
        f"{gid},Mia,cat,x,\n"
    )
    report = importer.run(text)
    assert report.imported == 2
    assert report.errors == [
        "Line 3: invalid group_id 'abc'",
        "Line 4: name is required",
        "Line 5: unknown group_id 999",
    ]
    animals = {a.name: a for a in repo.list_for_group(gid, None)}
    assert animals["Rex"].status == "foster"
    assert animals["Rex"].foster_start_date == NOW
    assert animals["Rex"].age == 4
    assert animals["Mia"].status == "available"
    assert animals["Mia"].age == 0
    assert animals["Mia"].arrival_date == NOW


def test_import_header_is_case_insensitive(session) -> None:
    importer, repo, gid = _importer(session)
    report = importer.run(f" Group_ID , NAME \n{gid},Rex\n")
    assert report.imported == 1


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "failed to read CSV header"),
        ("name,species\nRex,dog\n", "missing required column: group_id"),
        ("group_id,species\n1,dog\n", "missing required column: name"),
    ],
)
def test_import_rejects_bad_header(session, text: str, message: str) -> None:
    importer, _, _ = _importer(session)
    with pytest.raises(BadRequest) as exc:
        importer.run(text)
    assert exc.value.message == message


def test_import_without_valid_rows(session) -> None:
    importer, _, _ = _importer(session)
    with pytest.raises(BadRequest) as exc:
        importer.run("group_id,name\nabc,Rex\n")
    assert exc.value.message == "no valid animals to import"


def test_import_row_limit(session) -> None:
    importer, _, gid = _importer(session, max_rows=2)
    with pytest.raises(BadRequest):
        importer.run("group_id,name\n" + "".join(f"{gid},A{i}\n" for i in range(3)))


def test_import_write_failure_is_internal_error(session) -> None:
    importer, repo, gid = _importer(session)
    with patch.object(
        repo, "create", side_effect=OperationalError("INSERT INTO animals", {}, Exception("locked"))
    ):
        with pytest.raises(InternalError) as exc:
            importer.run(f"group_id,name\n{gid},Rex\n")
    assert exc.value.message == "failed to import animals"
