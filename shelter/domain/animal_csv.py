"""
Import/export CSV des animaux.

L'export produit une ligne par animal. L'import exige les colonnes `group_id` et `name`, collecte
les erreurs par ligne sans interrompre le traitement et crée les animaux valides avec les dates
initiales de leur statut.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import structlog

from shelter.domain.entities import Animal
from shelter.domain.errors import BadRequest, write_guard
from shelter.domain.statuses import STATUS_AVAILABLE, StatusTransitionEngine, utc_now

log = structlog.get_logger(__name__)

EXPORT_COLUMNS = [
    "id",
    "group_id",
    "name",
    "species",
    "breed",
    "age",
    "description",
    "status",
    "image_url",
]
REQUIRED_IMPORT_COLUMNS = ("group_id", "name")
_OPTIONAL_TEXT = ("species", "breed", "description", "image_url")


def export_animals_csv(animals: Iterable[Animal]) -> str:
    """Sérialise les animaux en CSV (en-tête inclus)."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(EXPORT_COLUMNS)
    for a in animals:
        writer.writerow(
            [a.id, a.group_id, a.name, a.species, a.breed, a.age, a.description, a.status, a.image_url]
        )
    return buf.getvalue()


@dataclass
class ImportReport:
    imported: int = 0
    errors: list[str] = field(default_factory=list)


class AnimalCsvImporter:
    """Crée des animaux à partir d'un CSV.

    Paramètres:
    - animals: dépôt d'animaux (méthode `create`).
    - groups: dépôt de groupes (méthode `exists`).
    - engine: moteur de transitions, pour les dates initiales du statut.
    - max_rows: nombre maximal de lignes de données acceptées.
    """

    def __init__(
        self,
        animals,
        groups,
        engine: StatusTransitionEngine | None = None,
        max_rows: int = 1000,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.animals = animals
        self.groups = groups
        self.engine = engine or StatusTransitionEngine()
        self.max_rows = max_rows
        self.clock = clock

    def run(self, text: str) -> ImportReport:
        reader = csv.reader(io.StringIO(text))
        header = next(reader, None)
        if not header:
            raise BadRequest("failed to read CSV header")
        index = {h.strip().lower(): i for i, h in enumerate(header)}
        for col in REQUIRED_IMPORT_COLUMNS:
            if col not in index:
                raise BadRequest(f"missing required column: {col}")

        rows: list[dict[str, Any]] = []
        report = ImportReport()
        known_groups: dict[int, bool] = {}
        # La ligne 1 est l'en-tête.
        for line_num, record in enumerate(reader, start=2):
            if not any(cell.strip() for cell in record):
                continue
            if len(rows) + len(report.errors) >= self.max_rows:
                raise BadRequest(f"too many rows (max {self.max_rows})")
            fields = self._parse_row(record, index, line_num, report, known_groups)
            if fields is not None:
                rows.append(fields)

        if not rows:
            raise BadRequest("no valid animals to import")
        with write_guard("failed to import animals", rows=len(rows)):
            for fields in rows:
                self.animals.create(fields)
        report.imported = len(rows)
        log.info("animals_imported", count=report.imported, warnings=len(report.errors))
        return report

    def _parse_row(
        self,
        record: list[str],
        index: dict[str, int],
        line_num: int,
        report: ImportReport,
        known_groups: dict[int, bool],
    ) -> dict[str, Any] | None:
        def cell(name: str) -> str:
            i = index.get(name)
            return record[i].strip() if i is not None and i < len(record) else ""

        raw_group = cell("group_id")
        try:
            group_id = int(raw_group)
        except ValueError:
            report.errors.append(f"Line {line_num}: invalid group_id '{raw_group}'")
            return None
        if group_id not in known_groups:
            known_groups[group_id] = self.groups.exists(group_id)
        if not known_groups[group_id]:
            report.errors.append(f"Line {line_num}: unknown group_id {group_id}")
            return None

        name = cell("name")
        if not name:
            report.errors.append(f"Line {line_num}: name is required")
            return None

        fields: dict[str, Any] = {"group_id": group_id, "name": name}
        for col in _OPTIONAL_TEXT:
            fields[col] = cell(col)
        age = cell("age")
        fields["age"] = int(age) if age.isdigit() else 0
        status = cell("status") or STATUS_AVAILABLE
        try:
            fields.update(self.engine.initial_fields(status, now=self.clock()))
        except BadRequest as err:
            report.errors.append(f"Line {line_num}: {err.message}")
            return None
        return fields
