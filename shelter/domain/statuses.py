"""
Moteur de transitions de statut des animaux.

Ce module calcule, pour un changement de statut demandé, l'ensemble des colonnes à écrire: le
statut lui-même, l'horodatage `last_status_change` et les dates dérivées (début de famille
d'accueil, début de quarantaine, date d'archivage).

Règles
------
- Statut identique au statut courant: aucune date dérivée ne change.
- `available`: efface les trois dates dérivées.
- `foster`: fixe `foster_start_date`, efface quarantaine et archivage.
- `bite_quarantine`: fixe `quarantine_start_date` (date fournie, sinon maintenant), efface
  famille d'accueil et archivage.
- `archived`: fixe `archived_date` et conserve les deux autres dates.
- Statut inconnu: écrit tel quel, sans effet de bord (sauf mode strict).

Le module n'importe ni le framework web ni l'ORM.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from shelter.domain.errors import BadRequest

STATUS_AVAILABLE = "available"
STATUS_FOSTER = "foster"
STATUS_BITE_QUARANTINE = "bite_quarantine"
STATUS_ARCHIVED = "archived"

KNOWN_STATUSES = frozenset(
    {STATUS_AVAILABLE, STATUS_FOSTER, STATUS_BITE_QUARANTINE, STATUS_ARCHIVED}
)
# Filtre par défaut des listes d'animaux d'un groupe
DEFAULT_VISIBLE_STATUSES = (STATUS_AVAILABLE, STATUS_BITE_QUARANTINE)

QUARANTINE_DAYS = 10
_SATURDAY = 5
_SUNDAY = 6

FieldChangeSet = dict[str, Any]


def utc_now() -> datetime:
    """Horodatage UTC naïf, format des colonnes `DateTime` de la base."""
    return datetime.now(UTC).replace(tzinfo=None)


def quarantine_end_date(start: datetime | None, days: int = QUARANTINE_DAYS) -> datetime | None:
    """Fin estimée de quarantaine: début + `days` jours calendaires, repoussée hors week-end."""
    if start is None:
        return None
    end = start + timedelta(days=days)
    while end.weekday() in (_SATURDAY, _SUNDAY):
        end += timedelta(days=1)
    return end


class StatusTransitionEngine:
    """Calcule les changements de colonnes induits par un changement de statut.

    Paramètres:
    - strict: si vrai, un statut hors `KNOWN_STATUSES` est refusé (`BadRequest`).
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def validate(self, status: str | None) -> None:
        """Refuse un statut inconnu en mode strict; ne fait rien sinon."""
        if self.strict and status and status not in KNOWN_STATUSES:
            raise BadRequest(f"invalid status: {status}")

    def compute_transition(
        self,
        current_status: str,
        requested_status: str | None,
        supplied_quarantine_start: datetime | None = None,
        now: datetime | None = None,
        override_after_transition: bool = True,
    ) -> FieldChangeSet:
        """Retourne les colonnes à écrire pour passer de `current_status` à `requested_status`.

        Paramètres:
        - current_status: statut actuellement persisté.
        - requested_status: statut demandé (None ou vide: pas de changement demandé).
        - supplied_quarantine_start: date de début de quarantaine fournie par l'appelant.
        - now: horodatage de référence (défaut: maintenant, UTC).
        - override_after_transition: si vrai (chemin administrateur), la date de quarantaine
          fournie s'applique dès que l'ancien ou le nouveau statut est `bite_quarantine`, y compris
          après une transition. Sinon (chemin membre), elle ne s'applique sans transition que si
          l'animal est déjà en quarantaine.

        Retour: dict colonne -> valeur (None signifie effacer la colonne).
        """
        self.validate(requested_status)
        now = now or utc_now()
        changes: FieldChangeSet = {}
        transitioned = bool(requested_status) and requested_status != current_status

        if transitioned:
            changes["status"] = requested_status
            changes["last_status_change"] = now
            changes.update(
                self._derived_dates(requested_status, supplied_quarantine_start, now)
            )

        if supplied_quarantine_start is not None:
            if override_after_transition:
                if STATUS_BITE_QUARANTINE in (requested_status, current_status):
                    changes["quarantine_start_date"] = supplied_quarantine_start
            elif not transitioned and current_status == STATUS_BITE_QUARANTINE:
                changes["quarantine_start_date"] = supplied_quarantine_start

        return changes

    def initial_fields(
        self,
        status: str,
        supplied_quarantine_start: datetime | None = None,
        now: datetime | None = None,
    ) -> FieldChangeSet:
        """Colonnes à renseigner à la création d'un animal avec le statut `status`.

        Seule la date correspondant au statut initial est renseignée; aucune date n'est effacée.
        """
        self.validate(status)
        now = now or utc_now()
        fields: FieldChangeSet = {
            "status": status,
            "arrival_date": now,
            "last_status_change": now,
        }
        derived = self._derived_dates(status, supplied_quarantine_start, now)
        fields.update({k: v for k, v in derived.items() if v is not None})
        return fields

    @staticmethod
    def _derived_dates(
        status: str, supplied_quarantine_start: datetime | None, now: datetime
    ) -> FieldChangeSet:
        if status == STATUS_AVAILABLE:
            return {
                "foster_start_date": None,
                "quarantine_start_date": None,
                "archived_date": None,
            }
        if status == STATUS_FOSTER:
            return {
                "foster_start_date": now,
                "quarantine_start_date": None,
                "archived_date": None,
            }
        if status == STATUS_BITE_QUARANTINE:
            return {
                "quarantine_start_date": supplied_quarantine_start or now,
                "foster_start_date": None,
                "archived_date": None,
            }
        if status == STATUS_ARCHIVED:
            return {"archived_date": now}
        return {}
