"""
Entités du domaine métier.

Ce module définit les objets manipulés par le cœur métier: identité de l'appelant, adhésions aux
groupes, animaux (avec leurs valeurs dérivées) et requêtes de mutation validées à la frontière.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from shelter.domain.statuses import quarantine_end_date, utc_now


@dataclass(frozen=True)
class Caller:
    """Identité de l'appelant, transmise explicitement à chaque opération."""

    user_id: int
    is_admin: bool = False


@dataclass(frozen=True)
class Membership:
    """Adhésion d'un utilisateur à un groupe (droit d'administration du groupe inclus)."""

    group_id: int
    group_name: str = ""
    is_group_admin: bool = False


@dataclass
class UserAccount:
    """Compte utilisateur tel que lu pour l'authentification."""

    id: int
    username: str
    email: str
    password_hash: str
    is_admin: bool = False
    first_name: str = ""
    last_name: str = ""
    locked_until: datetime | None = None


@dataclass(frozen=True)
class Group:
    id: int
    name: str
    description: str = ""


@dataclass(frozen=True)
class GroupMember:
    """Membre d'un groupe, tel que listé pour l'administration."""

    user_id: int
    username: str
    email: str
    is_group_admin: bool = False


@dataclass(frozen=True)
class AnimalTag:
    id: int
    name: str
    category: str = ""
    color: str = ""
    group_id: int = 0


@dataclass
class Animal:
    """
    Animal hébergé par un groupe (objet domaine).

    Attributs principaux
    - status: statut libre (`available`, `foster`, `bite_quarantine`, `archived`, ...).
    - foster_start_date / quarantine_start_date / archived_date: dates dérivées du statut.
    - last_status_change: dernier changement effectif de statut.
    - return_count: nombre de retours au refuge après archivage.
    """

    id: int
    group_id: int
    name: str
    species: str = ""
    breed: str = ""
    age: int = 0
    description: str = ""
    image_url: str = ""
    status: str = "available"
    arrival_date: datetime | None = None
    foster_start_date: datetime | None = None
    quarantine_start_date: datetime | None = None
    archived_date: datetime | None = None
    last_status_change: datetime | None = None
    return_count: int = 0
    is_returned: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    tags: list[AnimalTag] = field(default_factory=list)

    @property
    def quarantine_end_date(self) -> datetime | None:
        return quarantine_end_date(self.quarantine_start_date)

    @property
    def length_of_stay_days(self) -> int:
        """Jours écoulés depuis l'arrivée (0 si inconnue)."""
        if self.arrival_date is None:
            return 0
        return (utc_now() - self.arrival_date).days

    @property
    def current_status_days(self) -> int:
        """Jours écoulés depuis le dernier changement de statut (0 si inconnu)."""
        if self.last_status_change is None:
            return 0
        return (utc_now() - self.last_status_change).days


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


class AnimalRequest(BaseModel):
    """Requête de création/modification d'un animal.

    Les champs vides (chaîne vide, 0, None) sont considérés comme non fournis par le chemin
    administrateur (mise à jour partielle).
    """

    name: str = ""
    species: str = ""
    breed: str = ""
    age: int = Field(default=0, ge=0)
    description: str = ""
    image_url: str = ""
    status: str = ""
    group_id: int = Field(default=0, ge=0)
    quarantine_start_date: datetime | None = None
    is_returned: bool | None = None

    @field_validator("quarantine_start_date", mode="before")
    @classmethod
    def _empty_date_is_null(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("quarantine_start_date")
    @classmethod
    def _to_naive_utc(cls, value: datetime | None) -> datetime | None:
        return _naive_utc(value)

    @field_validator("name", "species", "breed", "description", "image_url", "status")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class BulkMutationRequest(BaseModel):
    """Mutation groupée: une liste d'identifiants et un groupe et/ou un statut cible."""

    animal_ids: list[int]
    group_id: int | None = None
    status: str | None = None

    def unique_ids(self) -> list[int]:
        """Identifiants dédoublonnés, ordre de première apparition conservé."""
        return list(dict.fromkeys(self.animal_ids))

    def field_updates(self) -> dict[str, object]:
        """Colonnes brutes à écrire (statut/groupe), sans calcul des dates dérivées."""
        updates: dict[str, object] = {}
        if self.group_id is not None:
            updates["group_id"] = self.group_id
        if self.status is not None:
            updates["status"] = self.status
        return updates


class GroupRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: str = ""

    @field_validator("name", "description")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class AnimalTagRequest(BaseModel):
    """Création/modification d'une étiquette; la catégorie est fermée."""

    name: str = Field(min_length=1, max_length=50)
    category: Literal["behavior", "walker_status"]
    color: str = Field(min_length=1, max_length=20)


class TagAssignment(BaseModel):
    """Jeu complet d'étiquettes d'un animal (remplace l'existant; liste vide = aucune)."""

    tag_ids: list[int]
