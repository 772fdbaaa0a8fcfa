# Schémas Pydantic exposés par l'API (requêtes et réponses).

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from shelter.domain.entities import Animal


class LoginPayload(BaseModel):
    """Payload pour la connexion: nom d'utilisateur ou email, et mot de passe."""

    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MembershipOut(BaseModel):
    group_id: int
    group_name: str
    is_group_admin: bool


class MeResponse(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    is_admin: bool
    groups: list[MembershipOut]


class TagOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    group_id: int
    name: str
    category: str
    color: str


class GroupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str


class GroupMemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    username: str
    email: str
    is_group_admin: bool


class AnimalOut(BaseModel):
    """Représentation d'un animal, valeurs dérivées incluses.

    Champs dérivés (lecture seule):
    - quarantine_end_date: début de quarantaine + 10 jours, hors week-end.
    - length_of_stay_days: jours depuis l'arrivée.
    - current_status_days: jours depuis le dernier changement de statut.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    group_id: int
    name: str
    species: str
    breed: str
    age: int
    description: str
    image_url: str
    status: str
    arrival_date: datetime | None
    foster_start_date: datetime | None
    quarantine_start_date: datetime | None
    quarantine_end_date: datetime | None
    archived_date: datetime | None
    last_status_change: datetime | None
    return_count: int
    is_returned: bool
    length_of_stay_days: int
    current_status_days: int
    created_at: datetime | None
    updated_at: datetime | None
    tags: list[TagOut]

    @classmethod
    def from_domain(cls, animal: Animal) -> "AnimalOut":
        return cls.model_validate(animal)


class DuplicateNamesResponse(BaseModel):
    name: str
    count: int
    animals: list[AnimalOut]
    has_duplicates: bool


class BulkUpdateResponse(BaseModel):
    message: str
    count: int


class ImportResponse(BaseModel):
    message: str
    count: int
    warnings: list[str] = []
