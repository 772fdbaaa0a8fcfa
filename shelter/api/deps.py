"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Ouvrir une session SQL par requête (commit en sortie, rollback sur exception).
- Construire les services métier à partir de la session et du conteneur.
- Résoudre l'identité de l'appelant à partir du jeton `Authorization: Bearer`.
"""

from collections.abc import Iterator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from shelter.api.errors import forbidden, unauthorized
from shelter.app.metrics import record_transition
from shelter.core.container import container
from shelter.domain.access import AccessScopeResolver
from shelter.domain.animal_csv import AnimalCsvImporter
from shelter.domain.animals import AnimalService
from shelter.domain.auth import decode_token
from shelter.domain.bulk import BulkMutationCoordinator
from shelter.domain.entities import Caller
from shelter.domain.groups import GroupService
from shelter.domain.tags import AnimalTagService
from shelter.infra.repo.accounts_repo import GroupRepo, MembershipRepo, UserRepo
from shelter.infra.repo.animal_repo import AnimalRepo
from shelter.infra.repo.db import session_scope
from shelter.infra.repo.tag_repo import TagRepo


def get_session() -> Iterator[Session]:
    """Session SQL à la portée de la requête."""
    with session_scope(container.session_factory) as session:
        yield session


def get_current_caller(
    authorization: str = Header(None), session: Session = Depends(get_session)
) -> Caller:
    """Extrait et valide l'appelant courant à partir du token d'autorisation."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise unauthorized("missing_token")
    token = authorization.split(" ", 1)[1]
    data = decode_token(token, container.settings.JWT_SECRET, container.settings.JWT_ALG)
    caller = data.to_caller() if data else None
    if caller is None:
        raise unauthorized("invalid_token")
    user = UserRepo(session).get(caller.user_id)
    if user is None:
        raise unauthorized("user_not_found")
    # Les droits courants en base priment sur ceux figés dans le jeton.
    return Caller(user_id=user.id, is_admin=user.is_admin)


def require_site_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    if not caller.is_admin:
        raise forbidden("admin privileges required")
    return caller


def get_access(session: Session = Depends(get_session)) -> AccessScopeResolver:
    return AccessScopeResolver(MembershipRepo(session))


def get_animal_service(
    session: Session = Depends(get_session),
    access: AccessScopeResolver = Depends(get_access),
) -> AnimalService:
    return AnimalService(
        AnimalRepo(session),
        GroupRepo(session),
        access,
        container.status_engine,
        on_transition=record_transition,
    )


def get_bulk_coordinator(
    session: Session = Depends(get_session),
    access: AccessScopeResolver = Depends(get_access),
) -> BulkMutationCoordinator:
    return BulkMutationCoordinator(AnimalRepo(session), access, container.status_engine)


def get_csv_importer(session: Session = Depends(get_session)) -> AnimalCsvImporter:
    return AnimalCsvImporter(
        AnimalRepo(session),
        GroupRepo(session),
        container.status_engine,
        max_rows=container.settings.CSV_IMPORT_MAX_ROWS,
    )


def get_group_service(
    session: Session = Depends(get_session),
    access: AccessScopeResolver = Depends(get_access),
) -> GroupService:
    return GroupService(GroupRepo(session), MembershipRepo(session), UserRepo(session), access)


def get_tag_service(
    session: Session = Depends(get_session),
    access: AccessScopeResolver = Depends(get_access),
) -> AnimalTagService:
    return AnimalTagService(TagRepo(session), AnimalRepo(session), access)
