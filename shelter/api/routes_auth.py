"""
Routes d'authentification pour l'API.

Ce module fournit les endpoints de connexion et de consultation du profil courant (groupes et
rôles inclus).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shelter.api.deps import get_current_caller, get_session
from shelter.api.errors import unauthorized
from shelter.api.schemas import LoginPayload, MeResponse, MembershipOut, TokenResponse
from shelter.core.container import container
from shelter.domain.auth import create_access_token, verify_password
from shelter.domain.entities import Caller
from shelter.domain.statuses import utc_now
from shelter.infra.repo.accounts_repo import MembershipRepo, UserRepo

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(p: LoginPayload, session: Session = Depends(get_session)):
    """Authentifie un utilisateur et retourne un token d'accès."""
    user = UserRepo(session).get_by_login(p.username.strip())
    if not user or not verify_password(p.password, user.password_hash):
        raise unauthorized("invalid_credentials")
    if user.locked_until is not None and user.locked_until > utc_now():
        raise unauthorized("account_locked")
    token = create_access_token(
        secret=container.settings.JWT_SECRET,
        alg=container.settings.JWT_ALG,
        expires_min=container.settings.JWT_EXPIRES_MIN,
        payload={"sub": str(user.id), "is_admin": user.is_admin},
    )
    return TokenResponse(access_token=token)


@router.get("/me", response_model=MeResponse)
def me(caller: Caller = Depends(get_current_caller), session: Session = Depends(get_session)):
    user = UserRepo(session).get(caller.user_id)
    if user is None:
        raise unauthorized("user_not_found")
    groups = [
        MembershipOut(group_id=m.group_id, group_name=m.group_name, is_group_admin=m.is_group_admin)
        for m in MembershipRepo(session).list_for_user(user.id)
    ]
    return MeResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        is_admin=user.is_admin,
        groups=groups,
    )
