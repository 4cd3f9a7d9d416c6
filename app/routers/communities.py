# app/routers/communities.py
from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.locks import KeyedLocks
from app.database import get_session
from app.repositories.community_repo import CommunityRepository
from app.repositories.kv_repo import KVRepository
from app.repositories.user_repo import UserRepository
from app.schemas.community import (
    CommunityCreate,
    CommunityCreateResponse,
    CommunityJoin,
    CommunityJoinResponse,
    JoinCodeCreate,
    JoinCodeCreateResponse,
    MemberList,
    MyCommunityRead,
)
from app.schemas.user import AuthUser
from app.services.community_service import CommunityService

router = APIRouter(prefix="/communities", tags=["Communities"])

kv_repo = KVRepository()
service = CommunityService(
    CommunityRepository(kv_repo),
    UserRepository(kv_repo),
    KeyedLocks(),
)


@router.post("/create", response_model=CommunityCreateResponse)
def create_community(
    payload: CommunityCreate,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Create a community; the caller becomes its owner.

    Requires a provisioned authorization code.
    """
    community = service.create_community(session, current_user, payload)
    return CommunityCreateResponse(community=community)


@router.post("/join", response_model=CommunityJoinResponse)
def join_community(
    payload: CommunityJoin,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Redeem a join code; the caller becomes a resident.
    """
    community = service.join_community(session, current_user, payload)
    return CommunityJoinResponse(community=community)


@router.get(
    "/my-community",
    response_model=MyCommunityRead,
    response_model_exclude_unset=True,
)
def my_community(
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    The caller's community, role and member count.

    Returns {"community": null, "role": "none"} when the caller has none.
    """
    return service.get_my_community(session, current_user)


@router.post(
    "/{community_id}/generate-code",
    response_model=JoinCodeCreateResponse,
)
def generate_join_code(
    community_id: str,
    payload: JoinCodeCreate | None = Body(default=None),
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Mint a single-use join code (owner only).

    Body is optional: {"recipientName": str, "expiresInDays": int}.
    """
    return service.generate_join_code(
        session=session,
        caller=current_user,
        community_id=community_id,
        payload=payload or JoinCodeCreate(),
    )


@router.get("/{community_id}/members", response_model=MemberList)
def list_members(
    community_id: str,
    session: Session = Depends(get_session),
    current_user: AuthUser = Depends(require_auth),
):
    """
    Roster in join order (members of this community only).
    """
    members = service.list_members(session, current_user, community_id)
    return MemberList(members=members)
