"""Shared API dependencies for authentication and external clients."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from huddle.core.security import InvalidSessionError, SessionClaims, decode_session_token
from huddle.db.session import get_db
from huddle.models import User
from huddle.services.identity import IdentityClient, get_identity_client
from huddle.services.locations import LocationClient, get_location_client
from huddle.services.storage import StorageClient, get_storage_client

# HTTP Bearer scheme for session tokens; missing credentials are reported as 401 below.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_session_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> SessionClaims:
    """Verify the bearer session token.

    Raises:
        HTTPException: 401 if the token is missing or invalid.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    try:
        return decode_session_token(credentials.credentials)
    except InvalidSessionError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err


ClaimsDep = Annotated[SessionClaims, Depends(get_session_claims)]


def get_current_user(claims: ClaimsDep, db: SessionDep) -> User:
    """Return the local profile of the authenticated user.

    Raises:
        HTTPException: 404 if the user has not completed the first onboarding write.
    """
    user = db.query(User).filter(User.external_id == claims.external_id).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found. Please complete onboarding.",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_identity_client_dep() -> IdentityClient:
    return get_identity_client()


def get_location_client_dep() -> LocationClient:
    return get_location_client()


def get_storage_client_dep() -> StorageClient:
    return get_storage_client()


IdentityClientDep = Annotated[IdentityClient, Depends(get_identity_client_dep)]
LocationClientDep = Annotated[LocationClient, Depends(get_location_client_dep)]
StorageClientDep = Annotated[StorageClient, Depends(get_storage_client_dep)]
