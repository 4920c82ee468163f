"""HTTP Basic guard for the mutating routes."""

import logging
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .settings import settings

log = logging.getLogger(__name__)

security = HTTPBasic(realm="pokemon")


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def require_basic_auth(
    credentials: HTTPBasicCredentials = Depends(security),
) -> str:
    """Dependency that rejects the request unless the basic-auth pair matches.

    Missing or malformed ``Authorization`` headers are rejected by `HTTPBasic`
    itself; wrong credentials are rejected here. Both answer 401 with a
    ``WWW-Authenticate: Basic`` challenge.

    Returns:
        The authenticated username.
    """
    user_ok = _matches(credentials.username, settings.AUTH_USERNAME)
    password_ok = _matches(credentials.password, settings.AUTH_PASSWORD)
    if not (user_ok and password_ok):
        log.info("auth.rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": 'Basic realm="pokemon"'},
        )
    return credentials.username
