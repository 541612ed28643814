from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.auth_service import AuthService
from ...core.dependencies import get_auth_service
from ...domain.errors import UnauthorizedError
from ...domain.models import TokenClaims

_bearer_scheme = HTTPBearer(auto_error=False)


def require_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenClaims:
    """Verify the bearer token and expose its claims as ``request.state.user``."""
    # Only the exact "Bearer " prefix is accepted; HTTPBearer alone ignores case.
    if credentials is None or credentials.scheme != "Bearer" or not credentials.credentials:
        raise UnauthorizedError("No authentication token, access denied")
    claims = auth_service.authorize(credentials.credentials)
    request.state.user = claims
    return claims
