from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.services.admin_session import AdminSession, AdminSessionGate, get_session_gate

bearer_scheme = HTTPBearer(auto_error=False)


async def get_session_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
) -> str | None:
    """The session artifact: a bearer token, else the admin cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.admin_cookie_name)


async def require_admin_session(
    token: str | None = Depends(get_session_token),
    gate: AdminSessionGate = Depends(get_session_gate),
) -> AdminSession:
    return gate.authenticate(token)
