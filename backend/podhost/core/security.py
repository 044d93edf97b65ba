import secrets
from typing import Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

DEFAULT_USERNAME = "podhost"
REALM = "auth"

basic_auth = HTTPBasic(realm=REALM, auto_error=False)


def parse_credential(credential: str) -> Dict[str, str]:
    """Parse "user:password" (or a bare password for the default user) into a lookup table"""
    if not credential:
        return {}
    user, sep, password = credential.partition(":")
    if not sep:
        return {DEFAULT_USERNAME: credential}
    return {user: password}


def require_admin(
    request: Request,
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
) -> Optional[str]:
    """Enforce basic auth on the management API when a credential is configured"""
    allowed = request.app.state.credentials
    if not allowed:
        return None

    if credentials is not None:
        expected = allowed.get(credentials.username)
        if expected is not None and secrets.compare_digest(
            credentials.password.encode(), expected.encode()
        ):
            return credentials.username

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
    )
