from datetime import datetime, timedelta, timezone
import jwt
from fastapi import Header, HTTPException, status
from .config import settings


CLIENT_TOKEN_ALGORITHM = "HS256"


def _unauthorized(detail: str = "Invalid API key") -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def issue_client_token(client_id: str) -> str:
    """Short-lived token a client can use as a bearer credential instead of the API key."""
    now = datetime.now(tz=timezone.utc)
    claims = {
        "sub": client_id,
        "iat": now,
        "exp": now + timedelta(seconds=settings.jwt_ttl_seconds),
    }
    if settings.jwt_audience:
        claims["aud"] = settings.jwt_audience
    if settings.jwt_issuer:
        claims["iss"] = settings.jwt_issuer
    return jwt.encode(claims, settings.jwt_secret, algorithm=CLIENT_TOKEN_ALGORITHM)


async def verify_api_key(authorization: str | None = Header(None), x_api_key: str | None = Header(None)) -> None:
    """Accept the API key (x-api-key or bearer) or a bearer token from issue_client_token."""
    if x_api_key is not None:
        if x_api_key != settings.api_key:
            raise _unauthorized()
        return

    scheme, _, credential = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not credential:
        raise _unauthorized()
    if credential == settings.api_key:
        return

    try:
        jwt.decode(
            credential,
            settings.jwt_secret,
            algorithms=[CLIENT_TOKEN_ALGORITHM],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"verify_aud": bool(settings.jwt_audience), "require": ["sub", "exp"]},
        )
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token") from None
