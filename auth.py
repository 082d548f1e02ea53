import time
from typing import Optional

from fastapi import Header, HTTPException
from itsdangerous import BadSignature, URLSafeTimedSerializer

from config import get_settings


class InvalidSessionError(ValueError):
    pass


def _serializer() -> URLSafeTimedSerializer:
    settings = get_settings()
    return URLSafeTimedSerializer(settings.session_secret, salt="session-token")


def issue_session_token(user_id: str, max_age_hours: Optional[int] = None) -> str:
    if not user_id:
        raise ValueError("User id cannot be empty")
    hours = (
        get_settings().session_max_age_hours if max_age_hours is None else max_age_hours
    )
    timestamp = int(time.time())
    token_data = {"u": user_id, "ts": timestamp, "exp": timestamp + hours * 3600}
    return _serializer().dumps(token_data)


def verify_session_token(token: str) -> str:
    max_age = get_settings().session_max_age_hours * 3600
    try:
        data = _serializer().loads(token, max_age=max_age)
    except BadSignature as exc:
        raise InvalidSessionError("Invalid session token") from exc

    user_id = data.get("u") if isinstance(data, dict) else None
    if not user_id:
        raise InvalidSessionError("Session token has no user")
    if int(time.time()) > int(data.get("exp", 0)):
        raise InvalidSessionError("Session expired")
    return str(user_id)


def current_user_id(authorization: Optional[str] = Header(default=None)) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing session token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    try:
        return verify_session_token(token.strip())
    except InvalidSessionError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
