from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum

from jose import JWTError, jwt

from slotkeeper.core.config import Settings, settings


class Role(str, Enum):
    SERVICE_PROVIDER = "SERVICE_PROVIDER"
    USER = "USER"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as asserted by the identity provider."""

    id: int
    role: Role

    @property
    def is_provider(self) -> bool:
        return self.role is Role.SERVICE_PROVIDER


def create_access_token(subject: str | int, role: Role, app_settings: Settings | None = None) -> str:
    cfg = app_settings or settings
    expire = datetime.now(UTC) + timedelta(minutes=cfg.access_token_expire_minutes)
    to_encode = {"sub": str(subject), "role": role.value, "exp": expire, "type": "access"}
    return jwt.encode(to_encode, cfg.secret_key, algorithm=cfg.algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str) -> Principal | None:
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        return None
    if payload.get("type") != "access":
        return None
    sub = payload.get("sub")
    try:
        return Principal(id=int(sub), role=Role(payload.get("role")))
    except (TypeError, ValueError):
        return None
