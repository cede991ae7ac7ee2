# identity records held by the session store

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Literal, Mapping, Optional, TypedDict

AuthProvider = Literal["local", "google"]

# api field name -> User attribute
_API_ALIASES = {
    "_id": "id",
    "authProvider": "auth_provider",
    "rememberMe": "remember_me",
}


@dataclass(frozen=True)
class User:
    id: str
    username: str = ""
    email: str = ""
    mobile: str = ""
    image: str = ""  # url, or a data: uri for uploaded bytes
    auth_provider: AuthProvider = "local"
    remember_me: Optional[bool] = None

    @classmethod
    def field_names(cls) -> frozenset:
        return frozenset(f.name for f in fields(cls))

    @classmethod
    def changes_from_api(cls, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Keep only the keys a User knows about, renamed to attribute names."""
        known = cls.field_names()
        changes = {}
        for key, value in data.items():
            key = _API_ALIASES.get(key, key)
            if key in known:
                changes[key] = "" if value is None and key != "remember_me" else value
        if "id" in changes:
            changes["id"] = str(changes["id"])
        return changes

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> User:
        changes = cls.changes_from_api(data)
        if "id" not in changes:
            raise ValueError("user payload has no id")
        return cls(**changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class UserUpdate(TypedDict, total=False):
    """Fields accepted by SessionStore.update_user."""

    username: str
    email: str
    mobile: str
    image: str
    auth_provider: AuthProvider
    remember_me: Optional[bool]


@dataclass(frozen=True)
class Session:
    token: Optional[str] = None
    user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def remember_me(self) -> bool:
        if self.user is None or self.user.remember_me is None:
            return True
        return self.user.remember_me

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "user": self.user.to_dict() if self.user else None,
        }

    @classmethod
    def from_snapshot(cls, data: Mapping[str, Any]) -> Session:
        token = data.get("token")
        user = data.get("user")
        if not token:
            return cls()
        if user and not isinstance(user, Mapping):
            raise ValueError(f"snapshot user is a {type(user).__name__}, not a mapping")
        return cls(token=str(token), user=User.from_api(user) if user else None)


ANONYMOUS = Session()
