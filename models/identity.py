# models/identity.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple


def _first_value(value: Any) -> Optional[str]:
    """LDAP 属性可能是多值列表，只取第一个值。"""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return _first_value(value[0]) if value else None
    return str(value)


@dataclass(frozen=True)
class UserIdentity:
    """Identity data supplied by the host for the user changing their password."""

    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    attributes: Mapping[str, Any] = field(default_factory=dict)
    locale: Optional[str] = None

    def get_first_attribute(self, name: str) -> Optional[str]:
        return _first_value(self.attributes.get(name))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Optional["UserIdentity"]:
        if not data:
            return None
        attributes = data.get("attributes")
        if attributes is None:
            attributes = {}
        if not isinstance(attributes, Mapping):
            raise ValueError("attributes must be an object")
        return cls(
            username=_first_value(data.get("username")),
            first_name=_first_value(data.get("first_name") or data.get("firstName")),
            last_name=_first_value(data.get("last_name") or data.get("lastName")),
            attributes=dict(attributes),
            locale=_first_value(data.get("locale")),
        )


@dataclass(frozen=True)
class ValidationRequest:
    username: Optional[str]
    # 优先级：cn > displayName > firstName + lastName
    full_name_sources: Tuple[Optional[str], ...]
    password: Optional[str]
    locale: Optional[str] = None

    @classmethod
    def from_identity(cls, identity: Optional[UserIdentity], password: Optional[str]) -> "ValidationRequest":
        if identity is None:
            return cls(username=None, full_name_sources=(), password=password)
        return cls(
            username=identity.username,
            full_name_sources=(
                identity.get_first_attribute("cn"),
                identity.get_first_attribute("displayName"),
                identity.first_name,
                identity.last_name,
            ),
            password=password,
            locale=identity.locale,
        )

    @property
    def has_user(self) -> bool:
        return bool(self.username)
