"""
Role Constants

Role names and the capabilities each role grants. Capabilities mirror the
host CMS ones the inspector checks against (only ``edit_posts`` today).
"""

from collections.abc import Iterable
from enum import Enum


class RoleName(str, Enum):
    """Enumeration of role names in the system."""

    USER = "user"
    EDITOR = "editor"
    MANAGER = "manager"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class Capability(str, Enum):
    """Capabilities checked by the inspector endpoints."""

    READ = "read"
    EDIT_POSTS = "edit_posts"


# "*" grants every capability
ROLE_CAPABILITIES: dict[str, list[str]] = {
    RoleName.USER.value: [Capability.READ.value],
    RoleName.EDITOR.value: [Capability.READ.value, Capability.EDIT_POSTS.value],
    RoleName.MANAGER.value: [Capability.READ.value, Capability.EDIT_POSTS.value],
    RoleName.ADMIN.value: ["*"],
    RoleName.SUPERADMIN.value: ["*"],
}


def role_has_capability(role: str, capability: str, extra: Iterable[str] | None = None) -> bool:
    """
    Check whether a role grants a capability.

    Args:
        role: Role name
        capability: Capability to check
        extra: Additional capabilities stored on the role record

    Returns:
        bool: True if the role (or its stored extras) grants the capability
    """
    granted = set(ROLE_CAPABILITIES.get(role, []))
    if extra:
        granted.update(extra)
    return "*" in granted or capability in granted
