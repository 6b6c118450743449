"""Constants package for the attachments inspector."""

from .auth import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from .roles import ROLE_CAPABILITIES, Capability, RoleName, role_has_capability

__all__ = [
    # Role constants
    "RoleName",
    "Capability",
    "ROLE_CAPABILITIES",
    "role_has_capability",
    # Auth constants
    "SECRET_KEY",
    "ALGORITHM",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
]
