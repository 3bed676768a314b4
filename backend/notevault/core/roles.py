# notevault/core/roles.py

import enum

from notevault.core.errors import ValidationError


class UserRole(str, enum.Enum):
    ADMIN = "admin"    # can upgrade the plan and invite users (own tenant only)
    MEMBER = "member"  # notes CRUD inside own tenant


def normalize_role(value) -> UserRole:
    """
    Canonical role from free-form input ("Admin", " MEMBER ", UserRole.ADMIN).
    Raises ValidationError for anything outside the two known roles.
    """
    if isinstance(value, UserRole):
        return value
    r = (value or "").strip().lower() if isinstance(value, str) else ""
    try:
        return UserRole(r)
    except ValueError:
        raise ValidationError(f"role must be one of: {', '.join(x.value for x in UserRole)}")
