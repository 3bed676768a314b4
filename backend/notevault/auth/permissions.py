from __future__ import annotations

import enum
from typing import FrozenSet, Mapping

from notevault.auth.identity import IdentityContext
from notevault.core.errors import Forbidden
from notevault.core.roles import UserRole


class Action(str, enum.Enum):
    # notes.*
    NOTES_LIST = "notes:list"
    NOTES_READ = "notes:read"
    NOTES_CREATE = "notes:create"
    NOTES_UPDATE = "notes:update"
    NOTES_DELETE = "notes:delete"

    # tenant.* (admin only)
    TENANT_UPGRADE = "tenant:upgrade"
    TENANT_INVITE = "tenant:invite"


NOTE_ACTIONS: FrozenSet[Action] = frozenset(
    {
        Action.NOTES_LIST,
        Action.NOTES_READ,
        Action.NOTES_CREATE,
        Action.NOTES_UPDATE,
        Action.NOTES_DELETE,
    }
)

ADMIN_ACTIONS: FrozenSet[Action] = frozenset({Action.TENANT_UPGRADE, Action.TENANT_INVITE})

ROLE_GRANTS: Mapping[UserRole, FrozenSet[Action]] = {
    UserRole.ADMIN: NOTE_ACTIONS | ADMIN_ACTIONS,
    UserRole.MEMBER: NOTE_ACTIONS,
}


_ROLE_DENIED_MESSAGES: Mapping[Action, str] = {
    Action.TENANT_UPGRADE: "Only admins can upgrade tenant plan",
    Action.TENANT_INVITE: "Only admins can invite users",
}


def is_permitted(*, role: UserRole, action: Action) -> bool:
    return action in ROLE_GRANTS.get(role, frozenset())


def authorize(identity: IdentityContext, action: Action, target_tenant_slug: str) -> None:
    """
    Decide whether `identity` may perform `action` on `target_tenant_slug`.

    Every action is confined to the caller's own tenant: nothing in the system
    grants cross-tenant trust, admins included. Admin-only actions additionally
    require the admin role. Raises Forbidden, returns None when allowed.
    """
    permitted = is_permitted(role=identity.role, action=action)

    if identity.tenant_slug != target_tenant_slug:
        if action in ADMIN_ACTIONS and permitted:
            raise Forbidden("Admins can only manage their own tenant")
        if action not in ADMIN_ACTIONS:
            raise Forbidden("Tenant access denied")

    if not permitted:
        raise Forbidden(_ROLE_DENIED_MESSAGES.get(action))
