from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..approvals.model import ApprovalSlot
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import SECTION_GRANTS, Capability, SessionPrincipal

logger = logging.getLogger(__name__)


def parse_capabilities(keys: Iterable[str]) -> frozenset:
    caps: set[Capability] = set()
    for key in keys or ():
        key = (key or "").strip()
        if key in SECTION_GRANTS:
            caps.add(SECTION_GRANTS[key])
            continue
        try:
            caps.add(Capability(key))
        except ValueError:
            logger.debug("Ignoring unknown permission key %r", key)
    return frozenset(caps)


def principal_from_claims(
    *,
    user_id: Optional[str],
    email: Optional[str],
    permissions: Iterable[str] = (),
    employee_id: Optional[str] = None,
    is_superuser: bool = False,
    display_name: str = "",
) -> SessionPrincipal:
    """Build a principal from the identity provider's flat permission list."""

    if not user_id or not email:
        raise AuthenticationError("Please sign in to continue")
    return SessionPrincipal(
        user_id=str(user_id),
        email=str(email).lower(),
        capabilities=parse_capabilities(permissions),
        employee_id=str(employee_id) if employee_id else None,
        is_superuser=bool(is_superuser),
        display_name=display_name or str(email),
    )


class Authorizer:
    """Single authorization interface for every component."""

    def can(self, principal: SessionPrincipal, capability: Capability) -> bool:
        return principal.is_superuser or capability in principal.capabilities

    def require(self, principal: SessionPrincipal, capability: Capability) -> None:
        if not self.can(principal, capability):
            logger.warning("User %s denied %s", principal.user_id, capability.value)
            raise AuthorizationError("You do not have permission for this action")

    def can_approve(self, principal: SessionPrincipal, capability: Capability, slot: ApprovalSlot) -> bool:
        if not slot.required or slot.is_approved:
            return False
        if not self.can(principal, capability):
            return False
        return not slot.designated_approver_id or principal.is_identified_by(slot.designated_approver_id)
