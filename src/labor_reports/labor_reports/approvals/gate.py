from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from ..auth.model import Capability, SessionPrincipal
from ..auth.service import Authorizer
from ..common.datetime_utils import now_local
from ..core.enums import ApprovalState
from ..core.exceptions import AuthorizationError, PreconditionError
from .model import ApprovalSlot, ApprovalView

logger = logging.getLogger(__name__)

NameLookup = Callable[[str], Optional[str]]


class ApprovalGate:
    """Independent two-party sign-off shared by daily reports and permissions."""

    def __init__(self, authorizer: Authorizer):
        self._authorizer = authorizer

    def view(
        self,
        principal: SessionPrincipal,
        slot: ApprovalSlot,
        capability: Capability,
        *,
        name_of: NameLookup,
    ) -> ApprovalView:
        if slot.is_approved:
            label = name_of(slot.approved_by) or "Approved"
            tooltip = f"Approved on {slot.approved_at:%Y-%m-%d %H:%M}" if slot.approved_at else ""
            return ApprovalView(slot.role, ApprovalState.APPROVED, label, tooltip)

        if not slot.required:
            return ApprovalView(slot.role, ApprovalState.NOT_REQUIRED, "Not required")

        if self._authorizer.can_approve(principal, capability, slot):
            return ApprovalView(slot.role, ApprovalState.AWAITING_CALLER, "Approve")

        tooltip = ""
        if slot.designated_approver_id:
            tooltip = f"Responsible: {name_of(slot.designated_approver_id) or slot.designated_approver_id}"
        return ApprovalView(slot.role, ApprovalState.PENDING, "Pending", tooltip)

    def approve(
        self,
        principal: SessionPrincipal,
        slot: ApprovalSlot,
        capability: Capability,
        *,
        now: datetime | None = None,
    ) -> ApprovalSlot:
        """Return the slot with approver and timestamp recorded. One-way."""

        self._authorizer.require(principal, capability)
        if not slot.required:
            raise PreconditionError("This approval is not required for the record")
        if slot.is_approved:
            raise PreconditionError("This approval was already recorded")
        if slot.designated_approver_id and not principal.is_identified_by(slot.designated_approver_id):
            raise AuthorizationError("Only the designated approver can approve this record")

        approved = replace(slot, approved_by=principal.employee_id or principal.user_id, approved_at=now or now_local())
        logger.info("Approval %s recorded by %s", slot.role.value, approved.approved_by)
        return approved
