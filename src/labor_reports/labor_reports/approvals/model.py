from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ApprovalRole, ApprovalState


@dataclass(frozen=True)
class ApprovalSlot:
    """One role's sign-off on a record (daily report or permission)."""

    role: ApprovalRole
    required: bool
    designated_approver_id: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None

    @property
    def is_approved(self) -> bool:
        return bool(self.approved_by)


@dataclass(frozen=True)
class ApprovalView:
    """Read-model for rendering a slot to a given caller."""

    role: ApprovalRole
    state: ApprovalState
    label: str
    tooltip: str = ""

    @property
    def can_approve(self) -> bool:
        return self.state == ApprovalState.AWAITING_CALLER

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "state": self.state.value,
            "label": self.label,
            "tooltip": self.tooltip,
            "can_approve": self.can_approve,
        }
