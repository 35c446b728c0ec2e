from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    user_id: int
    full_name: str
    email: str
    role: Role
    manager_id: Optional[int] = None
    delegated_manager_id: Optional[int] = None
    is_active: bool = True


@dataclass(frozen=True)
class ManagerChain:
    """A user's direct manager and the stand-in that manager configured, if any."""

    manager_id: Optional[int] = None
    delegated_manager_id: Optional[int] = None

    @property
    def effective_approver_id(self) -> Optional[int]:
        # Single hop: the delegate's own delegate is not followed.
        if self.manager_id is None:
            return None
        if self.delegated_manager_id is not None:
            return self.delegated_manager_id
        return self.manager_id
