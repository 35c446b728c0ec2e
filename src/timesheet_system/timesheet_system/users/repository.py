from __future__ import annotations

from typing import Optional, Protocol

from .model import ManagerChain, User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_manager_chain(self, user_id: int) -> ManagerChain:
        """Direct manager of the user plus that manager's delegate (one hop)."""

        raise NotImplementedError

    def set_delegate(self, *, manager_id: int, delegate_id: Optional[int]) -> bool:
        raise NotImplementedError
