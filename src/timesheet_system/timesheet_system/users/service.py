from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import ManagerChain
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: UserRepository):
        self._users = users

    def get_manager_chain(self, user_id: int) -> ManagerChain:
        return self._users.get_manager_chain(int(user_id))

    def set_delegate(
        self,
        *,
        current_role: Role,
        acting_user_id: int,
        manager_id: int,
        delegate_id: Optional[int],
    ) -> None:
        """Hand a manager's approval authority to a stand-in (None clears it)."""

        if current_role != Role.ADMIN and int(acting_user_id) != int(manager_id):
            raise AuthorizationError("Only the manager or an administrator can change the delegate")

        manager = self._users.get_by_id(int(manager_id))
        if not manager:
            raise ValidationError("Manager does not exist")

        if delegate_id is not None:
            if int(delegate_id) == int(manager_id):
                raise ValidationError("A manager cannot delegate to themselves")
            delegate = self._users.get_by_id(int(delegate_id))
            if not delegate or not delegate.is_active:
                raise ValidationError("Delegate does not exist")
            if delegate.role == Role.USER:
                raise ValidationError("Delegate must be a manager or an administrator")

        if not self._users.set_delegate(manager_id=int(manager_id), delegate_id=delegate_id):
            raise ValidationError("Updating the delegate failed")
        logger.info("Manager %s delegate set to %s", manager_id, delegate_id)
