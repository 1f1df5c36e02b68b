"""Authorization policy for boards.

Pure functions over ``(board, actor_id, action)``. Any member may create and
edit board content, but deleting columns or tasks and inviting people takes an
admin, and board-level changes (metadata, deletion, roster edits) are reserved
to the owner.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet

from app.core.errors import AccessDenied

logger = logging.getLogger(__name__)


class Action(str, Enum):
    READ_BOARD = "read_board"
    UPDATE_BOARD = "update_board"
    DELETE_BOARD = "delete_board"
    ADD_COLUMN = "add_column"
    UPDATE_COLUMN = "update_column"
    DELETE_COLUMN = "delete_column"
    ADD_TASK = "add_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    ADD_MEMBER = "add_member"
    UPDATE_MEMBER_ROLE = "update_member_role"
    REMOVE_MEMBER = "remove_member"


OWNER_ACTIONS = frozenset({
    Action.UPDATE_BOARD,
    Action.DELETE_BOARD,
    Action.UPDATE_MEMBER_ROLE,
    Action.REMOVE_MEMBER,
})
ADMIN_ACTIONS = frozenset({
    Action.DELETE_COLUMN,
    Action.DELETE_TASK,
    Action.ADD_MEMBER,
})
MEMBER_ACTIONS = frozenset({
    Action.READ_BOARD,
    Action.ADD_COLUMN,
    Action.UPDATE_COLUMN,
    Action.ADD_TASK,
    Action.UPDATE_TASK,
})


@dataclass(frozen=True)
class BoardAccess:
    is_owner: bool
    is_admin: bool
    is_member: bool


def resolve_access(board, actor_id: str) -> BoardAccess:
    is_owner = board.owner_id == actor_id
    membership = board.find_member(actor_id)
    return BoardAccess(
        is_owner=is_owner,
        is_admin=is_owner or (membership is not None and membership.role == "admin"),
        is_member=is_owner or membership is not None,
    )


def permitted_actions(board, actor_id: str) -> FrozenSet[Action]:
    access = resolve_access(board, actor_id)
    allowed = set()
    if access.is_member:
        allowed |= MEMBER_ACTIONS
    if access.is_admin:
        allowed |= ADMIN_ACTIONS
    if access.is_owner:
        allowed |= OWNER_ACTIONS
    return frozenset(allowed)


def can(board, actor_id: str, action: Action) -> bool:
    return action in permitted_actions(board, actor_id)


def authorize(board, actor_id: str, action: Action) -> None:
    if not can(board, actor_id, action):
        logger.warning(f"Access denied: user={actor_id} action={action.value} board={board.id}")
        raise AccessDenied("Access denied")
