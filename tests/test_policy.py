import pytest

from app.core.errors import AccessDenied
from app.models.board import Board, BoardMember
from app.services.board_policy import (
    Action,
    ADMIN_ACTIONS,
    MEMBER_ACTIONS,
    OWNER_ACTIONS,
    authorize,
    can,
    permitted_actions,
    resolve_access,
)


@pytest.fixture
def board():
    # objets transients, pas de DB nécessaire
    return Board(
        id="b1",
        owner_id="owner",
        title="Policy",
        members=[
            BoardMember(user_id="owner", role="admin"),
            BoardMember(user_id="admin", role="admin"),
            BoardMember(user_id="member", role="member"),
        ],
    )


def test_resolve_access(board):
    assert resolve_access(board, "owner").is_owner
    access = resolve_access(board, "admin")
    assert (access.is_owner, access.is_admin, access.is_member) == (False, True, True)
    access = resolve_access(board, "member")
    assert (access.is_owner, access.is_admin, access.is_member) == (False, False, True)
    access = resolve_access(board, "stranger")
    assert (access.is_owner, access.is_admin, access.is_member) == (False, False, False)


def test_owner_outside_roster_keeps_full_rights(board):
    board.members = [m for m in board.members if m.user_id != "owner"]
    assert permitted_actions(board, "owner") == MEMBER_ACTIONS | ADMIN_ACTIONS | OWNER_ACTIONS


def test_member_creates_but_does_not_delete(board):
    allowed = permitted_actions(board, "member")
    assert allowed == MEMBER_ACTIONS
    assert Action.UPDATE_TASK in allowed
    assert Action.DELETE_TASK not in allowed
    assert Action.DELETE_COLUMN not in allowed


def test_admin_cannot_touch_board_level(board):
    allowed = permitted_actions(board, "admin")
    assert allowed == MEMBER_ACTIONS | ADMIN_ACTIONS
    for action in (Action.UPDATE_BOARD, Action.DELETE_BOARD, Action.REMOVE_MEMBER, Action.UPDATE_MEMBER_ROLE):
        assert not can(board, "admin", action)


def test_stranger_has_nothing(board):
    assert permitted_actions(board, "stranger") == frozenset()


def test_authorize_raises_generic_message(board):
    authorize(board, "member", Action.ADD_TASK)
    with pytest.raises(AccessDenied) as exc:
        authorize(board, "member", Action.DELETE_TASK)
    assert exc.value.message == "Access denied"
