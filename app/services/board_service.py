"""Board service

Every operation follows the same path: load the board, check the actor's
rights, validate the input, mutate the aggregate in memory, then commit once.
Validation always happens before the first mutation so a failed call leaves
nothing behind in the session.
"""

import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, InvalidInput, NotFound
from app.core.utils import is_valid_id, utcnow
from app.models.board import Board, BoardColumn, BoardMember, DEFAULT_COLUMNS, ROLES
from app.models.task import Task, PRIORITIES, DEFAULT_PRIORITY
from app.schemas.updates import CLEAR, UNCHANGED, Set, TaskChanges
from app.services.board_policy import Action, authorize
from app.services.user_service import get_user_by_email, resolve_user_reference

logger = logging.getLogger(__name__)


# ========== HELPERS ==========

def _clean(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _require_title(title, label: str) -> str:
    title = _clean(title)
    if not title:
        raise InvalidInput(f"{label} title is required")
    return title


def _check_priority(priority) -> str:
    if priority not in PRIORITIES:
        raise InvalidInput("Invalid priority")
    return priority


def _check_role(role) -> str:
    if role not in ROLES:
        raise InvalidInput("Invalid role")
    return role


def _next_position(items) -> int:
    return max((item.position for item in items), default=-1) + 1


def _load_board(db: Session, board_id) -> Board:
    if not is_valid_id(board_id):
        raise InvalidInput("Invalid board id")
    board = db.query(Board).filter(Board.id == board_id).first()
    if not board:
        raise NotFound("Board not found")
    return board


def _load_for(db: Session, board_id, actor_id: str, action: Action) -> Board:
    board = _load_board(db, board_id)
    authorize(board, actor_id, action)
    return board


def _get_column(board: Board, column_id) -> BoardColumn:
    column = board.find_column(column_id)
    if not column:
        raise NotFound("Column not found")
    return column


def _get_member(board: Board, user_id) -> BoardMember:
    if not is_valid_id(user_id):
        raise InvalidInput("Invalid user id")
    member = board.find_member(user_id)
    if not member:
        raise NotFound("Member not found")
    return member


def _save(db: Session, board: Board) -> Board:
    board.updated_at = utcnow()
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to save board {board.id}")
        raise
    db.refresh(board)
    return board


# ========== BOARDS ==========

def create_board(db: Session, actor_id: str, title, description=None) -> Board:
    title = _require_title(title, "Board")
    board = Board(
        owner_id=actor_id,
        title=title,
        description=_clean(description),
        columns=[BoardColumn(title=name, position=i) for i, name in enumerate(DEFAULT_COLUMNS)],
        members=[BoardMember(user_id=actor_id, role="admin")],
    )
    db.add(board)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create board")
        raise
    db.refresh(board)
    logger.info(f"Board created: {board.id} by {actor_id}")
    return board


def get_board(db: Session, board_id, actor_id: str) -> Board:
    return _load_for(db, board_id, actor_id, Action.READ_BOARD)


def list_boards(db: Session, actor_id: str) -> List[Board]:
    """Tous les boards dont l'acteur est owner ou membre, plus récents d'abord."""
    member_of = select(BoardMember.board_id).where(BoardMember.user_id == actor_id)
    return db.query(Board).filter(
        or_(Board.owner_id == actor_id, Board.id.in_(member_of))
    ).order_by(Board.created_at.desc()).all()


def update_board_meta(db: Session, board_id, actor_id: str, title=UNCHANGED, description=UNCHANGED) -> Board:
    """Remplace seulement les champs fournis.

    Only ``Set`` values are applied: an empty title keeps the current one, and
    a null or empty description keeps the current description as well.
    """
    board = _load_for(db, board_id, actor_id, Action.UPDATE_BOARD)

    new_title = _clean(title.value) if isinstance(title, Set) else None
    new_description = _clean(description.value) if isinstance(description, Set) else None
    if new_title is None and new_description is None:
        return board

    if new_title is not None:
        board.title = new_title
    if new_description is not None:
        board.description = new_description
    _save(db, board)
    logger.info(f"Board updated: {board.id}")
    return board


def delete_board(db: Session, board_id, actor_id: str) -> None:
    board = _load_for(db, board_id, actor_id, Action.DELETE_BOARD)
    db.delete(board)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to delete board {board_id}")
        raise
    logger.info(f"Board deleted: {board_id} by {actor_id}")


# ========== COLUMNS ==========

def add_column(db: Session, board_id, actor_id: str, title) -> Board:
    board = _load_for(db, board_id, actor_id, Action.ADD_COLUMN)
    title = _require_title(title, "Column")
    board.columns.append(BoardColumn(title=title, position=_next_position(board.columns)))
    return _save(db, board)


def update_column_title(db: Session, board_id, actor_id: str, column_id, title) -> Board:
    board = _load_for(db, board_id, actor_id, Action.UPDATE_COLUMN)
    column = _get_column(board, column_id)
    column.title = _require_title(title, "Column")
    return _save(db, board)


def delete_column(db: Session, board_id, actor_id: str, column_id) -> Board:
    board = _load_for(db, board_id, actor_id, Action.DELETE_COLUMN)
    column = _get_column(board, column_id)
    # les tâches partent avec la colonne (cascade delete-orphan)
    board.columns.remove(column)
    _save(db, board)
    logger.info(f"Column {column_id} deleted from board {board.id}")
    return board


# ========== TASKS ==========

def _resolve_assignee(db: Session, assignee) -> Optional[str]:
    assignee = _clean(assignee)
    if assignee is None:
        return None
    return resolve_user_reference(db, assignee).id


def add_task(
    db: Session,
    board_id,
    actor_id: str,
    column_id,
    title,
    description=None,
    assignee=None,
    due_date=None,
    priority=None,
) -> Board:
    board = _load_for(db, board_id, actor_id, Action.ADD_TASK)
    column = _get_column(board, column_id)
    title = _require_title(title, "Task")
    priority = _check_priority(priority) if priority is not None else DEFAULT_PRIORITY
    assignee_id = _resolve_assignee(db, assignee)

    column.tasks.append(Task(
        title=title,
        description=_clean(description),
        assignee_id=assignee_id,
        due_date=due_date,
        priority=priority,
        position=_next_position(column.tasks),
    ))
    return _save(db, board)


def update_task(
    db: Session,
    board_id,
    actor_id: str,
    task_id,
    changes: TaskChanges = None,
    target_column_id=None,
) -> Board:
    """Modifie une tâche et/ou la déplace vers une autre colonne.

    The task is looked up across every column of the board. When
    ``target_column_id`` names another existing column, the task is detached
    from its source column and appended to the target. An unknown target
    column leaves the task where it is; field changes still apply.
    """
    changes = changes or TaskChanges()
    board = _load_for(db, board_id, actor_id, Action.UPDATE_TASK)
    source, task = board.find_task(task_id)
    if task is None:
        raise NotFound("Task not found")

    # Validation complète avant toute mutation
    updates = {}
    if changes.title is CLEAR:
        raise InvalidInput("Task title is required")
    if isinstance(changes.title, Set):
        updates["title"] = _require_title(changes.title.value, "Task")
    if changes.description is CLEAR:
        updates["description"] = None
    elif isinstance(changes.description, Set):
        updates["description"] = _clean(changes.description.value)
    if changes.assignee is CLEAR:
        updates["assignee_id"] = None
    elif isinstance(changes.assignee, Set):
        updates["assignee_id"] = _resolve_assignee(db, changes.assignee.value)
    if changes.due_date is CLEAR:
        updates["due_date"] = None
    elif isinstance(changes.due_date, Set):
        updates["due_date"] = changes.due_date.value
    if changes.priority is CLEAR:
        updates["priority"] = DEFAULT_PRIORITY
    elif isinstance(changes.priority, Set):
        updates["priority"] = _check_priority(changes.priority.value)

    target = None
    if target_column_id and target_column_id != source.id:
        target = board.find_column(target_column_id)
        if target is None:
            logger.info(f"Move of task {task.id} ignored: column {target_column_id} not found")

    if not updates and target is None:
        return board

    for field, value in updates.items():
        setattr(task, field, value)
    if updates:
        task.updated_at = utcnow()

    if target is not None:
        source.tasks.remove(task)
        task.position = _next_position(target.tasks)
        target.tasks.append(task)
        logger.info(f"Task {task.id} moved from column {source.id} to {target.id}")

    return _save(db, board)


def delete_task(db: Session, board_id, actor_id: str, column_id, task_id) -> Board:
    board = _load_for(db, board_id, actor_id, Action.DELETE_TASK)
    column = _get_column(board, column_id)
    task = next((t for t in column.tasks if t.id == task_id), None)
    if task is None:
        raise NotFound("Task not found")
    column.tasks.remove(task)
    return _save(db, board)


# ========== MEMBERS ==========

def add_member(db: Session, board_id, actor_id: str, email, role=None) -> Board:
    board = _load_for(db, board_id, actor_id, Action.ADD_MEMBER)
    role = _check_role(role or "member")
    if not _clean(email):
        raise InvalidInput("Email is required")

    user = get_user_by_email(db, email)
    if not user:
        raise NotFound("User not found")
    if board.find_member(user.id):
        raise Conflict("User is already a member of this board")

    board.members.append(BoardMember(user_id=user.id, role=role))
    _save(db, board)
    logger.info(f"User {user.id} added to board {board.id} as {role}")
    return board


def remove_member(db: Session, board_id, actor_id: str, user_id) -> Board:
    board = _load_for(db, board_id, actor_id, Action.REMOVE_MEMBER)
    if user_id == actor_id:
        raise InvalidInput("You cannot remove yourself from the board")
    member = _get_member(board, user_id)
    board.members.remove(member)
    _save(db, board)
    logger.info(f"User {user_id} removed from board {board.id}")
    return board


def update_member_role(db: Session, board_id, actor_id: str, user_id, role) -> Board:
    board = _load_for(db, board_id, actor_id, Action.UPDATE_MEMBER_ROLE)
    if user_id == actor_id:
        raise InvalidInput("You cannot change your own role")
    role = _check_role(role)
    member = _get_member(board, user_id)
    member.role = role
    return _save(db, board)
