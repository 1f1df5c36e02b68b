from typing import List
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.user import User
from app.routers.auth import get_current_user
from app.schemas.board import (
    BoardCreate,
    BoardUpdate,
    BoardResponse,
    ColumnCreate,
    ColumnUpdate,
    ColumnDelete,
    TaskCreate,
    TaskUpdate,
    TaskDelete,
    MemberAdd,
    MemberRoleUpdate,
    MemberRemove,
    MessageResponse,
)
from app.schemas.updates import TaskChanges, field_update
from app.services import board_service

router = APIRouter(prefix="/boards", tags=["boards"])


# ========== BOARDS ==========

@router.post("", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
def create_board(
    board_data: BoardCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return board_service.create_board(db, current_user.id, board_data.title, board_data.description)


@router.get("", response_model=List[BoardResponse])
def list_boards(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return board_service.list_boards(db, current_user.id)


@router.get("/{board_id}", response_model=BoardResponse)
def get_board(board_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return board_service.get_board(db, board_id, current_user.id)


@router.put("/{board_id}", response_model=BoardResponse)
def update_board(
    board_id: str,
    board_data: BoardUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return board_service.update_board_meta(
        db,
        board_id,
        current_user.id,
        title=field_update(board_data, "title", blank_is_unchanged=True),
        description=field_update(board_data, "description", blank_is_unchanged=True),
    )


@router.delete("/{board_id}", response_model=MessageResponse)
def delete_board(board_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    board_service.delete_board(db, board_id, current_user.id)
    return {"message": "Board deleted successfully"}


# ========== COLUMNS ==========

@router.post("/{board_id}/columns", response_model=BoardResponse)
def add_column(
    board_id: str,
    column_data: ColumnCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return board_service.add_column(db, board_id, current_user.id, column_data.title)


@router.put("/{board_id}/columns", response_model=BoardResponse)
def update_column(
    board_id: str,
    column_data: ColumnUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return board_service.update_column_title(db, board_id, current_user.id, column_data.column_id, column_data.title)


@router.delete("/{board_id}/columns", response_model=BoardResponse)
def delete_column(
    board_id: str,
    column_data: ColumnDelete = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return board_service.delete_column(db, board_id, current_user.id, column_data.column_id)


# ========== TASKS ==========

@router.post("/{board_id}/tasks", response_model=BoardResponse)
def add_task(
    board_id: str,
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return board_service.add_task(
        db,
        board_id,
        current_user.id,
        task_data.column_id,
        task_data.title,
        description=task_data.description,
        assignee=task_data.assignee,
        due_date=task_data.due_date,
        priority=task_data.priority,
    )


@router.put("/{board_id}/tasks", response_model=BoardResponse)
def update_task(
    board_id: str,
    task_data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Modifie une tâche; `status` (id de colonne) la déplace (drag & drop)."""
    changes = TaskChanges(
        title=field_update(task_data, "title"),
        description=field_update(task_data, "description"),
        assignee=field_update(task_data, "assignee"),
        due_date=field_update(task_data, "due_date"),
        priority=field_update(task_data, "priority"),
    )
    return board_service.update_task(
        db, board_id, current_user.id, task_data.task_id, changes, target_column_id=task_data.status
    )


@router.delete("/{board_id}/tasks", response_model=BoardResponse)
def delete_task(
    board_id: str,
    task_data: TaskDelete = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return board_service.delete_task(db, board_id, current_user.id, task_data.column_id, task_data.task_id)


# ========== MEMBERS ==========

@router.post("/{board_id}/members", response_model=BoardResponse)
def add_member(
    board_id: str,
    member_data: MemberAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return board_service.add_member(db, board_id, current_user.id, member_data.email, member_data.role)


@router.put("/{board_id}/members", response_model=BoardResponse)
def update_member_role(
    board_id: str,
    member_data: MemberRoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return board_service.update_member_role(db, board_id, current_user.id, member_data.user_id, member_data.role)


@router.delete("/{board_id}/members", response_model=BoardResponse)
def remove_member(
    board_id: str,
    member_data: MemberRemove = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return board_service.remove_member(db, board_id, current_user.id, member_data.user_id)
