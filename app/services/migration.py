"""One-time migration of board documents exported from the legacy store.

Older boards stored ``members`` as a plain list of user ids; newer ones store
``[{"user": <id>, "role": "admin"|"member"}]``. Both shapes are folded into
the canonical ``(user_id, role)`` form here and nowhere else.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from app.core.errors import InvalidInput, NotFound
from app.core.utils import utcnow
from app.models.board import Board, BoardColumn, BoardMember, ROLES
from app.models.task import Task, PRIORITIES, DEFAULT_PRIORITY
from app.services.user_service import get_user, get_user_by_email

logger = logging.getLogger(__name__)

_datetime_adapter = TypeAdapter(datetime)


def _ref_id(ref) -> Optional[str]:
    """Extrait un id depuis "id", {"_id": ...}, {"$oid": ...} ou un user peuplé."""
    if isinstance(ref, str):
        return ref.strip() or None
    if isinstance(ref, dict):
        for key in ("$oid", "_id", "id"):
            if key in ref:
                return _ref_id(ref[key])
    return None


def normalize_members(raw_members, owner_id: str) -> List[Tuple[str, str]]:
    entries = []
    seen = set()
    for raw in raw_members or []:
        if isinstance(raw, dict) and "user" in raw:
            user_id = _ref_id(raw["user"])
            role = raw.get("role") if raw.get("role") in ROLES else "member"
        else:
            user_id = _ref_id(raw)
            role = "member"
        if not user_id or user_id in seen:
            continue
        if user_id == owner_id:
            role = "admin"
        seen.add(user_id)
        entries.append((user_id, role))

    if owner_id not in seen:
        entries.insert(0, (owner_id, "admin"))
    return entries


def _parse_datetime(value) -> Optional[datetime]:
    if isinstance(value, dict):
        value = value.get("$date")
    if value in (None, ""):
        return None
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError:
        logger.warning(f"Unparseable date dropped: {value!r}")
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _resolve_user(db: Session, ref, user_map: Dict[str, str]) -> Optional[str]:
    ref_id = _ref_id(ref)
    if ref_id:
        ref_id = user_map.get(ref_id, ref_id)
        user = get_user(db, ref_id)
        if user:
            return user.id
    if isinstance(ref, dict) and ref.get("email"):
        user = get_user_by_email(db, ref["email"])
        if user:
            return user.id
    return None


def _build_task(db: Session, raw: dict, position: int, user_map: Dict[str, str]) -> Optional[Task]:
    title = (raw.get("title") or "").strip()
    if not title:
        logger.warning("Legacy task without title skipped")
        return None
    priority = raw.get("priority") if raw.get("priority") in PRIORITIES else DEFAULT_PRIORITY
    assignee_id = None
    if raw.get("assignee"):
        assignee_id = _resolve_user(db, raw["assignee"], user_map)
        if assignee_id is None:
            logger.warning(f"Unknown assignee dropped on task {title!r}")
    created_at = _parse_datetime(raw.get("createdAt")) or utcnow()
    return Task(
        title=title,
        description=(raw.get("description") or "").strip() or None,
        assignee_id=assignee_id,
        due_date=_parse_datetime(raw.get("dueDate")),
        priority=priority,
        position=position,
        created_at=created_at,
        updated_at=_parse_datetime(raw.get("updatedAt")) or created_at,
    )


def import_board_document(db: Session, document: dict, user_map: Dict[str, str] = None) -> Board:
    """Persiste un board legacy sous la forme canonique (nouveaux ids)."""
    user_map = user_map or {}
    title = (document.get("title") or "").strip()
    if not title:
        raise InvalidInput("Board title is required")

    raw_owner = _ref_id(document.get("owner"))
    owner_id = _resolve_user(db, document.get("owner"), user_map)
    if not raw_owner or owner_id is None:
        raise NotFound("Board owner not found")

    members = []
    resolved = set()
    for legacy_id, role in normalize_members(document.get("members"), raw_owner):
        user_id = owner_id if legacy_id == raw_owner else _resolve_user(db, legacy_id, user_map)
        if user_id is None:
            logger.warning(f"Unknown member {legacy_id} dropped from board {title!r}")
            continue
        if user_id in resolved:
            continue
        resolved.add(user_id)
        members.append(BoardMember(user_id=user_id, role=role))

    columns = []
    for i, raw_column in enumerate(document.get("columns") or []):
        tasks = []
        for raw_task in raw_column.get("tasks") or []:
            task = _build_task(db, raw_task, len(tasks), user_map)
            if task is not None:
                tasks.append(task)
        columns.append(BoardColumn(
            title=(raw_column.get("title") or "").strip() or "Untitled",
            position=i,
            tasks=tasks,
        ))

    created_at = _parse_datetime(document.get("createdAt")) or utcnow()
    board = Board(
        owner_id=owner_id,
        title=title,
        description=(document.get("description") or "").strip() or None,
        columns=columns,
        members=members,
        created_at=created_at,
        updated_at=_parse_datetime(document.get("updatedAt")) or created_at,
    )
    db.add(board)
    db.commit()
    db.refresh(board)
    logger.info(f"Legacy board imported: {board.id} ({len(columns)} columns, {len(members)} members)")
    return board
