"""Board aggregate: board -> columns -> tasks, plus the membership roster."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.utils import new_id, utcnow
from app.models.user import User
from app.models.task import Task

ROLES = ("admin", "member")
DEFAULT_COLUMNS = ("To Do", "In Progress", "Done")


class Board(Base):
    __tablename__ = "boards"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = relationship(User)
    columns = relationship(
        "BoardColumn",
        back_populates="board",
        order_by="BoardColumn.position",
        cascade="all, delete-orphan",
    )
    members = relationship(
        "BoardMember",
        back_populates="board",
        order_by="BoardMember.id",
        cascade="all, delete-orphan",
    )

    def find_column(self, column_id):
        return next((c for c in self.columns if c.id == column_id), None)

    def find_task(self, task_id):
        """Cherche la tâche dans toutes les colonnes -> (colonne, tâche)."""
        for column in self.columns:
            for task in column.tasks:
                if task.id == task_id:
                    return column, task
        return None, None

    def find_member(self, user_id):
        return next((m for m in self.members if m.user_id == user_id), None)


class BoardColumn(Base):
    __tablename__ = "board_columns"

    id = Column(String(36), primary_key=True, default=new_id)
    board_id = Column(String(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    title = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    board = relationship(Board, back_populates="columns")
    tasks = relationship(
        Task,
        back_populates="column",
        order_by=Task.position,
        cascade="all, delete-orphan",
    )


class BoardMember(Base):
    __tablename__ = "board_members"
    __table_args__ = (UniqueConstraint("board_id", "user_id", name="uq_board_member"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    board_id = Column(String(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String, nullable=False, default="member")
    created_at = Column(DateTime, default=utcnow)

    board = relationship(Board, back_populates="members")
    user = relationship(User)
