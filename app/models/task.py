"""Task model"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.utils import new_id, utcnow

PRIORITIES = ("low", "medium", "high")
DEFAULT_PRIORITY = "medium"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    column_id = Column(String(36), ForeignKey("board_columns.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    assignee_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    due_date = Column(DateTime, nullable=True)
    priority = Column(String, nullable=False, default=DEFAULT_PRIORITY)

    # pas d'onupdate: un déplacement ne touche pas updated_at
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)

    column = relationship("BoardColumn", back_populates="tasks")

    @property
    def assignee(self):
        return self.assignee_id
