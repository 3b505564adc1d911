from sqlalchemy import Column, String, DateTime, ForeignKey, Boolean
from sqlalchemy.orm import relationship
import datetime
from database import Base
from models.user import generate_id

TASK_TEXT_MAX_LENGTH = 500


class TaskDB(Base):
    __tablename__ = "todos"

    id = Column(String(36), primary_key=True, default=generate_id)
    text = Column(String(TASK_TEXT_MAX_LENGTH), nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    owner = relationship("UserDB", back_populates="tasks")

    def __repr__(self):
        return f"<Task(id={self.id}, text='{self.text}', completed={self.completed})>"
