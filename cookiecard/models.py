from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from cookiecard.shared.infrastructure.database import Base


class User(Base):
    """A connected Notion workspace owner."""
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)  # Notion owner user id
    access_token = Column(Text, nullable=False)  # Encrypted
    workspace_name = Column(String(255))
    bot_id = Column(String(64))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    widgets = relationship("Widget", back_populates="user", cascade="all, delete-orphan")


class Widget(Base):
    __tablename__ = "widgets"

    id = Column(String(36), primary_key=True)  # uuid4, doubles as the public embed key
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    icon = Column(String(64), nullable=False)
    prefix = Column(String(32))
    subtext = Column(String(255), nullable=False)
    db_id = Column(String(64), nullable=True)
    property = Column(String(255), nullable=True)
    manual_value = Column(String(255), nullable=False, default="0")
    calculation = Column(String(16), nullable=False, default="sum")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="widgets")

    __table_args__ = (
        Index("widget_user_idx", "user_id"),
    )
