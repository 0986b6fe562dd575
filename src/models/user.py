import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql.sqltypes import DateTime
from src.conf.base import Base


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(25), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    avatar = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    contacts = relationship("Contact", back_populates="owner")
