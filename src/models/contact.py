import uuid

from sqlalchemy import Column, String, Text, Date, Boolean, JSON, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql.sqltypes import DateTime
from src.conf.base import Base
from src.models.user import utcnow


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False, index=True)
    phone = Column(String(15), nullable=False)
    email = Column(String, nullable=False)
    # {"street", "city", "state", "postalCode"}
    address = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)
    birthday = Column(Date, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    favorite = Column(Boolean, nullable=False, default=False)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    owner = relationship("User", back_populates="contacts")
