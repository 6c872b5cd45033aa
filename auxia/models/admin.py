from sqlalchemy import Column, String, DateTime
from datetime import datetime

from auxia.core.database import Base
from auxia.core.types import GUID, generate_uuid


class Admin(Base):
    """Administrator model"""
    __tablename__ = "admins"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    admin_id = Column(String(20), unique=True, index=True, nullable=False)  # e.g., ADM001
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    hashed_password = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Admin {self.admin_id}>"
