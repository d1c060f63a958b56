import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from splitledger.db.session import Base

class Member(Base):
    __tablename__ = "members"

    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
