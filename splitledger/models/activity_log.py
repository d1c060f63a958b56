from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from splitledger.db.session import Base

class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True)
    group_id = Column(String, ForeignKey("groups.id", ondelete="CASCADE"), nullable=True, index=True)
    member_id = Column(String, ForeignKey("members.id"), nullable=True)
    action = Column(String, nullable=False)
    details = Column(String, nullable=False)
    changes = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
