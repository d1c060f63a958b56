import uuid
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Boolean, JSON
from sqlalchemy.sql import func, false
from splitledger.db.session import Base

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    group_id = Column(String, ForeignKey("groups.id", ondelete="CASCADE"), nullable=True, index=True)
    paid_by = Column(String, ForeignKey("members.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=True)

    # ordered member ids sharing the cost; the recipient for settlements
    participants = Column(JSON, nullable=False, default=list)
    is_settlement = Column(Boolean, nullable=False, server_default=false(), default=False)

    date = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    is_deleted = Column(Boolean, nullable=False, server_default=false(), default=False)
