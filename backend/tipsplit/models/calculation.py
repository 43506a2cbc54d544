"""
Calculation model: one stored tip/split computation
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, Numeric

from tipsplit.core.database import Base


class Calculation(Base):
    """Immutable record of a bill split; derived amounts are stored alongside the inputs"""
    __tablename__ = "calculations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bill_amount = Column(Numeric(10, 2), nullable=False, index=True)
    tip_percentage = Column(Numeric(5, 2), nullable=False, index=True)
    tip_amount = Column(Numeric(10, 2), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    people_count = Column(Integer, nullable=False, default=1)
    per_person_amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        """Structured payload returned by the create endpoint"""
        return {
            "id": self.id,
            "bill_amount": float(self.bill_amount),
            "tip_percentage": float(self.tip_percentage),
            "tip_amount": float(self.tip_amount),
            "total_amount": float(self.total_amount),
            "people_count": self.people_count,
            "per_person_amount": float(self.per_person_amount),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return (
            f"<Calculation(id={self.id}, bill_amount={self.bill_amount}, "
            f"tip_percentage={self.tip_percentage}, people_count={self.people_count})>"
        )
