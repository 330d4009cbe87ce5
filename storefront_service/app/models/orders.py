from sqlalchemy import JSON, Column, DateTime, Numeric, String
from shared.core.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(64), primary_key=True)
    payment_method = Column(String(32), nullable=False, index=True)
    status = Column(String(32), nullable=False, index=True)
    customer = Column(JSON, nullable=False)
    items = Column(JSON, nullable=False)
    total = Column(Numeric(14, 2), default=0)
    cancel_reason = Column(String(500))
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True))
