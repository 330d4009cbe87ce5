from sqlalchemy import Boolean, Column, DateTime, Integer, String
from shared.core.database import Base


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False, default="")
    stock_quantity = Column(Integer, nullable=False, default=0)
    # kept in step with stock_quantity on every write, never read back
    in_stock = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True))
