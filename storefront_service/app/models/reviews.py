from sqlalchemy import Column, DateTime, Integer, String, Text
from shared.core.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(64), primary_key=True)
    product_id = Column(String(64), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200))
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
