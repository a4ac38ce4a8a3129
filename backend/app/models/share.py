from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db import Base


class AdventureShare(Base):
    __tablename__ = "adventure_shares"
    __table_args__ = (
        # one grant per (adventure, user); re-sharing updates permission
        UniqueConstraint("adventure_id", "user_id", name="uq_adventure_shares_adventure_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    adventure_id = Column(Integer, ForeignKey("adventures.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    permission = Column(String(10), nullable=False, server_default="view")  # view, edit

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    adventure = relationship("Adventure", back_populates="shares")
    user = relationship("User")
