from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from app.db import Base
from app.models.adventure import adventure_tags


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    color = Column(String(9), nullable=False)
    category = Column(String, nullable=False, server_default="Custom")

    adventures = relationship("Adventure", secondary=adventure_tags, back_populates="tags")
