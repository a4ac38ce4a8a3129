from sqlalchemy import Column, Integer, String, Float, ForeignKey
from sqlalchemy.orm import relationship
from app.db import Base
from app.core.constants import DEFAULT_WAYPOINT_ICON


class Waypoint(Base):
    __tablename__ = "waypoints"

    id = Column(Integer, primary_key=True, index=True)
    adventure_id = Column(Integer, ForeignKey("adventures.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=True)
    icon = Column(String(16), nullable=False, default=DEFAULT_WAYPOINT_ICON)

    # Fixed at creation; updates only rename / re-icon
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    adventure = relationship("Adventure", back_populates="waypoints")
