from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db import Base, JSONType
from app.core.constants import DEFAULT_TRACK_MODE, TRACK_MODE_COLORS
from app.core.geometry import Point, track_distance_km


class Track(Base):
    __tablename__ = "tracks"

    id = Column(Integer, primary_key=True, index=True)
    adventure_id = Column(Integer, ForeignKey("adventures.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)

    # walking, hiking, cycling, bus, metro, train, boat, car, other
    mode = Column(String(20), nullable=False, server_default=DEFAULT_TRACK_MODE)
    color = Column(String(9), nullable=False, default=TRACK_MODE_COLORS[DEFAULT_TRACK_MODE])

    # [{lat, lng, elevation, timestamp}] in path order
    points = Column(JSONType, nullable=False, default=list)

    # Derived from points, never written directly (see set_points)
    distance_km = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    adventure = relationship("Adventure", back_populates="tracks")

    def get_points(self) -> list[Point]:
        return [Point.from_dict(p) for p in (self.points or [])]

    def set_points(self, points: list[Point]) -> None:
        """Replace the point sequence and recompute the distance."""
        self.points = [p.to_dict() for p in points]
        self.distance_km = track_distance_km(points)
