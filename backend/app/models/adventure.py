from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Float, ForeignKey, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


adventure_tags = Table(
    "adventure_tags",
    Base.metadata,
    Column("adventure_id", Integer, ForeignKey("adventures.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Adventure(Base):
    __tablename__ = "adventures"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    adventure_date = Column(Date, nullable=True)

    # Stored viewport; only used while no track has points
    center_lat = Column(Float, nullable=True)
    center_lng = Column(Float, nullable=True)
    zoom = Column(Integer, nullable=True)

    preview_picture_id = Column(Integer, nullable=True)

    # Timestamps (python-side default keeps sub-second ordering on SQLite)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    owner = relationship("User")
    tracks = relationship(
        "Track", back_populates="adventure", cascade="all, delete-orphan", order_by="Track.id"
    )
    waypoints = relationship(
        "Waypoint", back_populates="adventure", cascade="all, delete-orphan", order_by="Waypoint.id"
    )
    pictures = relationship(
        "Picture", back_populates="adventure", cascade="all, delete-orphan", order_by="Picture.id"
    )
    shares = relationship("AdventureShare", back_populates="adventure", cascade="all, delete-orphan")
    tags = relationship("Tag", secondary=adventure_tags, back_populates="adventures")
