from datetime import date, timedelta
import math
import random

from app.db import Base, SessionLocal, engine
from app.core.geometry import Point
from app.models.user import User
from app.models.adventure import Adventure
from app.models.share import AdventureShare
from app.models.tag import Tag  # noqa: F401  (registers the tags tables)
from app.models.picture import Picture  # noqa: F401
from app.models.waypoint import Waypoint
from app.services.tracks import new_track

DEMO_USERS = ["alice", "bob"]


def get_or_create_user(db, username: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if not user:
        user = User(username=username)
        db.add(user)
        db.commit()
        db.refresh(user)
    return user


def wiggly_line(start: Point, heading_deg: float, n: int, step_deg: float = 0.001) -> list[Point]:
    """A meandering path of n points starting at `start`."""
    pts = [start]
    lat, lng = start.lat, start.lng
    for i in range(1, n):
        heading = math.radians(heading_deg + random.uniform(-25, 25))
        lat += step_deg * math.cos(heading)
        lng += step_deg * math.sin(heading)
        pts.append(Point(lat=round(lat, 6), lng=round(lng, 6), elevation=round(800 + 40 * math.sin(i / 5), 1)))
    return pts


def clear_demo_data(db, owner: User) -> None:
    """Delete the owner's adventures so we can reseed cleanly."""
    for adv in db.query(Adventure).filter(Adventure.user_id == owner.id).all():
        db.delete(adv)
    db.commit()


def seed_demo_adventures(db) -> None:
    alice, bob = (get_or_create_user(db, u) for u in DEMO_USERS)
    clear_demo_data(db, alice)

    today = date.today()
    plans = [
        ("Chartreuse loop", Point(45.35, 5.80), "hiking", 60),
        ("Lake Annecy ride", Point(45.86, 6.17), "cycling", 120),
        ("Ferry to Evian", Point(46.50, 6.60), "boat", 30),
    ]

    for i, (name, start, mode, n) in enumerate(plans):
        adv = Adventure(
            user_id=alice.id,
            name=name,
            description=f"Demo {mode} adventure",
            adventure_date=today - timedelta(weeks=4 * i),
        )
        db.add(adv)
        db.flush()

        points = wiggly_line(start, heading_deg=random.uniform(0, 360), n=n)
        db.add(new_track(adventure_id=adv.id, name=f"{name} track", mode=mode, points=points))
        db.add(Waypoint(adventure_id=adv.id, name="Start", latitude=start.lat, longitude=start.lng))

        if i == 0:
            db.add(AdventureShare(adventure_id=adv.id, user_id=bob.id, permission="view"))

    db.commit()
    print(f"Seeded {len(plans)} demo adventures for {alice.username}")


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_demo_adventures(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
