"""Share grants for adventures (owner-managed)."""
import logging

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.models.adventure import Adventure
from app.models.share import AdventureShare
from app.models.user import User
from app.services.access import SHARE_PERMISSIONS

logger = logging.getLogger(__name__)


def grant_share(db: Session, adventure: Adventure, username: str, permission: str) -> AdventureShare:
    """Create the share, or update its permission if one already exists."""
    if permission not in SHARE_PERMISSIONS:
        raise ValidationError(f"permission must be one of: {', '.join(SHARE_PERMISSIONS)}")

    user = db.query(User).filter(User.username == username.strip().lower()).first()
    if user is None:
        raise NotFoundError("User not found")
    if user.id == adventure.user_id:
        raise ValidationError("Cannot share with yourself")

    share = (
        db.query(AdventureShare)
        .filter(AdventureShare.adventure_id == adventure.id)
        .filter(AdventureShare.user_id == user.id)
        .first()
    )
    if share is None:
        share = AdventureShare(adventure_id=adventure.id, user_id=user.id, permission=permission)
        db.add(share)
    else:
        share.permission = permission
    db.commit()
    db.refresh(share)
    logger.info("Adventure %s shared with %s (%s)", adventure.id, user.username, permission)
    return share


def revoke_share(db: Session, adventure: Adventure, share_id: int) -> None:
    share = (
        db.query(AdventureShare)
        .filter(AdventureShare.id == share_id)
        .filter(AdventureShare.adventure_id == adventure.id)
        .first()
    )
    if share is None:
        raise NotFoundError("Share not found")
    db.delete(share)
    db.commit()
    logger.info("Share %s on adventure %s revoked", share_id, adventure.id)


def list_shares(db: Session, adventure: Adventure) -> list[AdventureShare]:
    return (
        db.query(AdventureShare)
        .filter(AdventureShare.adventure_id == adventure.id)
        .order_by(AdventureShare.id)
        .all()
    )
