"""Who may do what on an adventure.

Resolution is a single lookup:

1. adventure missing             -> NONE
2. principal owns the adventure  -> OWNER
3. share row for the principal   -> VIEW / EDIT, otherwise NONE

The gate helpers turn NONE into ``NotFoundError`` whether or not the
adventure exists, so non-participants cannot probe for ids.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, PermissionDeniedError
from app.models.adventure import Adventure
from app.models.share import AdventureShare


class Permission(str, enum.Enum):
    NONE = "none"
    VIEW = "view"
    EDIT = "edit"
    OWNER = "owner"

    @property
    def can_read(self) -> bool:
        return self in (Permission.VIEW, Permission.EDIT, Permission.OWNER)

    @property
    def can_edit(self) -> bool:
        return self in (Permission.EDIT, Permission.OWNER)

    @property
    def is_owner(self) -> bool:
        return self is Permission.OWNER


SHARE_PERMISSIONS = {"view": Permission.VIEW, "edit": Permission.EDIT}


@dataclass
class Access:
    adventure: Optional[Adventure]
    permission: Permission


def resolve(db: Session, adventure_id: int, user_id: int) -> Access:
    adventure = db.get(Adventure, adventure_id)
    if adventure is None:
        return Access(None, Permission.NONE)
    if adventure.user_id == user_id:
        return Access(adventure, Permission.OWNER)

    share = (
        db.query(AdventureShare)
        .filter(AdventureShare.adventure_id == adventure_id)
        .filter(AdventureShare.user_id == user_id)
        .first()
    )
    if share is None:
        # Hide the adventure itself from non-participants
        return Access(None, Permission.NONE)
    return Access(adventure, SHARE_PERMISSIONS.get(share.permission, Permission.NONE))


def require_read(db: Session, adventure_id: int, user_id: int) -> Access:
    access = resolve(db, adventure_id, user_id)
    if not access.permission.can_read:
        raise NotFoundError("Adventure not found")
    return access


def require_edit(db: Session, adventure_id: int, user_id: int) -> Access:
    access = require_read(db, adventure_id, user_id)
    if not access.permission.can_edit:
        raise PermissionDeniedError("You do not have permission to edit this adventure")
    return access


def require_owner(db: Session, adventure_id: int, user_id: int) -> Access:
    """Owner-only operations (delete, share management).

    Anyone else, including editors, gets the same not-found answer.
    """
    access = resolve(db, adventure_id, user_id)
    if not access.permission.is_owner:
        raise NotFoundError("Adventure not found")
    return access
