from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.constants import DEFAULT_TAG_CATEGORY, TRACK_MODE_COLORS
from app.db import get_db
from app.models.tag import Tag
from app.models.user import User
from app.schemas.adventure import TagCreate, TagRead

router = APIRouter(prefix="/tags", tags=["tags"])

# Cycled through for tags created without a color
TAG_PALETTE = list(TRACK_MODE_COLORS.values())


@router.get("/", response_model=list[TagRead])
def list_tags(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return db.query(Tag).order_by(Tag.category, Tag.name).all()


@router.post("/", response_model=TagRead, status_code=201)
def create_tag(payload: TagCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    name = payload.name.strip()
    if db.query(Tag).filter(Tag.name == name).first():
        raise HTTPException(status_code=422, detail="Tag already exists")
    color = payload.color or TAG_PALETTE[db.query(Tag).count() % len(TAG_PALETTE)]
    tag = Tag(name=name, color=color, category=(payload.category or "").strip() or DEFAULT_TAG_CATEGORY)
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


@router.delete("/{tag_id}")
def delete_tag(tag_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    tag = db.get(Tag, tag_id)
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    db.delete(tag)
    db.commit()
    return {"message": "Tag deleted"}
