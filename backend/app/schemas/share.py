from enum import Enum

from pydantic import BaseModel, Field


class SharePermission(str, Enum):
    view = "view"
    edit = "edit"


class ShareCreate(BaseModel):
    username: str = Field(min_length=1)
    permission: SharePermission = SharePermission.view


class ShareRead(BaseModel):
    id: int
    user_id: int
    username: str
    permission: SharePermission
