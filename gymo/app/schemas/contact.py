# gymo/app/schemas/contact.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Largest value a BIGINT column holds
MAX_UID = 2**63 - 1


class FriendRequestCreate(BaseModel):
    uid: int = Field(..., ge=0, le=MAX_UID)


class FriendRequestOut(BaseModel):
    from_user_uid: int
    to_user_uid: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
