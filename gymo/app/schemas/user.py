# gymo/app/schemas/user.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# gender is stored in a 32-bit INTEGER column
MAX_GENDER = 2**31 - 1


# Body of POST /register
class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = None
    gender: int = Field(0, ge=0, le=MAX_GENDER)


# Body of POST /login
class UserLogin(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# Body of PATCH /user. Missing and "" both mean "keep the stored value".
class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = None
    description: Optional[str] = None
    gender: Optional[int] = Field(None, ge=0, le=MAX_GENDER)


# What the API says about a user (never password, never last_login)
class UserPublic(BaseModel):
    uid: int
    username: str
    email: str
    description: Optional[str] = None
    gender: int = 0

    model_config = ConfigDict(from_attributes=True)


class LoginData(UserPublic):
    token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    user_id: int
    login_time: int
