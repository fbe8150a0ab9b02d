# gymo/app/models/user.py
from sqlalchemy import Column, Integer, BigInteger, String, Text, DateTime
from sqlalchemy.sql import func

from gymo.app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Public identifier; contacts and friend requests reference this, never id
    uid = Column(BigInteger, unique=True, index=True, nullable=False)

    username = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Always a bcrypt digest
    password = Column(String(255), nullable=False)

    description = Column(Text, nullable=True)
    gender = Column(Integer, nullable=False, default=0)

    # Unix seconds of the last successful login, 0 before the first one.
    # Tokens embed this value; rewriting it revokes every token issued earlier.
    last_login = Column(BigInteger, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
