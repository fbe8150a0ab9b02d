# gymo/app/models/contact.py
from sqlalchemy import Column, Integer, BigInteger, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from gymo.app.db.base import Base


class Contact(Base):
    """
    Confirmed relationship, one row per direction.

    Nothing writes here yet: rows will come from accepting a friend request.
    """
    __tablename__ = "contacts"
    __table_args__ = (UniqueConstraint("user_uid", "friend_uid", name="uq_contact_pair"),)

    id = Column(Integer, primary_key=True, index=True)
    user_uid = Column(BigInteger, ForeignKey("users.uid"), index=True, nullable=False)
    friend_uid = Column(BigInteger, ForeignKey("users.uid"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class FriendRequest(Base):
    """Pending, directional proposal: from_user_uid -> to_user_uid."""
    __tablename__ = "friend_requests"
    __table_args__ = (
        UniqueConstraint("from_user_uid", "to_user_uid", name="uq_friend_request_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    from_user_uid = Column(BigInteger, ForeignKey("users.uid"), index=True, nullable=False)
    to_user_uid = Column(BigInteger, ForeignKey("users.uid"), index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
