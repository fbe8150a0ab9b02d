from gymo.app.models.user import User
from gymo.app.models.contact import Contact, FriendRequest

__all__ = ["User", "Contact", "FriendRequest"]
