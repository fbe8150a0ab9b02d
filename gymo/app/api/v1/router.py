# gymo/app/api/v1/router.py
from fastapi import APIRouter
from gymo.app.api.v1.endpoints import contacts, root, token, users

api_router = APIRouter()
api_router.include_router(root.router, tags=["root"])
api_router.include_router(users.router, tags=["users"])
api_router.include_router(token.router, prefix="/token", tags=["token"])
api_router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
