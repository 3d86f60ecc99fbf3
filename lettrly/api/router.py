from fastapi import APIRouter

from lettrly.features.inbox.api import router as inbox_router
from lettrly.features.letters.api import router as letters_router
from lettrly.features.profiles.api import router as profiles_router

api_router = APIRouter()
# The stream route must be registered before /api/letters/{letter_id}.
api_router.include_router(inbox_router)
api_router.include_router(letters_router)
api_router.include_router(profiles_router)
