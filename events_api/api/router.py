from fastapi import APIRouter

from events_api.api.events import router as events_router
from events_api.api.index import router as index_router
from events_api.api.oauth import router as oauth_router

router = APIRouter()
router.include_router(index_router)
router.include_router(events_router)
router.include_router(oauth_router)
