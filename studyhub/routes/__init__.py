from fastapi import APIRouter
from .peers import router as peers_router
from .conversations import router as conversations_router
from .resources import router as resources_router
from .profile import router as profile_router
from .ws import router as ws_router

router = APIRouter()
router.include_router(peers_router, prefix='/peers', tags=['peers'])
router.include_router(conversations_router, prefix='/conversations', tags=['conversations'])
router.include_router(resources_router, prefix='/resources', tags=['resources'])
router.include_router(profile_router, prefix='/profiles', tags=['profiles'])
router.include_router(ws_router, prefix='/ws', tags=['ws'])
