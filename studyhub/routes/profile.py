from fastapi import APIRouter, Depends
from ..schemas.profiles import Profile
from ..models.peers import Peer
from ..auth import get_current_peer, get_stores
from ..profiles import build_profile
from ..stores import Stores

router = APIRouter()


@router.get('/{profile_id}', response_model=Profile)
async def get_profile(profile_id: str, current_peer: Peer = Depends(get_current_peer),
                      stores: Stores = Depends(get_stores)):
    return await build_profile(stores, profile_id, current_peer.id)
