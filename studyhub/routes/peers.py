from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from ..schemas.peers import PeerIn, PeerOut, PresenceIn, ProfileUpdateIn, UniversityOut, ActionOkOut
from ..models.peers import Peer
from ..auth import get_current_peer, get_stores
from ..stores import Stores

router = APIRouter()


@router.post('/', response_model=PeerOut)
async def register(payload: PeerIn, stores: Stores = Depends(get_stores)):
    return await stores.peers.upsert_peer(Peer(**payload.model_dump()))


@router.get('/', response_model=List[PeerOut])
async def search(
    q: str = '',
    university_id: Optional[str] = None,
    year_of_study: Optional[str] = None,
    course: Optional[str] = None,
    online: Optional[bool] = None,
    limit: int = Query(50, ge=1),
    stores: Stores = Depends(get_stores),
):
    results = await stores.peers.search_peers(q, {
        'university_id': university_id,
        'year_of_study': year_of_study,
        'course': course,
        'online': online,
    })
    found = []
    for peer in results:
        if len(found) >= limit:
            break
        found.append(peer)
    return found


@router.get('/universities', response_model=List[UniversityOut])
async def universities(stores: Stores = Depends(get_stores)):
    return await stores.peers.list_universities()


@router.patch('/me', response_model=PeerOut)
async def update_me(payload: ProfileUpdateIn, current_peer: Peer = Depends(get_current_peer),
                    stores: Stores = Depends(get_stores)):
    return await stores.peers.update_profile(current_peer.id, **payload.model_dump(exclude_unset=True))


@router.post('/me/presence', response_model=PeerOut)
async def presence(payload: PresenceIn, current_peer: Peer = Depends(get_current_peer),
                   stores: Stores = Depends(get_stores)):
    return await stores.peers.set_online(current_peer.id, payload.online)


@router.delete('/me', response_model=ActionOkOut)
async def deactivate(current_peer: Peer = Depends(get_current_peer), stores: Stores = Depends(get_stores)):
    await stores.peers.deactivate(current_peer.id)
    return ActionOkOut(message='Account deactivated')


@router.get('/{peer_id}', response_model=PeerOut)
async def get_peer(peer_id: str, stores: Stores = Depends(get_stores)):
    return await stores.peers.get_peer(peer_id)
