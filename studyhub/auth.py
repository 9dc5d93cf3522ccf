"""
Request identity.
There is no authentication; the acting peer names itself in the X-Peer-Id header.
"""
from fastapi import Depends, Header, HTTPException, Request

from .errors import PeerNotFound
from .models.peers import Peer
from .stores import Stores


def get_stores(request: Request) -> Stores:
    return request.app.state.stores


async def get_current_peer(x_peer_id: str = Header(None), stores: Stores = Depends(get_stores)) -> Peer:
    if not x_peer_id:
        raise HTTPException(status_code=401, detail='Missing X-Peer-Id header')
    try:
        peer = await stores.peers.get_peer(x_peer_id)
    except PeerNotFound:
        raise HTTPException(status_code=401, detail='Unknown peer')
    if not peer.active:
        raise HTTPException(status_code=401, detail='Peer is deactivated')
    return peer
