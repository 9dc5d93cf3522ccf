import json
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query
from ..errors import PeerNotFound

router = APIRouter()

logger = logging.getLogger('studyhub.ws')


@router.websocket('/presence')
async def presence_ws(websocket: WebSocket, peer_id: str = Query(None)):
    stores = websocket.app.state.stores
    manager = websocket.app.state.presence
    try:
        peer = await stores.peers.get_peer(peer_id) if peer_id else None
    except PeerNotFound:
        peer = None
    if peer is None or not peer.active:
        await websocket.close(code=1008)
        return
    await manager.connect(peer_id, websocket)
    try:
        while True:
            try:
                data = json.loads(await websocket.receive_text())
            except (TypeError, ValueError):
                logger.info({'msg': 'ws_bad_frame', 'peer_id': peer_id})
                await websocket.send_json({'type': 'error', 'detail': 'Frames must be JSON'})
                continue
            if isinstance(data, dict) and data.get('type') == 'ping':
                await manager.heartbeat(peer_id)
                await websocket.send_json({'type': 'pong'})
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(peer_id, websocket)
