from typing import Dict, Iterable, Set
from fastapi import WebSocket
import asyncio
import logging

from .directory import PeerDirectory

logger = logging.getLogger('studyhub.ws')


class PresenceManager:
    """
    Tracks open websockets per peer.
    A peer is online while at least one socket is open; message events are pushed to every socket.
    """

    def __init__(self, directory: PeerDirectory):
        self.directory = directory
        self.connections: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, peer_id: str, websocket: WebSocket):
        await websocket.accept()
        async with self._lock:
            self.connections.setdefault(peer_id, set()).add(websocket)
        await self.directory.set_online(peer_id, True)

    async def disconnect(self, peer_id: str, websocket: WebSocket):
        async with self._lock:
            sockets = self.connections.get(peer_id, set())
            sockets.discard(websocket)
            last = not sockets
            if last:
                self.connections.pop(peer_id, None)
        if last:
            await self.directory.set_online(peer_id, False)

    async def heartbeat(self, peer_id: str):
        await self.directory.set_online(peer_id, True)

    async def send_personal(self, peer_id: str, message: dict) -> bool:
        async with self._lock:
            sockets = list(self.connections.get(peer_id, set()))
        sent = False
        for ws in sockets:
            try:
                await ws.send_json(message)
                sent = True
            except Exception as e:
                logger.warning({'msg': 'ws_send_failed', 'peer_id': peer_id, 'error': str(e)})
                await self.disconnect(peer_id, ws)
        return sent

    async def notify(self, peer_ids: Iterable[str], message: dict) -> int:
        """Push to every listed peer that is connected; returns how many received it"""
        delivered = 0
        for peer_id in peer_ids:
            if await self.send_personal(peer_id, message):
                delivered += 1
        return delivered
