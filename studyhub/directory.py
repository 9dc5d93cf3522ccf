"""
Peer/Presence Directory
Peer identities, online status and the university catalog used for discovery.
"""
import asyncio
import logging
from typing import Dict, List, Mapping, Optional

from .clock import MonotonicClock
from .core import PEERS_ONLINE
from .errors import DuplicateId, PeerNotFound
from .models.peers import Peer, University, make_initials
from .query import Results, build_predicates

logger = logging.getLogger('studyhub.directory')

# fields a re-registration may not change
IMMUTABLE_FIELDS = ('university_id',)
MUTABLE_FIELDS = ('display_name', 'initials', 'avatar_color', 'course', 'year_of_study', 'bio', 'email')
PEER_FILTERS = ('university_id', 'year_of_study', 'course', 'online')
EDITABLE_FIELDS = ('display_name', 'course', 'year_of_study', 'bio', 'avatar_color')


def _name_key(peer: Peer):
    return peer.display_name.casefold()


class PeerDirectory:

    def __init__(self, clock: MonotonicClock = None):
        self._clock = clock or MonotonicClock()
        self._peers: Dict[str, Peer] = {}
        self._universities: Dict[str, University] = {}
        self._lock = asyncio.Lock()

    def _get(self, peer_id: str) -> Peer:
        peer = self._peers.get(peer_id)
        if peer is None:
            raise PeerNotFound(f'Peer {peer_id} not found')
        return peer

    async def upsert_peer(self, peer: Peer) -> Peer:
        async with self._lock:
            existing = self._peers.get(peer.id)
            if existing is None:
                self._peers[peer.id] = peer
                logger.info({'msg': 'peer_registered', 'peer_id': peer.id, 'university_id': peer.university_id})
                return peer
            for name in IMMUTABLE_FIELDS:
                if getattr(existing, name) != getattr(peer, name):
                    raise DuplicateId(f'Peer {peer.id} is already registered with {name}={getattr(existing, name)!r}')
            for name in MUTABLE_FIELDS:
                setattr(existing, name, getattr(peer, name))
            logger.info({'msg': 'peer_updated', 'peer_id': peer.id})
            return existing

    async def get_peer(self, peer_id: str) -> Peer:
        return self._get(peer_id)

    async def exists(self, peer_id: str) -> bool:
        return peer_id in self._peers

    async def set_online(self, peer_id: str, online: bool) -> Peer:
        async with self._lock:
            peer = self._get(peer_id)
            changed = peer.online != online
            peer.online = online
            peer.last_seen = self._clock.now()
        if changed:
            if online:
                PEERS_ONLINE.inc()
            else:
                PEERS_ONLINE.dec()
            logger.info({'msg': 'presence_changed', 'peer_id': peer_id, 'online': online})
        return peer

    async def deactivate(self, peer_id: str) -> Peer:
        peer = await self.set_online(peer_id, False)
        peer.active = False
        logger.info({'msg': 'peer_deactivated', 'peer_id': peer_id})
        return peer

    async def update_profile(self, peer_id: str, **changes) -> Peer:
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f'Cannot edit fields: {", ".join(sorted(unknown))}')
        async with self._lock:
            peer = self._get(peer_id)
            for name, value in changes.items():
                if value is not None:
                    setattr(peer, name, value)
            if changes.get('display_name'):
                peer.initials = make_initials(peer.display_name)
        return peer

    async def search_peers(self, query: str = '', filters: Optional[Mapping] = None) -> Results:
        """
        Case-insensitive substring match on display name, exact match on each filter.
        Iterating the result walks a snapshot ordered by name; it can be iterated again.
        """
        filters = dict(filters or {})
        unknown = set(filters) - set(PEER_FILTERS)
        if unknown:
            raise ValueError(f'Unknown peer filters: {", ".join(sorted(unknown))}')
        snapshot = [p for p in self._peers.values() if p.active]
        return Results(snapshot, build_predicates(query, ['display_name'], filters), key=_name_key)

    async def upsert_university(self, university: University) -> University:
        async with self._lock:
            self._universities[university.id] = university
        return university

    async def list_universities(self) -> List[University]:
        return sorted(self._universities.values(), key=lambda u: u.name.casefold())
