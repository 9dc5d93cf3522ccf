"""
Conversation Store
Owns conversations and their append-only message logs, plus per-peer read markers.
Unread counts are derived from the markers on every read, never stored.
"""
import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .clock import MonotonicClock
from .core import CONVERSATIONS_CREATED, MESSAGES_APPENDED
from .errors import (
    ConversationNotFound,
    EmptyBody,
    InvalidParticipants,
    MessageNotFound,
    NotAParticipant,
)
from .models.conversations import Conversation, ConversationKind, Message

logger = logging.getLogger('studyhub.conversations')

PREVIEW_LENGTH = 80


@dataclass
class ConversationSummary:
    conversation: Conversation
    unread: int


def make_preview(body: str) -> str:
    if len(body) <= PREVIEW_LENGTH:
        return body
    return body[:PREVIEW_LENGTH - 3].rstrip() + '...'


class ConversationStore:

    def __init__(self, clock: MonotonicClock = None):
        self._clock = clock or MonotonicClock()
        self._conversations: Dict[int, Conversation] = {}
        self._messages: Dict[int, List[Message]] = {}
        # (conversation_id, peer_id) -> sort key of the last message seen
        self._markers: Dict[Tuple[int, str], tuple] = {}
        self._conversation_ids = itertools.count(1)
        self._message_ids = itertools.count(1)
        self._lock = asyncio.Lock()
        self._append_locks: Dict[int, asyncio.Lock] = {}

    def _get(self, conversation_id: int) -> Conversation:
        conv = self._conversations.get(conversation_id)
        if conv is None:
            raise ConversationNotFound(f'Conversation {conversation_id} not found')
        return conv

    def _get_for(self, conversation_id: int, peer_id: str) -> Conversation:
        conv = self._get(conversation_id)
        if peer_id not in conv.participant_ids:
            raise NotAParticipant(f'{peer_id} is not a participant of conversation {conversation_id}')
        return conv

    def _insert(self, participants: frozenset, kind: ConversationKind, title=None, description=None, created_by=None) -> Conversation:
        # caller holds self._lock
        conv = Conversation(
            id=next(self._conversation_ids),
            kind=kind,
            participant_ids=participants,
            created_at=self._clock.now(),
            title=title,
            description=description,
            created_by=created_by,
        )
        self._conversations[conv.id] = conv
        self._messages[conv.id] = []
        self._append_locks[conv.id] = asyncio.Lock()
        CONVERSATIONS_CREATED.labels(kind=kind.value).inc()
        logger.info({'msg': 'conversation_created', 'conversation_id': conv.id, 'kind': kind.value,
                     'participants': sorted(participants)})
        return conv

    async def create_conversation(self, participant_ids: Iterable[str], kind=None, title: str = None,
                                  description: str = None, created_by: str = None) -> Conversation:
        participants = frozenset(p for p in participant_ids if p)
        if len(participants) < 2:
            raise InvalidParticipants('A conversation needs at least two unique participants')
        if kind is None:
            kind = ConversationKind.DIRECT if len(participants) == 2 else ConversationKind.GROUP
        else:
            kind = ConversationKind(kind)
        if kind is ConversationKind.DIRECT and len(participants) != 2:
            raise InvalidParticipants('A direct conversation has exactly two participants')
        async with self._lock:
            if kind is ConversationKind.DIRECT:
                existing = self._find_direct(participants)
                if existing is not None:
                    return existing
            return self._insert(participants, kind, title, description, created_by)

    def _find_direct(self, participants: frozenset) -> Optional[Conversation]:
        # caller holds self._lock; a pair has at most one direct conversation
        for conv in self._conversations.values():
            if conv.kind is ConversationKind.DIRECT and conv.participant_ids == participants:
                return conv
        return None

    async def open_direct(self, peer_a: str, peer_b: str) -> Conversation:
        """Return the direct conversation between two peers, creating it on first contact"""
        participants = frozenset((peer_a, peer_b))
        if len(participants) < 2 or not all(participants):
            raise InvalidParticipants('A direct conversation needs two different peers')
        async with self._lock:
            return self._find_direct(participants) or self._insert(participants, ConversationKind.DIRECT,
                                                                    created_by=peer_a)

    async def get_conversation(self, conversation_id: int) -> Conversation:
        return self._get(conversation_id)

    async def append_message(self, conversation_id: int, sender_id: str, body: str) -> Message:
        conv = self._get_for(conversation_id, sender_id)
        text = (body or '').strip()
        if not text:
            raise EmptyBody('Message body is empty')
        async with self._append_locks[conv.id]:
            msg = Message(
                id=next(self._message_ids),
                conversation_id=conv.id,
                sender_id=sender_id,
                body=text,
                created_at=self._clock.now(),
                read_by={sender_id},
            )
            self._messages[conv.id].append(msg)
            conv.last_message_preview = make_preview(text)
            conv.last_message_at = msg.created_at
            # new activity brings the conversation back for everyone
            conv.archived_by.clear()
        MESSAGES_APPENDED.inc()
        logger.info({'msg': 'message_appended', 'conversation_id': conv.id, 'message_id': msg.id,
                     'sender_id': sender_id})
        return msg

    async def list_messages(self, conversation_id: int, peer_id: str, after_id: Optional[int] = None,
                            limit: Optional[int] = None) -> List[Message]:
        if limit is not None and limit < 1:
            raise ValueError('limit must be a positive number')
        conv = self._get_for(conversation_id, peer_id)
        messages = list(self._messages[conv.id])
        if after_id is not None:
            anchor = self._find(conv.id, after_id)
            messages = [m for m in messages if m.sort_key > anchor.sort_key]
        if limit is not None:
            messages = messages[:limit]
        return messages

    def _find(self, conversation_id: int, message_id: int) -> Message:
        for m in self._messages[conversation_id]:
            if m.id == message_id:
                return m
        raise MessageNotFound(f'Message {message_id} not found in conversation {conversation_id}')

    def _unread(self, conversation_id: int, peer_id: str) -> int:
        marker = self._markers.get((conversation_id, peer_id))
        return sum(
            1 for m in self._messages[conversation_id]
            if m.sender_id != peer_id and (marker is None or m.sort_key > marker)
        )

    async def unread_count(self, conversation_id: int, peer_id: str) -> int:
        conv = self._get_for(conversation_id, peer_id)
        return self._unread(conv.id, peer_id)

    async def list_conversations(self, peer_id: str, include_archived: bool = False) -> List[ConversationSummary]:
        convs = [
            c for c in self._conversations.values()
            if peer_id in c.participant_ids and (include_archived or not c.is_archived_for(peer_id))
        ]
        # stable sorts: id ascending breaks ties in the activity ordering
        convs.sort(key=lambda c: c.id)
        convs.sort(key=lambda c: c.activity_at, reverse=True)
        return [ConversationSummary(c, self._unread(c.id, peer_id)) for c in convs]

    async def mark_read(self, conversation_id: int, peer_id: str, upto_message_id: int) -> Optional[int]:
        """
        Move the peer's read marker forward to the given message.
        Moving it backwards is ignored. Returns the id of the message the marker now points at.
        """
        conv = self._get_for(conversation_id, peer_id)
        target = self._find(conv.id, upto_message_id)
        key = (conv.id, peer_id)
        current = self._markers.get(key)
        if current is not None and target.sort_key <= current:
            return current[1]
        self._markers[key] = target.sort_key
        for m in self._messages[conv.id]:
            if m.sort_key > target.sort_key:
                break
            m.read_by.add(peer_id)
        logger.info({'msg': 'marker_moved', 'conversation_id': conv.id, 'peer_id': peer_id,
                     'message_id': target.id})
        return target.id

    async def archive(self, conversation_id: int, peer_id: str, archived: bool = True) -> Conversation:
        """Hide or show the conversation in this peer's inbox only"""
        conv = self._get_for(conversation_id, peer_id)
        if archived:
            conv.archived_by.add(peer_id)
        else:
            conv.archived_by.discard(peer_id)
        return conv

    async def common_groups(self, peer_a: str, peer_b: str) -> List[Conversation]:
        return [
            c for c in self._conversations.values()
            if c.kind is ConversationKind.GROUP and {peer_a, peer_b} <= c.participant_ids
        ]
