from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Optional, Set


class ConversationKind(str, Enum):
    DIRECT = "direct"
    GROUP = "group"


@dataclass
class Conversation:
    id: int
    kind: ConversationKind
    participant_ids: FrozenSet[str]
    created_at: datetime
    title: Optional[str] = None
    description: Optional[str] = None
    created_by: Optional[str] = None
    last_message_preview: Optional[str] = None
    last_message_at: Optional[datetime] = None
    archived_by: Set[str] = field(default_factory=set)

    @property
    def activity_at(self) -> datetime:
        # empty conversations sort by their creation time
        return self.last_message_at or self.created_at

    def is_archived_for(self, peer_id: str) -> bool:
        return peer_id in self.archived_by


@dataclass
class Message:
    id: int
    conversation_id: int
    sender_id: str
    body: str
    created_at: datetime
    read_by: Set[str] = field(default_factory=set)

    @property
    def sort_key(self):
        return (self.created_at, self.id)
