from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional


class ConversationIn(BaseModel):
    participant_ids: List[str]
    kind: Optional[Literal['direct', 'group']] = None
    title: Optional[str] = None
    description: Optional[str] = None


class ConversationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    kind: str
    title: str
    participant_ids: List[str]
    description: Optional[str] = None
    last_message_preview: Optional[str] = None
    last_message_at: Optional[datetime] = None
    archived: bool = False
    unread: int = 0

    @field_validator('participant_ids', mode='before')
    @classmethod
    def _sorted_ids(cls, v):
        return sorted(v)


class MessageIn(BaseModel):
    body: str


class MessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    conversation_id: int
    sender_id: str
    body: str
    created_at: datetime
    read_by: List[str]

    @field_validator('read_by', mode='before')
    @classmethod
    def _sorted_readers(cls, v):
        return sorted(v)


class ReadIn(BaseModel):
    upto_message_id: int


class ReadOut(BaseModel):
    conversation_id: int
    last_read_message_id: Optional[int]
    unread: int


class ArchiveIn(BaseModel):
    archived: bool = True
