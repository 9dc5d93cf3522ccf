from fastapi import APIRouter, Depends, Query, Request
from typing import List, Optional
from ..schemas.conversations import (
    ArchiveIn,
    ConversationIn,
    ConversationOut,
    MessageIn,
    MessageOut,
    ReadIn,
    ReadOut,
)
from ..models.conversations import Conversation
from ..models.peers import Peer
from ..auth import get_current_peer, get_stores
from ..profiles import conversation_title
from ..query import TextPredicate, filter_items
from ..stores import Stores

router = APIRouter()


async def conversation_out(stores: Stores, conv: Conversation, viewer_id: str, unread: int = 0) -> ConversationOut:
    return ConversationOut(
        id=conv.id,
        kind=conv.kind.value,
        title=await conversation_title(stores, conv, viewer_id),
        participant_ids=conv.participant_ids,
        description=conv.description,
        last_message_preview=conv.last_message_preview,
        last_message_at=conv.last_message_at,
        archived=conv.is_archived_for(viewer_id),
        unread=unread,
    )


@router.post('/', response_model=ConversationOut)
async def create(payload: ConversationIn, current_peer: Peer = Depends(get_current_peer),
                 stores: Stores = Depends(get_stores)):
    participants = {current_peer.id, *payload.participant_ids}
    for peer_id in participants:
        await stores.peers.get_peer(peer_id)
    conv = await stores.conversations.create_conversation(
        participants,
        kind=payload.kind,
        title=payload.title,
        description=payload.description,
        created_by=current_peer.id,
    )
    return await conversation_out(stores, conv, current_peer.id)


@router.post('/direct/{peer_id}', response_model=ConversationOut)
async def open_direct(peer_id: str, current_peer: Peer = Depends(get_current_peer),
                      stores: Stores = Depends(get_stores)):
    await stores.peers.get_peer(peer_id)
    conv = await stores.conversations.open_direct(current_peer.id, peer_id)
    unread = await stores.conversations.unread_count(conv.id, current_peer.id)
    return await conversation_out(stores, conv, current_peer.id, unread)


@router.get('/', response_model=List[ConversationOut])
async def inbox(q: str = '', include_archived: bool = False, current_peer: Peer = Depends(get_current_peer),
                stores: Stores = Depends(get_stores)):
    summaries = await stores.conversations.list_conversations(current_peer.id, include_archived=include_archived)
    rows = [await conversation_out(stores, s.conversation, current_peer.id, s.unread) for s in summaries]
    return list(filter_items(rows, [TextPredicate(q, 'title')]))


@router.get('/{conversation_id}/messages', response_model=List[MessageOut])
async def messages(conversation_id: int, after_id: Optional[int] = None, limit: Optional[int] = Query(None, ge=1),
                   current_peer: Peer = Depends(get_current_peer), stores: Stores = Depends(get_stores)):
    return await stores.conversations.list_messages(conversation_id, current_peer.id, after_id=after_id, limit=limit)


@router.post('/{conversation_id}/messages', response_model=MessageOut)
async def send(conversation_id: int, payload: MessageIn, request: Request,
               current_peer: Peer = Depends(get_current_peer), stores: Stores = Depends(get_stores)):
    m = await stores.conversations.append_message(conversation_id, current_peer.id, payload.body)
    out = MessageOut.model_validate(m)

    # push to participants listening on the presence socket
    conv = await stores.conversations.get_conversation(conversation_id)
    await request.app.state.presence.notify(
        conv.participant_ids - {current_peer.id},
        {'type': 'message', 'message': out.model_dump(mode='json')},
    )
    return out


@router.post('/{conversation_id}/read', response_model=ReadOut)
async def mark_read(conversation_id: int, payload: ReadIn, current_peer: Peer = Depends(get_current_peer),
                    stores: Stores = Depends(get_stores)):
    marker = await stores.conversations.mark_read(conversation_id, current_peer.id, payload.upto_message_id)
    unread = await stores.conversations.unread_count(conversation_id, current_peer.id)
    return ReadOut(conversation_id=conversation_id, last_read_message_id=marker, unread=unread)


@router.post('/{conversation_id}/archive', response_model=ConversationOut)
async def archive(conversation_id: int, payload: ArchiveIn, current_peer: Peer = Depends(get_current_peer),
                  stores: Stores = Depends(get_stores)):
    conv = await stores.conversations.archive(conversation_id, current_peer.id, payload.archived)
    unread = await stores.conversations.unread_count(conversation_id, current_peer.id)
    return await conversation_out(stores, conv, current_peer.id, unread)
