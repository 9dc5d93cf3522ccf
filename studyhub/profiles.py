"""
Profile views for the peer/group detail screen.
A profile id names either a peer or a group conversation; each variant only carries its own fields.
"""
from typing import Union

from .errors import ConversationNotFound, PeerNotFound
from .models.conversations import Conversation, ConversationKind
from .models.peers import Peer, make_initials
from .schemas.profiles import GroupMember, GroupProfile, UserProfile
from .stores import Stores

GROUP_COLORS = ('bg-purple-400', 'bg-green-400', 'bg-orange-400', 'bg-teal-400')


def role_line(peer: Peer) -> str:
    parts = [p for p in (peer.course, peer.year_of_study) if p]
    return ' • '.join(parts)


async def user_profile(stores: Stores, peer: Peer, viewer_id: str) -> UserProfile:
    groups = await stores.conversations.common_groups(peer.id, viewer_id) if viewer_id != peer.id else []
    return UserProfile(
        id=peer.id,
        name=peer.display_name,
        initials=peer.initials,
        color=peer.avatar_color,
        role=role_line(peer),
        bio=peer.bio,
        email=peer.email,
        online=peer.online,
        common_groups=[g.title or f'Group {g.id}' for g in groups],
    )


async def group_profile(stores: Stores, conv: Conversation, viewer_id: str) -> GroupProfile:
    members = []
    online = 0
    for peer_id in sorted(conv.participant_ids):
        try:
            peer = await stores.peers.get_peer(peer_id)
        except PeerNotFound:
            continue
        online += peer.online
        members.append(GroupMember(
            id=peer.id,
            name=peer.display_name,
            role='Admin' if peer.id == conv.created_by else 'Member',
            you=peer.id == viewer_id,
        ))
    # admins first, then by name
    members.sort(key=lambda m: (m.role != 'Admin', m.name.casefold()))
    name = conv.title or f'Group {conv.id}'
    return GroupProfile(
        id=conv.id,
        name=name,
        initials=make_initials(name),
        color=GROUP_COLORS[conv.id % len(GROUP_COLORS)],
        description=conv.description,
        members=members,
        online_count=online,
    )


async def build_profile(stores: Stores, profile_id: str, viewer_id: str) -> Union[UserProfile, GroupProfile]:
    if await stores.peers.exists(profile_id):
        return await user_profile(stores, await stores.peers.get_peer(profile_id), viewer_id)
    if profile_id.isdigit():
        conv = await stores.conversations.get_conversation(int(profile_id))
        if conv.kind is ConversationKind.GROUP:
            return await group_profile(stores, conv, viewer_id)
        raise ConversationNotFound(f'Conversation {profile_id} is not a group')
    raise PeerNotFound(f'No profile named {profile_id}')


async def conversation_title(stores: Stores, conv: Conversation, viewer_id: str) -> str:
    """What the viewer's inbox shows for a conversation"""
    match conv.kind:
        case ConversationKind.DIRECT:
            other = next((p for p in conv.participant_ids if p != viewer_id), viewer_id)
            try:
                return (await stores.peers.get_peer(other)).display_name
            except PeerNotFound:
                return other
        case ConversationKind.GROUP:
            if conv.title:
                return conv.title
            names = []
            for peer_id in sorted(conv.participant_ids - {viewer_id}):
                try:
                    names.append((await stores.peers.get_peer(peer_id)).display_name)
                except PeerNotFound:
                    names.append(peer_id)
            return ', '.join(names)
        case _:
            raise ValueError(f'Unknown conversation kind {conv.kind!r}')
