# In-memory entities owned by the stores
from .peers import Peer, University  # noqa: F401
from .conversations import Conversation, ConversationKind, Message  # noqa: F401
from .resources import Resource  # noqa: F401
