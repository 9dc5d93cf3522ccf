from dataclasses import dataclass, field

from .clock import MonotonicClock
from .conversations import ConversationStore
from .directory import PeerDirectory
from .file_storage import FileStorageManager
from .library import ResourceLibrary


@dataclass
class Stores:
    """Store instances handed to the API; one set per application"""
    peers: PeerDirectory = field(default_factory=PeerDirectory)
    conversations: ConversationStore = field(default_factory=ConversationStore)
    library: ResourceLibrary = field(default_factory=ResourceLibrary)
    files: FileStorageManager = field(default_factory=FileStorageManager)


def build_stores(clock: MonotonicClock = None, **overrides) -> Stores:
    clock = clock or MonotonicClock()
    stores = Stores(
        peers=PeerDirectory(clock=clock),
        conversations=ConversationStore(clock=clock),
        library=ResourceLibrary(clock=clock),
    )
    for name, value in overrides.items():
        setattr(stores, name, value)
    return stores
