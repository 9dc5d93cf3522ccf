import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from studyhub.file_storage import FileStorageManager
from studyhub.main import create_app
from studyhub.models.peers import Peer
from studyhub.stores import build_stores


@pytest.fixture
def stores(tmp_path):
    return build_stores(files=FileStorageManager(str(tmp_path / "resources")))


@pytest.fixture
def app(stores):
    return create_app(stores, background=False)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def peers(stores):
    """Nomsa, Khotso and Thabo registered at UKZN"""
    for peer in (
        Peer(id="nomsa", display_name="Nomsa Dlamini", university_id="ukzn", course="Mathematics", year_of_study="3rd Year"),
        Peer(id="khotso", display_name="Khotso Mokoena", university_id="ukzn", course="Computer Science", year_of_study="2nd Year"),
        Peer(id="thabo", display_name="Thabo Nkosi", university_id="ukzn", course="Computer Science", year_of_study="3rd Year"),
    ):
        await stores.peers.upsert_peer(peer)
    return stores.peers


def as_peer(peer_id: str) -> dict:
    return {"X-Peer-Id": peer_id}
