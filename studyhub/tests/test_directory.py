import pytest

from studyhub.directory import PeerDirectory
from studyhub.errors import DuplicateId, PeerNotFound
from studyhub.models.peers import Peer, University

STUDENTS = [
    Peer(id="sipho", display_name="Sipho M.", university_id="ukzn", year_of_study="3rd Year", course="Comp Sci"),
    Peer(id="thando", display_name="Thando Z.", university_id="ukzn", year_of_study="1st Year", course="Mathematics"),
    Peer(id="kyle", display_name="Kyle V.", university_id="uct", year_of_study="2nd Year", course="Economics"),
    Peer(id="lerato", display_name="Lerato K.", university_id="wits", year_of_study="Honours", course="Physics"),
    Peer(id="jason", display_name="Jason D.", university_id="up", year_of_study="1st Year", course="Informatics"),
]


async def make_directory():
    directory = PeerDirectory()
    for peer in STUDENTS:
        await directory.upsert_peer(Peer(**vars(peer)))
    return directory


@pytest.mark.asyncio
async def test_upsert_updates_name_but_not_university():
    directory = await make_directory()
    updated = await directory.upsert_peer(Peer(id="kyle", display_name="Kyle Visser", university_id="uct"))
    assert updated.display_name == "Kyle Visser"
    assert updated.initials == "KV"
    assert (await directory.get_peer("kyle")).display_name == "Kyle Visser"

    with pytest.raises(DuplicateId):
        await directory.upsert_peer(Peer(id="kyle", display_name="Kyle V.", university_id="wits"))
    assert (await directory.get_peer("kyle")).university_id == "uct"


@pytest.mark.asyncio
async def test_initials_are_derived_from_the_name():
    assert Peer(id="n", display_name="Nomsa Dlamini", university_id="ukzn").initials == "ND"
    assert Peer(id="s", display_name="Sipho M.", university_id="ukzn").initials == "SM"


@pytest.mark.asyncio
async def test_set_online_is_idempotent_and_tracks_last_seen():
    directory = await make_directory()
    first = await directory.set_online("lerato", True)
    seen = first.last_seen
    again = await directory.set_online("lerato", True)
    assert again.online is True
    assert again.last_seen > seen
    await directory.set_online("lerato", False)
    assert (await directory.get_peer("lerato")).online is False
    with pytest.raises(PeerNotFound):
        await directory.set_online("ghost", True)


@pytest.mark.asyncio
async def test_empty_search_returns_everyone_by_name():
    directory = await make_directory()
    results = await directory.search_peers()
    assert [p.id for p in results] == ["jason", "kyle", "lerato", "sipho", "thando"]


@pytest.mark.asyncio
async def test_search_combines_name_and_filters():
    directory = await make_directory()
    results = await directory.search_peers("", {"university_id": "ukzn", "year_of_study": "1st Year"})
    assert [p.id for p in results] == ["thando"]

    results = await directory.search_peers("SIPHO", {"university_id": "ukzn"})
    assert [p.id for p in results] == ["sipho"]

    results = await directory.search_peers("sipho", {"university_id": "uct"})
    assert list(results) == []


@pytest.mark.asyncio
async def test_search_results_can_be_iterated_again():
    directory = await make_directory()
    results = await directory.search_peers("", {"year_of_study": "1st Year"})
    assert [p.id for p in results] == [p.id for p in results] == ["jason", "thando"]


@pytest.mark.asyncio
async def test_search_by_presence_and_unknown_filter():
    directory = await make_directory()
    await directory.set_online("kyle", True)
    assert [p.id for p in await directory.search_peers("", {"online": True})] == ["kyle"]
    with pytest.raises(ValueError):
        await directory.search_peers("", {"favourite_colour": "blue"})


@pytest.mark.asyncio
async def test_deactivated_peers_drop_out_of_search():
    directory = await make_directory()
    await directory.set_online("jason", True)
    peer = await directory.deactivate("jason")
    assert peer.active is False
    assert peer.online is False
    assert "jason" not in [p.id for p in await directory.search_peers()]
    # soft deactivation keeps the record
    assert (await directory.get_peer("jason")).display_name == "Jason D."


@pytest.mark.asyncio
async def test_update_profile():
    directory = await make_directory()
    peer = await directory.update_profile("sipho", display_name="Sipho Zulu", bio="Looking for study buddy")
    assert peer.initials == "SZ"
    assert peer.bio == "Looking for study buddy"
    with pytest.raises(ValueError):
        await directory.update_profile("sipho", university_id="uct")


@pytest.mark.asyncio
async def test_universities_are_listed_by_name():
    directory = PeerDirectory()
    await directory.upsert_university(University(id="wits", name="Wits"))
    await directory.upsert_university(University(id="uct", name="UCT"))
    assert [u.id for u in await directory.list_universities()] == ["uct", "wits"]
