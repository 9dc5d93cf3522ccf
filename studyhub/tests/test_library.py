import asyncio
import os
from datetime import datetime, timedelta, timezone

import pytest

from studyhub.errors import NotTheUploader, OversizeFile, ResourceNotFound, UnsupportedType
from studyhub.file_storage import FileStorageManager
from studyhub.library import ResourceLibrary, ResourceMetadata, format_size
from studyhub.workers import PurgeWorker

NOW = datetime(2026, 10, 1, tzinfo=timezone.utc)


def meta(title, subject="Mathematics", file_type="PDF", size=1024, expires_at=None):
    return ResourceMetadata(title=title, subject=subject, file_type=file_type, size=size, expires_at=expires_at)


@pytest.mark.asyncio
async def test_calculus_scenario():
    library = ResourceLibrary()
    calc = await library.upload(meta("Calculus 101 Finals"), "thabo")
    assert [r.id for r in await library.search("calc")] == [calc.id]
    assert list(await library.search("calc", subject="Physics")) == []


@pytest.mark.asyncio
async def test_empty_search_keeps_upload_order():
    library = ResourceLibrary()
    titles = ["Calculus 101 Finals", "Data Structures Notes", "Physics Lab Results"]
    for t in titles:
        await library.upload(meta(t), "thabo")
    assert [r.title for r in await library.search("")] == titles


@pytest.mark.asyncio
async def test_upload_limits():
    library = ResourceLibrary(max_size=10 * 1024 * 1024)
    with pytest.raises(OversizeFile):
        await library.upload(meta("Huge", size=10 * 1024 * 1024 + 1), "thabo")
    with pytest.raises(UnsupportedType):
        await library.upload(meta("Virus", file_type="EXE"), "thabo")
    assert list(await library.search()) == []

    exact = await library.upload(meta("Exactly ten", size=10 * 1024 * 1024, file_type=".pdf"), "thabo")
    assert exact.file_type == "PDF"


@pytest.mark.asyncio
async def test_filter_by_file_type():
    library = ResourceLibrary()
    await library.upload(meta("Physics Lab Results", subject="Physics", file_type="XLS"), "thabo")
    await library.upload(meta("Linear Algebra Intro"), "thabo")
    assert [r.title for r in await library.search(file_type="xls")] == ["Physics Lab Results"]


@pytest.mark.asyncio
async def test_purge_removes_only_expired():
    library = ResourceLibrary()
    keep = await library.upload(meta("Never expires"), "thabo")
    later = await library.upload(meta("Later", expires_at=NOW + timedelta(days=1)), "thabo")
    gone = await library.upload(meta("Old", expires_at=NOW - timedelta(seconds=1)), "thabo")
    # expiry exactly at now is not before now
    edge = await library.upload(meta("Edge", expires_at=NOW), "thabo")

    purged = await library.purge_expired(NOW)
    assert [r.id for r in purged] == [gone.id]
    assert [r.id for r in await library.search()] == [keep.id, later.id, edge.id]


@pytest.mark.asyncio
async def test_naive_expiry_is_treated_as_utc():
    library = ResourceLibrary()
    await library.upload(meta("Naive", expires_at=datetime(2026, 9, 30)), "thabo")
    assert len(await library.purge_expired(NOW)) == 1


@pytest.mark.asyncio
async def test_delete_is_owner_only():
    library = ResourceLibrary()
    r = await library.upload(meta("Project Proposal v2", file_type="DOC"), "thabo")
    with pytest.raises(NotTheUploader):
        await library.delete(r.id, "nomsa")
    assert await library.list_uploads("thabo") == [r]
    await library.delete(r.id, "thabo")
    assert await library.list_uploads("thabo") == []
    with pytest.raises(ResourceNotFound):
        await library.get(r.id)


@pytest.mark.asyncio
async def test_purge_worker_removes_stored_bytes(tmp_path):
    files = FileStorageManager(str(tmp_path))
    library = ResourceLibrary()
    uri = await files.save("thabo", "lab.xls", b"data")
    await library.upload(
        ResourceMetadata("Physics Lab Results", "Physics", "XLS", 4, expires_at=NOW - timedelta(days=1), uri=uri),
        "thabo",
    )
    path = files.path_for_uri(uri)
    assert os.path.exists(path)

    worker = PurgeWorker(library, files, delay=60)
    purged = await worker.run_once(NOW)
    assert len(purged) == 1
    assert not os.path.exists(path)
    assert worker.get_stats()["processed"] == 1


def test_format_size():
    assert format_size(800 * 1024) == "800 KB"
    assert format_size(int(2.4 * 1024 * 1024)) == "2.4 MB"
    assert format_size(12) == "12 B"


@pytest.mark.asyncio
async def test_purge_running_alongside_uploads_sees_whole_resources():
    library = ResourceLibrary()
    past, future = NOW - timedelta(days=1), NOW + timedelta(days=1)
    jobs = []
    for i in range(20):
        jobs.append(library.upload(meta(f"Notes {i}", expires_at=past if i % 2 else future), "thabo"))
        if i % 4 == 0:
            jobs.append(library.purge_expired(NOW))
    results = await asyncio.gather(*jobs)

    uploaded = {r.id: r for r in results if not isinstance(r, list)}
    purged = [r for batch in results if isinstance(batch, list) for r in batch]
    assert len(uploaded) == 20
    assert all(r.id in uploaded and r.is_expired(NOW) and r.uploaded_at is not None for r in purged)

    remaining = {r.id for r in await library.search("")}
    # nothing lost or duplicated: every upload is either still listed or was purged once
    assert remaining | {r.id for r in purged} == set(uploaded)
    assert not remaining & {r.id for r in purged}
    assert len(purged) == len({r.id for r in purged})

    await library.purge_expired(NOW)
    assert sorted(r.title for r in await library.search("")) == sorted(f"Notes {i}" for i in range(0, 20, 2))
