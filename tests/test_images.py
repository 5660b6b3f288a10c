from unittest import mock

import pytest

from conftest import png_bytes, jpeg_bytes
from photoportal.aws.metadata import MetadataStore
from photoportal.aws.storage import ObjectStore
from photoportal.components.portal import PhotoPortal
from photoportal.core.models import ImageRecord, LocalFile


@pytest.mark.asyncio
async def test_load_orders_records_by_creation_time(aws_mock):
    metadata = MetadataStore()
    metadata.insert(ImageRecord(id="r2.png", url="https://x.test/r2.png", caption="R2", created_at=1))
    metadata.insert(ImageRecord(id="r1.png", url="https://x.test/r1.png", caption="R1", created_at=2))

    portal = PhotoPortal()
    await portal.mount()
    assert [i.id for i in portal.gallery.images] == ["r1.png", "r2.png"]
    portal.unmount()


@pytest.mark.asyncio
async def test_two_dropped_files_become_two_records(aws_mock, monkeypatch):
    clock = iter([1000000, 2000000])
    monkeypatch.setattr("photoportal.components.uploader.now_ms", lambda: next(clock))

    portal = PhotoPortal()
    await portal.mount()
    portal.uploader.accept_files([
        LocalFile(filename="a.jpg", content_type="image/jpeg", data=jpeg_bytes()),
        LocalFile(filename="b.png", content_type="image/png", data=png_bytes()),
    ])
    assert [e.file.filename for e in portal.uploader.pending] == ["a.jpg", "b.png"]

    records = await portal.uploader.submit_all()

    stored = MetadataStore().list_all()
    assert [r.id for r in stored] == [records[1].id, records[0].id]
    assert [r.created_at for r in stored] == [2000000, 1000000]
    assert all(r.caption == "New uploaded image" for r in stored)
    assert len({r.url for r in stored}) == 2
    assert portal.gallery.images == [records[1], records[0]]
    assert portal.uploader.pending == []

    body, content_type = ObjectStore().get(records[1].id)
    assert content_type == "image/png"


@pytest.mark.asyncio
async def test_delete_with_failing_object_delete(aws_mock):
    objects = ObjectStore()
    metadata = MetadataStore()
    objects.put("r1.png", png_bytes(), "image/png")
    metadata.insert(ImageRecord(id="r1.png", url=objects.public_url_for("r1.png"), caption="R1", created_at=2))
    metadata.insert(ImageRecord(id="r2.png", url=objects.public_url_for("r2.png"), caption="R2", created_at=1))

    portal = PhotoPortal()
    await portal.mount()
    r1 = portal.gallery.find("r1.png")
    portal.gallery.open(r1)

    with mock.patch.object(ObjectStore, "delete", side_effect=RuntimeError("s3 down")):
        assert await portal.gallery.remove(r1, confirm=lambda _m: True)

    assert portal.gallery.selected is None
    assert portal.gallery.error is None
    await portal.gallery.load()
    assert [i.id for i in portal.gallery.images] == ["r2.png"]
    assert portal.gallery.error is None
    # The object was left behind
    assert objects.get("r1.png")[0]
