import pytest

from listing_pipeline.config import settings
from listing_pipeline.models import Agent
from listing_pipeline.service_layer.use_cases.bulk_insert import bulk_insert


@pytest.mark.asyncio
async def test_bulk_insert_matches_images_and_persists(store, static_lister, drive_file, make_row, folder_url):
    files = [drive_file("1-Avatar-1.jpg"), drive_file("1-Avatar-2.jpg"), drive_file("2-Avatar-1.jpg")]
    lister = static_lister(files)
    rows = [make_row(1), make_row(2), make_row(3, school1_name="DPS", school1_distance="1 km")]

    res = await bulk_insert(rows, folder_url, store=store, lister=lister)

    assert res.fatal_error is None
    assert lister.calls == ["1AbC-folder_9"]
    assert res.total == 3
    assert res.prepared == 3
    assert res.inserted_count == 3
    assert res.image_match_count == 2
    assert res.no_image_count == 1

    stored = await store.find_many(
        "properties", {}, ["slug", "main_image_url", "image_gallery", "nearby_landmarks", "agent_id"], order_by="id"
    )
    assert [r["slug"][-2:] for r in stored] == ["gi", "-2", "-3"]
    assert stored[0]["main_image_url"] == files[0].url
    assert stored[0]["image_gallery"] == [files[1].url]
    assert stored[2]["main_image_url"] == settings.PLACEHOLDER_IMAGE_URL
    assert stored[2]["nearby_landmarks"] == {"school1_name": "DPS", "school1_distance": "1 km"}
    assert {r["agent_id"] for r in stored} == {settings.FALLBACK_AGENT_ID}


@pytest.mark.asyncio
async def test_slugs_stay_unique_across_runs(store, make_row):
    await bulk_insert([make_row(1)], None, store=store)
    second = await bulk_insert([make_row(1)], None, store=store)

    assert second.inserted_count == 1
    slugs = [r["slug"] for r in await store.find_many("properties", {}, ["slug"], order_by="id")]
    assert slugs == [
        "3-bhk-apartment-for-sale-in-my-home-avatar-narsingi",
        "3-bhk-apartment-for-sale-in-my-home-avatar-narsingi-2",
    ]


@pytest.mark.asyncio
async def test_other_cities_are_skipped(store, make_row):
    rows = [make_row(1), make_row(2, city="Mumbai"), make_row(3, city=" hyderabad ")]

    res = await bulk_insert(rows, None, store=store)

    assert res.skipped == [2]
    assert res.inserted_count == 2
    assert res.inserted_sequence_numbers == [1, 3]


@pytest.mark.asyncio
async def test_first_active_agent_is_used(store, async_session_maker, make_row):
    async with async_session_maker() as session:
        session.add(Agent(id="00000000-0000-0000-0000-00000000000a", name="Inactive", is_active=False))
        session.add(Agent(id="00000000-0000-0000-0000-00000000000b", name="Asha", is_active=True))
        await session.commit()

    await bulk_insert([make_row(1)], None, store=store)

    row = await store.find_one("properties", {})
    assert row["agent_id"] == "00000000-0000-0000-0000-00000000000b"


@pytest.mark.asyncio
async def test_invalid_folder_url_aborts_before_persistence(store, make_row):
    res = await bulk_insert([make_row(1)], "https://drive.google.com/file/d/abc/view", store=store)

    assert res.fatal_error is not None
    assert "Invalid drive folder URL" in res.fatal_error
    assert res.inserted_count == 0
    assert res.chunks == []
    assert await store.find_many("properties", {}, ["id"]) == []


@pytest.mark.asyncio
async def test_listing_failure_aborts_before_persistence(store, broken_lister, make_row, folder_url):
    res = await bulk_insert([make_row(1)], folder_url, store=store, lister=broken_lister)

    assert "403 Forbidden" in res.fatal_error
    assert res.snapshot()["fatal_error"] == res.fatal_error
    assert await store.find_many("properties", {}, ["id"]) == []


@pytest.mark.asyncio
async def test_batch_isolation_through_the_run(flaky_store, store, make_row):
    rows = [make_row(n) for n in range(1, 46)]

    res = await bulk_insert(rows, None, store=flaky_store(fail_calls=(2,)), batch_size=20)

    assert res.total == 45
    assert res.inserted_count == 25
    assert res.errored_count == 20
    assert res.errors == [(2, "boom")]
    assert len(await store.find_many("properties", {}, ["id"])) == 25


@pytest.mark.asyncio
async def test_row_that_cannot_be_built_is_counted_and_the_run_continues(store, make_row):
    rows = [make_row(1, price=float("inf")), make_row(2)]

    res = await bulk_insert(rows, None, store=store)

    assert res.fatal_error is None
    assert res.prepared == 1
    assert res.inserted_count == 1
    assert res.errored_count == 1
    assert res.errored_sequence_numbers == [1]
    assert res.inserted_sequence_numbers == [2]
    assert res.build_errors[0][0] == 1
    assert res.snapshot()["build_errors"][0]["sequence_number"] == 1
    assert len(await store.find_many("properties", {}, ["id"])) == 1
