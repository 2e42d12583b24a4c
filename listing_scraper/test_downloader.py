"""
Tests for concurrent image downloads.
"""
import asyncio

import httpx
import pytest
import respx

from listing_scraper.downloader import download_images, image_filename


def test_image_filename_uses_input_position():
    assert image_filename(3, "https://cdn.test/a-800x600.webp") == "image_3.webp"
    assert image_filename(1, "https://cdn.test/photo/123") == "image_1.jpeg"


@pytest.mark.asyncio
@respx.mock
async def test_failed_download_leaves_gap_in_numbering(tmp_path, fast_settings):
    respx.get("https://cdn.test/1.jpg").mock(return_value=httpx.Response(200, content=b"one"))
    respx.get("https://cdn.test/2.jpg").mock(return_value=httpx.Response(404))
    respx.get("https://cdn.test/3.png").mock(return_value=httpx.Response(200, content=b"three"))

    dest = tmp_path / "images" / "87607079"
    paths = await download_images(
        ["https://cdn.test/1.jpg", "https://cdn.test/2.jpg", "https://cdn.test/3.png"],
        dest,
        fast_settings,
    )

    assert paths == [str(dest / "image_1.jpg"), str(dest / "image_3.png")]
    assert (dest / "image_1.jpg").read_bytes() == b"one"
    assert (dest / "image_3.png").read_bytes() == b"three"
    assert not list(dest.glob("image_2.*"))


@pytest.mark.asyncio
@respx.mock
async def test_transport_error_is_skipped(tmp_path, fast_settings):
    respx.get("https://cdn.test/1.jpg").mock(side_effect=httpx.ConnectError("connection refused"))
    respx.get("https://cdn.test/2").mock(return_value=httpx.Response(200, content=b"two"))

    paths = await download_images(["https://cdn.test/1.jpg", "https://cdn.test/2"], tmp_path, fast_settings)

    assert paths == [str(tmp_path / "image_2.jpeg")]


@pytest.mark.asyncio
async def test_result_order_follows_input_not_completion(tmp_path, fast_settings):
    completed = []

    async def handler(request):
        if request.url.path == "/slow.jpg":
            await asyncio.sleep(0.05)
        completed.append(request.url.path)
        return httpx.Response(200, content=b"data")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        paths = await download_images(
            ["https://cdn.test/slow.jpg", "https://cdn.test/fast.jpg"], tmp_path, fast_settings, client=client
        )

    assert completed == ["/fast.jpg", "/slow.jpg"]
    assert paths == [str(tmp_path / "image_1.jpg"), str(tmp_path / "image_2.jpg")]


@pytest.mark.asyncio
@respx.mock
async def test_all_downloads_fail(tmp_path, fast_settings):
    route = respx.get(url__startswith="https://cdn.test/").mock(return_value=httpx.Response(500))
    urls = [f"https://cdn.test/{i}.jpg" for i in range(1, 4)]

    assert await download_images(urls, tmp_path / "imgs", fast_settings) == []
    assert route.call_count == 3
    assert (tmp_path / "imgs").is_dir()


@pytest.mark.asyncio
async def test_empty_url_list_still_creates_directory(tmp_path, fast_settings):
    dest = tmp_path / "a" / "b"
    assert await download_images([], dest, fast_settings) == []
    assert dest.is_dir()
    # Existing directory is fine
    assert await download_images([], dest, fast_settings) == []


@pytest.mark.asyncio
async def test_concurrency_is_bounded(tmp_path, fast_settings):
    fast_settings.DOWNLOAD_CONCURRENCY = 2
    in_flight = 0
    peak = 0

    async def tracked(request):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return httpx.Response(200, content=b"x")

    urls = [f"https://cdn.test/{i}.jpg" for i in range(6)]
    async with httpx.AsyncClient(transport=httpx.MockTransport(tracked)) as client:
        paths = await download_images(urls, tmp_path, fast_settings, client=client)

    assert len(paths) == 6
    assert peak == 2


@pytest.mark.asyncio
@respx.mock
async def test_write_failure_raises_after_other_downloads_finish(tmp_path, fast_settings):
    respx.get("https://cdn.test/1.jpg").mock(return_value=httpx.Response(200, content=b"one"))
    second = respx.get("https://cdn.test/2.jpg").mock(return_value=httpx.Response(200, content=b"two"))
    # A directory in the way makes writing image_1.jpg fail
    (tmp_path / "image_1.jpg").mkdir()

    with pytest.raises(OSError):
        await download_images(["https://cdn.test/1.jpg", "https://cdn.test/2.jpg"], tmp_path, fast_settings)

    assert second.called
    assert (tmp_path / "image_2.jpg").read_bytes() == b"two"
