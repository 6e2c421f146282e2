import asyncio
from contextlib import closing
from pathlib import Path
import sqlite3

import pytest

from photoslib import extra as extra_mod
from photoslib.errors import ExtraNotFoundError, ExtraStoreError
from photoslib.library import PhotosLibrary
from photoslib.models import Asset


async def _asset(library: PhotosLibrary, pk: int) -> Asset:
    stream = await library.visible_assets(after_pk=pk - 1, limit=1)
    async with stream:
        return [a async for a in stream.assets()][0]


def test_extra_is_fetched_once(library_root: Path) -> None:
    async def _run() -> None:
        async with await PhotosLibrary.open(library_root) as library:
            asset = await _asset(library, 2)
            assert asset.cached_extra() is None
            before = library.stats.point_lookups

            first = await asset.extra()
            second = await asset.extra()

            assert first.original_filename == "original_2.jpg"
            assert second is first
            assert asset.cached_extra() is first
            assert library.stats.point_lookups - before == 1

    asyncio.run(_run())


def test_concurrent_first_access_issues_one_lookup(library_root: Path) -> None:
    async def _run() -> None:
        async with await PhotosLibrary.open(library_root) as library:
            asset = await _asset(library, 1)
            results = await asyncio.gather(*(asset.extra() for _ in range(5)))
            assert all(r is results[0] for r in results)
            assert library.stats.point_lookups == 1

    asyncio.run(_run())


def test_extra_available_after_stream_is_drained(library_root: Path) -> None:
    async def _run() -> list[str]:
        async with await PhotosLibrary.open(library_root) as library:
            stream = await library.visible_assets()
            async with stream:
                assets = [a async for a in stream.assets()]
            assert stream.closed
            return [(await a.extra()).original_filename for a in assets[:2]]

    assert asyncio.run(_run()) == ["original_1.jpg", "original_2.jpg"]


def test_missing_row_is_not_found(library_root: Path) -> None:
    async def _run() -> None:
        async with await PhotosLibrary.open(library_root) as library:
            asset = await _asset(library, 3)
            results = await asyncio.gather(asset.extra(), asset.extra(), return_exceptions=True)
            assert all(isinstance(r, ExtraNotFoundError) for r in results)
            assert results[0] is results[1]
            assert results[0].pk == 3
            assert library.stats.point_lookups == 1

            with pytest.raises(ExtraNotFoundError):
                await asset.extra()
            assert library.stats.point_lookups == 2
            assert asset.cached_extra() is None

    asyncio.run(_run())


def test_null_original_filename_is_not_found(library_root: Path, add_asset) -> None:
    add_asset(5)
    with closing(sqlite3.connect(library_root / "database" / "Photos.sqlite")) as conn:
        conn.execute("UPDATE ZADDITIONALASSETATTRIBUTES SET ZORIGINALFILENAME = NULL WHERE ZASSET = 5")
        conn.commit()

    async def _run() -> None:
        async with await PhotosLibrary.open(library_root) as library:
            asset = await _asset(library, 5)
            with pytest.raises(ExtraNotFoundError):
                await asset.extra()

    asyncio.run(_run())


def test_store_error_after_close(library_root: Path) -> None:
    async def _run() -> None:
        library = await PhotosLibrary.open(library_root)
        async with library:
            asset = await _asset(library, 1)
        with pytest.raises(ExtraStoreError) as info:
            await asset.extra()
        assert info.value.pk == 1

    asyncio.run(_run())


def test_cancelled_lookup_can_be_retried(library_root: Path, monkeypatch) -> None:
    real_fetch = extra_mod.fetch_extra
    calls: list[int] = []

    async def _run() -> None:
        started = asyncio.Event()
        release = asyncio.Event()

        async def _slow_fetch(library, pk):
            calls.append(pk)
            started.set()
            await release.wait()
            return await real_fetch(library, pk)

        monkeypatch.setattr(extra_mod, "fetch_extra", _slow_fetch)

        async with await PhotosLibrary.open(library_root) as library:
            asset = await _asset(library, 2)
            first = asyncio.create_task(asset.extra())
            waiter = asyncio.create_task(asset.extra())
            await started.wait()

            first.cancel()
            with pytest.raises(asyncio.CancelledError):
                await first
            assert asset.cached_extra() is None

            release.set()
            value = await waiter
            assert value.original_filename == "original_2.jpg"
            assert await asset.extra() is value

    asyncio.run(_run())
    assert calls == [2, 2]
