from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Sequence

import aiosqlite

from photoslib.errors import LibraryConnectionError
from photoslib.models import Asset
from photoslib.paths import database_path, originals_root
from photoslib.query import DEFAULT_BATCH_SIZE, AssetStream, VisibleAssetQuery

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LibraryStats:
    queries: int = 0
    point_lookups: int = 0


class PhotosLibrary:
    """Read-only handle on a photo library's metadata database.

    One connection is shared by every stream and every ``Asset`` created from
    this handle. Use ``PhotosLibrary.open`` (or ``async with await ...``) and
    close it when the last asset is no longer needed.
    """

    def __init__(self, library_path: Path, conn: aiosqlite.Connection):
        self.library_path = library_path
        self.stats = LibraryStats()
        self._conn: aiosqlite.Connection | None = conn

    @property
    def database_path(self) -> Path:
        return database_path(self.library_path)

    @property
    def closed(self) -> bool:
        return self._conn is None

    @classmethod
    async def open(cls, library_path: Path | str) -> PhotosLibrary:
        root = Path(library_path).expanduser().resolve()
        db_path = database_path(root)
        if not db_path.is_file():
            raise LibraryConnectionError(f"no photos database at {db_path}")

        try:
            conn = await aiosqlite.connect(f"{db_path.as_uri()}?mode=ro", uri=True)
        except aiosqlite.Error as exc:
            raise LibraryConnectionError(f"cannot open {db_path}: {exc}") from exc
        try:
            # sqlite only reads the header on first use; fail here, not mid-stream.
            await conn.execute_fetchall("SELECT count(*) FROM sqlite_master")
        except aiosqlite.Error as exc:
            await conn.close()
            raise LibraryConnectionError(f"cannot read {db_path}: {exc}") from exc

        logger.debug("opened library %s", root)
        return cls(root, conn)

    async def close(self) -> None:
        conn, self._conn = self._conn, None
        if conn is not None:
            await conn.close()
            logger.debug("closed library %s", self.library_path)

    async def __aenter__(self) -> PhotosLibrary:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise LibraryConnectionError(f"library {self.library_path} is closed")
        return self._conn

    async def execute(self, sql: str, args: Sequence[Any] = ()) -> aiosqlite.Cursor:
        conn = self._connection()
        self.stats.queries += 1
        return await conn.execute(sql, args)

    async def fetch_one(self, sql: str, args: Sequence[Any] = ()) -> Any:
        conn = self._connection()
        self.stats.queries += 1
        self.stats.point_lookups += 1
        async with conn.execute(sql, args) as cursor:
            return await cursor.fetchone()

    async def visible_assets(
        self,
        after_pk: int | None = None,
        limit: int | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> AssetStream:
        query = VisibleAssetQuery(after_pk=after_pk, limit=limit, batch_size=batch_size)
        return await query.stream(self)

    def originals_path(self, asset: Asset) -> Path:
        return originals_root(self.library_path) / asset.rel_path
