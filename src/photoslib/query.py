from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, AsyncIterator

import aiosqlite

from photoslib.errors import LibraryConnectionError, MappingError, QueryError
from photoslib.mapper import COLUMNS, map_row
from photoslib.models import Asset

if TYPE_CHECKING:
    from photoslib.library import PhotosLibrary

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 256

# Positions must match photoslib.mapper.COLUMNS.
VISIBLE_ASSETS_SELECT = """
SELECT
  ZASSET.Z_PK,                   -- 0
  ZASSET.ZUUID,                  -- 1
  ZASSET.ZKIND,                  -- 2
  ZASSET.ZUNIFORMTYPEIDENTIFIER, -- 3
  ZASSET.ZKINDSUBTYPE,           -- 4
  ZASSET.ZDIRECTORY,             -- 5
  ZASSET.ZFILENAME,              -- 6
  ZASSET.ZDATECREATED,           -- 7
  ZASSET.ZMODIFICATIONDATE,      -- 8
  ZASSET.ZADDEDDATE,             -- 9
  ZASSET.ZHEIGHT,                -- 10
  ZASSET.ZWIDTH                  -- 11
FROM ZASSET
"""

VISIBLE_CLAUSES = (
    "ZASSET.ZTRASHEDSTATE = 0",
    "ZASSET.ZHIDDEN = 0",
    "ZASSET.ZVISIBILITYSTATE = 0",
)


@dataclass(slots=True)
class VisibleAssetQuery:
    """Assets that are neither trashed nor hidden, in ascending pk order.

    ``after_pk`` resumes after a checkpoint taken from a previous stream;
    ``limit`` caps the number of rows for page-sized reads.
    """

    after_pk: int | None = None
    limit: int | None = None
    batch_size: int = DEFAULT_BATCH_SIZE

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")

    def sql(self) -> tuple[str, list[Any]]:
        clauses = list(VISIBLE_CLAUSES)
        args: list[Any] = []
        if self.after_pk is not None:
            clauses.append("ZASSET.Z_PK > ?")
            args.append(self.after_pk)
        sql = VISIBLE_ASSETS_SELECT + "WHERE " + " AND ".join(clauses) + "\nORDER BY ZASSET.Z_PK"
        if self.limit is not None:
            sql += "\nLIMIT ?"
            args.append(self.limit)
        return sql, args

    async def stream(self, library: PhotosLibrary) -> AssetStream:
        """Issue the query and return a fresh single-pass stream over its rows.

        Raises QueryError when the statement cannot be started or when the
        store returns a different number of columns than the row mapper reads.
        """
        sql, args = self.sql()
        logger.debug("visible asset query after_pk=%s limit=%s", self.after_pk, self.limit)
        try:
            cursor = await library.execute(sql, args)
        except (aiosqlite.Error, LibraryConnectionError) as exc:
            raise QueryError(f"visible asset query failed: {exc}") from exc

        width = len(cursor.description or ())
        if width != len(COLUMNS):
            await cursor.close()
            raise QueryError(f"visible asset query returned {width} columns, expected {len(COLUMNS)}")
        return AssetStream(library, cursor, self.batch_size)


class AssetStream:
    """Async iterator of ``Asset`` or ``MappingError`` items.

    Rows are pulled from the cursor ``batch_size`` at a time and mapped as
    they are handed out. A row that fails to map is yielded as its
    ``MappingError`` and iteration continues with the next row. Closing the
    stream early (``aclose`` or leaving ``async with``) releases the cursor.
    """

    def __init__(self, library: PhotosLibrary, cursor: aiosqlite.Cursor, batch_size: int = DEFAULT_BATCH_SIZE):
        self._library = library
        self._cursor: aiosqlite.Cursor | None = cursor
        self._batch_size = batch_size
        self._rows: deque[Any] = deque()
        self.last_pk: int | None = None
        self.delivered = 0
        self.failed = 0

    @property
    def closed(self) -> bool:
        return self._cursor is None and not self._rows

    def __aiter__(self) -> AssetStream:
        return self

    async def __anext__(self) -> Asset | MappingError:
        if not self._rows:
            await self._fill()
        if not self._rows:
            raise StopAsyncIteration
        row = self._rows.popleft()
        try:
            asset = map_row(row, self._library)
        except MappingError as exc:
            self.failed += 1
            return exc
        self.delivered += 1
        self.last_pk = asset.pk
        return asset

    async def _fill(self) -> None:
        if self._cursor is None:
            return
        try:
            rows = await self._cursor.fetchmany(self._batch_size)
        except aiosqlite.Error as exc:
            await self.aclose()
            raise QueryError(f"visible asset query failed after pk {self.last_pk}: {exc}") from exc
        if rows:
            self._rows.extend(rows)
        else:
            await self.aclose()

    async def assets(self) -> AsyncIterator[Asset]:
        """Iterate assets only, raising the first MappingError encountered."""
        async for item in self:
            if isinstance(item, MappingError):
                raise item
            yield item

    async def aclose(self) -> None:
        cursor, self._cursor = self._cursor, None
        self._rows.clear()
        if cursor is not None and not self._library.closed:
            await cursor.close()

    async def __aenter__(self) -> AssetStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
