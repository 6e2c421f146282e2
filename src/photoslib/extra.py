from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiosqlite

from photoslib.errors import ExtraNotFoundError, ExtraStoreError, LibraryConnectionError
from photoslib.models import ExtraAttributes

if TYPE_CHECKING:
    from photoslib.library import PhotosLibrary

logger = logging.getLogger(__name__)

EXTRA_SQL = """
SELECT
  ZADDITIONALASSETATTRIBUTES.ZORIGINALFILENAME
FROM ZADDITIONALASSETATTRIBUTES
WHERE ZADDITIONALASSETATTRIBUTES.ZASSET = ?
"""


async def fetch_extra(library: PhotosLibrary, pk: int) -> ExtraAttributes:
    logger.debug("loading extra attributes for asset %s", pk)
    try:
        row = await library.fetch_one(EXTRA_SQL, (pk,))
    except (aiosqlite.Error, LibraryConnectionError) as exc:
        raise ExtraStoreError(f"extra attributes lookup failed for asset {pk}: {exc}", pk=pk) from exc
    if row is None:
        raise ExtraNotFoundError(f"no extra attributes for asset {pk}", pk=pk)
    original_filename = row[0]
    if not isinstance(original_filename, str):
        raise ExtraNotFoundError(f"asset {pk} has no original filename", pk=pk)
    return ExtraAttributes(original_filename=original_filename)
