"""Positional row mapping for the visible-asset query.

The select list in :mod:`photoslib.query` and ``COLUMNS`` below describe the
same positions; change both together.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Sequence

from photoslib.errors import MappingError, TimestampDecodeError
from photoslib.models import Asset, AssetKind
from photoslib.timestamps import decode_timestamp

if TYPE_CHECKING:
    from photoslib.library import PhotosLibrary

COLUMNS = (
    "pk",
    "uuid",
    "kind",
    "uniform_type_identifier",
    "kind_subtype",
    "directory",
    "filename",
    "created",
    "modified",
    "added",
    "height",
    "width",
)

COL_PK = 0
COL_UUID = 1
COL_KIND = 2
COL_UTI = 3
COL_KIND_SUBTYPE = 4
COL_DIRECTORY = 5
COL_FILENAME = 6
COL_CREATED = 7
COL_MODIFIED = 8
COL_ADDED = 9
COL_HEIGHT = 10
COL_WIDTH = 11


def _get(row: Sequence[Any], idx: int, kind: type, pk: int | None, filename: str | None) -> Any:
    value = row[idx]
    if value is None or isinstance(value, bool) or not isinstance(value, kind):
        name = COLUMNS[idx]
        found = "NULL" if value is None else type(value).__name__
        where = f" for file {filename}" if filename else ""
        raise MappingError(
            f"bad {name} column{where}: expected {kind.__name__}, got {found}",
            pk=pk,
            field=name,
            filename=filename,
        )
    return value


def _timestamp(row: Sequence[Any], idx: int, pk: int, filename: str) -> datetime:
    name = COLUMNS[idx]
    try:
        return decode_timestamp(row[idx])
    except TimestampDecodeError as exc:
        raise MappingError(
            f"bad {name} datetime for file {filename}: {exc}",
            pk=pk,
            field=name,
            filename=filename,
        ) from exc


def map_row(row: Sequence[Any], library: PhotosLibrary) -> Asset:
    if len(row) != len(COLUMNS):
        raise MappingError(f"expected {len(COLUMNS)} columns, got {len(row)}")

    pk = _get(row, COL_PK, int, None, None)
    filename = _get(row, COL_FILENAME, str, pk, None)

    return Asset(
        library=library,
        pk=pk,
        uuid=_get(row, COL_UUID, str, pk, filename),
        kind=AssetKind(_get(row, COL_KIND, int, pk, filename)),
        uniform_type_identifier=_get(row, COL_UTI, str, pk, filename),
        kind_subtype=_get(row, COL_KIND_SUBTYPE, int, pk, filename),
        directory=_get(row, COL_DIRECTORY, str, pk, filename),
        filename=filename,
        created=_timestamp(row, COL_CREATED, pk, filename),
        modified=_timestamp(row, COL_MODIFIED, pk, filename),
        added=_timestamp(row, COL_ADDED, pk, filename),
        height=_get(row, COL_HEIGHT, int, pk, filename),
        width=_get(row, COL_WIDTH, int, pk, filename),
    )
