from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from photoslib.util.once import AsyncOnceCell

if TYPE_CHECKING:
    from photoslib.library import PhotosLibrary

KIND_NAMES = {0: "photo", 1: "video"}


@dataclass(frozen=True, slots=True)
class AssetKind:
    code: int

    @property
    def name(self) -> str:
        return KIND_NAMES.get(self.code, "unknown")

    @property
    def is_known(self) -> bool:
        return self.code in KIND_NAMES

    def __str__(self) -> str:
        if self.is_known:
            return self.name
        return f"unknown({self.code})"


PHOTO = AssetKind(0)
VIDEO = AssetKind(1)


@dataclass(frozen=True, slots=True)
class ExtraAttributes:
    original_filename: str


@dataclass(frozen=True, slots=True)
class Asset:
    """One visible asset of a library.

    Keeps a reference to the library that produced it so the extra attributes
    can still be looked up after the stream that yielded it is gone.
    """

    library: PhotosLibrary = field(repr=False, compare=False)
    pk: int
    uuid: str
    kind: AssetKind
    uniform_type_identifier: str
    kind_subtype: int
    directory: str
    filename: str
    created: datetime
    modified: datetime
    added: datetime
    height: int
    width: int
    _extra: AsyncOnceCell[ExtraAttributes] = field(
        default_factory=AsyncOnceCell, init=False, repr=False, compare=False
    )

    @property
    def rel_path(self) -> str:
        if not self.directory:
            return self.filename
        return f"{self.directory}/{self.filename}"

    async def extra(self) -> ExtraAttributes:
        """Secondary attributes, fetched from the store on first call only."""
        from photoslib.extra import fetch_extra

        return await self._extra.get_or_init(lambda: fetch_extra(self.library, self.pk))

    def cached_extra(self) -> ExtraAttributes | None:
        return self._extra.get()
