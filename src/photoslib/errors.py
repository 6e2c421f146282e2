from __future__ import annotations


class PhotosLibraryError(Exception):
    """Base class for every error raised by photoslib."""


class LibraryConnectionError(PhotosLibraryError):
    pass


class QueryError(PhotosLibraryError):
    pass


class TimestampDecodeError(PhotosLibraryError, ValueError):
    pass


class MappingError(PhotosLibraryError):
    """A single row could not be turned into an Asset.

    Delivered as an element of the asset stream rather than raised by it, so
    the caller decides whether to skip, log or abort.
    """

    def __init__(
        self,
        message: str,
        *,
        pk: int | None = None,
        field: str | None = None,
        filename: str | None = None,
    ):
        super().__init__(message)
        self.pk = pk
        self.field = field
        self.filename = filename


class AttributeLookupError(PhotosLibraryError):
    def __init__(self, message: str, *, pk: int):
        super().__init__(message)
        self.pk = pk


class ExtraNotFoundError(AttributeLookupError):
    pass


class ExtraStoreError(AttributeLookupError):
    pass
