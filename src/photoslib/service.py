from __future__ import annotations

from collections import Counter
from contextlib import asynccontextmanager
import logging
from typing import Any, AsyncIterator

from photoslib.config import AppConfig
from photoslib.errors import AttributeLookupError, MappingError
from photoslib.library import PhotosLibrary
from photoslib.output_models import (
    KindCountOutput,
    SummaryOutput,
    asset_output,
    lookup_error_output,
    row_error_output,
)

logger = logging.getLogger(__name__)


class PhotosService:
    """Library operations behind the CLI, each returning plain dicts."""

    def __init__(self, config: AppConfig):
        self.config = config

    @asynccontextmanager
    async def _library(self) -> AsyncIterator[PhotosLibrary]:
        library = await PhotosLibrary.open(self.config.library_path)
        async with library:
            yield library

    def _row_failed(self, err: MappingError) -> None:
        if not self.config.stream.skip_errors:
            raise err
        logger.warning("skipping asset %s: %s", err.pk, err)

    async def count_assets(self) -> dict[str, Any]:
        async with self._library() as library:
            stream = await library.visible_assets(batch_size=self.config.stream.batch_size)
            kinds: Counter[str] = Counter()
            async with stream:
                async for item in stream:
                    if isinstance(item, MappingError):
                        self._row_failed(item)
                        continue
                    kinds[str(item.kind)] += 1
            summary = SummaryOutput(
                library_path=str(library.library_path),
                database_path=str(library.database_path),
                visible=stream.delivered,
                failed=stream.failed,
                last_pk=stream.last_pk,
                kinds=[KindCountOutput(kind=k, count=n) for k, n in sorted(kinds.items())],
            )
        return summary.model_dump()

    async def list_assets(
        self,
        after_pk: int | None = None,
        limit: int | None = None,
        with_extra: bool = False,
    ) -> dict[str, Any]:
        rows: list[dict[str, Any]] = []
        errors: list[dict[str, Any]] = []
        async with self._library() as library:
            stream = await library.visible_assets(
                after_pk=after_pk,
                limit=limit,
                batch_size=self.config.stream.batch_size,
            )
            async with stream:
                async for item in stream:
                    if isinstance(item, MappingError):
                        self._row_failed(item)
                        errors.append(row_error_output(item).model_dump())
                        continue
                    extra = None
                    if with_extra:
                        try:
                            extra = await item.extra()
                        except AttributeLookupError as exc:
                            logger.warning("no extra attributes for asset %s: %s", item.pk, exc)
                            errors.append(lookup_error_output(item, exc).model_dump())
                    rows.append(asset_output(item, extra).model_dump())
            return {"assets": rows, "errors": errors, "last_pk": stream.last_pk}

    async def asset_extra(self, pk: int) -> dict[str, Any] | None:
        async with self._library() as library:
            stream = await library.visible_assets(after_pk=pk - 1, limit=1)
            async with stream:
                async for asset in stream.assets():
                    if asset.pk != pk:
                        return None
                    extra = await asset.extra()
                    return asset_output(asset, extra).model_dump()
        return None

    async def status(self) -> dict[str, Any]:
        async with self._library() as library:
            return {
                "library_path": str(library.library_path),
                "database_path": str(library.database_path),
                "batch_size": self.config.stream.batch_size,
                "skip_errors": self.config.stream.skip_errors,
            }
