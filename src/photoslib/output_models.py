from __future__ import annotations

from pydantic import BaseModel

from photoslib.errors import AttributeLookupError, MappingError
from photoslib.models import Asset, ExtraAttributes


class ExtraOutput(BaseModel):
    original_filename: str


class AssetOutput(BaseModel):
    pk: int
    uuid: str
    kind: str
    kind_code: int
    uniform_type_identifier: str
    kind_subtype: int
    directory: str
    filename: str
    rel_path: str
    created: str
    modified: str
    added: str
    height: int
    width: int
    extra: ExtraOutput | None = None


class RowErrorOutput(BaseModel):
    pk: int | None = None
    field: str | None = None
    filename: str | None = None
    message: str


class KindCountOutput(BaseModel):
    kind: str
    count: int


class SummaryOutput(BaseModel):
    library_path: str
    database_path: str
    visible: int
    failed: int
    last_pk: int | None = None
    kinds: list[KindCountOutput] = []


def asset_output(asset: Asset, extra: ExtraAttributes | None = None) -> AssetOutput:
    return AssetOutput(
        pk=asset.pk,
        uuid=asset.uuid,
        kind=str(asset.kind),
        kind_code=asset.kind.code,
        uniform_type_identifier=asset.uniform_type_identifier,
        kind_subtype=asset.kind_subtype,
        directory=asset.directory,
        filename=asset.filename,
        rel_path=asset.rel_path,
        created=asset.created.isoformat(),
        modified=asset.modified.isoformat(),
        added=asset.added.isoformat(),
        height=asset.height,
        width=asset.width,
        extra=ExtraOutput(original_filename=extra.original_filename) if extra else None,
    )


def row_error_output(err: MappingError) -> RowErrorOutput:
    return RowErrorOutput(pk=err.pk, field=err.field, filename=err.filename, message=str(err))


def lookup_error_output(asset: Asset, err: AttributeLookupError) -> RowErrorOutput:
    return RowErrorOutput(pk=asset.pk, field="extra", filename=asset.filename, message=str(err))
