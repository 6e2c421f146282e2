from __future__ import annotations

from contextlib import closing
from pathlib import Path
import sqlite3
from typing import Any, Callable

import pytest

SCHEMA = """
CREATE TABLE ZASSET (
  Z_PK INTEGER PRIMARY KEY,
  ZUUID VARCHAR,
  ZKIND INTEGER,
  ZUNIFORMTYPEIDENTIFIER VARCHAR,
  ZKINDSUBTYPE INTEGER,
  ZDIRECTORY VARCHAR,
  ZFILENAME VARCHAR,
  ZDATECREATED TIMESTAMP,
  ZMODIFICATIONDATE TIMESTAMP,
  ZADDEDDATE TIMESTAMP,
  ZHEIGHT INTEGER,
  ZWIDTH INTEGER,
  ZTRASHEDSTATE INTEGER,
  ZHIDDEN INTEGER,
  ZVISIBILITYSTATE INTEGER
);
CREATE TABLE ZADDITIONALASSETATTRIBUTES (
  Z_PK INTEGER PRIMARY KEY,
  ZASSET INTEGER,
  ZORIGINALFILENAME VARCHAR
);
"""

def _db_path(root: Path) -> Path:
    return root / "database" / "Photos.sqlite"


def insert_asset(
    root: Path,
    pk: int,
    *,
    kind: Any = 0,
    uti: Any = "public.jpeg",
    directory: Any = "0",
    filename: Any = None,
    created: Any = 0,
    modified: Any = 0,
    added: Any = 0,
    height: Any = 3024,
    width: Any = 4032,
    trashed: int = 0,
    hidden: int = 0,
    visibility: int = 0,
    original: Any = None,
    extra_row: bool = True,
) -> None:
    filename = f"IMG_{pk:04d}.JPG" if filename is None else filename
    with closing(sqlite3.connect(_db_path(root))) as conn:
        conn.execute(
            """
            INSERT INTO ZASSET(
              Z_PK, ZUUID, ZKIND, ZUNIFORMTYPEIDENTIFIER, ZKINDSUBTYPE,
              ZDIRECTORY, ZFILENAME, ZDATECREATED, ZMODIFICATIONDATE, ZADDEDDATE,
              ZHEIGHT, ZWIDTH, ZTRASHEDSTATE, ZHIDDEN, ZVISIBILITYSTATE
            ) VALUES (?, ?, ?, ?, 0, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                pk,
                f"UUID-{pk:04d}",
                kind,
                uti,
                directory,
                filename,
                created,
                modified,
                added,
                height,
                width,
                trashed,
                hidden,
                visibility,
            ),
        )
        if extra_row:
            if original is None:
                original = f"original_{pk}.jpg"
            conn.execute(
                "INSERT INTO ZADDITIONALASSETATTRIBUTES(ZASSET, ZORIGINALFILENAME) VALUES (?, ?)",
                (pk, original),
            )
        conn.commit()


def make_library(root: Path) -> Path:
    db = _db_path(root)
    db.parent.mkdir(parents=True, exist_ok=True)
    with closing(sqlite3.connect(db)) as conn:
        conn.executescript(SCHEMA)
    return root


@pytest.fixture
def empty_library(tmp_path: Path) -> Path:
    return make_library(tmp_path / "Photos Library.photoslibrary")


@pytest.fixture
def library_root(empty_library: Path) -> Path:
    """Three visible assets (photo, video, unknown kind) and one hidden photo."""
    insert_asset(empty_library, 1, created="0", modified="0", added="0")
    insert_asset(empty_library, 2, kind=1, uti="com.apple.quicktime-movie", filename="IMG_0002.MOV",
                 created="86400", modified="86400.5", added="86401")
    insert_asset(empty_library, 3, kind=7, directory="F", extra_row=False,
                 created=700000000.25, modified=700000000.25, added=700000000.25)
    insert_asset(empty_library, 4, hidden=1)
    return empty_library


@pytest.fixture
def add_asset(library_root: Path) -> Callable[..., None]:
    def _add(pk: int, **kwargs: Any) -> None:
        insert_asset(library_root, pk, **kwargs)

    return _add
