"""JSON file storage adapter for benchmark history.

The layout on disk is::

    <root>/
      branches.json          JSON array of branch names
      metadata.json          {"repoUrl", "lastUpdate", "moduleId"}
      data/
        <branch>.json        JSON array of entries, chronological
        release_tags.json    {"<sha>": "<tag>"}

Branch names are sanitised for file names; the catalog keeps the
original names.
"""

import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from benchstore.core.config import StoreConfig
from benchstore.core.encoding.json_codec import (
    branch_file_name,
    decode_catalog,
    decode_entries,
    decode_entry,
    decode_metadata,
    decode_release_tags,
    dumps,
    encode_entries,
    encode_metadata,
    loads,
)
from benchstore.core.exceptions import DecodeError, StorageIOError
from benchstore.core.models import Entry, Metadata
from benchstore.core.store import EntryStore

logger = logging.getLogger(__name__)

BRANCHES_FILE_NAME = "branches.json"
METADATA_FILE_NAME = "metadata.json"
DATA_DIR_NAME = "data"
RELEASE_TAGS_FILE_NAME = "release_tags.json"


def _read_text(path: Path) -> str | None:
    """Read a file, returning None if it does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as exc:
        raise DecodeError(str(path), str(exc)) from exc
    except OSError as exc:
        raise StorageIOError(str(path), "read", exc.strerror or str(exc)) from exc


def _load(path: Path) -> Any:
    """Load a JSON document, returning None if the file does not exist."""
    text = _read_text(path)
    if text is None:
        return None
    logger.debug("Read %s", path)
    return loads(text, str(path))


def load_entry_file(path: str | Path) -> Entry:
    """Load a single entry document written by a parse step.

    Raises:
        StorageIOError: If the file cannot be read (including a missing file).
        DecodeError: If the file is not a valid entry document.
    """
    path = Path(path)
    text = _read_text(path)
    if text is None:
        raise StorageIOError(str(path), "read", "no such file")
    return decode_entry(loads(text, str(path)), str(path))


class JSONFileStorage:
    """File-backed implementation of BranchLogStoragePort and IndexStoragePort.

    Each call reads or writes its document in full. With ``atomic_writes``
    enabled a document is written to a temporary file in the same directory
    and renamed into place, so readers never see a partial file.

    Args:
        root: Directory holding the store's documents. Created if missing.
        atomic_writes: Write through a temporary file and rename.
        indent: JSON indentation of written documents.
    """

    def __init__(
        self, root: str | Path, atomic_writes: bool = True, indent: int = 2
    ) -> None:
        self._root = Path(root)
        self._atomic_writes = atomic_writes
        self._indent = indent
        data_dir = self._root / DATA_DIR_NAME
        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageIOError(
                str(data_dir), "mkdir", exc.strerror or str(exc)
            ) from exc

    @property
    def root(self) -> Path:
        return self._root

    # --- Paths ---

    @property
    def branches_path(self) -> Path:
        return self._root / BRANCHES_FILE_NAME

    @property
    def metadata_path(self) -> Path:
        return self._root / METADATA_FILE_NAME

    @property
    def release_tags_path(self) -> Path:
        return self._root / DATA_DIR_NAME / RELEASE_TAGS_FILE_NAME

    def branch_path(self, branch: str) -> Path:
        """Return the data file path for a branch."""
        return self._root / DATA_DIR_NAME / branch_file_name(branch)

    # --- Writing ---

    def _write(self, path: Path, document: Any) -> None:
        text = dumps(document, self._indent)
        if self._atomic_writes:
            self._write_atomic(path, text)
        else:
            try:
                path.write_text(text, encoding="utf-8")
            except OSError as exc:
                raise StorageIOError(
                    str(path), "write", exc.strerror or str(exc)
                ) from exc
        logger.debug("Wrote %s", path)

    def _write_atomic(self, path: Path, text: str) -> None:
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise StorageIOError(str(path), "write", exc.strerror or str(exc)) from exc
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, 0o644)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageIOError(str(path), "write", exc.strerror or str(exc)) from exc
        try:
            os.replace(tmp_path, path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageIOError(
                str(path), "replace", exc.strerror or str(exc)
            ) from exc

    # --- Branch logs ---

    def read_branch(self, branch: str) -> list[Entry]:
        """Read a branch's entries, empty if its data file does not exist."""
        path = self.branch_path(branch)
        return decode_entries(_load(path), str(path))

    def write_branch(self, branch: str, entries: Sequence[Entry]) -> None:
        """Write a branch's entries, replacing its data file."""
        self._write(self.branch_path(branch), encode_entries(entries))

    # --- Catalog ---

    def read_catalog(self) -> list[str]:
        return decode_catalog(_load(self.branches_path), str(self.branches_path))

    def write_catalog(self, names: Sequence[str]) -> None:
        self._write(self.branches_path, list(names))

    # --- Release tags ---

    def read_release_tags(self) -> dict[str, str]:
        path = self.release_tags_path
        return decode_release_tags(_load(path), str(path))

    def write_release_tags(self, tags: dict[str, str]) -> None:
        self._write(self.release_tags_path, dict(tags))

    # --- Metadata ---

    def read_metadata(self) -> Metadata | None:
        document = _load(self.metadata_path)
        if document is None:
            return None
        return decode_metadata(document, str(self.metadata_path))

    def write_metadata(self, metadata: Metadata) -> None:
        self._write(self.metadata_path, encode_metadata(metadata))


def open_store(config: StoreConfig | str | Path | None = None) -> EntryStore:
    """Open a file-backed entry store.

    Args:
        config: A StoreConfig, a root directory, or None to read the
            configuration from BENCHSTORE_* environment variables.
    """
    if config is None:
        config = StoreConfig.from_env()
    elif not isinstance(config, StoreConfig):
        config = StoreConfig(root=Path(config))
    storage = JSONFileStorage(
        config.root, atomic_writes=config.atomic_writes, indent=config.indent
    )
    return EntryStore(
        storage,
        storage,
        retention_limit=config.retention_limit,
        aggregate_branch=config.aggregate_branch,
    )
