"""JSON file backend for keyring storage.

Keeps the full key -> item mapping in memory and rewrites the backing file
on every mutation. Writes go to a temporary file in the same directory which
is then renamed over the target, so an interrupted save never leaves a
truncated document behind.
"""

from __future__ import annotations

import logging
import os
import pathlib
import tempfile
import threading

from pydantic import ValidationError

from credential_cache.errors import ItemNotFoundError, MalformedStoreError
from credential_cache.models import Item, decode_document, encode_document
from credential_cache.secrets.store import Keyring

logger = logging.getLogger(__name__)

_FILE_MODE = 0o600


class JSONKeyring(Keyring):
    """Stores items as an indented JSON document on disk.

    Parameters
    ----------
    file_path:
        Path to the keyring file. A missing file is an empty keyring; the
        file is created on first write. The parent directory must already
        exist.

    Raises
    ------
    MalformedStoreError
        If the file exists but does not hold a valid keyring document.
    OSError
        If the file exists but cannot be read.
    """

    def __init__(self, file_path: pathlib.Path | str) -> None:
        self._path = pathlib.Path(file_path)
        self._lock = threading.Lock()
        self._items: dict[str, Item] = self._load()

    @property
    def path(self) -> pathlib.Path:
        return self._path

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def _load(self) -> dict[str, Item]:
        """Read and validate the backing file. Returns empty dict if missing."""
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return {}

        try:
            items = decode_document(raw)
        except ValidationError as exc:
            raise MalformedStoreError(self._path, _summarize(exc)) from exc

        for key, item in items.items():
            if item.key != key:
                raise MalformedStoreError(
                    self._path, f"entry {key!r} holds an item keyed {item.key!r}"
                )
        logger.debug("Loaded %d items from %s", len(items), self._path)
        return items

    def _save(self) -> pathlib.Path:
        """Atomically replace the backing file with the current mapping.

        Returns the path actually written, with symlinks resolved. The rename
        is not yet flushed; callers fsync its directory once memory and disk
        agree.
        """
        payload = encode_document(self._items)
        # Write through symlinks: the link stays, its target gets the data.
        target = pathlib.Path(os.path.realpath(self._path))
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        try:
            try:
                fh = os.fdopen(fd, "wb")
            except BaseException:
                os.close(fd)
                raise
            with fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_name, _FILE_MODE)
            os.replace(tmp_name, target)
        except BaseException:
            pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise
        return target

    def get(self, key: str) -> Item:
        with self._lock:
            try:
                return self._items[key]
            except KeyError:
                raise ItemNotFoundError(key) from None

    def set(self, item: Item) -> None:
        with self._lock:
            previous = self._items.get(item.key)
            self._items[item.key] = item
            try:
                written = self._save()
            except BaseException:
                # Keep memory equal to what is on disk.
                if previous is None:
                    del self._items[item.key]
                else:
                    self._items[item.key] = previous
                raise
            _fsync_directory(written.parent)

    def remove(self, key: str) -> None:
        with self._lock:
            previous = self._items.pop(key, None)
            try:
                written = self._save()
            except BaseException:
                if previous is not None:
                    self._items[key] = previous
                raise
            _fsync_directory(written.parent)


def _fsync_directory(directory: pathlib.Path) -> None:
    """Flush a rename in *directory* to disk."""
    fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def _summarize(exc: ValidationError) -> str:
    """First validation problem as ``location: message``."""
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    if location:
        return f"{location}: {first['msg']}"
    return first["msg"]
