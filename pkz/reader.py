from __future__ import annotations

import logging
import os
import zipfile
import zlib
from typing import List, Optional

from . import codec
from .constants import INFO_ENTRY_NAME
from .entities import Archive
from .errors import ContainerIOError, DecodeError, NotFoundError


logger = logging.getLogger(__name__)


class PkzReader:
    """Random access to the entries of a finished PKZ container.

    Entries are looked up by exact name and decoded independently; reading
    one never requires parsing ``PKZ-INFO``.
    """

    def __init__(self, path: str):
        self.path = path
        self._zip: Optional[zipfile.ZipFile] = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        if self._zip is not None:
            return
        try:
            self._zip = zipfile.ZipFile(self.path, mode="r")
        except (OSError, zipfile.BadZipFile) as exc:
            raise ContainerIOError(f"cannot open container {self.path}: {exc}") from exc
        logger.debug("opened %s with %d entries", self.path, len(self._zip.namelist()))

    def close(self):
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    def names(self) -> List[str]:
        if self._zip is None:
            raise RuntimeError("PKZ container not open")
        return self._zip.namelist()

    def asset_names(self) -> List[str]:
        return [n for n in self.names() if n != INFO_ENTRY_NAME]

    def has_entry(self, name: str) -> bool:
        return name in self.names()

    def read(self, name: str) -> bytes:
        """Return the decoded bytes stored under ``name``.

        Raises:
            NotFoundError: no entry has exactly this name.
            ContainerIOError: the entry could not be read or inflated.
        """
        if self._zip is None:
            raise RuntimeError("PKZ container not open")
        try:
            info = self._zip.getinfo(name)
        except KeyError:
            raise NotFoundError(f"entry not found: {name}") from None
        try:
            raw = self._zip.read(info)
        except (OSError, EOFError, RuntimeError, NotImplementedError, zipfile.BadZipFile, zlib.error) as exc:
            raise ContainerIOError(f"failed to read entry {name}: {exc}") from exc
        return codec.decode(raw)

    def metadata(self) -> Archive:
        data = self.read(INFO_ENTRY_NAME)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"{INFO_ENTRY_NAME} is not valid UTF-8: {exc}") from exc
        return Archive.from_json(text)

    def extract(self, name: str, out_path: str):
        data = self.read(name)
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        with open(out_path, "wb") as wf:
            wf.write(data)


def read_entry(container_path: str, entry_name: str) -> bytes:
    """Open ``container_path`` and return one decoded entry."""
    with PkzReader(container_path) as r:
        return r.read(entry_name)


def read_metadata(container_path: str) -> Archive:
    """Open ``container_path`` and decode its ``PKZ-INFO`` Archive tree."""
    with PkzReader(container_path) as r:
        return r.metadata()
