from __future__ import annotations

import logging
import os
import zipfile
import zlib
from typing import BinaryIO, List, Optional, Set, Union

from . import codec
from .constants import (
    DEFAULT_COMPRESS_LEVEL,
    ENTRY_COMPRESSION,
    INFO_ENTRY_NAME,
    INT64_MAX,
    INT64_MIN,
    new_entry_token,
)
from .entities import Archive, Chapter, Comic, Picture, Volume
from .errors import AdapterError, ContainerIOError
from .loader import ComicLoader


logger = logging.getLogger(__name__)

PathOrStream = Union[str, "os.PathLike[str]", BinaryIO]


def _safe_unlink(path) -> None:
    """Best-effort removal of a partial container that never raises."""
    try:
        os.unlink(path)
    except OSError as exc:
        logger.warning("failed to remove partial container %s: %s", path, exc)


class PkzWriter:
    """Write-once PKZ container.

    Entries are deflate-compressed and masked with :mod:`pkz.codec`. The
    container only becomes readable after :meth:`finalize` stores the
    ``PKZ-INFO`` entry and writes the ZIP trailer; closing an unfinalized
    writer aborts it instead, so a failed build never looks complete.
    """

    def __init__(self, out: PathOrStream, compresslevel: Optional[int] = DEFAULT_COMPRESS_LEVEL):
        self.out = out
        self.compresslevel = compresslevel
        self.entry_names: List[str] = []
        self.finalized = False
        self._names: Set[str] = set()
        self._fh: Optional[BinaryIO] = None
        self._owns_fh = False
        self._zip: Optional[zipfile.ZipFile] = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        if self._zip is not None:
            return
        if self.finalized:
            raise RuntimeError("PKZ container already finalized")
        try:
            if isinstance(self.out, (str, os.PathLike)):
                self._fh = open(self.out, "wb")
                self._owns_fh = True
            else:
                self._fh = self.out
                self._owns_fh = False
            self._zip = zipfile.ZipFile(
                self._fh,
                mode="w",
                compression=ENTRY_COMPRESSION,
                compresslevel=self.compresslevel,
            )
        except (OSError, ValueError, zipfile.BadZipFile) as exc:
            self.abort()
            raise ContainerIOError(f"cannot open container for writing: {exc}") from exc

    def close(self):
        if not self.finalized:
            self.abort()

    def abort(self):
        """Drop the container without writing its trailer.

        When the writer created the output file itself, the partial file is
        removed as well; a caller-supplied stream is left for the caller to
        discard.

        This relies on CPython's ZipFile.close() returning early when its
        ``fp`` attribute is None, which is also how ZipFile marks itself
        closed.
        """
        if self._zip is not None:
            # ZipFile.close() is a no-op once fp is detached, so no central
            # directory is ever emitted for an aborted build.
            self._zip.fp = None
            self._zip = None
        if self._fh is not None and self._owns_fh:
            try:
                self._fh.close()
            finally:
                _safe_unlink(self.out)
        self._fh = None

    def write_entry(self, name: str, data: bytes):
        """Store ``data`` under ``name`` through the entry codec."""
        if self._zip is None:
            raise RuntimeError("PKZ container not open")
        if name in self._names:
            raise ValueError(f"duplicate entry name: {name}")
        try:
            self._zip.writestr(name, codec.encode(data))
        except (OSError, ValueError, zlib.error, zipfile.LargeZipFile) as exc:
            raise ContainerIOError(f"failed to write entry {name}: {exc}") from exc
        self._names.add(name)
        self.entry_names.append(name)
        logger.debug("wrote entry %s (%d bytes)", name, len(data))

    def add_asset(self, data: bytes) -> str:
        """Store a binary asset under a fresh token and return the token."""
        token = new_entry_token()
        while token in self._names:
            token = new_entry_token()
        self.write_entry(token, data)
        return token

    def finalize(self, archive: Archive):
        """Write the metadata index and the container trailer."""
        if self._zip is None:
            raise RuntimeError("PKZ container not open")
        self.write_entry(INFO_ENTRY_NAME, archive.to_json().encode("utf-8"))
        try:
            self._zip.close()
            if self._owns_fh and self._fh is not None:
                self._fh.close()
            else:
                self._fh.flush()
        except (OSError, ValueError, zipfile.LargeZipFile) as exc:
            raise ContainerIOError(f"failed to finalize container: {exc}") from exc
        self._zip = None
        self._fh = None
        self.finalized = True


def _check_count(what: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not (0 <= value <= INT64_MAX):
        raise AdapterError(f"{what} returned an invalid count: {value!r}")
    return value


def _check_int64(what: str, info, *names: str):
    for name in names:
        value = getattr(info, name)
        if isinstance(value, bool) or not isinstance(value, int) or not (INT64_MIN <= value <= INT64_MAX):
            raise AdapterError(f"{what}.{name} is not a 64-bit integer: {value!r}")
    return info


def _store_optional(writer: PkzWriter, data: Optional[bytes]) -> str:
    if data is None:
        return ""
    return writer.add_asset(data)


def write_pkz(out: PathOrStream, loader: ComicLoader, *, compresslevel: Optional[int] = DEFAULT_COMPRESS_LEVEL) -> Archive:
    """
    Build a PKZ container from ``loader``.

    The loader is walked comic by comic, volume by volume, chapter by
    chapter and picture by picture. Every cover, avatar and picture is stored
    as its own entry, and the populated :class:`Archive` tree is written last
    as ``PKZ-INFO``.

    Any loader or container failure aborts the build and propagates; the
    output must then be treated as garbage (a path created here is removed).

    Args:
        out: Destination path or writable binary stream.
        loader: The comic source.
        compresslevel: zlib level for entry compression.

    Returns:
        The Archive tree that was stored in ``PKZ-INFO``.
    """
    with PkzWriter(out, compresslevel=compresslevel) as writer:
        archive = _pack_archive(writer, loader)
        writer.finalize(archive)
    logger.debug(
        "pkz complete: %d comics, %d volumes, %d chapters, %d pictures",
        archive.comic_count,
        archive.volumes_count,
        archive.chapter_count,
        archive.picture_count,
    )
    return archive


def _pack_archive(writer: PkzWriter, loader: ComicLoader) -> Archive:
    archive = Archive.from_info(loader.archive_info())
    archive.comic_count = _check_count("comic_count", loader.comic_count())
    archive.cover_path = _store_optional(writer, loader.archive_cover())
    archive.author_avatar_path = _store_optional(writer, loader.archive_author_avatar())
    logger.debug("packing archive %r with %d comics", archive.name, archive.comic_count)

    for comic_idx in range(archive.comic_count):
        comic = _pack_comic(writer, loader, comic_idx)
        archive.volumes_count += comic.volumes_count
        archive.chapter_count += comic.chapter_count
        archive.picture_count += comic.picture_count
        archive.comics.append(comic)
    return archive


def _pack_comic(writer: PkzWriter, loader: ComicLoader, comic_idx: int) -> Comic:
    comic_info = _check_int64("comic_info", loader.comic_info(comic_idx), "updated_at", "created_at")
    comic = Comic.from_info(comic_info, comic_idx)
    comic.volumes_count = _check_count("volume_count", loader.volume_count(comic_idx, comic_info))
    comic.cover_path = _store_optional(writer, loader.comic_cover(comic_idx, comic_info))
    comic.author_avatar_path = _store_optional(writer, loader.comic_author_avatar(comic_idx, comic_info))
    logger.debug("comic %d %r: %d volumes", comic_idx, comic.title, comic.volumes_count)

    for volume_idx in range(comic.volumes_count):
        volume = _pack_volume(writer, loader, comic_idx, comic_info, volume_idx)
        comic.chapter_count += volume.chapter_count
        comic.picture_count += volume.picture_count
        comic.volumes.append(volume)
    return comic


def _pack_volume(writer, loader, comic_idx, comic_info, volume_idx) -> Volume:
    volume_info = _check_int64(
        "volume_info", loader.volume_info(comic_idx, comic_info, volume_idx), "updated_at", "created_at"
    )
    volume = Volume.from_info(volume_info, volume_idx)
    volume.chapter_count = _check_count(
        "chapter_count",
        loader.chapter_count(comic_idx, comic_info, volume_idx, volume_info),
    )
    volume.cover_path = _store_optional(
        writer, loader.volume_cover(comic_idx, comic_info, volume_idx, volume_info)
    )

    for chapter_idx in range(volume.chapter_count):
        chapter = _pack_chapter(writer, loader, comic_idx, comic_info, volume_idx, volume_info, chapter_idx)
        volume.picture_count += chapter.picture_count
        volume.chapters.append(chapter)
    return volume


def _pack_chapter(writer, loader, comic_idx, comic_info, volume_idx, volume_info, chapter_idx) -> Chapter:
    chapter_info = _check_int64(
        "chapter_info",
        loader.chapter_info(comic_idx, comic_info, volume_idx, volume_info, chapter_idx),
        "updated_at",
        "created_at",
    )
    chapter = Chapter.from_info(chapter_info, chapter_idx)
    chapter.picture_count = _check_count(
        "picture_count",
        loader.picture_count(comic_idx, comic_info, volume_idx, volume_info, chapter_idx, chapter_info),
    )
    chapter.cover_path = _store_optional(
        writer,
        loader.chapter_cover(comic_idx, comic_info, volume_idx, volume_info, chapter_idx, chapter_info),
    )

    for picture_idx in range(chapter.picture_count):
        picture_info = loader.picture_info(
            comic_idx, comic_info, volume_idx, volume_info, chapter_idx, chapter_info, picture_idx
        )
        _check_int64("picture_info", picture_info, "width", "height")
        picture = Picture.from_info(picture_info, picture_idx)
        data = loader.picture_data(
            comic_idx, comic_info, volume_idx, volume_info, chapter_idx, chapter_info, picture_idx, picture_info
        )
        if data is None:
            raise AdapterError(f"picture_data returned no data for picture {picture_idx}")
        picture.picture_path = writer.add_asset(data)
        chapter.pictures.append(picture)
    return chapter
