from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .entities import ArchiveInfo, ChapterInfo, ComicInfo, PictureInfo, VolumeInfo


class ComicLoader(ABC):
    """Source of comic data consumed by :func:`pkz.writer.write_pkz`.

    Each call receives the indices and Info records of its ancestors, never
    the tree being built. The builder calls these one at a time in ascending
    index order and trusts every ``*_count`` result for the whole level.

    Cover and avatar methods return ``None`` when the asset does not exist;
    failures must be raised (preferably as :class:`pkz.errors.AdapterError`).
    """

    # Archive level

    @abstractmethod
    def archive_info(self) -> ArchiveInfo:
        pass

    @abstractmethod
    def archive_cover(self) -> Optional[bytes]:
        pass

    @abstractmethod
    def archive_author_avatar(self) -> Optional[bytes]:
        pass

    @abstractmethod
    def comic_count(self) -> int:
        pass

    # Comic level

    @abstractmethod
    def comic_info(self, comic_idx: int) -> ComicInfo:
        pass

    @abstractmethod
    def comic_cover(self, comic_idx: int, comic_info: ComicInfo) -> Optional[bytes]:
        pass

    @abstractmethod
    def comic_author_avatar(self, comic_idx: int, comic_info: ComicInfo) -> Optional[bytes]:
        pass

    @abstractmethod
    def volume_count(self, comic_idx: int, comic_info: ComicInfo) -> int:
        pass

    # Volume level

    @abstractmethod
    def volume_info(self, comic_idx: int, comic_info: ComicInfo, volume_idx: int) -> VolumeInfo:
        pass

    @abstractmethod
    def volume_cover(
        self,
        comic_idx: int,
        comic_info: ComicInfo,
        volume_idx: int,
        volume_info: VolumeInfo,
    ) -> Optional[bytes]:
        pass

    @abstractmethod
    def chapter_count(
        self,
        comic_idx: int,
        comic_info: ComicInfo,
        volume_idx: int,
        volume_info: VolumeInfo,
    ) -> int:
        pass

    # Chapter level

    @abstractmethod
    def chapter_info(
        self,
        comic_idx: int,
        comic_info: ComicInfo,
        volume_idx: int,
        volume_info: VolumeInfo,
        chapter_idx: int,
    ) -> ChapterInfo:
        pass

    @abstractmethod
    def chapter_cover(
        self,
        comic_idx: int,
        comic_info: ComicInfo,
        volume_idx: int,
        volume_info: VolumeInfo,
        chapter_idx: int,
        chapter_info: ChapterInfo,
    ) -> Optional[bytes]:
        pass

    @abstractmethod
    def picture_count(
        self,
        comic_idx: int,
        comic_info: ComicInfo,
        volume_idx: int,
        volume_info: VolumeInfo,
        chapter_idx: int,
        chapter_info: ChapterInfo,
    ) -> int:
        pass

    # Picture level

    @abstractmethod
    def picture_info(
        self,
        comic_idx: int,
        comic_info: ComicInfo,
        volume_idx: int,
        volume_info: VolumeInfo,
        chapter_idx: int,
        chapter_info: ChapterInfo,
        picture_idx: int,
    ) -> PictureInfo:
        pass

    @abstractmethod
    def picture_data(
        self,
        comic_idx: int,
        comic_info: ComicInfo,
        volume_idx: int,
        volume_info: VolumeInfo,
        chapter_idx: int,
        chapter_info: ChapterInfo,
        picture_idx: int,
        picture_info: PictureInfo,
    ) -> bytes:
        pass
