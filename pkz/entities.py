"""
Entity records stored in (and produced for) a PKZ container.

Two families exist per level. ``*Info`` records are what a ComicLoader hands
to the builder; the full records add the builder-owned fields (``idx``,
aggregate counts, entry tokens and children) and are what ends up encoded in
the ``PKZ-INFO`` entry.

Records are plain dataclasses. Nothing here enforces tree invariants; the
builder in :mod:`pkz.writer` is responsible for those.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from .constants import INT64_MAX, INT64_MIN
from .errors import DecodeError


def _require(data: Dict[str, Any], key: str) -> Any:
    if not isinstance(data, dict):
        raise DecodeError(f"expected an object, got {type(data).__name__}")
    if key not in data:
        raise DecodeError(f"missing field '{key}'")
    return data[key]


def _str(data: Dict[str, Any], key: str) -> str:
    v = _require(data, key)
    if not isinstance(v, str):
        raise DecodeError(f"field '{key}' must be a string")
    return v


def _int(data: Dict[str, Any], key: str) -> int:
    v = _require(data, key)
    # bool is an int subclass; JSON true/false is not a valid integer here
    if isinstance(v, bool) or not isinstance(v, int):
        raise DecodeError(f"field '{key}' must be an integer")
    if not (INT64_MIN <= v <= INT64_MAX):
        raise DecodeError(f"field '{key}' out of 64-bit range: {v}")
    return v


def _bool(data: Dict[str, Any], key: str) -> bool:
    v = _require(data, key)
    if not isinstance(v, bool):
        raise DecodeError(f"field '{key}' must be a boolean")
    return v


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    v = _require(data, key)
    if not isinstance(v, list) or not all(isinstance(s, str) for s in v):
        raise DecodeError(f"field '{key}' must be a list of strings")
    return list(v)


def _list(data: Dict[str, Any], key: str) -> list:
    v = _require(data, key)
    if not isinstance(v, list):
        raise DecodeError(f"field '{key}' must be a list")
    return v


# -------- Info records (loader output) --------

@dataclass
class ArchiveInfo:
    name: str = ""
    author: str = ""
    description: str = ""


@dataclass
class ComicInfo:
    id: str = ""
    title: str = ""
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    author_id: str = ""
    author: str = ""
    updated_at: int = 0
    created_at: int = 0
    description: str = ""
    chinese_team: str = ""
    finished: bool = False


@dataclass
class VolumeInfo:
    id: str = ""
    title: str = ""
    updated_at: int = 0
    created_at: int = 0


@dataclass
class ChapterInfo:
    id: str = ""
    title: str = ""
    updated_at: int = 0
    created_at: int = 0


@dataclass
class PictureInfo:
    id: str = ""
    title: str = ""
    width: int = 0
    height: int = 0
    format: str = ""


# -------- Full records (persisted in PKZ-INFO) --------

@dataclass
class Picture:
    id: str = ""
    title: str = ""
    width: int = 0
    height: int = 0
    format: str = ""

    idx: int = 0
    picture_path: str = ""

    @classmethod
    def from_info(cls, info: PictureInfo, idx: int) -> "Picture":
        return cls(
            id=info.id,
            title=info.title,
            width=info.width,
            height=info.height,
            format=info.format,
            idx=idx,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Picture":
        return cls(
            id=_str(data, "id"),
            title=_str(data, "title"),
            width=_int(data, "width"),
            height=_int(data, "height"),
            format=_str(data, "format"),
            idx=_int(data, "idx"),
            picture_path=_str(data, "picture_path"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Chapter:
    id: str = ""
    title: str = ""
    updated_at: int = 0
    created_at: int = 0

    idx: int = 0
    cover_path: str = ""
    picture_count: int = 0
    pictures: List[Picture] = field(default_factory=list)

    @classmethod
    def from_info(cls, info: ChapterInfo, idx: int) -> "Chapter":
        return cls(
            id=info.id,
            title=info.title,
            updated_at=info.updated_at,
            created_at=info.created_at,
            idx=idx,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chapter":
        return cls(
            id=_str(data, "id"),
            title=_str(data, "title"),
            updated_at=_int(data, "updated_at"),
            created_at=_int(data, "created_at"),
            idx=_int(data, "idx"),
            cover_path=_str(data, "cover_path"),
            picture_count=_int(data, "picture_count"),
            pictures=[Picture.from_dict(p) for p in _list(data, "pictures")],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Volume:
    id: str = ""
    title: str = ""
    updated_at: int = 0
    created_at: int = 0

    idx: int = 0
    cover_path: str = ""
    chapter_count: int = 0
    picture_count: int = 0
    chapters: List[Chapter] = field(default_factory=list)

    @classmethod
    def from_info(cls, info: VolumeInfo, idx: int) -> "Volume":
        return cls(
            id=info.id,
            title=info.title,
            updated_at=info.updated_at,
            created_at=info.created_at,
            idx=idx,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Volume":
        return cls(
            id=_str(data, "id"),
            title=_str(data, "title"),
            updated_at=_int(data, "updated_at"),
            created_at=_int(data, "created_at"),
            idx=_int(data, "idx"),
            cover_path=_str(data, "cover_path"),
            chapter_count=_int(data, "chapter_count"),
            picture_count=_int(data, "picture_count"),
            chapters=[Chapter.from_dict(c) for c in _list(data, "chapters")],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Comic:
    id: str = ""
    title: str = ""
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    author_id: str = ""
    author: str = ""
    updated_at: int = 0
    created_at: int = 0
    description: str = ""
    chinese_team: str = ""
    finished: bool = False

    idx: int = 0
    cover_path: str = ""
    author_avatar_path: str = ""
    volumes_count: int = 0
    chapter_count: int = 0
    picture_count: int = 0
    volumes: List[Volume] = field(default_factory=list)

    @classmethod
    def from_info(cls, info: ComicInfo, idx: int) -> "Comic":
        return cls(
            id=info.id,
            title=info.title,
            categories=list(info.categories),
            tags=list(info.tags),
            author_id=info.author_id,
            author=info.author,
            updated_at=info.updated_at,
            created_at=info.created_at,
            description=info.description,
            chinese_team=info.chinese_team,
            finished=info.finished,
            idx=idx,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comic":
        return cls(
            id=_str(data, "id"),
            title=_str(data, "title"),
            categories=_str_list(data, "categories"),
            tags=_str_list(data, "tags"),
            author_id=_str(data, "author_id"),
            author=_str(data, "author"),
            updated_at=_int(data, "updated_at"),
            created_at=_int(data, "created_at"),
            description=_str(data, "description"),
            chinese_team=_str(data, "chinese_team"),
            finished=_bool(data, "finished"),
            idx=_int(data, "idx"),
            cover_path=_str(data, "cover_path"),
            author_avatar_path=_str(data, "author_avatar_path"),
            volumes_count=_int(data, "volumes_count"),
            chapter_count=_int(data, "chapter_count"),
            picture_count=_int(data, "picture_count"),
            volumes=[Volume.from_dict(v) for v in _list(data, "volumes")],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Archive:
    name: str = ""
    author: str = ""
    description: str = ""

    cover_path: str = ""
    author_avatar_path: str = ""
    comic_count: int = 0
    volumes_count: int = 0
    chapter_count: int = 0
    picture_count: int = 0
    comics: List[Comic] = field(default_factory=list)

    @classmethod
    def from_info(cls, info: ArchiveInfo) -> "Archive":
        return cls(name=info.name, author=info.author, description=info.description)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Archive":
        return cls(
            name=_str(data, "name"),
            author=_str(data, "author"),
            description=_str(data, "description"),
            cover_path=_str(data, "cover_path"),
            author_avatar_path=_str(data, "author_avatar_path"),
            comic_count=_int(data, "comic_count"),
            volumes_count=_int(data, "volumes_count"),
            chapter_count=_int(data, "chapter_count"),
            picture_count=_int(data, "picture_count"),
            comics=[Comic.from_dict(c) for c in _list(data, "comics")],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str) -> "Archive":
        try:
            data = json.loads(text)
        except (ValueError, RecursionError) as exc:
            raise DecodeError(f"PKZ-INFO is not valid JSON: {exc}") from exc
        return cls.from_dict(data)
