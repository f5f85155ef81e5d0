"""Defines classes for representing notes and listing requests.

The most important classes are :class:`NoteRecord` and :class:`NoteQuery`, and the function :func:`classify`,
which decides whether a path is a note at all.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import os
import os.path
from typing import Iterable, List, Optional, Union


class NoteType(Enum):
    TYPST = 'typ'
    MARKDOWN = 'md'

    @property
    def extension(self) -> str:
        """The canonical file extension, including the leading period."""
        return f'.{self.value}'

    @property
    def main_file(self) -> str:
        """Name of the file that holds the content of a folder note of this type."""
        return f'main.{self.value}'

    @classmethod
    def parse(cls, val: NoteTypeIsh) -> NoteType:
        """Converts ``'typ'`` or ``'md'`` (case-insensitive) to a NoteType. Raises :exc:`ValueError` otherwise."""
        if isinstance(val, NoteType):
            return val
        try:
            return cls(val.strip().lower())
        except (AttributeError, ValueError):
            raise ValueError(f'Invalid note type: {val} (expected "typ" or "md")')

    @classmethod
    def from_extension(cls, path: str) -> Optional[NoteType]:
        """Returns the type implied by the path's extension, or None if it is not a note extension."""
        return _EXTENSIONS.get(os.path.splitext(path)[1].lower())


_EXTENSIONS = {
    '.typ': NoteType.TYPST,
    '.md': NoteType.MARKDOWN,
    '.markdown': NoteType.MARKDOWN,
}

MAIN_FILES = tuple(t.main_file for t in NoteType)

NoteTypeIsh = Union[str, NoteType]


class NoteKind(Enum):
    FILE = 'file'
    FOLDER = 'folder'


@dataclass
class NoteRecord:
    """Details about one note, as found by a directory walk.

    Records are recomputed on every invocation and never cached.
    """

    name: str
    """The file or directory name, including any extension."""

    kind: NoteKind

    note_type: NoteType

    path: str
    """Absolute path of the note file or note directory."""

    modified: Optional[datetime] = None
    """Last modification time of the note's main file."""

    created: Optional[datetime] = None
    """Creation time of the note file or directory (birthtime where the platform has it, else ctime)."""

    @property
    def stem(self) -> str:
        """The name without its extension, for file notes. Folder notes are returned unchanged."""
        if self.kind == NoteKind.FILE:
            return os.path.splitext(self.name)[0]
        return self.name

    @property
    def main_path(self) -> str:
        """The file an editor or previewer should open."""
        if self.kind == NoteKind.FOLDER:
            return os.path.join(self.path, self.note_type.main_file)
        return self.path

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'name': self.name,
            'kind': self.kind.value,
            'type': self.note_type.value,
            'path': self.path,
            'modified': self.modified.isoformat() if self.modified else None,
            'created': self.created.isoformat() if self.created else None,
        }


def _created_time(stat: os.stat_result) -> datetime:
    try:
        return datetime.fromtimestamp(stat.st_birthtime, tz=timezone.utc)
    except AttributeError:
        return datetime.fromtimestamp(stat.st_ctime, tz=timezone.utc)


def folder_note_type(path: str) -> Optional[NoteType]:
    """Returns the type of the folder note at ``path``, or None if it isn't one.

    A folder is a note only if exactly one recognized main file is present. A folder containing both
    ``main.typ`` and ``main.md`` is ambiguous and is not treated as a note.
    """
    found = [t for t in NoteType if os.path.isfile(os.path.join(path, t.main_file))]
    if len(found) == 1:
        return found[0]
    return None


def classify(path: str) -> Optional[NoteRecord]:
    """Returns a record for the note at the given path, or None if the path is not a note.

    Both discovery and name resolution go through this function, so they always agree on what a note is.
    """
    path = os.path.abspath(path)
    name = os.path.basename(path)
    if os.path.isfile(path):
        note_type = NoteType.from_extension(name)
        if not note_type:
            return None
        stat = os.stat(path)
        return NoteRecord(name, NoteKind.FILE, note_type, path,
                          modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                          created=_created_time(stat))
    if os.path.isdir(path):
        note_type = folder_note_type(path)
        if not note_type:
            return None
        main_stat = os.stat(os.path.join(path, note_type.main_file))
        return NoteRecord(name, NoteKind.FOLDER, note_type, path,
                          modified=datetime.fromtimestamp(main_stat.st_mtime, tz=timezone.utc),
                          created=_created_time(os.stat(path)))
    return None


class NoteSortField(Enum):
    NONE = 'none'
    CREATED = 'created'
    MODIFIED = 'modified'
    NAME = 'name'


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class NoteQuery:
    """Represents sorting and truncation options for listing notes."""

    sort_by: NoteSortField = NoteSortField.NONE
    """CREATED and MODIFIED sort newest first; NAME sorts alphabetically, ignoring case.

    With NONE, records stay in the order the filesystem listed them.
    """

    limit: Optional[int] = None
    """If set, at most this many records are returned (after sorting)."""

    def apply(self, records: Iterable[NoteRecord]) -> List[NoteRecord]:
        """Returns a sorted, truncated copy of the given records."""
        result = list(records)
        if self.sort_by == NoteSortField.CREATED:
            result.sort(key=lambda r: r.created or _EPOCH, reverse=True)
        elif self.sort_by == NoteSortField.MODIFIED:
            result.sort(key=lambda r: r.modified or _EPOCH, reverse=True)
        elif self.sort_by == NoteSortField.NAME:
            result.sort(key=lambda r: r.name.lower())
        if self.limit is not None:
            result = result[:max(self.limit, 0)]
        return result
