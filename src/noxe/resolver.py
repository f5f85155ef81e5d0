"""Turns a name or path typed by the user into a :class:`noxe.models.NoteRecord`."""

import logging
import os
import os.path
from typing import Optional

from noxe.discovery import discover, name_matcher
from noxe.errors import AmbiguousError, NotANoteError, NotFoundError
from noxe.ignore import IgnoreSet
from noxe.models import NoteRecord, classify


logger = logging.getLogger(__name__)


def resolve(root: str, name_or_path: Optional[str] = None, ignore: Optional[IgnoreSet] = None,
            ignore_hidden: bool = True) -> NoteRecord:
    """Finds the note the user means.

    * If ``name_or_path`` is None, the current working directory must itself be a note.
    * If it is the path of an existing file or directory (absolute, or relative to the working directory),
      that path must be a note; the notes directory is not consulted.
    * Otherwise the notes in ``root`` are searched: a note whose name (or name without extension) equals
      the argument wins; failing that, notes whose names contain it, ignoring case, are candidates.

    Raises :exc:`noxe.errors.NotANoteError`, :exc:`noxe.errors.NotFoundError`, or
    :exc:`noxe.errors.AmbiguousError` (whose ``candidates`` lists the matches).
    """
    if name_or_path is None:
        name_or_path = os.getcwd()
    if os.path.exists(name_or_path):
        record = classify(name_or_path)
        if not record:
            raise NotANoteError(os.path.abspath(name_or_path))
        return record

    records = discover(root, ignore, ignore_hidden)
    exact = [r for r in records if name_or_path in (r.name, r.stem)]
    if exact:
        candidates = exact
    else:
        matches = name_matcher(name_or_path)
        candidates = [r for r in records if matches(r.name)]
    logger.debug('Candidates for %r: %s', name_or_path, [r.name for r in candidates])

    if not candidates:
        raise NotFoundError(name_or_path, os.path.abspath(root))
    if len(candidates) > 1:
        raise AmbiguousError(name_or_path, candidates)
    return candidates[0]
