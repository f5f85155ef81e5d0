"""Finds the notes in a notes directory.

Only the immediate children of the directory are considered: a note is either a top-level file with a note
extension, or a top-level directory containing exactly one main file. Nothing is cached; every call walks the
directory again.
"""

import logging
import os
import re
from typing import Iterator, List, Optional

from noxe.errors import DiscoveryError, SearchQueryError
from noxe.ignore import IgnoreSet
from noxe.models import NoteQuery, NoteRecord, classify


logger = logging.getLogger(__name__)


def _entries(root: str) -> Iterator[os.DirEntry]:
    try:
        with os.scandir(root) as it:
            yield from it
    except FileNotFoundError as e:
        raise DiscoveryError('Notes directory does not exist', root, e)
    except NotADirectoryError as e:
        raise DiscoveryError('Notes directory is not a directory', root, e)
    except OSError as e:
        raise DiscoveryError(f'Cannot read notes directory ({e.strerror})', root, e)


def discover(root: str, ignore: Optional[IgnoreSet] = None, ignore_hidden: bool = True) -> List[NoteRecord]:
    """Returns a record for each note directly inside ``root``, in the order the filesystem lists them.

    If ``ignore`` is not given, it is built from the ignore files in ``root``. Entries whose names begin with
    a period are skipped unless ``ignore_hidden`` is False.

    Raises :exc:`noxe.errors.DiscoveryError` if ``root`` cannot be read.
    """
    root = os.path.abspath(root)
    if ignore is None:
        ignore = IgnoreSet.build(root)
    records = []
    for entry in _entries(root):
        if ignore_hidden and entry.name.startswith('.'):
            continue
        if ignore.is_ignored(entry.name, is_dir=entry.is_dir()):
            logger.debug('Ignoring %s', entry.path)
            continue
        record = classify(entry.path)
        if record:
            records.append(record)
        else:
            logger.debug('Not a note: %s', entry.path)
    return records


def list_notes(root: str, query: NoteQuery = NoteQuery(), ignore: Optional[IgnoreSet] = None,
               ignore_hidden: bool = True) -> List[NoteRecord]:
    """Discovers the notes in ``root`` and sorts/truncates them according to ``query``."""
    return query.apply(discover(root, ignore, ignore_hidden))


def name_matcher(query: str, regex: bool = False):
    """Returns a predicate testing whether a note name matches ``query``, ignoring case.

    By default the query is a plain substring. With ``regex``, it is a regular expression that may match
    anywhere in the name; raises :exc:`noxe.errors.SearchQueryError` if it is not valid.
    """
    if regex:
        try:
            pattern = re.compile(query, re.IGNORECASE)
        except re.error as e:
            raise SearchQueryError(f'Invalid regular expression "{query}" ({e})', cause=e)
        return lambda name: pattern.search(name) is not None
    folded = query.casefold()
    return lambda name: folded in name.casefold()


def search(root: str, query: str, ignore: Optional[IgnoreSet] = None, regex: bool = False,
           ignore_hidden: bool = True) -> List[NoteRecord]:
    """Returns the discovered notes whose names match ``query`` (see :func:`name_matcher`), in discovery order."""
    matches = name_matcher(query, regex)
    return [r for r in discover(root, ignore, ignore_hidden) if matches(r.name)]
