"""Loads ``.ignore`` and ``.gitignore`` patterns for a notes directory.

Patterns use gitignore syntax and are compiled with :mod:`pathspec`. The files are read in the order
``.ignore``, ``.gitignore``; as in git, the last pattern matching a path decides whether it is ignored,
so a ``!pattern`` in ``.gitignore`` can re-include something excluded by ``.ignore``.
"""

from __future__ import annotations
import logging
import os.path
from typing import List, Optional

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

from noxe.errors import IgnoreParseError


logger = logging.getLogger(__name__)

IGNORE_FILES = ('.ignore', '.gitignore')


def load_patterns(path: str) -> List[str]:
    """Returns the lines of an ignore file, without line endings.

    Returns an empty list if the file is absent. A file that can't be read or isn't UTF-8 is logged and skipped.
    """
    if not os.path.isfile(path):
        return []
    try:
        with open(path, 'r', encoding='utf-8') as file:
            return file.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        err = IgnoreParseError('Skipping unreadable ignore file', path, cause=e)
        logger.warning('%s: %s', err.message, err.path)
        return []


def compile_patterns(lines: List[str], source: Optional[str] = None) -> List[GitWildMatchPattern]:
    """Compiles each line separately, so that one bad pattern doesn't prevent the others from applying.

    Comments and blank lines are dropped. Lines the matcher rejects are logged and skipped.
    """
    patterns = []
    for line in lines:
        try:
            pattern = GitWildMatchPattern(line)
        except ValueError as e:
            err = IgnoreParseError('Skipping invalid ignore pattern', source, line, e)
            logger.warning('%s', err)
            continue
        if pattern.include is not None:
            patterns.append(pattern)
    return patterns


class IgnoreSet:
    """A compiled set of ignore patterns for one notes directory.

    .. attribute:: spec
       :type: pathspec.PathSpec
    """
    def __init__(self, patterns: List[GitWildMatchPattern] = ()):
        self.spec = PathSpec(patterns)

    @classmethod
    def build(cls, root: str) -> IgnoreSet:
        """Reads the ignore files in ``root``. Missing files contribute no patterns."""
        patterns = []
        for filename in IGNORE_FILES:
            path = os.path.join(root, filename)
            patterns.extend(compile_patterns(load_patterns(path), path))
        logger.debug('Loaded %d ignore patterns from %s', len(patterns), root)
        return cls(patterns)

    @classmethod
    def from_lines(cls, lines: List[str]) -> IgnoreSet:
        return cls(compile_patterns(lines))

    def is_ignored(self, relpath: str, is_dir: bool = False) -> bool:
        """Returns True if the path (relative to the notes directory) is excluded.

        Directories are matched with a trailing slash, so that patterns like ``drafts/`` apply to them only.
        """
        relpath = relpath.replace(os.sep, '/').strip('/')
        if is_dir:
            relpath += '/'
        return self.spec.match_file(relpath)

    def __len__(self):
        return len(self.spec)
