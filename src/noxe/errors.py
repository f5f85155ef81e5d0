"""Exceptions raised by noxe.

Everything derives from :class:`Error`, so callers such as the CLI can report any failure the same way.
"""

from typing import List, Optional


class Error(Exception):
    """Base class for noxe errors.

    .. attribute:: message
    .. attribute:: path

       The file or directory the error concerns, if any.
    """
    def __init__(self, message: str, path: Optional[str] = None, cause: BaseException = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self):
        if self.path:
            return f'{self.message}: {self.path}'
        return self.message


class ConfError(Error):
    """Raised when the user's configuration file cannot be loaded."""


class TemplateParseError(Error):
    """Raised when a note template is not well-formed.

    ``key`` is the slash-separated location of the offending entry inside the template, when known.
    """
    def __init__(self, message: str, path: Optional[str] = None, key: Optional[str] = None,
                 cause: BaseException = None):
        super().__init__(message, path, cause)
        self.key = key

    def __str__(self):
        text = super().__str__()
        if self.key:
            text += f' (at {self.key})'
        return text


class ScaffoldError(Error):
    """Raised when a note cannot be created on disk."""


class AlreadyExistsError(ScaffoldError):
    """Raised instead of overwriting or merging into an existing path."""
    def __init__(self, path: str):
        super().__init__('Note already exists', path)


class ScaffoldIOError(ScaffoldError):
    """Raised when the filesystem fails partway through creating a note.

    Whatever was created before the failure is left on disk.
    """


class IgnoreParseError(Error):
    """Describes an ignore-file line that could not be compiled. Such lines are skipped, not raised."""
    def __init__(self, message: str, path: Optional[str] = None, pattern: str = None,
                 cause: BaseException = None):
        super().__init__(message, path, cause)
        self.pattern = pattern

    def __str__(self):
        return f'{super().__str__()} (pattern {self.pattern!r})'


class DiscoveryError(Error):
    """Raised when the notes directory cannot be read."""


class SearchQueryError(Error):
    """Raised for a search expression that is not a valid regular expression."""


class ResolveError(Error):
    """Base class for failures to turn a user-supplied name or path into a note."""


class NotFoundError(ResolveError):
    def __init__(self, name: str, root: str):
        super().__init__(f'No note matching "{name}" found in', root)
        self.name = name


class AmbiguousError(ResolveError):
    """Raised when a name matches several notes. ``candidates`` holds the matching records."""
    def __init__(self, name: str, candidates: List):
        super().__init__(f'Multiple notes match "{name}"')
        self.name = name
        self.candidates = candidates


class NotANoteError(ResolveError):
    """Raised when an explicitly given path exists but is neither a file note nor a folder note."""
    def __init__(self, path: str):
        super().__init__('Not a note', path)
