"""Provides the main entry point for using the library, :class:`Noxe`"""

from __future__ import annotations
import logging
import os.path
from typing import Iterable, List, Optional, Tuple

from noxe import dispatch, scaffold, templates
from noxe.conf import NoxeConf
from noxe.discovery import list_notes, search
from noxe.ignore import IgnoreSet
from noxe.models import NoteQuery, NoteRecord, NoteType, NoteTypeIsh
from noxe.resolver import resolve


logger = logging.getLogger(__name__)


def note_type_for(target: str, explicit: Optional[NoteTypeIsh] = None,
                  default: NoteType = NoteType.TYPST) -> Tuple[NoteType, bool]:
    """Decides the type of a new note, and whether it is a file note.

    A note extension on ``target`` (``.typ``, ``.md`` or ``.markdown``) makes it a file note of that type.
    Otherwise it is a folder note of the ``explicit`` type if given, else of the ``default`` type.
    """
    from_ext = NoteType.from_extension(target)
    if from_ext:
        return from_ext, True
    if explicit is not None:
        return NoteType.parse(explicit), False
    return default, False


def is_note_name(path: str) -> bool:
    """Returns True if the path has a single component, like ``foo`` or ``foo.md`` rather than ``bar/foo``."""
    if not path or os.path.isabs(path):
        return False
    norm = os.path.normpath(path)
    return norm not in ('.', '..') and os.path.basename(norm) == norm


class Noxe:
    """Main entry point for working programmatically with a notes directory.

    Generally, you should get an instance using :meth:`Noxe.for_user`.

    .. attribute:: conf
       :type: noxe.conf.NoxeConf

    Here's an example that prints the five most recently modified notes:

    .. code-block:: python

       from noxe.api import Noxe
       from noxe.models import NoteQuery, NoteSortField
       nd = Noxe.for_user()
       for record in nd.list(NoteQuery(NoteSortField.MODIFIED, limit=5)):
           print(record.path)
    """

    @staticmethod
    def for_user() -> Noxe:
        """Creates an instance from ``~/.noxe.conf.py`` (if present) and ``NOXE_*`` environment variables."""
        return NoxeConf.for_user().instantiate()

    def __init__(self, conf: NoxeConf):
        self.conf = conf

    def ignore_set(self) -> IgnoreSet:
        return IgnoreSet.build(self.conf.root)

    def template(self, path: Optional[str] = None) -> templates.Template:
        """Loads the template at ``path``, or the configured one, or else returns the built-in default."""
        path = path or self.conf.template
        if path:
            return templates.load(path)
        return templates.default_template()

    def target_path(self, note_path: str) -> str:
        """Bare names are placed in the notes directory; other paths are used as given."""
        if is_note_name(note_path):
            return os.path.join(self.conf.root, os.path.normpath(note_path))
        return os.path.abspath(note_path)

    def new(self, note_path: str, note_type: Optional[NoteTypeIsh] = None, single_file: bool = False,
            template: Optional[str] = None, author: Optional[str] = None, keywords: Iterable[str] = (),
            with_metadata: Optional[bool] = None) -> str:
        """Creates a new note and returns its path.

        If ``note_path`` has a note extension, a single file of the corresponding type is created. Otherwise a
        folder note is created from the template, unless ``single_file`` is True, in which case the type's
        extension is appended and a single file is created.

        ``template`` is the path of a template file (see :mod:`noxe.templates`); the configured template or
        the built-in one is used otherwise. Only the template's main content is used for single files.

        If ``with_metadata`` is True (or is None and the configuration enables it), the main file begins with
        a header containing the note's name, the author, the keywords and the current time.

        Raises :exc:`noxe.errors.TemplateParseError` before anything is created if the template is invalid,
        :exc:`noxe.errors.AlreadyExistsError` if the note exists, and :exc:`noxe.errors.ScaffoldIOError` on
        filesystem failures.
        """
        target = self.target_path(note_path)
        resolved_type, is_file_note = note_type_for(target, note_type, self.conf.note_type)
        if single_file and not is_file_note:
            target += resolved_type.extension
            is_file_note = True

        tmpl = self.template(template)

        header = ''
        if with_metadata if with_metadata is not None else self.conf.with_metadata:
            title = os.path.splitext(os.path.basename(target))[0] if is_file_note else os.path.basename(target)
            header = scaffold.render_header(resolved_type, title,
                                            author=author or self.conf.author,
                                            keywords=list(self.conf.keywords) + list(keywords))

        logger.debug('Creating %s %s note at %s', resolved_type.value, 'file' if is_file_note else 'folder', target)
        scaffold.materialize(tmpl, target, resolved_type, is_file_note, header)
        return target

    def list(self, query: NoteQuery = NoteQuery()) -> List[NoteRecord]:
        """Returns the notes in the notes directory, sorted and truncated as the query says."""
        return list_notes(self.conf.root, query, self.ignore_set(), self.conf.ignore_hidden)

    def search(self, query: str, regex: bool = False) -> List[NoteRecord]:
        """Returns notes whose names contain ``query`` (ignoring case), or match it as a regular expression."""
        return search(self.conf.root, query, self.ignore_set(), regex, self.conf.ignore_hidden)

    def resolve(self, name_or_path: Optional[str] = None) -> NoteRecord:
        """See :func:`noxe.resolver.resolve`."""
        return resolve(self.conf.root, name_or_path, self.ignore_set(), self.conf.ignore_hidden)

    def preview_command(self, record: NoteRecord, override: Optional[dispatch.CommandIsh] = None)\
            -> Tuple[str, List[str]]:
        """Returns the command for previewing the note, honoring the configured preview commands."""
        if not override:
            override = self.conf.preview_typst if record.note_type == NoteType.TYPST else self.conf.preview_markdown
        return dispatch.preview_command(record, override)

    def edit_command(self, record: NoteRecord, editor: Optional[dispatch.CommandIsh] = None)\
            -> Tuple[str, List[str]]:
        """Returns the command for editing the note, honoring the configured editor."""
        return dispatch.edit_command(record, editor or self.conf.editor)
