from __future__ import annotations
from dataclasses import dataclass, field, replace
import os
import os.path
from typing import List, Mapping, Optional

from noxe.errors import ConfError
from noxe.models import NoteType


USER_CONF_PATH = os.path.join('~', '.noxe.conf.py')


@dataclass
class NoxeConf:
    root: str = '.'
    """The directory where notes are created, listed and searched for.

    Can be overridden with the ``NOXE_DIR`` environment variable or the ``-d`` command-line argument.
    """

    note_type: NoteType = NoteType.TYPST
    """Type of new folder notes when none is given (``NOXE_TYPE``, ``-t``).

    File notes always take their type from their extension.
    """

    author: Optional[str] = None
    """Written into the metadata header of new notes (``NOXE_AUTHOR``, ``-a``)."""

    keywords: List[str] = field(default_factory=list)
    """Written into the metadata header of new notes, in addition to any given with ``-k``."""

    template: Optional[str] = None
    """Path to a YAML note template (``NOXE_TEMPLATE``, ``-S``). If unset, the built-in template is used.

    See :mod:`noxe.templates` for the format.
    """

    with_metadata: bool = False
    """If True, new notes start with a metadata header (title, author, keywords, date). Also enabled by ``-m``."""

    ignore_hidden: bool = True
    """If True, files and folders whose names begin with a period are never treated as notes."""

    preview_typst: Optional[List[str]] = None
    """Command used to preview Typst notes. Defaults to ``['tinymist', 'preview', '--root', <note folder>]``.

    The path of the note's main file is appended.
    """

    preview_markdown: Optional[List[str]] = None
    """Command used to preview Markdown notes. Defaults to ``['glow']``."""

    editor: Optional[str] = None
    """Command used by ``edit``. Defaults to ``$VISUAL``, then ``$EDITOR``, then ``vim``."""

    @classmethod
    def for_user(cls, environ: Mapping[str, str] = os.environ) -> NoxeConf:
        """Loads ``~/.noxe.conf.py`` if it exists, then applies environment variable overrides.

        The config file is a Python script that must assign a :class:`NoxeConf` to the variable ``conf``.
        """
        path = os.path.expanduser(USER_CONF_PATH)
        conf = cls()
        if os.path.exists(path):
            with open(path, 'r') as file:
                conf_script = file.read()
            context = {}
            exec(conf_script, context)
            if 'conf' not in context or not isinstance(context['conf'], cls):
                raise ConfError('You need to assign an instance of NoxeConf to the variable `conf` '
                                'in your config file', path)
            conf = context['conf']
        return conf.with_env(environ)

    def with_env(self, environ: Mapping[str, str]) -> NoxeConf:
        """Returns a copy updated from the ``NOXE_DIR``, ``NOXE_TYPE``, ``NOXE_AUTHOR`` and ``NOXE_TEMPLATE``
        environment variables, where set."""
        changes = {}
        if environ.get('NOXE_DIR'):
            changes['root'] = environ['NOXE_DIR']
        if environ.get('NOXE_TYPE'):
            try:
                changes['note_type'] = NoteType.parse(environ['NOXE_TYPE'])
            except ValueError as e:
                raise ConfError(f'Bad NOXE_TYPE environment variable ({e})')
        if environ.get('NOXE_AUTHOR'):
            changes['author'] = environ['NOXE_AUTHOR']
        if environ.get('NOXE_TEMPLATE'):
            changes['template'] = environ['NOXE_TEMPLATE']
        return replace(self, **changes)

    def standardize(self) -> NoxeConf:
        return replace(
            self,
            root=os.path.realpath(os.path.expanduser(self.root)),
            note_type=NoteType.parse(self.note_type),
            template=os.path.expanduser(self.template) if self.template else None
        )

    def instantiate(self):
        from noxe.api import Noxe
        return Noxe(self.standardize())
