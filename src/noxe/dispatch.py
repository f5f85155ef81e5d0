"""Chooses the external commands used to preview or edit a note.

Nothing here starts a process; the functions only return the program and its arguments.
"""

import os
import os.path
import shlex
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from noxe.models import NoteRecord, NoteType


DEFAULT_EDITOR = 'vim'

CommandIsh = Union[str, Sequence[str]]


def split_command(command: CommandIsh) -> List[str]:
    """Splits a shell-style command string into words. Lists are copied unchanged."""
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


def default_preview_command(record: NoteRecord) -> List[str]:
    if record.note_type == NoteType.TYPST:
        return ['tinymist', 'preview', '--root', os.path.dirname(record.main_path)]
    return ['glow']


def preview_command(record: NoteRecord, override: Optional[CommandIsh] = None) -> Tuple[str, List[str]]:
    """Returns ``(program, args)`` for previewing the note; the note's main file is always the last argument.

    Typst notes use ``tinymist preview --root <folder>`` and Markdown notes use ``glow``, unless ``override``
    gives another command (as a string like ``"typst watch"`` or a list of words).
    """
    words = split_command(override) if override else default_preview_command(record)
    if not words:
        words = default_preview_command(record)
    return words[0], words[1:] + [record.main_path]


def edit_command(record: NoteRecord, editor: Optional[CommandIsh] = None,
                 environ: Mapping[str, str] = os.environ) -> Tuple[str, List[str]]:
    """Returns ``(program, args)`` for editing the note's main file.

    The editor is the ``editor`` argument if given, else ``$VISUAL``, else ``$EDITOR``, else ``vim``.
    """
    words = split_command(editor or environ.get('VISUAL') or environ.get('EDITOR') or DEFAULT_EDITOR)
    if not words:
        words = [DEFAULT_EDITOR]
    return words[0], words[1:] + [record.main_path]
