"""Creates notes on disk from a :class:`noxe.templates.Template`.

The main function is :func:`materialize`.
"""

from datetime import datetime
import logging
import os
import os.path
from typing import Iterable, Optional

from mako.template import Template as MakoTemplate

from noxe.errors import AlreadyExistsError, ScaffoldIOError
from noxe.models import NoteType
from noxe.templates import Dir, EmptyDir, File, Template


logger = logging.getLogger(__name__)


_MARKDOWN_HEADER = MakoTemplate("""---
title: ${q(title)}
% if author:
author: ${q(author)}
% endif
% if keywords:
keywords: [${", ".join(q(k) for k in keywords)}]
% endif
date: "${date.strftime('%Y-%m-%d %H:%M:%S')}"
---

""")

_TYPST_HEADER = MakoTemplate("""<%
    parts = ["title: " + q(title)]
    if author:
        parts.append("author: " + q(author))
    if keywords:
        quoted = [q(k) for k in keywords]
        parts.append('keywords: (%s)' % (', '.join(quoted) if len(quoted) > 1 else quoted[0] + ','))
    fields = (date.year, date.month, date.day, date.hour, date.minute, date.second)
    parts.append('date: datetime(year: %d, month: %d, day: %d, hour: %d, minute: %d, second: %d)' % fields)
%>#set document(${', '.join(parts)})

""")


def _quote(value: str) -> str:
    """Returns a double-quoted string literal, valid in both YAML and Typst."""
    return '"' + str(value).replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n') + '"'


def render_header(note_type: NoteType, title: str, author: Optional[str] = None,
                  keywords: Iterable[str] = (), date: Optional[datetime] = None) -> str:
    """Returns a metadata block to put at the top of a new note's main file.

    For Markdown this is YAML front matter; for Typst it is a ``#set document(...)`` rule.
    The date defaults to the current local time.
    """
    template = _TYPST_HEADER if note_type == NoteType.TYPST else _MARKDOWN_HEADER
    return template.render(q=_quote, title=title, author=author, keywords=[k for k in keywords if k],
                           date=date or datetime.now())


def _write_file(path: str, content: str) -> None:
    try:
        with open(path, 'x', encoding='utf-8') as file:
            file.write(content)
    except FileExistsError:
        raise AlreadyExistsError(path)
    except OSError as e:
        raise ScaffoldIOError(f'Failed to write file ({e.strerror})', path, e)
    logger.debug('Created file %s', path)


def _make_dir(path: str) -> None:
    try:
        os.makedirs(path)
    except FileExistsError:
        raise AlreadyExistsError(path)
    except OSError as e:
        raise ScaffoldIOError(f'Failed to create directory ({e.strerror})', path, e)
    logger.debug('Created directory %s', path)


def _materialize_dir(parent: str, node: Dir) -> None:
    for name, child in node.children.items():
        path = os.path.join(parent, name)
        if isinstance(child, File):
            _write_file(path, child.content)
        elif isinstance(child, EmptyDir):
            _make_dir(path)
        else:
            _make_dir(path)
            _materialize_dir(path, child)


def materialize(template: Template, target: str, note_type: NoteType, is_file_note: bool, header: str = '') -> str:
    """Creates a note at ``target`` and returns the path of its main file.

    For a file note, ``target`` is the path of the single file to create, and it receives the template's
    main content for ``note_type``. For a folder note, ``target`` is the directory to create; everything in
    :attr:`Template.paths` is created inside it, followed by ``main.typ`` or ``main.md``.

    ``header`` is prepended to the main file content (see :func:`render_header`).

    Raises :exc:`noxe.errors.AlreadyExistsError` without writing anything if ``target`` exists, and
    :exc:`noxe.errors.ScaffoldIOError` if the filesystem fails. In the latter case, anything created
    before the failure is left in place.
    """
    if os.path.lexists(target):
        raise AlreadyExistsError(target)
    content = header + template.main_content(note_type)

    if is_file_note:
        parent = os.path.dirname(target)
        if parent:
            try:
                os.makedirs(parent, exist_ok=True)
            except OSError as e:
                raise ScaffoldIOError(f'Failed to create directory ({e.strerror})', parent, e)
        _write_file(target, content)
        return target

    _make_dir(target)
    _materialize_dir(target, template.paths)
    main_path = os.path.join(target, note_type.main_file)
    _write_file(main_path, content)
    return main_path
