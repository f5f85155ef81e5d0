"""Parses note templates, which describe the skeleton of a new folder note.

A template is a YAML document like this::

    paths:
      bibliography:
        refs.bib: |
          @book{...}
      chapter: {}
      images: {}
    main.typ: |
      = Introduction
    main.md: |
      # Introduction

Under ``paths``, an empty mapping is an empty directory, a non-empty mapping is a directory with children,
and a string is a file with exactly that content. ``main.typ`` and ``main.md`` hold the content of the note's
main file; only the one matching the type of the note being created is used.
"""

from __future__ import annotations
from collections.abc import Hashable
from dataclasses import dataclass, field
import logging
from typing import Dict, Optional, Union

import yaml

from noxe.errors import TemplateParseError
from noxe.models import MAIN_FILES, NoteType


logger = logging.getLogger(__name__)


@dataclass
class EmptyDir:
    pass


@dataclass
class Dir:
    children: Dict[str, TemplateNode] = field(default_factory=dict)


@dataclass
class File:
    content: str


TemplateNode = Union[EmptyDir, Dir, File]


@dataclass
class Template:
    paths: Dir = field(default_factory=Dir)
    """Files and directories to create inside a folder note. Not used for file notes."""

    main_typ: Optional[str] = None
    """Content of ``main.typ`` (or of the single file, for file notes) when creating a Typst note."""

    main_md: Optional[str] = None
    """Content of ``main.md`` (or of the single file, for file notes) when creating a Markdown note."""

    def main_content(self, note_type: NoteType) -> str:
        """Returns the main file content for the given note type, or an empty string if the template has none."""
        if note_type == NoteType.TYPST:
            return self.main_typ or ''
        return self.main_md or ''


DEFAULT_BIB = """@misc{noxe,
  title = {Example Reference},
  author = {Doe, Jane},
  year = {2024},
  note = {Replace this entry with your own references},
}
"""

DEFAULT_MAIN_TYP = """#set heading(numbering: "1.")

= Introduction

#bibliography("bibliography/refs.bib")
"""


def default_template() -> Template:
    """Returns the template used when the user does not supply one.

    It has no ``main.md`` content, so a default Markdown folder note gets an empty ``main.md``.
    """
    return Template(
        paths=Dir({
            'bibliography': Dir({'refs.bib': File(DEFAULT_BIB)}),
            'chapter': EmptyDir(),
            'images': EmptyDir(),
        }),
        main_typ=DEFAULT_MAIN_TYP,
    )


class _Mapping(dict):
    """A YAML mapping that remembers which keys were given more than once."""
    def __init__(self):
        super().__init__()
        self.duplicates = []


class _TemplateLoader(yaml.SafeLoader):
    pass


def _construct_mapping(loader: _TemplateLoader, node: yaml.MappingNode) -> _Mapping:
    explicit = sum(1 for key_node, _ in node.value if key_node.tag != 'tag:yaml.org,2002:merge')
    loader.flatten_mapping(node)
    # Merged entries come first and may be overridden; only explicit keys count as duplicates.
    first_explicit = len(node.value) - explicit
    mapping = _Mapping()
    explicit_keys = set()
    for i, (key_node, value_node) in enumerate(node.value):
        key = loader.construct_object(key_node, deep=True)
        if not isinstance(key, Hashable):
            raise yaml.constructor.ConstructorError('while constructing a mapping', node.start_mark,
                                                    'found unhashable key', key_node.start_mark)
        if i >= first_explicit:
            if key in explicit_keys and key not in mapping.duplicates:
                mapping.duplicates.append(key)
            explicit_keys.add(key)
        mapping[key] = loader.construct_object(value_node, deep=True)
    return mapping


_TemplateLoader.add_constructor(yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_mapping)


def _check_duplicates(mapping: dict, key: Optional[str], source: Optional[str]) -> None:
    duplicates = getattr(mapping, 'duplicates', ())
    if duplicates:
        dup_key = f'{key}/{duplicates[0]}' if key else str(duplicates[0])
        raise TemplateParseError(f'Duplicate name {duplicates[0]!r}', source, dup_key)


def _check_name(name, key: str, source: Optional[str]) -> None:
    if not isinstance(name, str):
        raise TemplateParseError(f'Path names must be strings, not {type(name).__name__}', source, key)
    if not name or name in ('.', '..') or '/' in name or '\\' in name or '\0' in name:
        raise TemplateParseError(f'Illegal path name {name!r}', source, key)


def _parse_node(value, key: str, source: Optional[str]) -> TemplateNode:
    if isinstance(value, str):
        return File(value)
    if isinstance(value, dict):
        if not value:
            return EmptyDir()
        _check_duplicates(value, key, source)
        children = {}
        for name, child in value.items():
            child_key = f'{key}/{name}'
            _check_name(name, child_key, source)
            children[name] = _parse_node(child, child_key, source)
        return Dir(children)
    if value is None:
        raise TemplateParseError('Missing value; use {} for an empty directory or "" for an empty file',
                                 source, key)
    raise TemplateParseError(f'Expected a mapping or a string, not {type(value).__name__}', source, key)


def parse(text: str, source: Optional[str] = None) -> Template:
    """Parses the YAML text of a template.

    ``source`` is only used in error messages, and is normally the path the text was read from.

    Raises :exc:`noxe.errors.TemplateParseError` if the text is not YAML, or does not have the shape
    described in this module's documentation, or uses names that are not valid single path segments.
    """
    try:
        doc = yaml.load(text, Loader=_TemplateLoader)
    except yaml.YAMLError as e:
        raise TemplateParseError(f'Invalid YAML ({e})', source, cause=e)
    if not isinstance(doc, dict):
        raise TemplateParseError('Template must be a mapping with a "paths" key', source)
    _check_duplicates(doc, None, source)

    for key in doc:
        if key not in ('paths',) + MAIN_FILES:
            logger.warning('Ignoring unknown key %r in template %s', key, source or '<string>')

    if 'paths' not in doc:
        raise TemplateParseError('Template has no "paths" key', source)
    paths = doc['paths']
    if not isinstance(paths, dict):
        raise TemplateParseError('"paths" must be a mapping', source, 'paths')
    for main_file in MAIN_FILES:
        if main_file in paths:
            raise TemplateParseError(f'"{main_file}" belongs at the top level of the template, not under "paths"',
                                     source, f'paths/{main_file}')
    root = _parse_node(paths, 'paths', source)
    if isinstance(root, EmptyDir):
        root = Dir()

    mains = {}
    for main_file in MAIN_FILES:
        content = doc.get(main_file)
        if content is not None and not isinstance(content, str):
            raise TemplateParseError(f'"{main_file}" must be a string', source, main_file)
        mains[main_file] = content

    return Template(paths=root, main_typ=mains[NoteType.TYPST.main_file], main_md=mains[NoteType.MARKDOWN.main_file])


def load(path: str) -> Template:
    """Reads and parses the template file at ``path``. See :func:`parse`."""
    try:
        with open(path, 'r', encoding='utf-8') as file:
            text = file.read()
    except OSError as e:
        raise TemplateParseError(f'Cannot read template ({e.strerror})', path, cause=e)
    except UnicodeDecodeError as e:
        raise TemplateParseError('Template is not valid UTF-8', path, cause=e)
    return parse(text, path)
