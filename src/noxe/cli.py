"""Command-line interface for noxe."""


import argparse
from dataclasses import replace
import json
import logging
import os.path
import shlex
import subprocess
import sys
from typing import List

from terminaltables import AsciiTable

from noxe.api import Noxe
from noxe.conf import NoxeConf
from noxe.errors import AmbiguousError, Error
from noxe.models import NoteQuery, NoteRecord, NoteSortField, NoteType


def _split_keywords(values: List[str]) -> List[str]:
    return [k.strip() for v in (values or []) for k in v.split(',') if k.strip()]


def _print_records(records: List[NoteRecord], args) -> None:
    if args.json:
        print(json.dumps([r.as_json() for r in records]))
    elif getattr(args, 'table', False):
        data = [('Name', 'Type', 'Kind', 'Modified', 'Created')]
        for record in records:
            data.append((record.name, record.note_type.value, record.kind.value,
                         record.modified.astimezone().strftime('%Y-%m-%d %H:%M') if record.modified else '',
                         record.created.astimezone().strftime('%Y-%m-%d %H:%M') if record.created else ''))
        print(AsciiTable(data).table)
    elif getattr(args, 'long', True):
        for record in records:
            print(record.path)
    else:
        for record in records:
            print(record.name)


def _run(command: str, cmd_args: List[str]) -> int:
    try:
        return subprocess.run([command] + cmd_args).returncode
    except FileNotFoundError:
        print(f'Error: command not found: {command}', file=sys.stderr)
        return 1


def _new(args, nd: Noxe) -> int:
    path = nd.new(args.note_path[0],
                  note_type=args.type,
                  single_file=args.single_file,
                  template=args.template,
                  author=args.author,
                  keywords=_split_keywords(args.keywords),
                  with_metadata=args.metadata)
    print(f'Created {path}')
    return 0


def _list(args, nd: Noxe) -> int:
    query = NoteQuery(sort_by=args.sort_by, limit=args.number)
    _print_records(nd.list(query), args)
    return 0


def _search(args, nd: Noxe) -> int:
    records = nd.search(args.query[0], regex=args.regex)
    if not records and not args.json:
        print(f'No notes match "{args.query[0]}" in {nd.conf.root}', file=sys.stderr)
        return 1
    _print_records(records, args)
    return 0


def _preview(args, nd: Noxe) -> int:
    record = nd.resolve(args.note)
    command, cmd_args = nd.preview_command(record, args.command)
    print(f'Running {shlex.join([command] + cmd_args)}')
    return _run(command, cmd_args)


def _edit(args, nd: Noxe) -> int:
    record = nd.resolve(args.note)
    command, cmd_args = nd.edit_command(record, args.editor)
    return _run(command, cmd_args)


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='noxe', description='Create, find and preview Typst and Markdown notes.')
    parser.set_defaults(func=None)
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debugging information to stderr.')

    dir_parent = argparse.ArgumentParser(add_help=False)
    dir_parent.add_argument('-d', '--dir',
                            help='The directory where notes are stored. Defaults to $NOXE_DIR, or else the '
                                 'current directory.')

    subs = parser.add_subparsers(title='Commands')

    p_new = subs.add_parser(
        'new', parents=[dir_parent],
        help='Create a new note. If the path has a .typ, .md or .markdown extension, the note is created as a '
             'single file of that type; otherwise a folder note is created from the template. A bare name is '
             'created in the notes directory; any other path is used as given.')
    p_new.add_argument('note_path', nargs=1, help='Name or path of the note to create.')
    p_new.add_argument('-t', '--type', choices=[t.value for t in NoteType],
                       help='Note type when the path has no extension. Defaults to $NOXE_TYPE, or else typ.')
    p_new.add_argument('-s', '--single-file', action='store_true',
                       help='Create a single file instead of a folder note, adding the extension for the type.')
    p_new.add_argument('-S', '--template',
                       help='YAML template describing the files and folders of a folder note, and the content of '
                            'its main file. Defaults to $NOXE_TEMPLATE, or else a built-in template.')
    p_new.add_argument('-a', '--author', help='Author for the metadata header. Defaults to $NOXE_AUTHOR.')
    p_new.add_argument('-k', '--keywords', action='append',
                       help='Comma-separated keywords for the metadata header. May be repeated.')
    p_new.add_argument('-m', '--metadata', action='store_true', default=None,
                       help='Begin the main file with a metadata header (title, author, keywords, date).')
    p_new.set_defaults(func=_new)

    p_list = subs.add_parser('list', parents=[dir_parent], help='List notes.')
    p_list_sort = p_list.add_mutually_exclusive_group()
    p_list_sort.add_argument('-c', '--created', dest='sort_by', action='store_const', const=NoteSortField.CREATED,
                             help='Show the most recently created notes first.')
    p_list_sort.add_argument('-u', '--updated', dest='sort_by', action='store_const', const=NoteSortField.MODIFIED,
                             help='Show the most recently modified notes first.')
    p_list_sort.add_argument('-N', '--name', dest='sort_by', action='store_const', const=NoteSortField.NAME,
                             help='Sort notes by name.')
    p_list.add_argument('-n', '--number', type=int, help='Show at most this many notes.')
    p_list_formats = p_list.add_mutually_exclusive_group()
    p_list_formats.add_argument('-l', '--long', action='store_true', help='Show full paths instead of names.')
    p_list_formats.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_list_formats.add_argument('-t', '--table', action='store_true', help='Format output as a table.')
    p_list.set_defaults(func=_list, sort_by=NoteSortField.NONE)

    p_search = subs.add_parser(
        'search', parents=[dir_parent],
        help='Search for notes whose names contain the query, ignoring case. Prints their paths.')
    p_search.add_argument('query', nargs=1)
    p_search.add_argument('-r', '--regex', action='store_true',
                          help='Treat the query as a (case-insensitive) regular expression.')
    p_search.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_search.set_defaults(func=_search, long=True)

    p_preview = subs.add_parser(
        'preview', parents=[dir_parent],
        help='Preview a note with tinymist (Typst) or glow (Markdown).')
    p_preview.add_argument('note', nargs='?',
                           help='Name or path of the note. A name is looked up in the notes directory. If omitted, '
                                'the current directory must be a note.')
    p_preview.add_argument('-c', '--command',
                           help='Preview command to use instead of the default. The path of the main file is '
                                'appended to it.')
    p_preview.set_defaults(func=_preview)

    p_edit = subs.add_parser('edit', parents=[dir_parent], help='Open a note in your editor.')
    p_edit.add_argument('note', nargs='?',
                        help='Name or path of the note. A name is looked up in the notes directory. If omitted, '
                             'the current directory must be a note.')
    p_edit.add_argument('-e', '--editor', help='Editor command. Defaults to $VISUAL, then $EDITOR, then vim.')
    p_edit.set_defaults(func=_edit)

    return parser


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    if not args.func:
        parser.print_help()
        return 1
    try:
        conf = NoxeConf.for_user()
        if args.dir:
            conf = replace(conf, root=args.dir)
        return args.func(args, conf.instantiate())
    except AmbiguousError as e:
        print(f'Error: {e}. Candidates:', file=sys.stderr)
        for record in e.candidates:
            print(f'\t{os.path.relpath(record.path)}', file=sys.stderr)
        return 1
    except Error as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
