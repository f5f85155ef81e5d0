from datetime import datetime, timezone
import os
import pytest
from noxe.models import NoteType, NoteKind, NoteRecord, NoteQuery, NoteSortField, classify, folder_note_type


def record(name, modified=None, created=None):
    return NoteRecord(name, NoteKind.FILE, NoteType.MARKDOWN, f'/notes/{name}', modified=modified, created=created)


def ts(day):
    return datetime(2020, 1, day, tzinfo=timezone.utc)


def test_note_type_parse():
    assert NoteType.parse('typ') == NoteType.TYPST
    assert NoteType.parse(' MD ') == NoteType.MARKDOWN
    assert NoteType.parse(NoteType.MARKDOWN) == NoteType.MARKDOWN
    with pytest.raises(ValueError, match='Invalid note type: txt'):
        NoteType.parse('txt')
    with pytest.raises(ValueError):
        NoteType.parse(None)


def test_note_type_from_extension():
    assert NoteType.from_extension('foo.typ') == NoteType.TYPST
    assert NoteType.from_extension('/a/b/foo.md') == NoteType.MARKDOWN
    assert NoteType.from_extension('foo.Markdown') == NoteType.MARKDOWN
    assert NoteType.from_extension('foo.txt') is None
    assert NoteType.from_extension('foo') is None
    assert NoteType.TYPST.main_file == 'main.typ'
    assert NoteType.MARKDOWN.extension == '.md'


def test_classify_file(fs):
    fs.create_file('/notes/one.md')
    fs.create_file('/notes/two.typ')
    fs.create_file('/notes/three.txt')
    one = classify('/notes/one.md')
    assert (one.name, one.kind, one.note_type, one.path) == ('one.md', NoteKind.FILE, NoteType.MARKDOWN,
                                                             '/notes/one.md')
    assert one.stem == 'one'
    assert one.main_path == '/notes/one.md'
    assert one.modified.tzinfo and one.created.tzinfo
    assert classify('/notes/two.typ').note_type == NoteType.TYPST
    assert classify('/notes/three.txt') is None
    assert classify('/notes/missing.md') is None


def test_classify_folder(fs):
    fs.create_file('/notes/typ/main.typ')
    fs.create_file('/notes/md/main.md')
    fs.create_file('/notes/both/main.md')
    fs.create_file('/notes/both/main.typ')
    fs.create_file('/notes/neither/notes.md')
    fs.create_dir('/notes/dirmain/main.md')
    fs.cwd = '/notes'

    rec = classify('typ')
    assert (rec.name, rec.kind, rec.note_type, rec.path) == ('typ', NoteKind.FOLDER, NoteType.TYPST, '/notes/typ')
    assert rec.main_path == '/notes/typ/main.typ'
    assert rec.stem == 'typ'
    assert classify('/notes/md').note_type == NoteType.MARKDOWN
    assert classify('/notes/both') is None
    assert folder_note_type('/notes/both') is None
    assert classify('/notes/neither') is None
    assert classify('/notes/dirmain') is None


def test_folder_modified_uses_main_file(fs):
    fs.create_file('/notes/n/main.typ')
    os.utime('/notes/n/main.typ', (1000, 2000))
    assert classify('/notes/n').modified == datetime.fromtimestamp(2000, tz=timezone.utc)


def test_as_json():
    r = NoteRecord('n', NoteKind.FOLDER, NoteType.TYPST, '/notes/n', modified=ts(2), created=None)
    assert r.as_json() == {
        'name': 'n',
        'kind': 'folder',
        'type': 'typ',
        'path': '/notes/n',
        'modified': '2020-01-02T00:00:00+00:00',
        'created': None,
    }


def test_query_sorting():
    records = [record('b.md', ts(1), ts(3)), record('A.md', ts(3), ts(2)), record('c.md', ts(2), ts(1))]
    assert [r.name for r in NoteQuery().apply(records)] == ['b.md', 'A.md', 'c.md']
    assert [r.name for r in NoteQuery(NoteSortField.CREATED).apply(records)] == ['b.md', 'A.md', 'c.md']
    assert [r.name for r in NoteQuery(NoteSortField.MODIFIED).apply(records)] == ['A.md', 'c.md', 'b.md']
    assert [r.name for r in NoteQuery(NoteSortField.NAME).apply(records)] == ['A.md', 'b.md', 'c.md']
    assert [r.name for r in records] == ['b.md', 'A.md', 'c.md']


def test_query_limit():
    records = [record('b.md', ts(1)), record('a.md', ts(3)), record('c.md', ts(2))]
    assert [r.name for r in NoteQuery(NoteSortField.MODIFIED, limit=2).apply(records)] == ['a.md', 'c.md']
    assert len(NoteQuery(limit=1000000).apply(records)) == 3
    assert NoteQuery(limit=0).apply(records) == []
