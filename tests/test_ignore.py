import logging
from pathspec.patterns.gitwildmatch import GitWildMatchPattern
from noxe.ignore import IgnoreSet, load_patterns, compile_patterns


def test_from_lines():
    ignore = IgnoreSet.from_lines(['# comment', '', 'drafts', '*.tmp.md', 'archive/'])
    assert len(ignore) == 3
    assert ignore.is_ignored('drafts')
    assert ignore.is_ignored('drafts', is_dir=True)
    assert ignore.is_ignored('x.tmp.md')
    assert not ignore.is_ignored('x.md')
    assert ignore.is_ignored('archive', is_dir=True)
    assert not ignore.is_ignored('archive')
    assert not ignore.is_ignored('# comment')


def test_negation_last_match_wins():
    ignore = IgnoreSet.from_lines(['*.md', '!keep.md'])
    assert ignore.is_ignored('drop.md')
    assert not ignore.is_ignored('keep.md')
    ignore = IgnoreSet.from_lines(['!keep.md', '*.md'])
    assert ignore.is_ignored('keep.md')


def test_anchoring_and_double_star():
    ignore = IgnoreSet.from_lines(['/root-only', '**/deep'])
    assert ignore.is_ignored('root-only')
    assert ignore.is_ignored('deep', is_dir=True)
    assert ignore.is_ignored('a/b/deep')


def test_empty():
    ignore = IgnoreSet()
    assert len(ignore) == 0
    assert not ignore.is_ignored('anything')


def test_load_patterns(fs):
    fs.create_file('/notes/.gitignore', contents='a\nb\n')
    assert load_patterns('/notes/.gitignore') == ['a', 'b']
    assert load_patterns('/notes/.ignore') == []


def test_load_patterns_not_utf8(fs, caplog):
    fs.create_file('/notes/.gitignore', contents=b'\xff\xfe bad\nb\n')
    with caplog.at_level(logging.WARNING, logger='noxe.ignore'):
        assert load_patterns('/notes/.gitignore') == []
    assert 'Skipping unreadable ignore file: /notes/.gitignore' in caplog.text


def test_build_skips_unreadable_file(fs):
    fs.create_file('/notes/.ignore', contents='scratch\n')
    fs.create_file('/notes/.gitignore', contents=b'\xe9t\xe9\n')
    ignore = IgnoreSet.build('/notes')
    assert ignore.is_ignored('scratch')
    assert not ignore.is_ignored('other.md')


def test_build(fs):
    fs.create_file('/notes/.ignore', contents='*.md\nscratch\n')
    fs.create_file('/notes/.gitignore', contents='!keep.md\n')
    ignore = IgnoreSet.build('/notes')
    assert ignore.is_ignored('other.md')
    assert ignore.is_ignored('scratch', is_dir=True)
    assert not ignore.is_ignored('keep.md')
    assert not ignore.is_ignored('paper.typ')


def test_build_without_files(fs):
    fs.create_dir('/notes')
    assert len(IgnoreSet.build('/notes')) == 0


def test_invalid_pattern_skipped(mocker, caplog):
    def fake_pattern(line):
        if line == 'bad[':
            raise ValueError('nope')
        return GitWildMatchPattern(line)

    mocker.patch('noxe.ignore.GitWildMatchPattern', side_effect=fake_pattern)
    with caplog.at_level(logging.WARNING, logger='noxe.ignore'):
        patterns = compile_patterns(['one', 'bad[', 'two'], '/notes/.gitignore')
    assert [p.pattern for p in patterns] == ['one', 'two']
    assert "Skipping invalid ignore pattern: /notes/.gitignore (pattern 'bad[')" in caplog.text
