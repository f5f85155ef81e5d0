import os.path
from pathlib import Path
import pytest
from noxe.conf import NoxeConf
from noxe.errors import ConfError
from noxe.models import NoteType


def test_for_user_no_file(fs):
    assert NoxeConf.for_user(environ={}) == NoxeConf()


def test_for_user(fs):
    confpy = """from noxe.conf import *
conf = NoxeConf(root='/notes', note_type=NoteType.MARKDOWN, author='Jane', preview_markdown=['mdcat'])"""
    fs.create_file(os.path.expanduser('~/.noxe.conf.py'), contents=confpy)
    conf = NoxeConf.for_user(environ={})
    assert conf == NoxeConf(root='/notes', note_type=NoteType.MARKDOWN, author='Jane', preview_markdown=['mdcat'])


def test_for_user_bad_file(fs):
    fs.create_file(os.path.expanduser('~/.noxe.conf.py'), contents='config = 1')
    with pytest.raises(ConfError, match='assign an instance of NoxeConf'):
        NoxeConf.for_user(environ={})


def test_env_overrides(fs):
    fs.create_file(os.path.expanduser('~/.noxe.conf.py'),
                   contents="from noxe.conf import *\nconf = NoxeConf(root='/from-file', author='File')")
    conf = NoxeConf.for_user(environ={'NOXE_DIR': '/from-env', 'NOXE_TYPE': 'md', 'NOXE_TEMPLATE': '/t.yaml'})
    assert conf.root == '/from-env'
    assert conf.note_type == NoteType.MARKDOWN
    assert conf.author == 'File'
    assert conf.template == '/t.yaml'
    assert NoxeConf().with_env({'NOXE_AUTHOR': 'Env', 'NOXE_DIR': ''}) == NoxeConf(author='Env')


def test_env_bad_type():
    with pytest.raises(ConfError, match='NOXE_TYPE'):
        NoxeConf().with_env({'NOXE_TYPE': 'docx'})


def test_standardize(fs):
    Path('/notes/sub').mkdir(parents=True)
    fs.cwd = '/notes/sub'
    conf = NoxeConf(root='..', note_type='md', template='~/t.yaml').standardize()
    assert conf.root == '/notes'
    assert conf.note_type == NoteType.MARKDOWN
    assert conf.template == os.path.expanduser('~/t.yaml')
