# -*- coding: utf-8 -*-

import pytest
from click.testing import CliRunner
from contentstore import ContentStore
from contentstore.cli.cli import cli

HELLO_SHA256 = '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def root(tmpdir):
    return str(tmpdir.join('cli_store'))


@pytest.fixture
def infile(tmpdir):
    path = tmpdir.join('hello.txt')
    path.write(b'hello')
    return str(path)


def test_init_and_valid(runner, root):
    result = runner.invoke(cli, [root, 'init'])
    assert result.exit_code == 0
    assert ContentStore.open(root) is not None

    result = runner.invoke(cli, [root, 'valid'])
    assert result.exit_code == 0
    assert 'valid' in result.output


def test_valid_missing(runner, root):
    result = runner.invoke(cli, [root, 'valid'])
    assert result.exit_code == 1
    assert 'No content store' in result.output


def test_commands_need_a_store(runner, root):
    for command in ('iterate', 'check'):
        result = runner.invoke(cli, [root, command])
        assert result.exit_code == 1
        assert 'no content store' in result.output


def test_put_get_iterate(runner, root, infile):
    runner.invoke(cli, [root, 'init'])

    result = runner.invoke(cli, [root, 'put', infile])
    assert result.exit_code == 0
    assert result.output.split() == [HELLO_SHA256, infile]

    result = runner.invoke(cli, [root, 'get', HELLO_SHA256])
    assert result.exit_code == 0
    assert result.stdout_bytes == b'hello'

    result = runner.invoke(cli, [root, 'iterate'])
    assert result.exit_code == 0
    assert result.output.split() == [HELLO_SHA256]


def test_get_missing(runner, root):
    runner.invoke(cli, [root, 'init'])
    result = runner.invoke(cli, [root, 'get', '0' * 64])
    assert result.exit_code == 1
    assert 'object not found' in result.output


def test_check(runner, root):
    runner.invoke(cli, [root, 'init'])
    store = ContentStore.open(root)
    digest = store.store(b'foo')

    result = runner.invoke(cli, [root, 'check'])
    assert result.exit_code == 0
    assert result.output == ''

    with open(str(store.object_path(digest.hex())), 'ab') as fh:
        fh.write(b'f')
    result = runner.invoke(cli, [root, 'check'])
    assert result.exit_code == 1
    assert 'corrupt object' in result.output
