"""Integration tests for repository initialization."""

import pytest
from pathlib import Path
from click.testing import CliRunner
from twig.cli.main import cli
from twig.core.repository import Repository


def test_init_creates_git_directory(temp_dir, monkeypatch):
    """Test that init creates the .git directory structure."""
    monkeypatch.chdir(temp_dir)
    result = CliRunner().invoke(cli, ['init'])

    assert result.exit_code == 0
    assert 'Initialized empty Twig repository' in result.output
    assert (temp_dir / '.git' / 'objects').is_dir()
    assert (temp_dir / '.git' / 'refs' / 'heads').is_dir()
    assert (temp_dir / '.git' / 'HEAD').read_text() == 'ref: refs/heads/main\n'


def test_init_in_new_directory(temp_dir):
    target = temp_dir / 'project'
    result = CliRunner().invoke(cli, ['init', str(target)])

    assert result.exit_code == 0
    assert Repository.find_repository(str(target)).work_tree == target


def test_init_with_object_format(temp_dir):
    result = CliRunner().invoke(cli, ['init', '--object-format', 'sha256', str(temp_dir)])

    assert result.exit_code == 0
    assert Repository(str(temp_dir)).algorithm == 'sha256'


def test_double_init_fails(temp_dir):
    """Test that initializing twice fails."""
    runner = CliRunner()
    assert runner.invoke(cli, ['init', str(temp_dir)]).exit_code == 0

    result = runner.invoke(cli, ['init', str(temp_dir)])
    assert result.exit_code != 0
    assert 'already exists' in result.output


def test_commands_outside_repository_fail(temp_dir, monkeypatch):
    monkeypatch.chdir(temp_dir)
    result = CliRunner().invoke(cli, ['write-tree'])
    assert result.exit_code != 0
    assert 'Not a twig repository' in result.output
