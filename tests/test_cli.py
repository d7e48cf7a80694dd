"""Tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from standard_site_sync import __version__
from sync import cli

from conftest import make_post

ENV_VARS = ["PDS_URL", "PDS_REPO", "PDS_ACCESS_TOKEN", "CONTENT_DIR", "REPO_ROOT", "DRY_RUN"]


@pytest.fixture
def runner(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_dry_run_sync(runner, blog_dir, write_post):
    write_post("hello.md", make_post())

    result = runner.invoke(cli, ["--dry-run", "--content-dir", str(blog_dir), "sync"])

    assert result.exit_code == 0
    assert "Would push" in result.output
    assert "/blog/hello-world" in result.output


def test_default_command_is_sync(runner, blog_dir, write_post):
    write_post("hello.md", make_post())

    result = runner.invoke(cli, ["--dry-run", "--content-dir", str(blog_dir)])

    assert result.exit_code == 0
    assert "Would push" in result.output


def test_invalid_post_exits_with_error(runner, blog_dir, write_post):
    write_post("bad.md", "---\ntitle: Broken\n---\n")

    result = runner.invoke(cli, ["--dry-run", "--content-dir", str(blog_dir), "sync"])

    assert result.exit_code == 1
    assert "Validation failed" in result.output


def test_missing_content_dir(runner, tmp_path):
    result = runner.invoke(cli, ["--dry-run", "--content-dir", str(tmp_path / "nope"), "sync"])

    assert result.exit_code == 1
    assert "Content directory not found" in result.output


def test_missing_pds_settings(runner, blog_dir):
    result = runner.invoke(cli, ["--content-dir", str(blog_dir), "sync"])

    assert result.exit_code == 1
    assert "Configuration error" in result.output
    assert "PDS_URL" in result.output


def test_inspect(runner, write_post):
    path = write_post("hello.md", make_post(tags=["a"]))

    result = runner.invoke(cli, ["inspect", str(path)])

    assert result.exit_code == 0
    assert "site.standard.document/" in result.output
    assert "2024-03-15T00:00:00.000Z" in result.output


def test_inspect_invalid(runner, write_post):
    path = write_post("bad.md", "---\ntitle: Broken\nno colon here\n---\n")

    result = runner.invoke(cli, ["inspect", str(path)])

    assert result.exit_code == 1
    assert "Skipped line 3" in result.output
    assert "Validation failed" in result.output


def test_inspect_draft(runner, write_post):
    path = write_post("draft.md", make_post(draft=True))

    result = runner.invoke(cli, ["inspect", str(path)])

    assert result.exit_code == 0
    assert "Draft" in result.output
