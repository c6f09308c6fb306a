"""Tests for the silk-cache command-line interface."""

import pytest
import typer
from typer.testing import CliRunner

from silk_cache import __version__
from silk_cache.__main__ import run
from silk_cache.cli.app import app
from silk_cache.core.handler import ImmediateHandler
from silk_cache.exceptions import CacheDecodeError
from silk_cache.storage.cache import CacheManager

runner = CliRunner()


@pytest.fixture
def invoke(tmp_path, cache_dir):
    config_file = tmp_path / "silk.ini"

    def _invoke(*args, **kwargs):
        return runner.invoke(
            app,
            ["--config", str(config_file), "--dir", str(cache_dir), *args],
            **kwargs,
        )

    return _invoke


@pytest.fixture
def seeded(cache_dir, items):
    cache = CacheManager("feed", cache_dir, handler=ImmediateHandler())
    cache.append_all(items).commit()
    return cache


class TestCli:
    """Commands for inspecting and maintaining caches."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_show_config(self, invoke, cache_dir):
        result = invoke("--show-config")

        assert result.exit_code == 0
        assert "cache_name = default" in result.stdout

    def test_caches_lists_files(self, invoke, seeded):
        result = invoke("caches")

        assert result.exit_code == 0
        assert "feed" in result.stdout

    def test_caches_with_empty_dir(self, invoke):
        result = invoke("caches")

        assert result.exit_code == 0
        assert "No caches found" in result.stdout

    def test_info(self, invoke, seeded, items):
        result = invoke("info", "feed")

        assert result.exit_code == 0
        assert "Entries:" in result.stdout
        assert str(len(items)) in result.stdout

    def test_show_lists_entries(self, invoke, seeded):
        result = invoke("show", "feed", "--limit", "2")

        assert result.exit_code == 0
        assert "FeedItem" in result.stdout
        assert "3 more not shown" in result.stdout

    def test_remove_commits(self, invoke, seeded, cache_dir, items):
        result = invoke("remove", "feed", "0")

        assert result.exit_code == 0
        reopened = CacheManager("feed", cache_dir, handler=ImmediateHandler())
        assert reopened.read() == items[1:]

    def test_remove_out_of_range(self, invoke, seeded):
        result = invoke("remove", "feed", "99")

        assert result.exit_code == 1
        assert "out of range" in result.stdout

    def test_clear_deletes_file(self, invoke, seeded):
        result = invoke("clear", "feed", "--yes")

        assert result.exit_code == 0
        assert not seeded.cache_file.exists()

    def test_clear_can_be_aborted(self, invoke, seeded):
        result = invoke("clear", "feed", input="n\n")

        assert result.exit_code != 0
        assert seeded.cache_file.exists()

    def test_init_writes_config(self, invoke, tmp_path):
        result = invoke("init")

        assert result.exit_code == 0
        assert (tmp_path / "silk.ini").is_file()

    def test_corrupt_cache_surfaces_decode_error(self, invoke, cache_dir):
        cache_dir.mkdir(parents=True)
        (cache_dir / "feed.cache").write_bytes(b"corrupt")

        result = invoke("show", "feed")

        assert result.exit_code == 1
        assert isinstance(result.exception, CacheDecodeError)

    def test_clear_deletes_corrupt_cache(self, invoke, cache_dir):
        cache_dir.mkdir(parents=True)
        cache_file = cache_dir / "feed.cache"
        cache_file.write_bytes(b"corrupt")

        result = invoke("clear", "feed", "--yes")

        assert result.exit_code == 0
        assert not cache_file.exists()

    def test_clear_of_corrupt_cache_can_be_aborted(self, invoke, cache_dir):
        cache_dir.mkdir(parents=True)
        cache_file = cache_dir / "feed.cache"
        cache_file.write_bytes(b"corrupt")

        result = invoke("clear", "feed", input="n\n")

        assert result.exit_code != 0
        assert cache_file.exists()

    def test_unknown_module(self, invoke):
        result = invoke("-m", "silk_cache_missing_module", "caches")

        assert result.exit_code == 1
        assert "Could not import" in result.stdout


class TestEntryPoint:
    """Exit codes and error panels from the console script."""

    def _run_with(self, monkeypatch, command):
        monkeypatch.setattr("silk_cache.__main__.app", command)
        return run()

    def test_success(self, monkeypatch):
        assert self._run_with(monkeypatch, lambda: None) == 0

    def test_cache_error_exits_with_one(self, monkeypatch, capsys):
        def command():
            raise CacheDecodeError("Record 0 in 'feed.cache' could not be decoded")

        assert self._run_with(monkeypatch, command) == 1
        assert "CacheDecodeError" in capsys.readouterr().err

    def test_unexpected_error_exits_with_one(self, monkeypatch, capsys):
        def command():
            raise RuntimeError("boom")

        assert self._run_with(monkeypatch, command) == 1
        assert "Unexpected" in capsys.readouterr().err

    def test_exit_code_is_passed_through(self, monkeypatch):
        def command():
            raise typer.Exit(code=3)

        assert self._run_with(monkeypatch, command) == 3
