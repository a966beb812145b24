"""Unit tests for new-version reporting."""

from __future__ import annotations

from pathlib import Path

import pytest

from php_winget_manifest.core.exceptions import WriteError
from php_winget_manifest.core.models import GenerationResult, ReleaseQuery
from php_winget_manifest.reporter import env_value, export_env, print_new_version, write_sentinel


def _result(tmp_path: Path, new_version: str | None) -> GenerationResult:
    return GenerationResult(
        query=ReleaseQuery("8.3"),
        release=None,  # type: ignore[arg-type]
        output_dir=tmp_path,
        new_version=new_version,
    )


class TestPrintNewVersion:
    def test_prints_version(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        print_new_version(_result(tmp_path, "8.3.14"))
        assert capsys.readouterr().out == "8.3.14\n"

    def test_no_output_without_new_version(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        print_new_version(_result(tmp_path, None))
        assert capsys.readouterr().out == ""


class TestExportEnv:
    def test_env_value(self, tmp_path: Path) -> None:
        assert env_value(_result(tmp_path, "8.3.14")) == "8.3.14"
        assert env_value(_result(tmp_path, None)) == "0"
        assert env_value(_result(tmp_path, None), no_new_version_value="none") == "none"

    def test_sets_variable(self, tmp_path: Path) -> None:
        environ: dict[str, str] = {}

        value = export_env(_result(tmp_path, "8.3.14"), "NEW_PHP_VERSION", environ=environ)

        assert value == "8.3.14"
        assert environ == {"NEW_PHP_VERSION": "8.3.14"}

    def test_sentinel_value_without_new_version(self, tmp_path: Path) -> None:
        environ: dict[str, str] = {}

        export_env(_result(tmp_path, None), "NEW_PHP_VERSION", environ=environ)

        assert environ["NEW_PHP_VERSION"] == "0"

    def test_appends_to_github_env(self, tmp_path: Path) -> None:
        """GITHUB_ENV が設定されていれば追記されること."""
        github_env = tmp_path / "github_env"
        github_env.write_text("EXISTING=1\n", encoding="utf-8")
        environ = {"GITHUB_ENV": str(github_env)}

        export_env(_result(tmp_path, "8.3.14"), "NEW_PHP_VERSION", environ=environ)

        assert github_env.read_text(encoding="utf-8") == "EXISTING=1\nNEW_PHP_VERSION=8.3.14\n"

    def test_defaults_to_process_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import os

        monkeypatch.setenv("NEW_PHP_VERSION", "placeholder")
        monkeypatch.delenv("GITHUB_ENV", raising=False)

        export_env(_result(tmp_path, "8.3.14"), "NEW_PHP_VERSION")

        assert os.environ["NEW_PHP_VERSION"] == "8.3.14"


class TestWriteSentinel:
    def test_writes_new_version(self, tmp_path: Path) -> None:
        sentinel = tmp_path / "new-version.txt"

        assert write_sentinel(_result(tmp_path, "8.3.14"), sentinel)
        assert sentinel.read_text(encoding="utf-8") == "8.3.14"

    def test_replaces_previous_content(self, tmp_path: Path) -> None:
        sentinel = tmp_path / "new-version.txt"
        sentinel.write_text("8.3.13-and-more-text", encoding="utf-8")

        write_sentinel(_result(tmp_path, "8.3.14"), sentinel)

        assert sentinel.read_text(encoding="utf-8") == "8.3.14"

    def test_removes_stale_file_without_new_version(self, tmp_path: Path) -> None:
        """新バージョンが無い場合は以前のファイルが消えて何も書かれないこと."""
        sentinel = tmp_path / "new-version.txt"
        sentinel.write_text("8.3.13", encoding="utf-8")

        assert not write_sentinel(_result(tmp_path, None), sentinel)
        assert not sentinel.exists()

    def test_no_file_without_new_version(self, tmp_path: Path) -> None:
        sentinel = tmp_path / "new-version.txt"

        write_sentinel(_result(tmp_path, None), sentinel)

        assert not sentinel.exists()


def test_unwritable_github_env_is_write_error(tmp_path: Path) -> None:
    """GITHUB_ENV に追記できない場合は WriteError になること."""
    environ = {"GITHUB_ENV": str(tmp_path)}

    with pytest.raises(WriteError, match="Unable to write to file"):
        export_env(_result(tmp_path, "8.3.14"), "NEW_PHP_VERSION", environ=environ)


@pytest.mark.parametrize("new_version", ["8.3.14", None])
def test_sentinel_path_is_directory(tmp_path: Path, new_version: str | None) -> None:
    sentinel = tmp_path / "new-version.txt"
    sentinel.mkdir()

    with pytest.raises(WriteError) as exc_info:
        write_sentinel(_result(tmp_path, new_version), sentinel)
    assert exc_info.value.path == sentinel
