"""Unit tests for the command line entry point."""

from __future__ import annotations

import sys
from pathlib import Path

import httpx
import pytest
from loguru import logger

from php_winget_manifest import cli
from php_winget_manifest.core.exceptions import FetchError, ParseError
from php_winget_manifest.generator import generate

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger.remove()
    logger.add(sys.__stderr__)


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEW_PHP_VERSION", "unset")
    monkeypatch.delenv("GITHUB_ENV", raising=False)


def _fixture_transport() -> httpx.MockTransport:
    body = (FIXTURES / "releases.json").read_text(encoding="utf-8")
    return httpx.MockTransport(lambda request: httpx.Response(200, text=body))


def _fail_if_called(*args, **kwargs):
    raise AssertionError("generate() must not be called")


def test_no_arguments_prints_help(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "generate", _fail_if_called)

    assert cli.run([]) == 0
    assert "Builds Winget-compatible manifest files" in capsys.readouterr().out


@pytest.mark.parametrize("version", ["8", "8.3.1", "latest", "10.0"])
def test_invalid_version_exits_2(version: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "generate", _fail_if_called)

    assert cli.run([version]) == 2


@pytest.mark.parametrize("variant", ["zts", "TS", "threadsafe"])
def test_invalid_thread_safety_exits_1(variant: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "generate", _fail_if_called)

    assert cli.run(["8.3", variant]) == 1


def test_error_without_exit_code_exits_255(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def failing_generate(query, config, work_dir):
        raise FetchError("network down")

    monkeypatch.setattr(cli, "generate", failing_generate)

    assert cli.run(["8.3", "--work-dir", str(tmp_path)]) == 255


def test_parse_error_exits_255(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def failing_generate(query, config, work_dir):
        raise ParseError("x64")

    monkeypatch.setattr(cli, "generate", failing_generate)

    assert cli.run(["8.3", "--work-dir", str(tmp_path)]) == 255


def test_generates_and_reports(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    isolated_env: None,
) -> None:
    import os

    transport = _fixture_transport()
    monkeypatch.setattr(cli, "generate", lambda q, c, w: generate(q, c, w, transport=transport))

    assert cli.run(["8.3", "nts", "--work-dir", str(tmp_path)]) == 0

    assert capsys.readouterr().out == "8.3.14\n"
    assert os.environ["NEW_PHP_VERSION"] == "8.3.14"
    assert (tmp_path / "new-version.txt").read_text(encoding="utf-8") == "8.3.14"
    version_dir = tmp_path / "manifests" / "p" / "PHP" / "PHP" / "NTS" / "8" / "3" / "8.3.14"
    assert (version_dir / "PHP.PHP.NTS.8.3.installer.yaml").is_file()

    # 2回目は新バージョン無し
    assert cli.run(["8.3", "nts", "--work-dir", str(tmp_path)]) == 0

    assert capsys.readouterr().out == ""
    assert os.environ["NEW_PHP_VERSION"] == "0"
    assert not (tmp_path / "new-version.txt").exists()


def test_reporting_can_be_disabled(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    isolated_env: None,
) -> None:
    import os

    transport = _fixture_transport()
    monkeypatch.setattr(cli, "generate", lambda q, c, w: generate(q, c, w, transport=transport))

    assert cli.run(["8.3", "--work-dir", str(tmp_path), "--no-env", "--no-sentinel"]) == 0

    assert os.environ["NEW_PHP_VERSION"] == "unset"
    assert not (tmp_path / "new-version.txt").exists()


def test_unwritable_github_env_exits_255(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    isolated_env: None,
) -> None:
    """報告段階の書き込み失敗もトレースバックにならず255で終了すること."""
    transport = _fixture_transport()
    monkeypatch.setattr(cli, "generate", lambda q, c, w: generate(q, c, w, transport=transport))
    github_env = tmp_path / "github_env_dir"
    github_env.mkdir()
    monkeypatch.setenv("GITHUB_ENV", str(github_env))

    assert cli.run(["8.3", "--work-dir", str(tmp_path)]) == 255


def test_unwritable_sentinel_exits_255(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    isolated_env: None,
) -> None:
    transport = _fixture_transport()
    monkeypatch.setattr(cli, "generate", lambda q, c, w: generate(q, c, w, transport=transport))
    (tmp_path / "new-version.txt").mkdir()

    assert cli.run(["8.3", "--work-dir", str(tmp_path)]) == 255
