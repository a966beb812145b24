"""新バージョン検出結果の公開（標準出力・環境変数・センチネルファイル）.

いずれも独立しており、呼び出し側が必要なものを任意の順で呼ぶ。
"""

from __future__ import annotations

import os
from collections.abc import MutableMapping
from pathlib import Path

from loguru import logger

from .core.exceptions import WriteError
from .core.models import GenerationResult

GITHUB_ENV = "GITHUB_ENV"


def print_new_version(result: GenerationResult) -> None:
    if result.new_version is None:
        return
    print(result.new_version)


def env_value(result: GenerationResult, no_new_version_value: str = "0") -> str:
    return result.new_version if result.new_version is not None else no_new_version_value


def export_env(
    result: GenerationResult,
    var_name: str,
    no_new_version_value: str = "0",
    environ: MutableMapping[str, str] | None = None,
) -> str:
    """結果を環境変数として公開し、設定した値を返す.

    GITHUB_ENV が設定されていれば後続の CI ステップ向けにも追記する。
    """
    environ = os.environ if environ is None else environ
    value = env_value(result, no_new_version_value)
    environ[var_name] = value

    github_env = environ.get(GITHUB_ENV)
    if github_env:
        try:
            with open(github_env, "a", encoding="utf-8") as f:
                f.write(f"{var_name}={value}\n")
        except OSError as e:
            raise WriteError(Path(github_env)) from e
        logger.debug(f"Appended {var_name} to {github_env}")

    logger.info(f"Exported {var_name}={value}")
    return value


def write_sentinel(result: GenerationResult, path: Path) -> bool:
    """前回の内容を消してから、新バージョンがあれば書き出す.

    Returns:
        ファイルを書き出した場合 True
    """
    path = Path(path)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise WriteError(path) from e
    if result.new_version is None:
        logger.info("No new version found, sentinel file not written")
        return False

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(result.new_version, encoding="utf-8")
    except OSError as e:
        raise WriteError(path) from e
    if not path.exists():
        raise WriteError(path)
    logger.info(f"New version {result.new_version} written to {path}")
    return True
