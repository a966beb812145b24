"""設定ファイル（config.yml）の読み込み.

パッケージ同梱の config.yml を既定値とし、--config で渡されたYAMLの各セクションを上書きマージする。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from .exceptions import ManifestGeneratorError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.yml"
DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


@dataclass(frozen=True)
class SourceConfig:
    url: str
    download_base_url: str
    timeout: float
    max_redirects: int
    user_agent: str


@dataclass(frozen=True)
class PackageConfig:
    identifier: str
    nts_segment: str


@dataclass(frozen=True)
class OutputConfig:
    manifests_dir: Path
    aux_dir: Path
    sentinel_file: Path
    env_var: str
    no_new_version_value: str
    templates_dir: Path


@dataclass(frozen=True)
class GeneratorConfig:
    source: SourceConfig
    package: PackageConfig
    output: OutputConfig
    toolsets: dict[str, tuple[str, ...]]


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ManifestGeneratorError(f"Config file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ManifestGeneratorError(f"Invalid YAML in config file: {path}") from e
    if not isinstance(data, dict):
        raise ManifestGeneratorError(f"Config file must contain a mapping, got {type(data)}")
    return data


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def _parse_toolsets(raw: dict[str, Any]) -> dict[str, tuple[str, ...]]:
    toolsets: dict[str, tuple[str, ...]] = {}
    for line, names in raw.items():
        if isinstance(names, str):
            names = [names]
        if not isinstance(names, list) or not names:
            raise ManifestGeneratorError(f"Invalid toolset list for '{line}': {names!r}")
        toolsets[str(line)] = tuple(str(n).lower() for n in names)
    if "default" not in toolsets:
        raise ManifestGeneratorError("Config 'toolsets' must define a 'default' list")
    return toolsets


def parse_config(data: dict[str, Any]) -> GeneratorConfig:
    """辞書から GeneratorConfig を構築する.

    Raises:
        ManifestGeneratorError: 必須キーの欠落、または値の型が不正な場合
    """
    try:
        source = data["source"]
        package = data["package"]
        output = data["output"]
        templates_dir = output.get("templates_dir") or DEFAULT_TEMPLATES_DIR
        return GeneratorConfig(
            source=SourceConfig(
                url=str(source["url"]),
                download_base_url=str(source["download_base_url"]),
                timeout=float(source["timeout"]),
                max_redirects=int(source["max_redirects"]),
                user_agent=str(source["user_agent"]),
            ),
            package=PackageConfig(
                identifier=str(package["identifier"]),
                nts_segment=str(package["nts_segment"]),
            ),
            output=OutputConfig(
                manifests_dir=Path(output["manifests_dir"]),
                aux_dir=Path(output["aux_dir"]),
                sentinel_file=Path(output["sentinel_file"]),
                env_var=str(output["env_var"]),
                no_new_version_value=str(output["no_new_version_value"]),
                templates_dir=Path(templates_dir),
            ),
            toolsets=_parse_toolsets(data.get("toolsets") or {}),
        )
    except KeyError as e:
        raise ManifestGeneratorError(f"Missing config key: {e.args[0]}") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise ManifestGeneratorError(f"Invalid config value: {e}") from e


def load_config(config_path: Path | None = None) -> GeneratorConfig:
    """既定の config.yml を読み込み、指定があればユーザー設定で上書きする.

    Args:
        config_path: ユーザー設定YAMLのパス（None なら既定値のみ）

    Returns:
        設定オブジェクト
    """
    data = _read_yaml(DEFAULT_CONFIG_PATH)
    if config_path is not None:
        data = _merge(data, _read_yaml(Path(config_path)))
        logger.info(f"Loaded config overrides from {config_path}")
    return parse_config(data)
