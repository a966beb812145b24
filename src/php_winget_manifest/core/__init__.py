"""マニフェスト生成のコア（データ型・設定・例外）."""

from .config import GeneratorConfig, load_config, parse_config
from .exceptions import (
    ArgumentError,
    DirectoryError,
    FetchError,
    ManifestGeneratorError,
    ParseError,
    TemplateError,
    WriteError,
)
from .models import ArtifactInfo, GenerationResult, ReleaseInfo, ReleaseQuery

__all__ = [
    "GeneratorConfig",
    "load_config",
    "parse_config",
    "ArgumentError",
    "DirectoryError",
    "FetchError",
    "ManifestGeneratorError",
    "ParseError",
    "TemplateError",
    "WriteError",
    "ArtifactInfo",
    "GenerationResult",
    "ReleaseInfo",
    "ReleaseQuery",
]
