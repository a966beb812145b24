"""php_winget_manifest: PHP for Windows 用 Winget マニフェスト生成.

リリースインデックスの取得、リリース情報の抽出、テンプレート描画、新バージョン通知を提供する。
"""

from php_winget_manifest.core import (
    ArgumentError,
    ArtifactInfo,
    DirectoryError,
    FetchError,
    GenerationResult,
    GeneratorConfig,
    ManifestGeneratorError,
    ParseError,
    ReleaseInfo,
    ReleaseQuery,
    TemplateError,
    WriteError,
    load_config,
)
from php_winget_manifest.extractors import HtmlPageExtractor, JsonIndexExtractor, select_extractor
from php_winget_manifest.fetcher import fetch_release_index
from php_winget_manifest.generator import extract_release, generate
from php_winget_manifest.renderer import build_render_context, output_dir_for, render_manifests, render_template
from php_winget_manifest.reporter import env_value, export_env, print_new_version, write_sentinel

__version__ = "0.1.0"

__all__ = [
    # core
    "ArgumentError",
    "ArtifactInfo",
    "DirectoryError",
    "FetchError",
    "GenerationResult",
    "GeneratorConfig",
    "ManifestGeneratorError",
    "ParseError",
    "ReleaseInfo",
    "ReleaseQuery",
    "TemplateError",
    "WriteError",
    "load_config",
    # extractors
    "HtmlPageExtractor",
    "JsonIndexExtractor",
    "select_extractor",
    # pipeline
    "fetch_release_index",
    "extract_release",
    "generate",
    "build_render_context",
    "output_dir_for",
    "render_manifests",
    "render_template",
    "print_new_version",
    "env_value",
    "export_env",
    "write_sentinel",
]
