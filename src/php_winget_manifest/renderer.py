"""テンプレートからマニフェストを生成して書き出す.

置換は strtr 相当の文字列置換（一回走査・最長一致）で、未知の %token% はそのまま残す。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .core.config import GeneratorConfig
from .core.exceptions import DirectoryError, TemplateError, WriteError
from .core.models import TS, ReleaseInfo, ReleaseQuery

PLACEHOLDER_LIKE = re.compile(r"%[a-z][a-z0-9-]*%")

TS_LABELS = {"ts": "Thread Safe", "nts": "Non Thread Safe"}

# %tssuffix% は ts 版では空文字
OPTIONAL_PLACEHOLDERS = frozenset({"%tssuffix%"})


@dataclass(frozen=True)
class TemplateSpec:
    name: str
    version_scoped: bool


TEMPLATES: tuple[TemplateSpec, ...] = (
    TemplateSpec("(packageid).installer.yaml", version_scoped=True),
    TemplateSpec("(packageid).locale.en-US.yaml", version_scoped=True),
    TemplateSpec("(packageid).yaml", version_scoped=True),
    TemplateSpec("commit-message.txt", version_scoped=False),
    TemplateSpec("pr-description.md", version_scoped=False),
)


def package_identifier(query: ReleaseQuery, config: GeneratorConfig) -> str:
    parts = [config.package.identifier]
    if not query.is_thread_safe:
        parts.append(config.package.nts_segment)
    parts.append(query.version)
    return ".".join(parts)


def build_render_context(query: ReleaseQuery, release: ReleaseInfo, config: GeneratorConfig) -> dict[str, str]:
    """置換トークン → 値のマッピングを作る."""
    return {
        "%version%": query.version,
        "%releasedate%": release.release_date_text,
        "%fullversion%": release.full_version,
        "%url-x64%": release.artifacts["x64"].url,
        "%hash-x64%": release.artifacts["x64"].sha256,
        "%url-x86%": release.artifacts["x86"].url,
        "%hash-x86%": release.artifacts["x86"].sha256,
        "%versionmin%": query.version.replace(".", ""),
        "%major%": query.major,
        "%minor%": query.minor,
        "%ts%": query.variant,
        "%tslabel%": TS_LABELS[query.variant],
        "%tssuffix%": "" if query.variant == TS else f" {config.package.nts_segment}",
        "%packageid%": package_identifier(query, config),
    }


def build_filename_context(query: ReleaseQuery, release: ReleaseInfo, config: GeneratorConfig) -> dict[str, str]:
    return {
        "(packageid)": package_identifier(query, config),
        "(fullversion)": release.full_version,
        "(version)": query.version,
    }


def substitute(text: str, replacements: dict[str, str]) -> str:
    """一回走査で置換する（置換後の文字列は再走査しない）."""
    if not replacements:
        return text
    keys = sorted(replacements, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(k) for k in keys))
    return pattern.sub(lambda m: replacements[m.group(0)], text)


def check_required(context: dict[str, str]) -> None:
    """必須トークンが全て値を持つことを確認する."""
    missing = sorted(k for k, v in context.items() if k not in OPTIONAL_PLACEHOLDERS and not v)
    if missing:
        raise TemplateError(f"Unresolved required placeholders: {', '.join(missing)}")


def render_template(template: str, context: dict[str, str], source_name: str = "<template>") -> str:
    rendered = substitute(template, context)
    unknown = sorted({t for t in PLACEHOLDER_LIKE.findall(template) if t not in context})
    if unknown:
        logger.warning(f"Unrecognized placeholders left in {source_name}: {', '.join(unknown)}")
    return rendered


def output_dir_for(query: ReleaseQuery, release: ReleaseInfo, config: GeneratorConfig, work_dir: Path) -> Path:
    """manifests_dir/[NTS/]<major>/<minor>/<fullversion>."""
    base = work_dir / config.output.manifests_dir
    if not query.is_thread_safe:
        base = base / config.package.nts_segment
    return base / query.major / query.minor / release.full_version


def ensure_directory(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryError(path, str(e)) from e
    if not path.is_dir():
        raise DirectoryError(path)


def _write(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8", newline="")
    except OSError as e:
        raise WriteError(path) from e
    if not path.exists():
        raise WriteError(path)


def render_manifests(
    query: ReleaseQuery,
    release: ReleaseInfo,
    config: GeneratorConfig,
    work_dir: Path,
) -> list[Path]:
    """全テンプレートを描画し、書き出したファイルのリストを返す.

    Args:
        query: 生成対象のリリースライン
        release: 抽出済みのリリース情報
        config: 設定
        work_dir: 相対パスの基準ディレクトリ

    Returns:
        書き出したファイルパスのリスト（テンプレート順）

    Raises:
        TemplateError: テンプレートが読み込めない、または必須トークンの値が空の場合
        DirectoryError: 出力ディレクトリを作成できない場合
        WriteError: ファイルが書き出せなかった場合
    """
    output_dir = output_dir_for(query, release, config, work_dir)
    aux_dir = work_dir / config.output.aux_dir
    templates_dir = work_dir / config.output.templates_dir

    context = build_render_context(query, release, config)
    check_required(context)
    filename_context = build_filename_context(query, release, config)

    ensure_directory(output_dir)
    ensure_directory(aux_dir)

    written: list[Path] = []
    for spec in TEMPLATES:
        template_path = templates_dir / spec.name
        try:
            template = template_path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateError(f"Unable to read template: {template_path}") from e

        target_dir = output_dir if spec.version_scoped else aux_dir
        target = target_dir / substitute(spec.name, filename_context)
        _write(target, render_template(template, context, spec.name))
        logger.info(f"Rendered {target}")
        written.append(target)

    return written
