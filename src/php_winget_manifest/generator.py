"""マニフェスト生成パイプライン.

取得 → 抽出 → 描画 を順に実行する。どの段階で失敗しても以降は実行しない。
抽出に失敗した場合はファイルを一切書き出さない。
"""

from __future__ import annotations

from pathlib import Path

import httpx
from loguru import logger

from .core.config import GeneratorConfig
from .core.models import GenerationResult, ReleaseInfo, ReleaseQuery
from .extractors import select_extractor
from .fetcher import fetch_release_index
from .renderer import output_dir_for, render_manifests


def extract_release(document: str, query: ReleaseQuery, config: GeneratorConfig) -> ReleaseInfo:
    extractor = select_extractor(document, config.source.download_base_url, config.toolsets)
    logger.debug(f"Using {extractor.name} extractor")
    return extractor.extract(document, query)


def generate(
    query: ReleaseQuery,
    config: GeneratorConfig,
    work_dir: Path,
    transport: httpx.BaseTransport | None = None,
) -> GenerationResult:
    """1つのリリースラインのマニフェストを生成する.

    Args:
        query: 生成対象（バージョン・スレッドセーフ指定）
        config: 設定
        work_dir: 出力パスの基準ディレクトリ
        transport: テスト用のhttpxトランスポート

    Returns:
        生成結果（出力先・書き出したファイル・新バージョン）
    """
    work_dir = Path(work_dir)
    logger.info(f"=== Generate start: PHP {query.version} ({query.variant}) ===")

    document = fetch_release_index(config.source, transport=transport)
    release = extract_release(document, query, config)

    output_dir = output_dir_for(query, release, config, work_dir)
    existed = output_dir.exists()
    if existed:
        logger.info(f"Output directory already exists, not a new version: {output_dir}")
    else:
        logger.info(f"New version discovered: {release.full_version}")

    written = render_manifests(query, release, config, work_dir)

    logger.info(f"=== Generate done: PHP {release.full_version} ===")
    return GenerationResult(
        query=query,
        release=release,
        output_dir=output_dir,
        written=written,
        new_version=None if existed else release.full_version,
    )
