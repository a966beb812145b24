"""リリース情報抽出器（基底クラス）.

取得したドキュメント（JSONインデックス/HTMLページ）から ReleaseInfo を得るための
共通インターフェースと、両形式で共有する処理を定義します。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from urllib.parse import urljoin

from ..core.exceptions import ParseError
from ..core.models import SHA256_PATTERN, ArtifactInfo, ReleaseInfo, ReleaseQuery


class BaseExtractor(ABC):
    """抽出器の基底クラス.

    全ての抽出器はこのクラスを継承し、can_parse()/extract() を実装します。

    Args:
        download_base_url: 相対パスのアーティファクトを解決する基準URL
        toolsets: リリースラインごとの許可ツールセット（"default" は必須）
    """

    name = "base"

    def __init__(self, download_base_url: str, toolsets: dict[str, tuple[str, ...]]) -> None:
        self.download_base_url = download_base_url
        self.toolsets = toolsets

    @abstractmethod
    def can_parse(self, document: str) -> bool:
        """この抽出器で扱える形式かを判定する."""
        ...

    @abstractmethod
    def extract(self, document: str, query: ReleaseQuery) -> ReleaseInfo:
        """ドキュメントからリリース情報を抽出する.

        Raises:
            ParseError: 必須フィールドが見つからない場合（フィールド名付き）
        """
        ...

    def allowed_toolsets(self, version: str) -> tuple[str, ...]:
        return self.toolsets.get(version, self.toolsets.get("default", ()))

    def is_allowed_toolset(self, version: str, toolset: str) -> bool:
        return toolset.lower() in self.allowed_toolsets(version)

    def make_artifact(self, arch: str, path: object, sha256: object) -> ArtifactInfo:
        if not isinstance(path, str) or not isinstance(sha256, str) or not path or not sha256:
            raise ParseError(arch, f"Unable to parse {arch} URL and hash")
        sha256 = sha256.strip().lower()
        if not SHA256_PATTERN.match(sha256):
            raise ParseError(arch, f"Invalid {arch} sha256 hash: {sha256!r}")
        url = urljoin(self.download_base_url, path)
        if not url.startswith("https://"):
            raise ParseError(arch, f"{arch} download URL is not HTTPS: {url}")
        return ArtifactInfo(arch=arch, url=url, sha256=sha256)
