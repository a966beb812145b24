"""リリースインデックス用の抽出器群."""

from __future__ import annotations

from ..core.exceptions import ParseError
from .base_extractor import BaseExtractor
from .html_extractor import HtmlPageExtractor
from .json_extractor import JsonIndexExtractor

EXTRACTORS: tuple[type[BaseExtractor], ...] = (JsonIndexExtractor, HtmlPageExtractor)


def select_extractor(
    document: str,
    download_base_url: str,
    toolsets: dict[str, tuple[str, ...]],
) -> BaseExtractor:
    """ドキュメントを扱える最初の抽出器を返す（JSON → HTML の順）.

    Raises:
        ParseError: どの抽出器も対応しない形式の場合
    """
    for extractor_cls in EXTRACTORS:
        extractor = extractor_cls(download_base_url, toolsets)
        if extractor.can_parse(document):
            return extractor
    raise ParseError("document format", "Unrecognized release index format (expected JSON or HTML)")


__all__ = [
    "BaseExtractor",
    "HtmlPageExtractor",
    "JsonIndexExtractor",
    "EXTRACTORS",
    "select_extractor",
]
