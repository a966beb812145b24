"""windows.php.net のダウンロードページ（HTML）用抽出器.

正規表現でページを走査する。スレッドセーフ版のアーカイブ名には "-nts" が付かない。
"""

from __future__ import annotations

import re
from datetime import datetime

from loguru import logger

from ..core.exceptions import ParseError
from ..core.models import ARCHITECTURES, TS, ReleaseInfo, ReleaseQuery
from .base_extractor import BaseExtractor

RELEASE_VERSION = r'<h3 id="php-{version}"[^>]*>\s*PHP {version} \((?P<version>[^)<]+)\)\s*</h3>'
RELEASE_DATE = r'<h4 id="php-{version}-(?P<id>[^"]*)"[^>]*>[^<]*?\((?P<date>20\d\d-[A-Za-z]{{3}}-\d\d)[^)]*\)\s*</h4>'
DOWNLOAD_ZIP = (
    r'<a href="(?P<url>[^"]*/php-{full_version}{nts}-Win32-(?P<toolset>[A-Za-z]+\d+)-{arch}\.zip)">Zip</a>'
    r'(?:(?!<a href=).)*?<span class="md5sum">sha256:\s*(?P<sha256>[A-Fa-f\d]{{64}})</span>'
)


class HtmlPageExtractor(BaseExtractor):
    """HTMLのリリース一覧ページからリリース情報を抽出する."""

    name = "html"

    def can_parse(self, document: str) -> bool:
        head = document.lstrip()[:1024].lower()
        return head.startswith("<") and ("<html" in head or "<!doctype html" in head or "<h3" in document)

    def _release_date(self, document: str, query: ReleaseQuery) -> str | None:
        pattern = re.compile(RELEASE_DATE.format(version=re.escape(query.version)), re.S)
        first = None
        for m in pattern.finditer(document):
            if first is None:
                first = m
            id_parts = m.group("id").lower().split("-")
            is_nts = "nts" in id_parts
            if is_nts == (query.variant != TS):
                return m.group("date")
        return first.group("date") if first else None

    def extract(self, document: str, query: ReleaseQuery) -> ReleaseInfo:
        version = re.escape(query.version)

        m = re.search(RELEASE_VERSION.format(version=version), document, re.S)
        if not m:
            raise ParseError("version", f"PHP {query.version}: version not found")
        full_version = m.group("version").strip()
        if not full_version:
            raise ParseError("full version", f"Unable to parse full version for PHP {query.version}")

        date_text = self._release_date(document, query)
        if not date_text:
            raise ParseError("release date", "Unable to parse release date.")
        try:
            release_date = datetime.strptime(date_text, "%Y-%b-%d").date()
        except ValueError as e:
            raise ParseError("release date", f"Unrecognized release date: {date_text}") from e

        nts = "" if query.variant == TS else "-nts"
        artifacts = {}
        for arch in ARCHITECTURES:
            pattern = DOWNLOAD_ZIP.format(full_version=re.escape(full_version), nts=nts, arch=arch)
            path = sha256 = None
            for zm in re.finditer(pattern, document, re.S):
                if self.is_allowed_toolset(query.version, zm.group("toolset")):
                    path, sha256 = zm.group("url"), zm.group("sha256")
                    break
                logger.debug(f"Skipping {zm.group('url')}: toolset not allowed for {query.version}")
            artifacts[arch] = self.make_artifact(arch, path, sha256)

        logger.info(f"Extracted PHP {full_version} ({query.variant}) released {release_date.isoformat()}")
        return ReleaseInfo(
            version=query.version,
            full_version=full_version,
            release_date=release_date,
            artifacts=artifacts,
            variant=query.variant,
        )
