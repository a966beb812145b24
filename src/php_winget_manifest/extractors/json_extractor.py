"""releases.json 形式のリリースインデックス用抽出器.

形式（リリースラインごと、キーの出現順を保持）:

    {
        "8.3": {
            "version": "8.3.14",
            "nts-vs16-x64": {
                "mtime": "2024-11-20T15:15:54+01:00",
                "zip": {"path": "php-8.3.14-nts-Win32-vs16-x64.zip", "sha256": "..."}
            },
            ...
        }
    }
"""

from __future__ import annotations

import json
import re
from datetime import date, datetime
from typing import Any

from loguru import logger

from ..core.exceptions import ParseError
from ..core.models import ARCHITECTURES, ReleaseInfo, ReleaseQuery
from .base_extractor import BaseExtractor

BUILD_KEY_PATTERN = re.compile(r"^(?P<variant>nts|ts)-(?P<toolset>[a-z]+\d+)-(?P<arch>x86|x64)$", re.IGNORECASE)


def _parse_mtime(value: Any) -> date | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        logger.warning(f"Unrecognized mtime value: {value!r}")
        return None


class JsonIndexExtractor(BaseExtractor):
    """releases.json からリリース情報を抽出する."""

    name = "json"

    def can_parse(self, document: str) -> bool:
        if not document.lstrip().startswith("{"):
            return False
        try:
            return isinstance(json.loads(document), dict)
        except json.JSONDecodeError:
            return False

    def _matching_builds(self, entry: dict, query: ReleaseQuery) -> list[tuple[str, str, dict]]:
        builds = []
        for key, build in entry.items():
            m = BUILD_KEY_PATTERN.match(key)
            if not m or not isinstance(build, dict):
                continue
            if m.group("variant").lower() != query.variant:
                continue
            if not self.is_allowed_toolset(query.version, m.group("toolset")):
                logger.debug(f"Skipping {key}: toolset not allowed for {query.version}")
                continue
            builds.append((key, m.group("arch").lower(), build))
        return builds

    def extract(self, document: str, query: ReleaseQuery) -> ReleaseInfo:
        index = json.loads(document)
        entry = index.get(query.version)
        if not isinstance(entry, dict):
            raise ParseError("version", f"PHP {query.version}: version not found")

        full_version = entry.get("version")
        if not isinstance(full_version, str) or not full_version:
            raise ParseError("full version", f"Unable to parse full version for PHP {query.version}")

        builds = self._matching_builds(entry, query)

        release_date = None
        for _key, _arch, build in builds:
            mtime = _parse_mtime(build.get("mtime"))
            # 同日なら先勝ち
            if mtime and (release_date is None or mtime > release_date):
                release_date = mtime
        if release_date is None:
            raise ParseError("release date", "Unable to parse release date.")

        artifacts = {}
        for arch in ARCHITECTURES:
            build = next((b for _k, a, b in builds if a == arch), None)
            zip_info = (build or {}).get("zip")
            if not isinstance(zip_info, dict):
                zip_info = {}
            artifacts[arch] = self.make_artifact(arch, zip_info.get("path"), zip_info.get("sha256"))

        logger.info(f"Extracted PHP {full_version} ({query.variant}) released {release_date.isoformat()}")
        return ReleaseInfo(
            version=query.version,
            full_version=full_version,
            release_date=release_date,
            artifacts=artifacts,
            variant=query.variant,
        )
