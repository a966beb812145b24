"""パイプライン内で受け渡すデータ型."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from .exceptions import ArgumentError

VERSION_PATTERN = re.compile(r"^[0-9]\.[0-9]$")
SHA256_PATTERN = re.compile(r"^[0-9a-f]{64}$")

ARCHITECTURES = ("x86", "x64")

TS = "ts"
NTS = "nts"


@dataclass(frozen=True)
class ReleaseQuery:
    """生成対象のリリースライン指定.

    thread_safe が None の場合は「未指定」を表し、スレッドセーフ版として扱います。
    """

    version: str
    thread_safe: bool | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.version, str) or not VERSION_PATTERN.fullmatch(self.version):
            raise ArgumentError(f"PHP Version must match N.N format, got {self.version!r}")

    @property
    def major(self) -> str:
        return self.version.split(".")[0]

    @property
    def minor(self) -> str:
        return self.version.split(".")[1]

    @property
    def is_thread_safe(self) -> bool:
        return self.thread_safe is not False

    @property
    def variant(self) -> str:
        return TS if self.is_thread_safe else NTS

    @classmethod
    def from_args(cls, version: str, variant: str | None = None) -> ReleaseQuery:
        """CLI 引数（"8.3", "ts"/"nts"/None）からクエリを作る."""
        if variant is None:
            return cls(version)
        if variant not in (TS, NTS):
            raise ArgumentError(f"Thread safety must be either 'ts' or 'nts', got {variant!r}", exit_code=1)
        return cls(version, thread_safe=variant == TS)


@dataclass(frozen=True)
class ArtifactInfo:
    arch: str
    url: str
    sha256: str


@dataclass(frozen=True)
class ReleaseInfo:
    version: str
    full_version: str
    release_date: date
    artifacts: dict[str, ArtifactInfo]
    variant: str = TS

    @property
    def release_date_text(self) -> str:
        return self.release_date.isoformat()


@dataclass
class GenerationResult:
    """1回の実行結果.

    new_version は出力ディレクトリが実行前に存在しなかった場合のみセットされます。
    """

    query: ReleaseQuery
    release: ReleaseInfo
    output_dir: Path
    written: list[Path] = field(default_factory=list)
    new_version: str | None = None

    @property
    def is_new_version(self) -> bool:
        return self.new_version is not None
