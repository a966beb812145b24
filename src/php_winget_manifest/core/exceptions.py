"""マニフェスト生成の例外クラス.

全ての例外は ManifestGeneratorError を継承し、CLI 側で終了コードに変換されます。
exit_code が None の場合、CLI は 255 で終了します。
"""

from __future__ import annotations

from pathlib import Path


class ManifestGeneratorError(Exception):
    """マニフェスト生成処理の基底例外.

    Attributes:
        exit_code: プロセス終了コード（未設定なら None）
    """

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        self.exit_code = exit_code
        super().__init__(message)


class ArgumentError(ManifestGeneratorError):
    """引数（バージョン指定・スレッドセーフ指定）が不正."""

    def __init__(self, message: str, exit_code: int | None = 2) -> None:
        super().__init__(message, exit_code)


class FetchError(ManifestGeneratorError):
    """リリースインデックスの取得に失敗."""


class ParseError(ManifestGeneratorError):
    """取得したドキュメントから必須フィールドを抽出できない.

    Attributes:
        field: 見つからなかったフィールド名（"x64"、"release date" など）
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"Unable to parse {field}")


class TemplateError(ManifestGeneratorError):
    """テンプレートファイルが読み込めない."""


class WriteError(ManifestGeneratorError):
    """書き込んだはずのファイルがディスク上に存在しない."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Unable to write to file: {path}")


class DirectoryError(ManifestGeneratorError):
    """出力ディレクトリを作成できない."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        self.path = path
        message = f'Directory "{path}" was not created'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
