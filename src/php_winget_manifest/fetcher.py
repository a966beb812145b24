"""リリースインデックスの取得."""

from __future__ import annotations

import ssl

import httpx
from loguru import logger

from .core.config import SourceConfig
from .core.exceptions import FetchError


def _ssl_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    return context


def _require_https(request: httpx.Request) -> None:
    # リダイレクト先のリクエストにも適用される
    if request.url.scheme != "https":
        raise FetchError(f"Refusing non-HTTPS request: {request.url}")


def fetch_release_index(source: SourceConfig, transport: httpx.BaseTransport | None = None) -> str:
    """上流のリリースインデックスを1回だけ取得して本文を返す.

    Args:
        source: 取得先URL・タイムアウト等の設定
        transport: テスト用に差し替えるhttpxトランスポート

    Returns:
        レスポンス本文（テキスト）

    Raises:
        FetchError: 通信失敗、非2xx応答、HTTPS以外への遷移、または本文が空の場合
    """
    logger.info(f"Fetching release index from {source.url}")

    client_kwargs = {
        "follow_redirects": True,
        "max_redirects": source.max_redirects,
        "timeout": source.timeout,
        "headers": {"User-Agent": source.user_agent},
        "event_hooks": {"request": [_require_https]},
    }
    if transport is not None:
        client_kwargs["transport"] = transport
    else:
        client_kwargs["verify"] = _ssl_context()

    try:
        with httpx.Client(**client_kwargs) as client:
            response = client.get(source.url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise FetchError(f"Unable to fetch {source.url}: {e}") from e

    body = response.text
    if not body.strip():
        raise FetchError(f"Empty response from {source.url}")

    logger.info(f"Fetched {len(body)} characters from {response.url}")
    return body
