"""HTTP 전송 모듈 - aiohttp 기반 GET / POST 헬퍼"""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from huobi_pro.errors import HttpError, MalformedResponseError
from huobi_pro.utils import loads

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


async def http_get(url: str, session: aiohttp.ClientSession | None = None,
                   timeout: float = DEFAULT_TIMEOUT) -> Any:
    """GET 요청 후 JSON 디코딩 결과 반환.

    HTTP 200 이외는 HttpError, 본문이 JSON이 아니면 MalformedResponseError.
    """
    if session is not None:
        return await _get(session, url, timeout)
    async with aiohttp.ClientSession() as own_session:
        return await _get(own_session, url, timeout)


async def _get(session: aiohttp.ClientSession, url: str, timeout: float) -> Any:
    async with session.get(url, timeout=aiohttp.ClientTimeout(total=timeout)) as resp:
        body = await resp.text()
        if resp.status != 200:
            logger.warning(f"[HTTP] GET {resp.status}: {body[:200]}")
            raise HttpError(resp.status, body)
        try:
            return loads(body)
        except ValueError as e:
            raise MalformedResponseError(f"invalid json: {e} ({body[:200]!r})") from e


async def http_post(url: str, body: str, headers: dict[str, str],
                    session: aiohttp.ClientSession | None = None,
                    timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """POST 요청 후 원본 바이트 반환. HTTP 200 이외는 HttpError."""
    if session is not None:
        return await _post(session, url, body, headers, timeout)
    async with aiohttp.ClientSession() as own_session:
        return await _post(own_session, url, body, headers, timeout)


async def _post(session: aiohttp.ClientSession, url: str, body: str,
                headers: dict[str, str], timeout: float) -> bytes:
    async with session.post(url, data=body, headers=headers,
                            timeout=aiohttp.ClientTimeout(total=timeout)) as resp:
        data = await resp.read()
        if resp.status != 200:
            logger.warning(f"[HTTP] POST {resp.status}: {data[:200]!r}")
            raise HttpError(resp.status, data.decode("utf-8", errors="replace"))
        return data
