"""구독 레지스트리 - 카테고리별 채널 → 콜백 (채널당 콜백 1개, 마지막 등록 우선)"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Union

from huobi_pro.channel_router import ChannelCategory

logger = logging.getLogger(__name__)

Callback = Callable[[Any], Union[None, Awaitable[None]]]


class SubscriptionRegistry:
    """카테고리마다 분리된 channel → callback 저장소"""

    def __init__(self):
        self._handlers: dict[ChannelCategory, dict[str, Callback]] = {
            c: {} for c in ChannelCategory
        }
        self._lock = asyncio.Lock()

    async def register(self, category: ChannelCategory, channel: str, callback: Callback) -> None:
        async with self._lock:
            if channel in self._handlers[category]:
                logger.info(f"[구독] {channel} 콜백 교체")
            self._handlers[category][channel] = callback

    async def lookup(self, category: ChannelCategory, channel: str) -> Callback | None:
        async with self._lock:
            return self._handlers[category].get(channel)

    async def channels(self, category: ChannelCategory) -> list[str]:
        async with self._lock:
            return list(self._handlers[category])
