"""후오비 커넥터 - REST 메서드 + WebSocket 구독 메서드"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Union

import aiohttp

from huobi_pro.channel_router import (
    ChannelCategory, depth_channel, kline_channel, ticker_channel, trade_channel,
)
from huobi_pro.models import (
    AccountType, CurrencyPair, Depth, Kline, KlinePeriod, Ticker, Trade,
)
from huobi_pro.rest_client import DEFAULT_REST_URL, HuobiProRest
from huobi_pro.ws_conn import SessionState
from huobi_pro.ws_session import DEFAULT_WS_URL, WsSession

logger = logging.getLogger(__name__)

TickerHandler = Callable[[Ticker], Union[None, Awaitable[None]]]
DepthHandler = Callable[[Depth], Union[None, Awaitable[None]]]
TradeHandler = Callable[[Trade], Union[None, Awaitable[None]]]
KlineHandler = Callable[[Kline], Union[None, Awaitable[None]]]


class HuobiPro(HuobiProRest):
    """후오비 현물 커넥터. 인증 정보는 생성 후 변경하지 않는다."""

    def __init__(self, access_key: str = "", secret_key: str = "", account_id: str = "",
                 base_url: str = DEFAULT_REST_URL, ws_url: str = DEFAULT_WS_URL,
                 heartbeat_interval: float = 5.0, stale_timeout: float = 30.0,
                 session: aiohttp.ClientSession | None = None):
        super().__init__(access_key, secret_key, account_id, base_url, session)
        self.ws = WsSession(ws_url, heartbeat_interval=heartbeat_interval,
                            stale_timeout=stale_timeout)

    @classmethod
    async def spot(cls, access_key: str, secret_key: str, **kwargs) -> "HuobiPro":
        """현물 계좌. 계좌 조회 실패 시 account_id="" 상태로 반환 (예외 없음)"""
        hb = cls(access_key, secret_key, "", **kwargs)
        try:
            info = await hb.get_account_info(AccountType.SPOT.value)
        except Exception as e:
            logger.error(f"[계좌] spot 계좌 조회 실패, account_id 미설정: {e}")
            return hb
        hb.account_id = info.id
        logger.info(f"[계좌] account state : {info.state}")
        return hb

    @classmethod
    async def point(cls, access_key: str, secret_key: str, **kwargs) -> "HuobiPro":
        """포인트 계좌. 계좌 조회 실패는 그대로 전파"""
        hb = cls(access_key, secret_key, "", **kwargs)
        info = await hb.get_account_info(AccountType.POINT.value)
        hb.account_id = info.id
        logger.info(f"[계좌] account state : {info.state}")
        return hb

    # ── WebSocket 구독 ──

    async def subscribe_ticker(self, pair: CurrencyPair, handler: TickerHandler) -> None:
        await self.ws.subscribe(ChannelCategory.TICKER, ticker_channel(pair), handler)

    async def subscribe_depth(self, pair: CurrencyPair, handler: DepthHandler) -> None:
        await self.ws.subscribe(ChannelCategory.DEPTH, depth_channel(pair), handler)

    async def subscribe_trade(self, pair: CurrencyPair, handler: TradeHandler) -> None:
        await self.ws.subscribe(ChannelCategory.TRADE, trade_channel(pair), handler)

    async def subscribe_kline(self, pair: CurrencyPair, period: KlinePeriod | str,
                              handler: KlineHandler) -> None:
        await self.ws.subscribe(ChannelCategory.KLINE, kline_channel(pair, period), handler)

    @property
    def ws_state(self) -> SessionState:
        return self.ws.state

    async def close(self) -> None:
        await self.ws.close()
