"""WebSocket 세션 모듈 - 지연 연결(1회), 하트비트 응답, 채널별 콜백 디스패치"""

from __future__ import annotations

import asyncio
import inspect
import itertools
import logging
import time
from typing import Any, Callable

from huobi_pro.channel_router import ChannelCategory, Route, route_channel
from huobi_pro.errors import MalformedResponseError
from huobi_pro.normalizer import parse_depth, parse_kline, parse_ticker, parse_trades
from huobi_pro.registry import Callback, SubscriptionRegistry
from huobi_pro.utils import decode_frame, to_int
from huobi_pro.ws_conn import SessionState, WsConn

logger = logging.getLogger(__name__)

DEFAULT_WS_URL = "wss://api.huobi.br.com/ws"


def client_ping() -> dict:
    return {"ping": int(time.time())}


class WsSession:
    """커넥터 인스턴스당 하나의 WebSocket 세션"""

    def __init__(self, url: str = DEFAULT_WS_URL, heartbeat_interval: float = 5.0,
                 stale_timeout: float = 30.0,
                 conn_factory: Callable[..., WsConn] = WsConn):
        self.url = url
        self.heartbeat_interval = heartbeat_interval
        self.stale_timeout = stale_timeout
        self.registry = SubscriptionRegistry()
        self._conn_factory = conn_factory
        self._conn: WsConn | None = None
        self._create_lock = asyncio.Lock()
        self._sub_ids = itertools.count(1)

    @property
    def state(self) -> SessionState:
        if self._conn is None:
            return SessionState.UNINITIALIZED
        return self._conn.state

    @property
    def last_active(self) -> float:
        return self._conn.last_active if self._conn else 0.0

    async def ensure_connected(self) -> WsConn:
        """최초 호출에서만 연결 생성. 동시 호출자는 같은 연결을 기다린다."""
        async with self._create_lock:
            if self._conn is None:
                conn = self._conn_factory(
                    self.url,
                    on_message=self.handle_frame,
                    heartbeat=client_ping,
                    heartbeat_interval=self.heartbeat_interval,
                    stale_timeout=self.stale_timeout,
                )
                self._conn = conn
                try:
                    await conn.connect()
                except Exception:
                    self._conn = None
                    raise
            return self._conn

    async def subscribe(self, category: ChannelCategory, channel: str, callback: Callback) -> None:
        """콜백 등록 후 구독 프레임 전송"""
        conn = await self.ensure_connected()
        await self.registry.register(category, channel, callback)
        await conn.subscribe({"id": next(self._sub_ids), "sub": channel})
        logger.info(f"[구독] {channel}")

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()

    # ── 수신 경로 ──

    async def handle_frame(self, raw: bytes | str) -> None:
        """수신 프레임 처리. 어떤 실패도 수신 루프를 멈추지 않는다."""
        try:
            msg = decode_frame(raw)
        except Exception as e:
            logger.warning(f"[수신] 프레임 디코딩 실패: {e} ({raw[:200]!r})")
            return
        if not isinstance(msg, dict):
            logger.warning(f"[수신] 객체가 아닌 프레임 무시: {msg!r}")
            return

        if msg.get("ping") is not None:
            self._conn.update_active_time()
            await self._conn.send_json({"pong": msg["ping"]})
            return

        if msg.get("pong") is not None:
            self._conn.update_active_time()
            return

        ch = msg.get("ch")
        if msg.get("id") is not None and ch is None:
            # 구독 응답
            logger.info(f"[구독] 응답: {msg}")
            return

        if not isinstance(ch, str):
            logger.warning(f"[수신] ch 없는 프레임 무시: {msg}")
            return

        route = route_channel(ch)
        if route.category is None:
            return

        try:
            await self._dispatch(route, ch, msg)
        except MalformedResponseError as e:
            logger.warning(f"[수신] {ch} 페이로드 형식 오류: {e}")
        except Exception:
            logger.exception(f"[수신] {ch} 콜백 처리 중 예외")

    async def _dispatch(self, route: Route, ch: str, msg: dict) -> None:
        callback = await self.registry.lookup(route.category, ch)
        if callback is None:
            return
        tick = msg.get("tick")
        if not isinstance(tick, dict):
            raise MalformedResponseError("missing tick")

        if route.category == ChannelCategory.TICKER:
            ticker = parse_ticker(tick, route.pair, date=to_int(msg.get("ts"), field_name="ts"))
            await _invoke(callback, ticker)
        elif route.category == ChannelCategory.DEPTH:
            await _invoke(callback, parse_depth(tick, route.pair))
        elif route.category == ChannelCategory.TRADE:
            # 가장 먼저 보낸 체결부터 (수신 순서의 역순)
            for trade in reversed(parse_trades(tick, route.pair)):
                await _invoke(callback, trade)
        elif route.category == ChannelCategory.KLINE:
            await _invoke(callback, parse_kline(tick, route.pair))


async def _invoke(callback: Callback, value: Any) -> None:
    result = callback(value)
    if inspect.isawaitable(result):
        await result
