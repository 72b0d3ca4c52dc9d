"""WebSocket 연결 모듈 - 연결/재연결, 하트비트, 수신 콜백, 마지막 활동 시각"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable

import websockets

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


class WsConn:
    """단일 WebSocket 연결. 끊기면 지수 백오프로 재연결하고 보냈던 구독을 다시 보낸다."""

    def __init__(self, url: str,
                 on_message: Callable[[bytes | str], Awaitable[None]],
                 heartbeat: Callable[[], dict] | None = None,
                 heartbeat_interval: float = 5.0,
                 stale_timeout: float = 30.0):
        self.url = url
        self.on_message = on_message
        self.heartbeat = heartbeat
        self.heartbeat_interval = heartbeat_interval
        self.stale_timeout = stale_timeout
        self.state = SessionState.UNINITIALIZED
        self.last_active = 0.0
        self.reconnect_attempt = 0
        self.reconnect_delay = self.compute_reconnect_delay(0)
        self.reconnect_count = 0
        self._ws: Any = None
        # 채널 이름 → 마지막 구독 프레임 (재연결 시 채널당 1회 재전송)
        self._subscriptions: dict[str, dict] = {}
        self._recv_task: asyncio.Task | None = None
        self._heartbeat_task: asyncio.Task | None = None

    async def connect(self) -> None:
        """최초 연결 후 수신/하트비트 태스크 시작"""
        self.state = SessionState.CONNECTING
        await self._open()
        self._recv_task = asyncio.create_task(self._run())
        if self.heartbeat is not None:
            self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())

    async def _open(self) -> None:
        self._ws = await websockets.connect(self.url, ping_interval=None)
        self.state = SessionState.CONNECTED
        self.update_active_time()
        self._reset_reconnect_delay()
        logger.info(f"[연결] {self.url} 연결 성공")
        for sub in list(self._subscriptions.values()):
            await self.send_json(sub)

    async def _run(self) -> None:
        """수신 루프 - 프레임은 순차 처리"""
        while self.state != SessionState.CLOSED:
            try:
                async for raw in self._ws:
                    await self.on_message(raw)
                if self.state == SessionState.CLOSED:
                    return
                raise ConnectionError("connection closed by server")
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if self.state == SessionState.CLOSED:
                    return
                self.state = SessionState.RECONNECTING
                self.reconnect_count += 1
                logger.error(f"[에러] {e}, {self.reconnect_delay}초 후 재연결...")
                await asyncio.sleep(self.reconnect_delay)
                self._increase_reconnect_delay()
                try:
                    await self._open()
                except Exception as open_err:
                    logger.error(f"[재연결 실패] {open_err}")

    async def _heartbeat_loop(self) -> None:
        while self.state != SessionState.CLOSED:
            await asyncio.sleep(self.heartbeat_interval)
            if self.state != SessionState.CONNECTED:
                continue
            if self.is_stale():
                logger.warning(f"[하트비트] {self.stale_timeout}초 동안 수신 없음, 연결 종료")
                await self._ws.close()
                continue
            try:
                await self.send_json(self.heartbeat())
            except Exception as e:
                logger.warning(f"[하트비트] 전송 실패: {e}")

    async def send_json(self, payload: dict) -> None:
        await self._ws.send(json.dumps(payload))

    async def subscribe(self, sub: dict) -> None:
        """구독 프레임 전송. 재연결 시 다시 보내도록 기억"""
        self._subscriptions[sub["sub"]] = sub
        if self.state == SessionState.CONNECTED:
            await self.send_json(sub)

    def update_active_time(self) -> None:
        self.last_active = time.time()

    def is_stale(self, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return now - self.last_active > self.stale_timeout

    async def close(self) -> None:
        self.state = SessionState.CLOSED
        tasks = [t for t in (self._heartbeat_task, self._recv_task)
                 if t is not None and t is not asyncio.current_task()]
        for task in tasks:
            task.cancel()
        for result in await asyncio.gather(*tasks, return_exceptions=True):
            if isinstance(result, Exception):
                logger.warning(f"[연결] 태스크 종료 중 예외: {result!r}")
        if self._ws is not None:
            await self._ws.close()
        logger.info(f"[연결] {self.url} 종료")

    def _reset_reconnect_delay(self) -> None:
        self.reconnect_attempt = 0
        self.reconnect_delay = self.compute_reconnect_delay(0)

    def _increase_reconnect_delay(self) -> None:
        self.reconnect_attempt += 1
        self.reconnect_delay = self.compute_reconnect_delay(self.reconnect_attempt)

    @staticmethod
    def compute_reconnect_delay(attempt: int) -> float:
        """attempt번째 재시도 대기 시간: min(2^attempt, 60)초"""
        return float(min(2 ** min(attempt, 6), 60))
