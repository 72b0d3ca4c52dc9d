"""메인 애플리케이션 - 설정 로드, 커넥터 생성, 시세 구독 및 모니터링"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
import time
from pathlib import Path

from huobi_pro.config import Config
from huobi_pro.exchange import HuobiPro
from huobi_pro.models import CurrencyPair, Depth, Kline, Ticker, Trade

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)
logger = logging.getLogger(__name__)

STATUS_INTERVAL = 60


async def build_connector(config: Config) -> HuobiPro:
    """account_type에 맞는 생성자로 커넥터 생성 (인증 정보 없으면 시세 전용)"""
    kwargs = dict(base_url=config.rest_url, ws_url=config.ws_url,
                  heartbeat_interval=config.heartbeat_interval,
                  stale_timeout=config.stale_timeout)
    if not config.has_credentials:
        return HuobiPro(**kwargs)
    if config.account_id:
        return HuobiPro(config.access_key, config.secret_key, config.account_id, **kwargs)
    if config.account_type == "point":
        return await HuobiPro.point(config.access_key, config.secret_key, **kwargs)
    return await HuobiPro.spot(config.access_key, config.secret_key, **kwargs)


def on_ticker(t: Ticker) -> None:
    logger.info(f"[시세] {t.pair} last={t.last} high={t.high} low={t.low} vol={t.vol}")


def on_depth(d: Depth) -> None:
    best_ask = d.ask_list[-1].price if d.ask_list else None
    best_bid = d.bid_list[0].price if d.bid_list else None
    logger.info(f"[호가] {d.pair} ask={best_ask} bid={best_bid} "
                f"({len(d.ask_list)}/{len(d.bid_list)})")


def on_trade(t: Trade) -> None:
    logger.info(f"[체결] {t.pair} {t.side.value} {t.amount}@{t.price} id={t.trade_id}")


def on_kline(k: Kline) -> None:
    logger.info(f"[캔들] {k.pair} {k.timestamp} O={k.open} H={k.high} L={k.low} C={k.close} V={k.vol}")


async def subscribe_all(hb: HuobiPro, config: Config) -> None:
    for text in config.symbols:
        pair = CurrencyPair.from_string(text)
        if "ticker" in config.streams:
            await hb.subscribe_ticker(pair, on_ticker)
        if "depth" in config.streams:
            await hb.subscribe_depth(pair, on_depth)
        if "trade" in config.streams:
            await hb.subscribe_trade(pair, on_trade)
        if "kline" in config.streams:
            await hb.subscribe_kline(pair, config.kline_period, on_kline)


async def main(config_path: str = "config.yaml") -> None:
    config = Config.from_yaml(config_path)

    # 디렉토리 생성 (로깅 FileHandler보다 먼저)
    Path(config.log_dir).mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(
        Path(config.log_dir) / "huobi_pro.log", encoding="utf-8"
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )
    logging.getLogger().addHandler(file_handler)

    hb = await build_connector(config)
    logger.info("=== 후오비 커넥터 시작 ===")
    logger.info(f"심볼: {config.symbols} 스트림: {config.streams}")

    if hb.account_id:
        try:
            account = await hb.get_account()
            for cur, sub in account.sub_accounts.items():
                if sub.amount or sub.frozen_amount:
                    logger.info(f"[잔고] {cur} 가용={sub.amount} 동결={sub.frozen_amount}")
        except Exception as e:
            logger.error(f"[잔고] 조회 실패: {e}")

    await subscribe_all(hb, config)

    async def status_log():
        while True:
            await asyncio.sleep(STATUS_INTERVAL)
            idle = time.time() - hb.ws.last_active
            logger.info(f"[상태] {hb.ws_state.value} 마지막 수신 {idle:.1f}초 전")

    status_task = asyncio.create_task(status_log())

    # graceful shutdown
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def _signal_handler():
        logger.info("종료 신호 수신")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    await shutdown_event.wait()
    status_task.cancel()
    await hb.close()
    logger.info("=== 시스템 종료 ===")


if __name__ == "__main__":
    config_file = sys.argv[1] if len(sys.argv) > 1 else "config.yaml"
    asyncio.run(main(config_file))
