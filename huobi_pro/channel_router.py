"""채널 라우팅 모듈 - 구독 채널 문자열 → (카테고리, 통화쌍)

채널 예시:
    market.btcusdt.detail          ticker
    market.btcusdt.depth.step0     depth
    market.btcusdt.trade.detail    trade
    market.btcusdt.kline.1min      kline
    orders.btcusdt                 order-update
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from huobi_pro.models import CurrencyPair, KlinePeriod, UNKNOWN_PAIR

logger = logging.getLogger(__name__)


class ChannelCategory(str, Enum):
    TICKER = "ticker"
    DEPTH = "depth"
    TRADE = "trade"
    KLINE = "kline"
    ORDER = "order"


# 우선순위 순서로 평가 (trade.detail이 detail보다 먼저)
CHANNEL_PATTERNS: list[tuple[re.Pattern, ChannelCategory]] = [
    (re.compile(r"market\.(.+)\.kline\..+"), ChannelCategory.KLINE),
    (re.compile(r"market\.(.+)\.depth\..+"), ChannelCategory.DEPTH),
    (re.compile(r"market\.(.+)\.trade\.detail"), ChannelCategory.TRADE),
    (re.compile(r"market\.(.+)\.detail"), ChannelCategory.TICKER),
    (re.compile(r"orders\.(.+)"), ChannelCategory.ORDER),
]

# 첫 번째 일치 우선
QUOTE_CURRENCIES = ("usdt", "husd", "btc", "eth", "ht")


@dataclass(frozen=True)
class Route:
    category: ChannelCategory | None
    pair: CurrencyPair

    @property
    def is_valid(self) -> bool:
        return self.category is not None and self.pair.is_valid


def split_symbol(symbol: str) -> CurrencyPair:
    """'btcusdt' → BTC/USDT. 알 수 없는 호가 통화는 quote="" (base=symbol)"""
    quote = next((q for q in QUOTE_CURRENCIES if symbol.endswith(q)), "")
    base = symbol[: len(symbol) - len(quote)] if quote else symbol
    return CurrencyPair(base, quote)


def route_channel(ch: str) -> Route:
    """채널 분류. 매칭 실패 시 category=None, UNKNOWN_PAIR (예외 없음)"""
    for pattern, category in CHANNEL_PATTERNS:
        m = pattern.fullmatch(ch)
        if m:
            return Route(category, split_symbol(m.group(1)))
    logger.warning(f"[채널] 알 수 없는 채널: {ch!r}")
    return Route(None, UNKNOWN_PAIR)


# ── 채널 이름 생성 ──

def _symbol(pair: CurrencyPair) -> str:
    return pair.to_symbol().lower()


def ticker_channel(pair: CurrencyPair) -> str:
    return f"market.{_symbol(pair)}.detail"


def depth_channel(pair: CurrencyPair) -> str:
    return f"market.{_symbol(pair)}.depth.step0"


def trade_channel(pair: CurrencyPair) -> str:
    return f"market.{_symbol(pair)}.trade.detail"


def kline_channel(pair: CurrencyPair, period: KlinePeriod | str) -> str:
    return f"market.{_symbol(pair)}.kline.{resolve_period(period)}"


def resolve_period(period: KlinePeriod | str) -> str:
    """알 수 없는 주기는 1min으로 대체"""
    try:
        return KlinePeriod(period).value
    except ValueError:
        logger.warning(f"[채널] 지원하지 않는 kline 주기 {period!r}, 1min 사용")
        return KlinePeriod.MIN_1.value
