"""ChannelRouter 테스트
Feature: huobi-pro-connector
Property 4: 채널 → 통화쌍 분리
Property 5: 미인식 채널은 예외 없이 빈 통화쌍
"""

import pytest
from hypothesis import given, strategies as st, settings

from huobi_pro.channel_router import (
    QUOTE_CURRENCIES, ChannelCategory, depth_channel, kline_channel,
    resolve_period, route_channel, split_symbol, ticker_channel, trade_channel,
)
from huobi_pro.models import CurrencyPair, KlinePeriod, UNKNOWN_PAIR


# ── 공통 전략 ──

base_st = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=8)
quote_st = st.sampled_from(QUOTE_CURRENCIES)
period_st = st.sampled_from([p.value for p in KlinePeriod])

CHANNEL_BUILDERS = [
    ("market.{}.detail", ChannelCategory.TICKER),
    ("market.{}.depth.step0", ChannelCategory.DEPTH),
    ("market.{}.trade.detail", ChannelCategory.TRADE),
    ("market.{}.kline.1min", ChannelCategory.KLINE),
    ("orders.{}", ChannelCategory.ORDER),
]


def expected_quote(symbol: str) -> str:
    return next(q for q in QUOTE_CURRENCIES if symbol.endswith(q))


# ── Property 4 ──

class TestChannelSplit:

    @given(base=base_st, quote=quote_st, builder=st.sampled_from(CHANNEL_BUILDERS))
    @settings(max_examples=200)
    def test_known_pattern_splits_into_base_and_quote(self, base, quote, builder):
        """알려진 패턴: base 비어있지 않고 quote는 5개 중 하나"""
        template, category = builder
        symbol = base + quote
        route = route_channel(template.format(symbol))

        assert route.category == category
        assert route.pair.quote.lower() in QUOTE_CURRENCIES
        # 첫 번째로 일치하는 접미사 기준
        q = expected_quote(symbol)
        assert route.pair.quote.lower() == q
        if len(symbol) > len(q):
            assert route.pair.base.lower() == symbol[: -len(q)]

    @given(base=st.text(alphabet="abcdefg", min_size=1, max_size=6), quote=quote_st)
    @settings(max_examples=100)
    def test_builders_round_trip_through_router(self, base, quote):
        pair = CurrencyPair(base, quote)
        assert route_channel(ticker_channel(pair)).category == ChannelCategory.TICKER
        assert route_channel(depth_channel(pair)).category == ChannelCategory.DEPTH
        assert route_channel(trade_channel(pair)).category == ChannelCategory.TRADE
        assert route_channel(kline_channel(pair, "5min")).category == ChannelCategory.KLINE


# ── Property 5 ──

class TestUnknownChannel:

    @given(ch=st.text(alphabet="abcxyz._ ", max_size=30))
    @settings(max_examples=200)
    def test_unmatched_returns_invalid_without_raising(self, ch):
        route = route_channel(ch)
        if route.category is None:
            assert route.pair == UNKNOWN_PAIR
            assert not route.is_valid

    @pytest.mark.parametrize("ch", ["", "market", "foo.btcusdt.detail", "market.btcusdt.bbo"])
    def test_examples(self, ch):
        route = route_channel(ch)
        assert route.category is None
        assert route.pair == UNKNOWN_PAIR


# ── 단위 테스트 ──

class TestChannelRouterUnit:

    def test_ticker_not_shadowed_by_trade_detail(self):
        assert route_channel("market.btcusdt.trade.detail").category == ChannelCategory.TRADE
        assert route_channel("market.btcusdt.detail").category == ChannelCategory.TICKER

    def test_ticker_without_trailing_whitespace(self):
        route = route_channel("market.ethbtc.detail")
        assert route.category == ChannelCategory.TICKER
        assert route.pair == CurrencyPair("eth", "btc")

    def test_depth_channel(self):
        route = route_channel("market.btcusdt.depth.step0")
        assert route.category == ChannelCategory.DEPTH
        assert route.pair == CurrencyPair("BTC", "USDT")

    def test_husd_before_usd_like_suffixes(self):
        assert split_symbol("btchusd") == CurrencyPair("btc", "husd")

    def test_ht_quote(self):
        assert split_symbol("eosht") == CurrencyPair("eos", "ht")

    def test_unknown_suffix_gives_empty_quote(self):
        pair = split_symbol("btckrw")
        assert pair.quote == ""
        assert pair.base == "BTCKRW"
        assert not pair.is_valid

    def test_channel_names(self):
        pair = CurrencyPair("BTC", "USDT")
        assert ticker_channel(pair) == "market.btcusdt.detail"
        assert depth_channel(pair) == "market.btcusdt.depth.step0"
        assert trade_channel(pair) == "market.btcusdt.trade.detail"
        assert kline_channel(pair, KlinePeriod.DAY_1) == "market.btcusdt.kline.1day"

    def test_unknown_period_falls_back_to_1min(self):
        assert resolve_period("2min") == "1min"
        assert resolve_period(KlinePeriod.MONTH_1) == "1mon"
