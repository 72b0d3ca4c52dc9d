"""데이터 정규화 모듈 - 원본 JSON 페이로드 → 도메인 값 타입

필드 단위 변환 실패는 해당 필드만 기본값으로 처리하고,
구조 자체가 다르면 (dict 대신 list 등) MalformedResponseError를 던진다.
"""

from __future__ import annotations

import logging
from typing import Any

from huobi_pro.errors import MalformedResponseError
from huobi_pro.models import (
    Account, AccountInfo, CurrencyPair, Depth, DepthRecord, Kline, Order,
    OrderSide, OrderStatus, SubAccount, SymbolInfo, Ticker, Trade, ZERO,
)
from huobi_pro.utils import to_decimal, to_int

logger = logging.getLogger(__name__)

EXCHANGE_NAME = "huobi.pro"

ORDER_STATE_MAP: dict[str, OrderStatus] = {
    "submitted": OrderStatus.UNFINISHED,
    "pre-submitted": OrderStatus.UNFINISHED,
    "partial-filled": OrderStatus.PARTIALLY_FINISHED,
    "filled": OrderStatus.FINISHED,
    "canceled": OrderStatus.CANCELED,
    "partial-canceled": OrderStatus.CANCELED,
}

ORDER_TYPE_MAP: dict[str, OrderSide] = {
    "buy-limit": OrderSide.BUY,
    "sell-limit": OrderSide.SELL,
    "buy-market": OrderSide.BUY_MARKET,
    "sell-market": OrderSide.SELL_MARKET,
}


def require(data: Any, key: str, kind: type | tuple[type, ...]) -> Any:
    """필수 필드 추출. 없거나 타입이 다르면 MalformedResponseError"""
    if not isinstance(data, dict):
        raise MalformedResponseError(f"expected object, got {type(data).__name__}")
    if key not in data:
        raise MalformedResponseError(f"missing field {key!r}")
    value = data[key]
    if not isinstance(value, kind):
        raise MalformedResponseError(
            f"field {key!r}: expected {kind}, got {type(value).__name__}"
        )
    return value


def _level(raw: Any) -> DepthRecord:
    if not isinstance(raw, (list, tuple)) or len(raw) < 2:
        raise MalformedResponseError(f"depth level must be [price, amount], got {raw!r}")
    return DepthRecord(price=to_decimal(raw[0], field_name="price"),
                       amount=to_decimal(raw[1], field_name="amount"))


# ── 시세 ──

def parse_ticker(tick: dict, pair: CurrencyPair, date: int = 0) -> Ticker:
    """WebSocket market.*.detail 페이로드. last = close"""
    if not isinstance(tick, dict):
        raise MalformedResponseError("tick must be an object")
    return Ticker(
        pair=pair,
        last=to_decimal(tick.get("close"), field_name="close"),
        low=to_decimal(tick.get("low"), field_name="low"),
        high=to_decimal(tick.get("high"), field_name="high"),
        vol=to_decimal(tick.get("vol"), field_name="vol"),
        date=date,
    )


def parse_merged_ticker(resp: dict, pair: CurrencyPair) -> Ticker:
    """REST /market/detail/merged 응답 (bid/ask 포함, vol은 amount 필드)"""
    tick = require(resp, "tick", dict)
    bid = require(tick, "bid", list)
    ask = require(tick, "ask", list)
    if not bid or not ask:
        raise MalformedResponseError("empty bid/ask")
    return Ticker(
        pair=pair,
        last=to_decimal(tick.get("close"), field_name="close"),
        buy=to_decimal(bid[0], field_name="bid"),
        sell=to_decimal(ask[0], field_name="ask"),
        high=to_decimal(tick.get("high"), field_name="high"),
        low=to_decimal(tick.get("low"), field_name="low"),
        vol=to_decimal(tick.get("amount"), field_name="amount"),
        date=to_int(resp.get("ts"), field_name="ts"),
    )


# ── 호가 ──

def parse_depth(tick: dict, pair: CurrencyPair) -> Depth:
    """asks는 가격 내림차순 재정렬, bids는 수신 순서 유지"""
    if not isinstance(tick, dict):
        raise MalformedResponseError("tick must be an object")
    asks = tick.get("asks") or []
    bids = tick.get("bids") or []
    if not isinstance(asks, list) or not isinstance(bids, list):
        raise MalformedResponseError("asks/bids must be lists")

    ask_list = sorted((_level(r) for r in asks), key=lambda r: r.price, reverse=True)
    bid_list = [_level(r) for r in bids]
    return Depth(pair=pair, ask_list=ask_list, bid_list=bid_list)


# ── 체결 ──

def parse_trades(tick: dict, pair: CurrencyPair) -> list[Trade]:
    """체결 목록 파싱. 부하 시 중복 id가 섞여 오므로 id 기준 중복 제거 (마지막 값 유지)"""
    if not isinstance(tick, dict):
        raise MalformedResponseError("tick must be an object")
    data = tick.get("data") or []
    if not isinstance(data, list):
        raise MalformedResponseError("trade data must be a list")

    by_id: dict[str, Trade] = {}
    for item in data:
        if not isinstance(item, dict) or item.get("id") is None:
            logger.warning(f"[정규화] id 없는 체결 무시: {item!r}")
            continue
        trade_id = str(item["id"])
        by_id[trade_id] = Trade(
            trade_id=trade_id,
            pair=pair,
            side=OrderSide.BUY if item.get("direction") == "buy" else OrderSide.SELL,
            amount=to_decimal(item.get("amount"), field_name="amount"),
            price=to_decimal(item.get("price"), field_name="price"),
            date=to_int(item.get("ts"), field_name="ts"),
        )
    return list(by_id.values())


# ── 캔들 ──

def parse_kline(item: dict, pair: CurrencyPair) -> Kline:
    if not isinstance(item, dict):
        raise MalformedResponseError("kline must be an object")
    return Kline(
        pair=pair,
        timestamp=to_int(item.get("id"), field_name="id"),
        open=to_decimal(item.get("open"), field_name="open"),
        close=to_decimal(item.get("close"), field_name="close"),
        high=to_decimal(item.get("high"), field_name="high"),
        low=to_decimal(item.get("low"), field_name="low"),
        vol=to_decimal(item.get("vol"), field_name="vol"),
    )


# ── 주문 ──

def order_status_from_state(state: str) -> OrderStatus:
    """알 수 없는 상태는 UNFINISHED"""
    return ORDER_STATE_MAP.get(state, OrderStatus.UNFINISHED)


def parse_order(data: dict, pair: CurrencyPair) -> Order:
    """주문 조회 응답. 평균가 = field-cash-amount / field-amount (체결량 > 0일 때)"""
    order_id = to_int(require(data, "id", (int, str)), field_name="id")
    state = require(data, "state", str)
    deal_amount = to_decimal(data.get("field-amount"), field_name="field-amount")

    avg_price = ZERO
    if deal_amount > 0:
        avg_price = to_decimal(data.get("field-cash-amount"), field_name="field-cash-amount") / deal_amount

    return Order(
        order_id=order_id,
        order_id2=str(order_id),
        pair=pair,
        side=ORDER_TYPE_MAP.get(data.get("type", "")),
        amount=to_decimal(data.get("amount"), field_name="amount"),
        price=to_decimal(data.get("price"), field_name="price"),
        deal_amount=deal_amount,
        fee=to_decimal(data.get("field-fees"), field_name="field-fees"),
        avg_price=avg_price,
        status=order_status_from_state(state),
        order_time=to_int(data.get("created-at"), field_name="created-at"),
    )


# ── 계좌 ──

def parse_account_info(data: list, account_type: str) -> AccountInfo:
    """계좌 목록에서 type이 일치하는 첫 계좌. 없으면 빈 AccountInfo"""
    for item in data:
        if isinstance(item, dict) and item.get("type") == account_type:
            return AccountInfo(
                id=str(to_int(item.get("id"), field_name="id")),
                type=account_type,
                state=str(item.get("state", "")),
            )
    return AccountInfo()


def parse_balances(balances: list) -> Account:
    """type=trade → 가용, type=frozen → 동결"""
    account = Account(exchange=EXCHANGE_NAME)
    for item in balances:
        currency = require(item, "currency", str).upper()
        kind = item.get("type")
        balance = to_decimal(item.get("balance"), field_name="balance")
        sub = account.sub_accounts.setdefault(currency, SubAccount(currency=currency))
        if kind == "trade":
            sub.amount = balance
        elif kind == "frozen":
            sub.frozen_amount = balance
    return account


def parse_symbol_info(item: dict) -> SymbolInfo:
    return SymbolInfo(
        base_currency=require(item, "base-currency", str),
        quote_currency=require(item, "quote-currency", str),
        price_precision=to_int(item.get("price-precision"), field_name="price-precision"),
        amount_precision=to_int(item.get("amount-precision"), field_name="amount-precision"),
        symbol_partition=str(item.get("symbol-partition", "")),
        symbol=require(item, "symbol", str),
    )
