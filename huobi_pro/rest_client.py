"""REST 클라이언트 모듈 - 서명 요청, 응답 envelope 검사, 타입 변환"""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from huobi_pro import http_client
from huobi_pro.channel_router import resolve_period
from huobi_pro.errors import AccountStateError, ApiError, MalformedResponseError
from huobi_pro.models import (
    Account, AccountInfo, CurrencyPair, Depth, Kline, KlinePeriod, Order,
    OrderSide, SymbolInfo, Ticker,
)
from huobi_pro.normalizer import (
    EXCHANGE_NAME, parse_account_info, parse_balances, parse_depth, parse_kline,
    parse_merged_ticker, parse_order, parse_symbol_info, require,
)
from huobi_pro.signer import encode_params, host_of, sign_params
from huobi_pro.utils import loads, to_decimal, to_int, to_json

logger = logging.getLogger(__name__)

DEFAULT_REST_URL = "https://api.huobi.br.com"

POST_HEADERS = {"Content-Type": "application/json", "Accept-Language": "zh-cn"}

# 주문 조회용 상태 필터
ORDER_STATE_FILTERS = {
    "unfinished": "pre-submitted,submitted,partial-filled",
    "history": "partial-canceled,filled",
}

ORDER_TYPES = {
    OrderSide.BUY: "buy-limit",
    OrderSide.SELL: "sell-limit",
    OrderSide.BUY_MARKET: "buy-market",
    OrderSide.SELL_MARKET: "sell-market",
}


def check_envelope(resp: Any) -> dict:
    """status == "ok" 이외는 ApiError, 객체가 아니면 MalformedResponseError"""
    if not isinstance(resp, dict):
        raise MalformedResponseError(f"expected object envelope, got {type(resp).__name__}")
    status = resp.get("status")
    if status is None:
        raise MalformedResponseError("missing field 'status'")
    if status != "ok":
        raise ApiError.from_envelope(resp)
    return resp


class HuobiProRest:
    """후오비 현물 REST API"""

    def __init__(self, access_key: str = "", secret_key: str = "", account_id: str = "",
                 base_url: str = DEFAULT_REST_URL,
                 session: aiohttp.ClientSession | None = None):
        self.access_key = access_key
        self.secret_key = secret_key
        self.account_id = account_id
        self.base_url = base_url.rstrip("/")
        self.session = session

    @property
    def exchange_name(self) -> str:
        return EXCHANGE_NAME

    # ── 요청 헬퍼 ──

    def _signed_url(self, method: str, path: str, params: dict[str, str]) -> str:
        sign_params(method, host_of(self.base_url), path, params,
                    self.access_key, self.secret_key)
        return f"{self.base_url}{path}?{encode_params(params)}"

    async def _signed_get(self, path: str, params: dict[str, str] | None = None) -> dict:
        url = self._signed_url("GET", path, dict(params or {}))
        resp = await http_client.http_get(url, session=self.session)
        return check_envelope(resp)

    async def _signed_post(self, path: str, params: dict[str, str] | None = None) -> tuple[Any, bytes]:
        """서명된 파라미터를 쿼리스트링과 JSON 본문 양쪽에 실어 보냄. (디코딩 결과, 원본) 반환"""
        params = dict(params or {})
        url = self._signed_url("POST", path, params)
        raw = await http_client.http_post(url, to_json(params), POST_HEADERS, session=self.session)
        try:
            return loads(raw), raw
        except ValueError as e:
            raise MalformedResponseError(f"invalid json: {e}") from e

    async def _public_get(self, path: str, params: dict[str, Any] | None = None) -> dict:
        url = f"{self.base_url}{path}"
        if params:
            url += "?" + encode_params({k: str(v) for k, v in params.items()})
        return check_envelope(await http_client.http_get(url, session=self.session))

    # ── 계좌 ──

    async def get_account_info(self, account_type: str) -> AccountInfo:
        """/v1/account/accounts 에서 account_type 계좌 조회"""
        resp = await self._signed_get("/v1/account/accounts")
        return parse_account_info(require(resp, "data", list), account_type)

    async def get_account(self) -> Account:
        """잔고 조회 (매번 새로 조회, 캐시 없음)"""
        path = f"/v1/account/accounts/{self.account_id}/balance"
        resp = await self._signed_get(path, {"accountId-id": self.account_id})
        data = require(resp, "data", dict)
        state = data.get("state")
        if state != "working":
            raise AccountStateError(str(state))
        return parse_balances(require(data, "list", list))

    # ── 주문 ──

    async def place_order(self, amount: str, price: str, pair: CurrencyPair,
                          side: OrderSide) -> Order:
        """주문 제출. amount/price는 문자열 그대로 전송 (반올림 없음), 시장가는 price 무시"""
        order_type = ORDER_TYPES[side]
        params = {
            "account-id": self.account_id,
            "amount": amount,
            "symbol": pair.to_symbol().lower(),
            "type": order_type,
        }
        if order_type in ("buy-limit", "sell-limit"):
            params["price"] = price

        resp, _ = await self._signed_post("/v1/order/orders/place", params)
        data = require(check_envelope(resp), "data", (str, int))
        order_id = str(data)
        logger.info(f"[REST] 주문 {order_type} {pair} amount={amount} price={price} → {order_id}")
        return Order(
            order_id=to_int(order_id, field_name="order-id"),
            order_id2=order_id,
            pair=pair,
            side=side,
            amount=to_decimal(amount, field_name="amount"),
            price=to_decimal(price, field_name="price"),
        )

    async def limit_buy(self, amount: str, price: str, pair: CurrencyPair) -> Order:
        return await self.place_order(amount, price, pair, OrderSide.BUY)

    async def limit_sell(self, amount: str, price: str, pair: CurrencyPair) -> Order:
        return await self.place_order(amount, price, pair, OrderSide.SELL)

    async def market_buy(self, amount: str, price: str, pair: CurrencyPair) -> Order:
        return await self.place_order(amount, price, pair, OrderSide.BUY_MARKET)

    async def market_sell(self, amount: str, price: str, pair: CurrencyPair) -> Order:
        return await self.place_order(amount, price, pair, OrderSide.SELL_MARKET)

    async def cancel_order(self, order_id: str, pair: CurrencyPair) -> bool:
        resp, raw = await self._signed_post(f"/v1/order/orders/{order_id}/submitcancel")
        if isinstance(resp, dict) and resp.get("status") not in (None, "ok"):
            # 취소 실패는 응답 본문 전체를 메시지로
            raise ApiError(ApiError.from_envelope(resp).code, raw.decode("utf-8", errors="replace"))
        check_envelope(resp)
        logger.info(f"[REST] 주문 취소 {pair} {order_id}")
        return True

    async def get_order(self, order_id: str, pair: CurrencyPair) -> Order:
        resp = await self._signed_get(f"/v1/order/orders/{order_id}")
        return parse_order(require(resp, "data", dict), pair)

    async def get_orders(self, pair: CurrencyPair, states: str, size: int = 0,
                         direct: str = "", types: str = "", start_date: str = "",
                         end_date: str = "", from_id: str = "") -> list[Order]:
        """/v1/order/orders 조회. states는 쉼표 구분 원본 상태 또는 'unfinished'/'history'"""
        params = {
            "symbol": pair.to_symbol().lower(),
            "states": ORDER_STATE_FILTERS.get(states, states),
        }
        optional = {"direct": direct, "types": types, "start-date": start_date,
                    "end-date": end_date, "from": from_id}
        params.update({k: v for k, v in optional.items() if v})
        if size > 0:
            params["size"] = str(size)

        resp = await self._signed_get("/v1/order/orders", params)
        return [parse_order(item, pair) for item in require(resp, "data", list)]

    async def get_unfinished_orders(self, pair: CurrencyPair) -> list[Order]:
        return await self.get_orders(pair, "unfinished", size=100)

    async def get_order_history(self, pair: CurrencyPair, page_size: int = 0) -> list[Order]:
        return await self.get_orders(pair, "history", size=page_size, direct="next")

    # ── 시세 ──

    async def get_ticker(self, pair: CurrencyPair) -> Ticker:
        resp = await self._public_get("/market/detail/merged",
                                      {"symbol": pair.to_symbol().lower()})
        return parse_merged_ticker(resp, pair)

    async def get_depth(self, size: int, pair: CurrencyPair) -> Depth:
        """size > 0이면 각 방향 최우선 size개만 유지"""
        resp = await self._public_get("/market/depth",
                                      {"symbol": pair.to_symbol().lower(), "type": "step0"})
        depth = parse_depth(require(resp, "tick", dict), pair)
        if size > 0:
            # asks는 내림차순이므로 최우선 호가가 뒤쪽
            depth.ask_list = depth.ask_list[-size:]
            depth.bid_list = depth.bid_list[:size]
        return depth

    async def get_kline_records(self, pair: CurrencyPair, period: KlinePeriod | str,
                                size: int = 150) -> list[Kline]:
        """최신 캔들이 앞쪽 (역순)"""
        symbol = pair.adapt_usd_to_usdt().to_symbol().lower()
        resp = await self._public_get("/market/history/kline", {
            "period": resolve_period(period), "size": size, "symbol": symbol,
        })
        return [parse_kline(item, pair) for item in require(resp, "data", list)]

    async def get_symbols(self) -> list[SymbolInfo]:
        resp = await self._public_get("/v1/common/symbols", {})
        return [parse_symbol_info(item) for item in require(resp, "data", list)]

    async def get_currencies(self) -> list[str]:
        resp = await self._public_get("/v1/common/currencys", {})
        return [str(c) for c in require(resp, "data", list)]
