"""데이터 모델 정의 - 후오비 REST/WebSocket 응답을 담는 도메인 값 타입"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

ZERO = Decimal(0)


# ── 통화쌍 ──

@dataclass(frozen=True)
class CurrencyPair:
    """기준 통화 / 호가 통화 쌍 (대문자 코드)"""
    base: str
    quote: str

    def __post_init__(self):
        object.__setattr__(self, "base", self.base.upper())
        object.__setattr__(self, "quote", self.quote.upper())

    @classmethod
    def from_string(cls, text: str) -> "CurrencyPair":
        """'btc_usdt' 형태 문자열 파싱"""
        base, _, quote = text.partition("_")
        return cls(base, quote)

    def to_symbol(self, sep: str = "") -> str:
        return f"{self.base}{sep}{self.quote}"

    def adapt_usd_to_usdt(self) -> "CurrencyPair":
        if self.quote == "USD":
            return CurrencyPair(self.base, "USDT")
        return self

    @property
    def is_valid(self) -> bool:
        return bool(self.base and self.quote)

    def __str__(self) -> str:
        return self.to_symbol("_")


UNKNOWN_PAIR = CurrencyPair("", "")


# ── 열거형 ──

class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"
    BUY_MARKET = "buy-market"
    SELL_MARKET = "sell-market"


class OrderStatus(str, Enum):
    UNFINISHED = "unfinished"
    PARTIALLY_FINISHED = "partially-finished"
    FINISHED = "finished"
    CANCELED = "canceled"


class AccountType(str, Enum):
    SPOT = "spot"
    POINT = "point"


class KlinePeriod(str, Enum):
    MIN_1 = "1min"
    MIN_5 = "5min"
    MIN_15 = "15min"
    MIN_30 = "30min"
    MIN_60 = "60min"
    DAY_1 = "1day"
    WEEK_1 = "1week"
    MONTH_1 = "1mon"
    YEAR_1 = "1year"


# ── 시세 관련 ──

@dataclass
class Ticker:
    """시세 스냅샷"""
    pair: CurrencyPair
    last: Decimal = ZERO
    buy: Decimal = ZERO          # 최우선 매수호가 (REST merged만)
    sell: Decimal = ZERO         # 최우선 매도호가 (REST merged만)
    high: Decimal = ZERO
    low: Decimal = ZERO
    vol: Decimal = ZERO
    date: int = 0                # ms


@dataclass
class DepthRecord:
    price: Decimal
    amount: Decimal


@dataclass
class Depth:
    """호가 스냅샷 (asks 가격 내림차순, bids 수신 순서)"""
    pair: CurrencyPair
    ask_list: list[DepthRecord] = field(default_factory=list)
    bid_list: list[DepthRecord] = field(default_factory=list)


@dataclass
class Trade:
    """개별 체결"""
    trade_id: str                # 원본 id (정밀도 보존용 문자열)
    pair: CurrencyPair
    side: OrderSide
    amount: Decimal
    price: Decimal
    date: int                    # ms


@dataclass
class Kline:
    """OHLCV 캔들"""
    pair: CurrencyPair
    timestamp: int               # 캔들 id (unix sec)
    open: Decimal
    close: Decimal
    high: Decimal
    low: Decimal
    vol: Decimal


# ── 주문 / 계좌 ──

@dataclass(frozen=True)
class Order:
    """주문 스냅샷 - 조회할 때마다 새 객체"""
    order_id: int
    order_id2: str
    pair: CurrencyPair
    side: OrderSide | None
    amount: Decimal
    price: Decimal
    deal_amount: Decimal = ZERO
    fee: Decimal = ZERO
    avg_price: Decimal = ZERO
    status: OrderStatus = OrderStatus.UNFINISHED
    order_time: int = 0          # ms


@dataclass
class SubAccount:
    """통화별 잔고 (가용 / 동결)"""
    currency: str
    amount: Decimal = ZERO
    frozen_amount: Decimal = ZERO


@dataclass
class Account:
    exchange: str
    sub_accounts: dict[str, SubAccount] = field(default_factory=dict)


@dataclass
class AccountInfo:
    id: str = ""
    type: str = ""
    state: str = ""


@dataclass
class SymbolInfo:
    """거래쌍 정밀도 정보 (/v1/common/symbols)"""
    base_currency: str
    quote_currency: str
    price_precision: int
    amount_precision: int
    symbol_partition: str
    symbol: str
