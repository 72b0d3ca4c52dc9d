"""숫자/문자열 변환 및 프레임 디코딩 헬퍼"""

from __future__ import annotations

import gzip
import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)


def to_decimal(value: Any, default: Decimal = Decimal(0), field_name: str = "") -> Decimal:
    """문자열/숫자 JSON 값을 Decimal로 변환. 실패 시 해당 필드만 default."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        logger.warning(f"[변환] {field_name or '값'} bool 무시: {value!r}")
        return default
    try:
        # float은 repr 문자열 기준으로 변환 (이진 오차 방지)
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        logger.warning(f"[변환] {field_name or '값'} Decimal 변환 실패: {value!r}")
        return default
    if not result.is_finite():
        logger.warning(f"[변환] {field_name or '값'} 유한하지 않은 값 무시: {value!r}")
        return default
    return result


def to_int(value: Any, default: int = 0, field_name: str = "") -> int:
    """정수 변환 (문자열 "12345", Decimal, float 허용)"""
    if value is None or value == "" or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(Decimal(str(value)))
    except (InvalidOperation, ValueError, OverflowError):
        logger.warning(f"[변환] {field_name or '값'} int 변환 실패: {value!r}")
        return default


def loads(data: str | bytes) -> Any:
    """JSON 디코딩 - 실수는 Decimal, 정수는 int 그대로 (정밀도 보존)"""
    return json.loads(data, parse_float=Decimal)


def decode_frame(raw: str | bytes) -> Any:
    """WebSocket 프레임: gzip 해제 후 JSON 디코딩"""
    if isinstance(raw, (bytes, bytearray)):
        raw = gzip.decompress(raw)
    return loads(raw)


def to_json(params: dict) -> str:
    return json.dumps(params, separators=(",", ":"))
