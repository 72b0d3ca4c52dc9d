"""REST 요청 서명 모듈 - HmacSHA256 / SignatureVersion 2"""

from __future__ import annotations

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from urllib.parse import urlencode

SIGNATURE_METHOD = "HmacSHA256"
SIGNATURE_VERSION = "2"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def encode_params(params: dict[str, str]) -> str:
    """키 사전순 정렬 + 퍼센트 인코딩"""
    return urlencode(sorted(params.items()))


def host_of(base_url: str) -> str:
    """https:// 스킴 제거한 호스트"""
    return base_url.replace("https://", "").replace("http://", "").rstrip("/")


def canonical_payload(method: str, host: str, path: str, params: dict[str, str]) -> str:
    """서명 대상 문자열: METHOD\\nHOST\\nPATH\\nENCODED_PARAMS"""
    return "\n".join([method.upper(), host, path, encode_params(params)])


def sign(secret_key: str, payload: str) -> str:
    digest = hmac.new(secret_key.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def build_signature(method: str, host: str, path: str, params: dict[str, str],
                    secret_key: str) -> str:
    """canonical payload에 대한 base64 HMAC-SHA256 서명. Signature 자신은 입력에 포함하지 않음."""
    unsigned = {k: v for k, v in params.items() if k != "Signature"}
    return sign(secret_key, canonical_payload(method, host, path, unsigned))


def sign_params(method: str, host: str, path: str, params: dict[str, str],
                access_key: str, secret_key: str,
                now: datetime | None = None) -> dict[str, str]:
    """인증 필드 4개를 채우고 마지막에 Signature 추가 (params를 직접 수정하고 반환)"""
    now = now or datetime.now(timezone.utc)
    params["AccessKeyId"] = access_key
    params["SignatureMethod"] = SIGNATURE_METHOD
    params["SignatureVersion"] = SIGNATURE_VERSION
    params["Timestamp"] = now.strftime(TIMESTAMP_FORMAT)
    params["Signature"] = build_signature(method, host, path, params, secret_key)
    return params
