"""HTTP 전송 테스트
Feature: huobi-pro-connector
GET JSON 디코딩(Decimal), 비정상 상태코드, POST 원본 바이트, 세션 주입
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from huobi_pro import http_client
from huobi_pro.errors import HttpError, MalformedResponseError


def make_session(status=200, text="", data=b""):
    mock_resp = MagicMock()
    mock_resp.status = status
    mock_resp.text = AsyncMock(return_value=text)
    mock_resp.read = AsyncMock(return_value=data)
    mock_resp.__aenter__ = AsyncMock(return_value=mock_resp)
    mock_resp.__aexit__ = AsyncMock(return_value=False)

    mock_session = MagicMock()
    mock_session.get = MagicMock(return_value=mock_resp)
    mock_session.post = MagicMock(return_value=mock_resp)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=False)
    return mock_session


class TestHttpGet:

    def test_success_decodes_decimal(self):
        mock_session = make_session(text='{"status":"ok","tick":{"close":43000.12}}')

        async def run():
            with patch("aiohttp.ClientSession", return_value=mock_session):
                return await http_client.http_get("https://api.example.com/market/detail")

        result = asyncio.run(run())
        assert result["tick"]["close"] == Decimal("43000.12")
        mock_session.get.assert_called_once()

    def test_non_200_raises(self):
        mock_session = make_session(status=502, text="Bad Gateway")

        async def run():
            with patch("aiohttp.ClientSession", return_value=mock_session):
                return await http_client.http_get("https://api.example.com/x")

        with pytest.raises(HttpError) as exc:
            asyncio.run(run())
        assert exc.value.status == 502
        assert exc.value.body == "Bad Gateway"

    def test_non_json_body_is_malformed(self):
        mock_session = make_session(text="<html>oops</html>")

        async def run():
            with patch("aiohttp.ClientSession", return_value=mock_session):
                return await http_client.http_get("https://api.example.com/x")

        with pytest.raises(MalformedResponseError):
            asyncio.run(run())

    def test_injected_session_reused(self):
        """주입된 세션이 있으면 새 ClientSession을 만들지 않음"""
        mock_session = make_session(text="[]")

        async def run():
            with patch("aiohttp.ClientSession") as mock_cls:
                result = await http_client.http_get("https://api.example.com/x", session=mock_session)
                mock_cls.assert_not_called()
                return result

        assert asyncio.run(run()) == []


class TestHttpPost:

    def test_success_returns_bytes(self):
        mock_session = make_session(data=b'{"status":"ok","data":"1"}')

        async def run():
            with patch("aiohttp.ClientSession", return_value=mock_session):
                return await http_client.http_post(
                    "https://api.example.com/v1/order/orders/place",
                    '{"amount":"1"}', {"Content-Type": "application/json"})

        assert asyncio.run(run()) == b'{"status":"ok","data":"1"}'
        kwargs = mock_session.post.call_args.kwargs
        assert kwargs["data"] == '{"amount":"1"}'
        assert kwargs["headers"]["Content-Type"] == "application/json"

    def test_non_200_raises(self):
        mock_session = make_session(status=403, data=b"forbidden")

        async def run():
            with patch("aiohttp.ClientSession", return_value=mock_session):
                return await http_client.http_post("https://api.example.com/x", "{}", {})

        with pytest.raises(HttpError) as exc:
            asyncio.run(run())
        assert exc.value.status == 403
        assert exc.value.body == "forbidden"
