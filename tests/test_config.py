"""Config YAML 라운드트립 테스트
Feature: huobi-pro-connector, Property 11: 설정 YAML 라운드트립
"""

import tempfile
import os

import pytest
from hypothesis import given, strategies as st, settings

from huobi_pro.config import Config


# ── Hypothesis 전략 ──

pair_st = st.tuples(
    st.from_regex(r"[a-z]{2,5}", fullmatch=True),
    st.sampled_from(["usdt", "btc", "eth", "husd", "ht"]),
).map(lambda t: f"{t[0]}_{t[1]}")

config_st = st.builds(
    Config,
    access_key=st.from_regex(r"[a-f0-9\-]{0,40}", fullmatch=True),
    secret_key=st.from_regex(r"[a-f0-9\-]{0,40}", fullmatch=True),
    account_id=st.from_regex(r"[0-9]{0,10}", fullmatch=True),
    account_type=st.sampled_from(["spot", "point"]),
    rest_url=st.just("https://api.huobi.br.com"),
    ws_url=st.just("wss://api.huobi.br.com/ws"),
    heartbeat_interval=st.integers(min_value=1, max_value=60),
    stale_timeout=st.integers(min_value=5, max_value=600),
    log_dir=st.just("./logs"),
    symbols=st.lists(pair_st, min_size=1, max_size=5),
    kline_period=st.sampled_from(["1min", "5min", "60min", "1day"]),
    streams=st.lists(st.sampled_from(["ticker", "depth", "trade", "kline"]), unique=True),
)


# ── Property 11: Config YAML 라운드트립 ──

class TestConfigYamlRoundtrip:

    @given(config=config_st)
    @settings(max_examples=100)
    def test_yaml_roundtrip(self, config: Config):
        """For any valid Config, YAML serialize then deserialize produces identical Config."""
        with tempfile.NamedTemporaryFile(suffix=".yaml", delete=False, mode="w") as f:
            tmp_path = f.name

        try:
            config.to_yaml(tmp_path)
            restored = Config.from_yaml(tmp_path)
            assert config == restored, f"Roundtrip failed: {config} != {restored}"
        finally:
            os.unlink(tmp_path)


# ── 단위 테스트 ──

class TestConfigUnit:

    def test_default_config(self):
        c = Config()
        assert c.symbols == ["btc_usdt"]
        assert c.heartbeat_interval == 5
        assert c.account_type == "spot"
        assert c.ws_url.startswith("wss://")
        assert c.has_credentials is False

    def test_from_yaml_missing_file(self):
        c = Config.from_yaml("/nonexistent/path.yaml")
        assert c == Config()

    def test_from_yaml_ignores_unknown_keys(self):
        with tempfile.NamedTemporaryFile(suffix=".yaml", delete=False, mode="w") as f:
            f.write("symbols: [eth_btc]\naccess_key: abc\nsecret_key: def\nunknown_key: 42\n")
            tmp_path = f.name
        try:
            c = Config.from_yaml(tmp_path)
            assert c.symbols == ["eth_btc"]
            assert c.has_credentials is True
        finally:
            os.unlink(tmp_path)
