"""시스템 설정 모듈 - config.yaml 로드 및 Config 데이터클래스"""

from dataclasses import dataclass, field, asdict
from pathlib import Path

import yaml


@dataclass
class Config:
    """커넥터 설정 (config.yaml에서 로드)"""
    access_key: str = ""
    secret_key: str = ""
    account_id: str = ""
    account_type: str = "spot"
    rest_url: str = "https://api.huobi.br.com"
    ws_url: str = "wss://api.huobi.br.com/ws"
    heartbeat_interval: int = 5
    stale_timeout: int = 30
    log_dir: str = "./logs"
    symbols: list[str] = field(default_factory=lambda: ["btc_usdt"])
    kline_period: str = "1min"
    streams: list[str] = field(default_factory=lambda: ["ticker", "depth", "trade", "kline"])

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """YAML 파일에서 Config 객체 생성"""
        p = Path(path)
        if not p.exists():
            return cls()
        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    def to_yaml(self, path: str) -> None:
        """Config 객체를 YAML 파일로 저장"""
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(asdict(self), f, default_flow_style=False, allow_unicode=True)

    def to_dict(self) -> dict:
        """Config를 딕셔너리로 변환"""
        return asdict(self)

    @property
    def has_credentials(self) -> bool:
        return bool(self.access_key and self.secret_key)
