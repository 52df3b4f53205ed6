import os
from typing import Optional
from pydantic import BaseModel, Field


class AppConfig(BaseModel):
    rpc_url: str = Field(default_factory=lambda: os.getenv("RPC_URL", "https://rpc.mevblocker.io"))
    rpc_pool: list[str] = Field(default_factory=lambda: [x for x in os.getenv("RPC_POOL", "").split(",") if x.strip()])
    multicall_address: str = Field(default_factory=lambda: os.getenv("MULTICALL_ADDRESS", "").strip())
    sender: Optional[str] = Field(default_factory=lambda: os.getenv("SENDER", "").strip() or None)

    # ORACLES=PYTH=https://...,CHAINLINK=https://...
    oracles: str = Field(default_factory=lambda: os.getenv("ORACLES", ""))

    max_iterations: int = Field(default_factory=lambda: int(os.getenv("MAX_ITERATIONS", "32")))
    max_retries: int = Field(default_factory=lambda: int(os.getenv("MAX_RETRIES", "1")))
    retry_base_delay: float = Field(default_factory=lambda: float(os.getenv("RETRY_BASE_DELAY", "0.25")))
    call_timeout: float = Field(default_factory=lambda: float(os.getenv("CALL_TIMEOUT", "15.0")))

    debug: bool = Field(default_factory=lambda: os.getenv("DEBUG", "false").lower() != "false")
    log_file: Optional[str] = Field(default_factory=lambda: os.getenv("LOG_FILE", "").strip() or None)

    def oracle_urls(self) -> dict[str, str]:
        out: dict[str, str] = {}
        for item in self.oracles.split(","):
            if not item.strip():
                continue
            oracle_id, sep, url = item.partition("=")
            if not sep or not oracle_id.strip() or not url.strip():
                raise ValueError(f"ORACLES entry must look like ID=URL, got {item.strip()!r}")
            out[oracle_id.strip()] = url.strip()
        return out


def load_env() -> AppConfig:
    from dotenv import load_dotenv
    load_dotenv()
    return AppConfig()
