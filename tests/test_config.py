import logging

import pytest
from web3.exceptions import ContractLogicError

from erc7412.config import AppConfig
from erc7412.core.log import setup_logging
from erc7412.errors import OracleNotSupportedError
from erc7412.main import apply_args, call_to_json, main, parse_args
from erc7412.ports import Call


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("RPC_URL", "RPC_POOL", "MULTICALL_ADDRESS", "SENDER", "ORACLES", "MAX_ITERATIONS",
                 "MAX_RETRIES", "RETRY_BASE_DELAY", "CALL_TIMEOUT", "DEBUG", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    cfg = AppConfig()
    assert cfg.rpc_pool == []
    assert cfg.max_iterations == 32
    assert cfg.sender is None
    assert cfg.debug is False
    assert cfg.oracle_urls() == {}


def test_from_env(clean_env):
    clean_env.setenv("RPC_POOL", "https://a, ,https://b")
    clean_env.setenv("ORACLES", "PYTH=https://hermes.example/v1, CHAINLINK=https://cl.example")
    clean_env.setenv("MAX_ITERATIONS", "0")
    clean_env.setenv("DEBUG", "1")

    cfg = AppConfig()

    assert cfg.rpc_pool == ["https://a", "https://b"]
    assert cfg.oracle_urls() == {"PYTH": "https://hermes.example/v1", "CHAINLINK": "https://cl.example"}
    assert cfg.max_iterations == 0
    assert cfg.debug is True


def test_bad_oracle_entry(clean_env):
    clean_env.setenv("ORACLES", "PYTH")
    with pytest.raises(ValueError, match="ID=URL"):
        AppConfig().oracle_urls()


def test_cli_overrides(clean_env):
    clean_env.setenv("ORACLES", "A=https://a.example")
    a = parse_args(["--to", "0x" + "11" * 20, "--oracle", "B=https://b.example",
                    "--max-iterations", "5", "--rpc", "https://node.example"])

    cfg = apply_args(AppConfig(), a)

    assert cfg.rpc_url == "https://node.example"
    assert cfg.max_iterations == 5
    assert list(cfg.oracle_urls()) == ["A", "B"]


def test_call_to_json():
    call = Call(to="0x" + "11" * 20, data=b"\xab", value=10 ** 20)
    assert call_to_json(call) == {"to": "0x" + "11" * 20, "data": "0xab", "value": str(10 ** 20)}


def test_setup_logging(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    log_file = tmp_path / "erc7412.log"
    setup_logging(debug=True, to_file=str(log_file))
    try:
        logging.getLogger("resolver").debug("round %d", 1)
        for h in logging.getLogger().handlers:
            h.flush()

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("web3").level == logging.WARNING
        assert "| DEBUG    | resolver | round 1" in log_file.read_text(encoding="utf-8")
    finally:
        for h in root.handlers:
            if isinstance(h, logging.FileHandler):
                h.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


class TestMain:
    @pytest.fixture
    def cli(self, clean_env):
        clean_env.setattr("erc7412.main.load_env", AppConfig)
        clean_env.setattr("erc7412.main.setup_logging", lambda debug, to_file=None: None)
        return clean_env

    def _failing_run(self, exc):
        async def run(cfg, call):
            raise exc
        return run

    def test_unhandled_revert_exits_with_message(self, cli, caplog):
        cli.setattr("erc7412.main.run", self._failing_run(ContractLogicError("execution reverted", data="0xdeadbeef")))

        with caplog.at_level(logging.ERROR, logger="main"):
            assert main(["--to", "0x" + "11" * 20]) == 1

        assert "0xdeadbeef" in caplog.text

    def test_unsupported_oracle_exits_with_message(self, cli, caplog):
        cli.setattr("erc7412.main.run", self._failing_run(OracleNotSupportedError("X", ["A", "B"])))

        with caplog.at_level(logging.ERROR, logger="main"):
            assert main(["--to", "0x" + "11" * 20]) == 1

        assert "oracle X not supported (supported oracles: A,B)" in caplog.text

    def test_prints_resolved_call(self, cli, capsys):
        async def run(cfg, call):
            return Call(to=call.to, data=b"\x01", value=call.value)

        cli.setattr("erc7412.main.run", run)

        assert main(["--to", "0x" + "11" * 20, "--value", "7"]) == 0
        assert '"value": "7"' in capsys.readouterr().out
