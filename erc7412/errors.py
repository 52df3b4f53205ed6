from typing import Sequence


class ERC7412Error(Exception):
    pass


class OracleNotSupportedError(ERC7412Error):
    def __init__(self, oracle_id: str, supported: Sequence[str]) -> None:
        self.oracle_id = oracle_id
        self.supported = list(supported)
        super().__init__(f"oracle {oracle_id} not supported (supported oracles: {','.join(self.supported)})")


class ResolutionLimitExceeded(ERC7412Error):
    """
    The batch kept failing with recoverable errors for more rounds than allowed.
    `batch` is the last candidate batch, original call last.
    """

    def __init__(self, iterations: int, batch: list) -> None:
        self.iterations = iterations
        self.batch = list(batch)
        super().__init__(f"no successful simulation after {iterations} rounds "
                         f"({len(self.batch) - 1} fulfillment calls in batch)")


class OffchainDataError(ERC7412Error):
    def __init__(self, oracle_id: str, reason: str) -> None:
        self.oracle_id = oracle_id
        self.reason = reason
        super().__init__(f"offchain data for oracle {oracle_id} unavailable: {reason}")
