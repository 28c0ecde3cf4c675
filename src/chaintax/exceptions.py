class ChainTaxError(Exception):
    """Base error for chaintax."""


class ExternalServiceError(ChainTaxError):
    """Blockchain-data provider failed (network, HTTP status or payload error)."""


class UnsupportedChainError(ChainTaxError, ValueError):
    def __init__(self, chain: str) -> None:
        super().__init__(f"Unsupported chain: {chain}")
        self.chain = chain


class TaxReportError(ChainTaxError):
    """A tax report run aborted. The underlying cause is chained as __cause__."""


class ProviderUnavailableError(ExternalServiceError):
    """Transient provider failure (transport error, 429 or 5xx). Retried at the client."""
