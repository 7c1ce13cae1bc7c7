"""Exception hierarchy for the wallet engine.

Read paths (balance aggregation) catch these and degrade to zero. Write
paths (transfers) let them propagate to the caller.
"""

from typing import Optional


class WalletError(Exception):
    """Base class for wallet engine errors."""
    pass


class InvalidSecret(WalletError):
    """Raised when an imported phrase or private key cannot be parsed."""
    pass


class AddressNormalizationFailure(WalletError):
    """Raised when an address is not valid for its network."""

    def __init__(self, address: str, network: str, reason: str = ""):
        self.address = address
        self.network = network
        message = f"Invalid {network} address: {address!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class EndpointUnreachable(WalletError):
    """Raised when no endpoint of a network answered its liveness probe."""
    pass


class InvalidAmount(WalletError):
    """Raised when a transfer amount is not a positive, representable number."""
    pass


class UnsupportedRoute(WalletError):
    """Raised when the identity holds no key for the requested network."""
    pass


class NetworkError(WalletError):
    """Raised when an RPC call or broadcast fails."""

    def __init__(
        self,
        message: str,
        network: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.network = network
        self.cause = cause
        super().__init__(f"[{network}] {message}" if network else message)
