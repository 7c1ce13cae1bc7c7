"""Transfer dispatcher: validate a request and route it to a handler.

Validation happens before any network call:
- amount must be a positive number         -> InvalidAmount
- network/asset must be known              -> UnsupportedRoute
- amount must be at least one base unit    -> InvalidAmount
  (native assets and SPL tokens; ERC-20 decimals are only known on-chain)
- identity must hold a key for the family  -> UnsupportedRoute
- destination must parse for the network   -> AddressNormalizationFailure

Anything that fails after validation surfaces as NetworkError (WalletError
subclasses raised by the handlers pass through unchanged).
"""

import logging
from decimal import Decimal
from typing import Optional

from vaultlink.chains import Asset, ChainConfig, ChainFamily, get_chain, parse_asset
from vaultlink.config import Settings, get_settings
from vaultlink.errors import NetworkError, UnsupportedRoute, WalletError
from vaultlink.rpc.racer import EndpointRacer
from vaultlink.utils.addresses import normalize_evm_address, normalize_solana_address
from vaultlink.utils.units import to_base_units, to_decimal
from vaultlink.withdrawal.base import (
    TransferHandler,
    TransferReceipt,
    TransferRequest,
    TransferStage,
    ValidatedTransfer,
)
from vaultlink.withdrawal.eth import EvmTransferHandler
from vaultlink.withdrawal.solana import SolanaTransferHandler

logger = logging.getLogger(__name__)


def check_static_amount(
    amount: Decimal, chain: ChainConfig, asset: Asset, settings: Settings
) -> Optional[int]:
    """Scale an amount whose decimals are fixed, or return None for ERC-20 tokens.

    EVM scaling is strict; Solana rounds half-up, as the handlers do.
    """
    if chain.family == ChainFamily.SOLANA:
        decimals = chain.decimals if asset == Asset.NATIVE else settings.spl_token_decimals
        return to_base_units(amount, decimals)
    if asset == Asset.NATIVE:
        return to_base_units(amount, chain.decimals, strict=True)
    return None


def validate_transfer(
    request: TransferRequest, settings: Optional[Settings] = None
) -> ValidatedTransfer:
    """Check a transfer request without touching the network.

    Raises:
        InvalidAmount: Amount is not a positive number, or is below one base unit
        UnsupportedRoute: Unknown network/asset, or no key for the network
        AddressNormalizationFailure: Destination is malformed
    """
    amount = to_decimal(request.amount)

    try:
        chain = get_chain(request.network)
        asset = parse_asset(request.asset, chain.network)
    except ValueError as e:
        raise UnsupportedRoute(str(e)) from None

    check_static_amount(amount, chain, asset, settings or get_settings())

    identity = request.identity
    if identity is None or not identity.supports(chain.network):
        raise UnsupportedRoute(f"Wallet not available for {chain.name}")

    if chain.family == ChainFamily.EVM:
        destination = normalize_evm_address(request.destination, chain.network)
    elif chain.family == ChainFamily.SOLANA:
        destination = normalize_solana_address(request.destination)
    else:
        raise UnsupportedRoute(f"Unhandled chain family: {chain.family}")

    return ValidatedTransfer(
        identity=identity,
        chain=chain,
        asset=asset,
        destination=destination,
        amount=amount,
    )


class TransferDispatcher:
    """Sends single-asset transfers for imported identities."""

    def __init__(
        self,
        racer: EndpointRacer,
        settings: Optional[Settings] = None,
        handlers: Optional[dict[ChainFamily, TransferHandler]] = None,
    ):
        self.racer = racer
        self.settings = settings or racer.settings
        self._handlers = handlers or {
            ChainFamily.EVM: EvmTransferHandler(),
            ChainFamily.SOLANA: SolanaTransferHandler(self.settings),
        }

    def get_handler(self, family: ChainFamily) -> TransferHandler:
        try:
            return self._handlers[family]
        except KeyError:
            raise UnsupportedRoute(f"No transfer handler for {family.value}") from None

    async def send(self, request: TransferRequest) -> TransferReceipt:
        """Validate, build, sign and broadcast one transfer.

        Returns:
            TransferReceipt with the transaction id

        Raises:
            InvalidAmount, UnsupportedRoute, AddressNormalizationFailure: Before
                any network call
            NetworkError: If anything fails after validation
        """
        transfer = validate_transfer(request, self.settings)
        handler = self.get_handler(transfer.chain.family)
        network = transfer.network.value

        logger.info(
            f"[{network}] sending {transfer.amount} {transfer.symbol} "
            f"from {transfer.identity.address_for(transfer.network)} to {transfer.destination}"
        )

        stage = TransferStage.RESOLVE_CONNECTION
        try:
            connection = await self.racer.acquire(transfer.network)
            stage = TransferStage.BUILD
            unsigned = await handler.build(transfer, connection)
            stage = TransferStage.SIGN
            signed = handler.sign(transfer, unsigned)
            stage = TransferStage.BROADCAST
            txid = await handler.broadcast(signed, connection)
        except WalletError:
            raise
        except Exception as e:
            logger.error(f"[{network}] transfer failed during {stage.value}: {e}")
            raise NetworkError(
                f"Transfer failed during {stage.value}: {e}", network=network, cause=e
            ) from e

        logger.info(f"[{network}] transfer broadcast: {txid}")
        return TransferReceipt(
            txid=txid,
            network=transfer.network,
            asset=transfer.asset,
            amount=transfer.amount,
            destination=str(transfer.destination),
        )
