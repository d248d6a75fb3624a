"""Wallet helpers: address normalisation, login-signature recovery and
on-chain lookup of consultation-fee transfers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3
from web3.exceptions import TransactionNotFound

from .config import settings

logger = logging.getLogger(__name__)


def normalize_address(address: str) -> str:
    """Return the EIP-55 checksum form of ``address``; ValueError if malformed."""
    address = (address or "").strip()
    if not Web3.is_address(address):
        raise ValueError(f"Invalid wallet address: {address!r}")
    return Web3.to_checksum_address(address)


def login_message(role: str, address: str) -> str:
    """Exact text a wallet must personal_sign to register or log in."""
    return f"Sign in to {settings.PROJECT_NAME} as {role.capitalize()} with wallet: {address}"


def recover_signer(message: str, signature: str) -> Optional[str]:
    """Recover the checksum address that produced ``signature`` over ``message``."""
    try:
        signer = Account.recover_message(encode_defunct(text=message), signature=signature)
    except Exception as e:  # malformed hex, wrong length, bad v value ...
        logger.warning(f"⚠️ Could not recover signer: {e}")
        return None
    return Web3.to_checksum_address(signer)


def verify_signature(message: str, signature: str, address: str) -> bool:
    signer = recover_signer(message, signature)
    return signer is not None and signer == normalize_address(address)


# ------------------------------------------------------------
# Chain access
# ------------------------------------------------------------
@lru_cache(maxsize=1)
def get_web3() -> Web3:
    return Web3(Web3.HTTPProvider(settings.RPC_URL))


@dataclass
class TransferCheck:
    confirmed: bool  # a receipt exists
    ok: bool = False
    reason: str = ""


def check_transfer(tx_hash: str, to_address: str, min_amount_eth: Decimal) -> TransferCheck:
    """Check that ``tx_hash`` is a successful native transfer of at least
    ``min_amount_eth`` ether to ``to_address``."""
    w3 = get_web3()
    try:
        receipt = w3.eth.get_transaction_receipt(tx_hash)
    except TransactionNotFound:
        return TransferCheck(confirmed=False, reason="Transaction not yet confirmed")

    if receipt.get("status") != 1:
        return TransferCheck(confirmed=True, reason="Transaction reverted")

    tx = w3.eth.get_transaction(tx_hash)
    recipient = tx.get("to")
    if not recipient or Web3.to_checksum_address(recipient) != normalize_address(to_address):
        return TransferCheck(confirmed=True, reason="Transfer recipient does not match the doctor's wallet")

    if int(tx.get("value", 0)) < Web3.to_wei(min_amount_eth, "ether"):
        return TransferCheck(confirmed=True, reason="Transferred amount is below the consultation fee")

    return TransferCheck(confirmed=True, ok=True)
