"""
Chain Manager
=============

[CHAIN] JSON-RPC connection, transaction sending and contract deployment.

Two signing modes:
- PRIVATE_KEY set: transactions are built, signed locally with eth-account
  and sent raw.
- No key: the node's first unlocked account sends them (the default Hardhat
  signer on a local node).

[USAGE]
    chain = ChainManager(rpc_url="http://127.0.0.1:8545")
    address = chain.deploy(artifact.abi, artifact.bytecode, semaphore, group_id)
    receipt = chain.send(contract.functions.addMember(group_id, commitment))
"""

import logging
from typing import Any, Dict, Optional

from eth_account import Account
from web3 import Web3

from core.exceptions import TransactionFailedError

logger = logging.getLogger(__name__)

RECEIPT_TIMEOUT = 120
# Headroom on top of eth_estimateGas
GAS_MULTIPLIER = 1.2


class ChainManager:
    """
    Thin wrapper around Web3 for sequential scripts.

    Every send() blocks until the transaction is mined and raises
    TransactionFailedError on a reverted receipt.
    """

    def __init__(
        self,
        rpc_url: str,
        private_key: Optional[str] = None,
        w3: Optional[Web3] = None,
        receipt_timeout: int = RECEIPT_TIMEOUT,
    ):
        """
        Args:
            rpc_url: JSON-RPC endpoint
            private_key: Signing key (hex); None to use the node's account
            w3: Preconfigured Web3 instance (tests)
            receipt_timeout: Seconds to wait for each receipt
        """
        self.rpc_url = rpc_url
        self.w3 = w3 or Web3(Web3.HTTPProvider(rpc_url))
        self.receipt_timeout = receipt_timeout

        if private_key:
            self.account = Account.from_key(private_key)
            self.address = self.account.address
        else:
            self.account = None
            self.address = None

    def connect(self) -> int:
        """
        Check the endpoint and resolve the sender address.

        Returns:
            Chain ID

        Raises:
            ConnectionError: endpoint unreachable or no usable account
        """
        if not self.w3.is_connected():
            raise ConnectionError(f"Failed to connect to RPC endpoint {self.rpc_url}")

        if self.address is None:
            accounts = self.w3.eth.accounts
            if not accounts:
                raise ConnectionError("Node exposes no unlocked accounts; set PRIVATE_KEY")
            self.address = accounts[0]

        chain_id = self.w3.eth.chain_id
        logger.info(f"[CHAIN] Connected to {self.rpc_url} (ChainID: {chain_id}), sender {self.address}")
        return chain_id

    @property
    def sender(self) -> str:
        if self.address is None:
            self.connect()
        return self.address

    # ========================================================================
    # Contracts
    # ========================================================================

    def contract(self, address: str, abi: list):
        """Bind an ABI to a deployed address."""
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def deploy(self, abi: list, bytecode: str, *constructor_args) -> str:
        """
        Deploy a contract and wait for it to be mined.

        Returns:
            Checksummed contract address
        """
        factory = self.w3.eth.contract(abi=abi, bytecode=bytecode)
        receipt = self._transact(factory.constructor(*constructor_args))

        address = receipt["contractAddress"]
        if not address:
            raise TransactionFailedError(
                "Deployment receipt has no contract address",
                tx_hash=_hex(receipt.get("transactionHash")),
                receipt=receipt,
            )
        return Web3.to_checksum_address(address)

    def send(self, function) -> Dict[str, Any]:
        """
        Send a contract function call as a transaction.

        Args:
            function: Bound contract function, e.g. contract.functions.addMember(1, 2)

        Returns:
            Transaction receipt
        """
        return self._transact(function)

    # ========================================================================
    # Transactions
    # ========================================================================

    def _transact(self, call) -> Dict[str, Any]:
        sender = self.sender

        if self.account is None:
            tx_hash = call.transact({"from": sender})
        else:
            tx = call.build_transaction({
                "from": sender,
                "nonce": self.w3.eth.get_transaction_count(sender, "pending"),
            })
            tx["gas"] = int(tx["gas"] * GAS_MULTIPLIER)
            signed = self.account.sign_transaction(tx)
            raw_tx = getattr(signed, "raw_transaction", None) or getattr(signed, "rawTransaction", None)
            tx_hash = self.w3.eth.send_raw_transaction(raw_tx)

        logger.debug(f"[CHAIN] Transaction sent: {_hex(tx_hash)}")
        return self.wait_for_receipt(tx_hash)

    def wait_for_receipt(self, tx_hash) -> Dict[str, Any]:
        """
        Wait for a receipt and check its status.

        Raises:
            TransactionFailedError: status != 1
        """
        if isinstance(tx_hash, str):
            tx_hash = bytes.fromhex(tx_hash.replace("0x", ""))

        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        if receipt["status"] != 1:
            raise TransactionFailedError(
                f"Transaction {_hex(tx_hash)} reverted",
                tx_hash=_hex(tx_hash),
                receipt=dict(receipt),
            )

        logger.info(f"[CHAIN] Mined {_hex(tx_hash)} in block {receipt['blockNumber']} (gas {receipt['gasUsed']})")
        return receipt


def _hex(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if hasattr(value, "hex"):
        text = value.hex()
        return text if text.startswith("0x") else "0x" + text
    return str(value)
