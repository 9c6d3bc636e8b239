"""Typed shape of the wallet JSON document, one model per nested entity.

Field names are the persisted column names; aliases are the camelCase keys
the wallet backend produces. Scalars are strict, so a string ``amount`` or
an object ``isViewWallet`` is rejected instead of being stored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr


class _Entity(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TransactionInput(_Entity):
    key_image: StrictStr = Field(alias="keyImage")
    amount: StrictInt
    block_height: StrictInt = Field(alias="blockHeight")
    transaction_public_key: StrictStr = Field(alias="transactionPublicKey")
    transaction_index: StrictInt = Field(alias="transactionIndex")
    global_output_index: StrictInt = Field(alias="globalOutputIndex")
    key: StrictStr
    spend_height: StrictInt = Field(alias="spendHeight")
    unlock_time: StrictInt = Field(alias="unlockTime")
    parent_transaction_hash: StrictStr = Field(alias="parentTransactionHash")


class UnconfirmedInput(_Entity):
    amount: StrictInt
    key: StrictStr
    parent_transaction_hash: StrictStr = Field(alias="parentTransactionHash")


class Transfer(_Entity):
    amount: StrictInt
    public_key: StrictStr = Field(alias="publicKey")


class Transaction(_Entity):
    transfers: list[Transfer]
    hash: StrictStr
    fee: StrictInt
    block_height: StrictInt = Field(alias="blockHeight")
    timestamp: StrictInt
    payment_id: StrictStr = Field(alias="paymentID")
    unlock_time: StrictInt = Field(alias="unlockTime")
    is_coinbase_transaction: StrictBool = Field(alias="isCoinbaseTransaction")


class TxPrivateKey(_Entity):
    transaction_hash: StrictStr = Field(alias="transactionHash")
    tx_private_key: StrictStr = Field(alias="txPrivateKey")


class SubWallet(_Entity):
    """One spend key's view of the chain."""

    unspent_inputs: list[TransactionInput] = Field(alias="unspentInputs")
    locked_inputs: list[TransactionInput] = Field(alias="lockedInputs")
    spent_inputs: list[TransactionInput] = Field(alias="spentInputs")
    unconfirmed_incoming_amounts: list[UnconfirmedInput] = Field(
        alias="unconfirmedIncomingAmounts"
    )
    public_spend_key: StrictStr = Field(alias="publicSpendKey")
    private_spend_key: StrictStr = Field(alias="privateSpendKey")
    sync_start_timestamp: StrictInt = Field(alias="syncStartTimestamp")
    sync_start_height: StrictInt = Field(alias="syncStartHeight")
    address: StrictStr
    is_primary_address: StrictBool = Field(alias="isPrimaryAddress")


class SubWallets(_Entity):
    """Container of every sub-wallet and the wallet's transactions."""

    public_spend_keys: list[StrictStr] = Field(alias="publicSpendKeys")
    sub_wallet: list[SubWallet] = Field(alias="subWallet")
    transactions: list[Transaction]
    locked_transactions: list[Transaction] = Field(alias="lockedTransactions")
    private_view_key: StrictStr = Field(alias="privateViewKey")
    is_view_wallet: StrictBool = Field(alias="isViewWallet")
    tx_private_keys: list[TxPrivateKey] = Field(alias="txPrivateKeys")


class SynchronizationStatus(_Entity):
    block_hash_checkpoints: list[StrictStr] = Field(alias="blockHashCheckpoints")
    last_known_block_hashes: list[StrictStr] = Field(alias="lastKnownBlockHashes")
    last_known_block_height: StrictInt = Field(alias="lastKnownBlockHeight")


class WalletSynchronizer(_Entity):
    start_timestamp: StrictInt = Field(alias="startTimestamp")
    start_height: StrictInt = Field(alias="startHeight")
    private_view_key: StrictStr = Field(alias="privateViewKey")
    transaction_synchronizer_status: SynchronizationStatus = Field(
        alias="transactionSynchronizerStatus"
    )


class WalletDocument(_Entity):
    """The whole wallet as exchanged with the backend."""

    wallet_file_format_version: StrictInt | None = Field(
        default=None, alias="walletFileFormatVersion"
    )
    sub_wallets: SubWallets = Field(alias="subWallets")
    wallet_synchronizer: WalletSynchronizer = Field(alias="walletSynchronizer")
