"""Object graph codec between the wallet JSON document and stored rows."""

from wallet_store.codec.documents import WalletDocument
from wallet_store.codec.graph import WalletGraph
from wallet_store.codec.wallet import decode, encode

__all__ = ["WalletDocument", "WalletGraph", "decode", "encode"]
