"""Tests for PayeeService — the address book lifecycle."""

from __future__ import annotations


def _payee(nickname: str, address: str = "PLEaddr", payment_id: str = "") -> dict:
    return {"nickname": nickname, "address": address, "paymentID": payment_id}


class TestPayees:
    async def test_empty(self, storage) -> None:
        assert await storage.payees.load_payees() == []

    async def test_save_adds_one(self, storage) -> None:
        assert await storage.payees.save_payee(_payee("alice"))
        assert await storage.payees.load_payees() == [_payee("alice")]

    async def test_save_same_nickname_updates_in_place(self, storage) -> None:
        await storage.payees.save_payee(_payee("alice"))
        await storage.payees.save_payee(_payee("alice", "PLEnew", "pid"))
        assert await storage.payees.load_payees() == [_payee("alice", "PLEnew", "pid")]

    async def test_ordered_by_nickname(self, storage) -> None:
        for name in ("carol", "alice", "bob"):
            await storage.payees.save_payee(_payee(name))
        payees = await storage.payees.load_payees()
        assert [p["nickname"] for p in payees] == ["alice", "bob", "carol"]

    async def test_remove(self, storage) -> None:
        await storage.payees.save_payee(_payee("alice"))
        await storage.payees.save_payee(_payee("bob"))
        assert await storage.payees.remove_payee("alice")
        assert await storage.payees.load_payees() == [_payee("bob")]

    async def test_remove_unknown_is_noop(self, storage, reporter) -> None:
        await storage.payees.save_payee(_payee("alice"))
        assert await storage.payees.remove_payee("nobody")
        assert await storage.payees.load_payees() == [_payee("alice")]
        assert reporter.reports == []

    async def test_payment_id_defaults_to_empty(self, storage) -> None:
        await storage.payees.save_payee({"nickname": "dave", "address": "PLEdave"})
        assert await storage.payees.load_payees() == [_payee("dave", "PLEdave")]

    async def test_empty_nickname_rejected(self, storage) -> None:
        assert not await storage.payees.save_payee(_payee(""))
        assert await storage.payees.load_payees() == []
