"""End-to-end eligibility checks against the in-memory ledger."""

import asyncio
import json

import pytest

from conftest import FakeLedger, make_private_key
from tiercheck.errors import InvalidSecret, InvalidWalletAddress, PersistenceFailure
from tiercheck.services.eligibility_service import secret_fingerprint


class SlowLedger:
    async def get_signatures_page(self, address, before=None, limit=1000):
        await asyncio.sleep(5)
        return []


class TestCheckSecret:
    @pytest.mark.asyncio
    async def test_top_tier_wallet(self, make_service, data_file) -> None:
        _, secret, address = make_private_key()
        ledger = FakeLedger(total=5106)

        wallet, result = await make_service(ledger).check_secret(secret)

        assert wallet == address
        assert result.total_tx == 5106
        assert result.total_eligible_tx == 851
        assert result.eligible is True
        assert result.tier == 6
        assert all(call[0] == address for call in ledger.calls)

        record = json.loads(data_file.read_text())[0]
        assert record["wallet"] == address
        assert record["tier"] == 6
        assert record["seed"] == secret_fingerprint(secret)
        assert secret not in data_file.read_text()

    @pytest.mark.asyncio
    async def test_raw_secret_stored_when_enabled(self, make_service, data_file) -> None:
        seed, _, _ = make_private_key(5)
        await make_service(FakeLedger(total=0), store_secret_input=True).check_secret(seed)
        assert json.loads(data_file.read_text())[0]["seed"] == seed

    @pytest.mark.asyncio
    async def test_invalid_secret_does_not_touch_ledger(self, make_service, data_file) -> None:
        ledger = FakeLedger(total=10)
        with pytest.raises(InvalidSecret):
            await make_service(ledger).check_secret("definitely not a key")
        assert ledger.calls == []
        assert not data_file.exists()


class TestCheckWallet:
    @pytest.mark.asyncio
    async def test_ledger_failure_is_ineligible(self, make_service, data_file) -> None:
        _, _, address = make_private_key()
        result = await make_service(FakeLedger(total=9000, fail_on_call=2)).check_wallet(address)

        assert result.total_tx == 0
        assert result.eligible is False
        assert result.tier is None
        assert json.loads(data_file.read_text())[0]["totalTx"] == 0

    @pytest.mark.asyncio
    async def test_timeout_is_treated_as_failure(self, make_service) -> None:
        _, _, address = make_private_key()
        result = await make_service(SlowLedger(), history_timeout=0.01).check_wallet(address)
        assert result.total_tx == 0
        assert result.eligible is False

    @pytest.mark.asyncio
    async def test_invalid_address(self, make_service) -> None:
        with pytest.raises(InvalidWalletAddress):
            await make_service(FakeLedger()).check_wallet("nope")

    @pytest.mark.asyncio
    async def test_persistence_failure_propagates(self, make_service, data_file) -> None:
        data_file.write_text("corrupt")
        _, _, address = make_private_key()
        with pytest.raises(PersistenceFailure):
            await make_service(FakeLedger(total=700)).check_wallet(address)
