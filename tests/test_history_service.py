"""History fetcher: cursor pagination, fail-soft behaviour, caching."""

from unittest.mock import AsyncMock, patch

import pytest

from conftest import FakeLedger, ScriptedLedger
from tiercheck.errors import LedgerFetchFailure
from tiercheck.services.history_service import HistoryFetcher
from tiercheck.services.tier_service import classify

WALLET = "wallet-under-test"


class TestPagination:
    @pytest.mark.asyncio
    async def test_pages_are_summed_and_cursors_chain(self) -> None:
        ledger = ScriptedLedger([1000, 1000, 37, 0])
        fetcher = HistoryFetcher(ledger, page_size=1000)

        total = await fetcher.fetch_total_transaction_count(WALLET)

        assert total == 2037
        assert len(ledger.calls) == 4
        cursors = [before for _, before, _ in ledger.calls]
        assert cursors[0] is None
        assert cursors[1] == ledger.pages[0][-1]["signature"]
        assert cursors[2] == ledger.pages[1][-1]["signature"]
        assert cursors[3] == ledger.pages[2][-1]["signature"]
        assert all(address == WALLET for address, _, _ in ledger.calls)
        assert all(limit == 1000 for _, _, limit in ledger.calls)

    @pytest.mark.asyncio
    async def test_empty_history(self) -> None:
        ledger = ScriptedLedger([])
        total = await HistoryFetcher(ledger).fetch_total_transaction_count(WALLET)
        assert total == 0
        assert len(ledger.calls) == 1

    @pytest.mark.asyncio
    async def test_walks_whole_fake_ledger(self) -> None:
        ledger = FakeLedger(total=2500)
        fetcher = HistoryFetcher(ledger, page_size=1000)

        assert await fetcher.fetch_total_transaction_count(WALLET) == 2500
        # 1000 + 1000 + 500 + empty
        assert len(ledger.calls) == 4
        assert ledger.calls[1][1] == "sig-1500"

    @pytest.mark.asyncio
    async def test_repeated_calls_are_idempotent(self) -> None:
        ledger = FakeLedger(total=1234)
        fetcher = HistoryFetcher(ledger, page_size=500)

        first = await fetcher.fetch_total_transaction_count(WALLET)
        second = await fetcher.fetch_total_transaction_count(WALLET)
        assert first == second == 1234


class TestFailSoft:
    @pytest.mark.asyncio
    async def test_error_on_first_call_returns_zero(self) -> None:
        ledger = FakeLedger(total=5000, fail_on_call=1)
        fetcher = HistoryFetcher(ledger)

        total = await fetcher.fetch_total_transaction_count(WALLET)

        assert total == 0
        result = classify(total)
        assert result.eligible is False
        assert result.tier is None

    @pytest.mark.asyncio
    async def test_error_mid_scan_discards_partial_total(self) -> None:
        ledger = FakeLedger(total=5000, fail_on_call=3)
        total = await HistoryFetcher(ledger).fetch_total_transaction_count(WALLET)
        assert total == 0
        assert len(ledger.calls) == 3

    @pytest.mark.asyncio
    async def test_error_callback_receives_failure(self) -> None:
        seen = []
        ledger = FakeLedger(total=10, fail_on_call=1)
        fetcher = HistoryFetcher(ledger, on_error=lambda address, exc: seen.append((address, exc)))

        await fetcher.fetch_total_transaction_count(WALLET)

        assert len(seen) == 1
        assert seen[0][0] == WALLET
        assert isinstance(seen[0][1], ConnectionError)

    @pytest.mark.asyncio
    async def test_broken_callback_does_not_raise(self) -> None:
        def explode(address, exc):
            raise RuntimeError("callback bug")

        ledger = FakeLedger(total=10, fail_on_call=1)
        fetcher = HistoryFetcher(ledger, on_error=explode)
        assert await fetcher.fetch_total_transaction_count(WALLET) == 0

    @pytest.mark.asyncio
    async def test_count_signatures_propagates(self) -> None:
        ledger = AsyncMock()
        ledger.get_signatures_page.side_effect = LedgerFetchFailure("RPC error")
        with pytest.raises(LedgerFetchFailure):
            await HistoryFetcher(ledger).count_signatures(WALLET)


class TestCaching:
    @pytest.mark.asyncio
    async def test_cached_total_skips_ledger(self) -> None:
        ledger = FakeLedger(total=10)
        fetcher = HistoryFetcher(ledger, cache_ttl=300)
        with patch("tiercheck.services.history_service.cache_service.get_tx_count", AsyncMock(return_value=42)):
            assert await fetcher.fetch_total_transaction_count(WALLET) == 42
        assert ledger.calls == []

    @pytest.mark.asyncio
    async def test_cached_bool_is_ignored(self) -> None:
        ledger = FakeLedger(total=10)
        fetcher = HistoryFetcher(ledger, cache_ttl=300)
        with patch("tiercheck.services.history_service.cache_service.get_tx_count", AsyncMock(return_value=True)), \
                patch("tiercheck.services.history_service.cache_service.set_tx_count", AsyncMock(return_value=False)):
            assert await fetcher.fetch_total_transaction_count(WALLET) == 10
        assert len(ledger.calls) == 2

    @pytest.mark.asyncio
    async def test_success_is_cached_failure_is_not(self) -> None:
        cache_set = AsyncMock(return_value=True)
        with patch("tiercheck.services.history_service.cache_service.get_tx_count", AsyncMock(return_value=None)), \
                patch("tiercheck.services.history_service.cache_service.set_tx_count", cache_set):
            ok = HistoryFetcher(FakeLedger(total=7), cache_ttl=300)
            assert await ok.fetch_total_transaction_count(WALLET) == 7
            cache_set.assert_awaited_once_with(WALLET, 7, ttl=300)

            cache_set.reset_mock()
            broken = HistoryFetcher(FakeLedger(total=7, fail_on_call=1), cache_ttl=300)
            assert await broken.fetch_total_transaction_count(WALLET) == 0
            cache_set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cache_disabled_without_ttl(self) -> None:
        cache_get = AsyncMock(return_value=99)
        with patch("tiercheck.services.history_service.cache_service.get_tx_count", cache_get):
            assert await HistoryFetcher(FakeLedger(total=3)).fetch_total_transaction_count(WALLET) == 3
        cache_get.assert_not_awaited()
