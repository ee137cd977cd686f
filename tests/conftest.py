"""
Pytest fixtures for TierCheck tests. In-memory ledger, temporary JSON record file.
"""

from __future__ import annotations

import base58
import pytest
from nacl.signing import SigningKey

from tiercheck.services.eligibility_service import EligibilityService
from tiercheck.services.history_service import HistoryFetcher
from tiercheck.services.record_service import RecordService


class FakeLedger:
    """
    Ledger with `total` signatures, newest first ("sig-{total-1}" ... "sig-0").
    Records every (address, before, limit) call.
    """

    def __init__(self, total: int = 0, fail_on_call: int | None = None):
        self.signatures = [f"sig-{i}" for i in range(total - 1, -1, -1)]
        self.fail_on_call = fail_on_call
        self.calls: list[tuple[str, str | None, int]] = []

    async def get_signatures_page(self, address, before=None, limit=1000):
        self.calls.append((address, before, limit))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise ConnectionError("ledger unavailable")
        start = 0 if before is None else self.signatures.index(before) + 1
        return [{"signature": s, "slot": 1} for s in self.signatures[start:start + limit]]


class ScriptedLedger:
    """Returns pre-built pages of the given sizes, in order."""

    def __init__(self, page_sizes: list[int]):
        self.pages = []
        counter = 0
        for size in page_sizes:
            page = []
            for _ in range(size):
                page.append({"signature": f"sig-{counter}"})
                counter += 1
            self.pages.append(page)
        self.calls: list[tuple[str, str | None, int]] = []

    async def get_signatures_page(self, address, before=None, limit=1000):
        self.calls.append((address, before, limit))
        index = len(self.calls) - 1
        return self.pages[index] if index < len(self.pages) else []


def make_private_key(fill: int = 7) -> tuple[str, str, str]:
    """(base58 32-byte seed, base58 64-byte secret key, base58 address)"""
    seed = bytes([fill]) * 32
    public_key = bytes(SigningKey(seed).verify_key)
    return (
        base58.b58encode(seed).decode(),
        base58.b58encode(seed + public_key).decode(),
        base58.b58encode(public_key).decode(),
    )


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data.json"


@pytest.fixture
def make_service(data_file):
    def _make(ledger, **kwargs) -> EligibilityService:
        fetcher = HistoryFetcher(ledger, page_size=1000)
        return EligibilityService(fetcher, RecordService(str(data_file)), **kwargs)

    return _make


@pytest.fixture
def client_for(make_service):
    """FastAPI TestClient with the eligibility service swapped for one backed by `ledger`."""
    from fastapi.testclient import TestClient

    from tiercheck.main import app
    from tiercheck.routes.eligibility import get_eligibility_service

    def _client(ledger, **kwargs) -> TestClient:
        service = make_service(ledger, **kwargs)
        app.dependency_overrides[get_eligibility_service] = lambda: service
        return TestClient(app, raise_server_exceptions=False)

    yield _client
    app.dependency_overrides.clear()
