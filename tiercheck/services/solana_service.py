"""
Solana RPC 연동 서비스
- getSignaturesForAddress 한 페이지 조회 (before 커서 기반)
- 모든 전송/서비스 에러는 LedgerFetchFailure로 변환
"""
from typing import Optional

import httpx

from tiercheck.errors import LedgerFetchFailure
from tiercheck.services.api_client import RateLimitedClient
from tiercheck.utils.logger import logger, short_wallet

# getSignaturesForAddress 최대 limit
MAX_SIGNATURES_PER_PAGE = 1000


class SolanaService:
    """Solana JSON-RPC 원장 클라이언트"""

    def __init__(
        self,
        rpc_url: str,
        commitment: str = "confirmed",
        requests_per_second: float = 5.0,
        timeout: float = 10.0,
        max_retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.rpc_url = rpc_url
        self.commitment = commitment
        self._client_options = {
            "requests_per_second": requests_per_second,
            "timeout": timeout,
            "max_retries": max_retries,
            "transport": transport,
        }
        self._client: Optional[RateLimitedClient] = None
        self._request_id = 0

    @property
    def is_configured(self) -> bool:
        return bool(self.rpc_url)

    def _get_client(self) -> RateLimitedClient:
        """HTTP 클라이언트 lazy 초기화"""
        if self._client is None:
            self._client = RateLimitedClient(**self._client_options)
        return self._client

    async def close(self):
        if self._client:
            await self._client.close()
            self._client = None

    async def _rpc_call(self, method: str, params: list):
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        try:
            response = await self._get_client().post(self.rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise LedgerFetchFailure(f"RPC transport error ({method}): {e!r}") from e

        if response.status_code >= 400:
            raise LedgerFetchFailure(f"RPC HTTP {response.status_code} ({method})")

        try:
            body = response.json()
        except ValueError as e:
            raise LedgerFetchFailure(f"RPC returned non-JSON body ({method})") from e

        if "error" in body:
            raise LedgerFetchFailure(f"RPC error ({method}): {body['error']}")
        return body.get("result")

    async def get_signatures_page(
        self,
        address: str,
        before: Optional[str] = None,
        limit: int = MAX_SIGNATURES_PER_PAGE,
    ) -> list[dict]:
        """
        before 시그니처보다 오래된 트랜잭션 시그니처 한 페이지 조회
        반환: 최신 -> 과거 순 [{"signature": ..., "slot": ..., ...}, ...]
        """
        if not self.is_configured:
            raise LedgerFetchFailure("Solana RPC URL is not configured")

        options: dict = {
            "limit": min(max(limit, 1), MAX_SIGNATURES_PER_PAGE),
            "commitment": self.commitment,
        }
        if before:
            options["before"] = before

        result = await self._rpc_call("getSignaturesForAddress", [address, options])
        if not isinstance(result, list):
            raise LedgerFetchFailure(
                f"Malformed getSignaturesForAddress result for {short_wallet(address)}"
            )
        logger.debug(
            f"시그니처 페이지 조회: wallet={short_wallet(address)}, "
            f"before={before[:8] + '...' if before else None}, size={len(result)}"
        )
        return result
