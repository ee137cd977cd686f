"""
트랜잭션 히스토리 집계
- before 커서로 빈 페이지가 나올 때까지 역방향 페이지네이션
- 누적 개수와 마지막 커서만 유지 (레코드 목록은 보관하지 않음)
- 조회 실패 시 0 반환 (fail-soft), 에러는 로그 + 콜백으로 노출
"""
from typing import Awaitable, Callable, Optional, Protocol

from tiercheck.services import cache_service
from tiercheck.utils.logger import logger, short_wallet

ErrorCallback = Callable[[str, Exception], None]


class LedgerClient(Protocol):
    def get_signatures_page(
        self, address: str, before: Optional[str] = None, limit: int = 1000
    ) -> Awaitable[list[dict]]: ...


class HistoryFetcher:
    def __init__(
        self,
        ledger: LedgerClient,
        page_size: int = 1000,
        cache_ttl: int = 0,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.ledger = ledger
        self.page_size = page_size
        self.cache_ttl = cache_ttl
        self.on_error = on_error

    async def count_signatures(self, address: str) -> int:
        """전체 시그니처 수. 원장 에러는 그대로 전파된다."""
        total = 0
        cursor: Optional[str] = None
        pages = 0

        while True:
            page = await self.ledger.get_signatures_page(address, before=cursor, limit=self.page_size)
            if not page:
                break
            total += len(page)
            cursor = page[-1]["signature"]
            pages += 1

        logger.info(f"히스토리 집계 완료: wallet={short_wallet(address)}, pages={pages}, total={total}")
        return total

    async def fetch_total_transaction_count(self, address: str) -> int:
        """
        캐시 -> 원장 순으로 전체 트랜잭션 수 조회
        어떤 에러든 0을 반환하며 실패 결과는 캐시하지 않는다
        """
        if self.cache_ttl > 0:
            cached = await cache_service.get_tx_count(address)
            if isinstance(cached, int) and not isinstance(cached, bool):
                return cached

        try:
            total = await self.count_signatures(address)
        except Exception as e:
            self.report_failure(address, e)
            return 0

        if self.cache_ttl > 0:
            await cache_service.set_tx_count(address, total, ttl=self.cache_ttl)
        return total

    def report_failure(self, address: str, exc: Exception) -> None:
        logger.error(f"트랜잭션 조회 실패 (wallet={short_wallet(address)}): {exc!r}")
        if self.on_error is None:
            return
        try:
            self.on_error(address, exc)
        except Exception as callback_error:
            logger.warning(f"on_error 콜백 실패: {callback_error!r}")
