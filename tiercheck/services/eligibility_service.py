"""
지갑 자격 판정 오케스트레이션
시크릿 -> 주소 도출 -> 히스토리 조회(타임아웃) -> 티어 판정 -> 기록
"""
import asyncio
import hashlib
from typing import Optional

from tiercheck.models.eligibility import EligibilityRecord, EligibilityResult
from tiercheck.services.history_service import HistoryFetcher
from tiercheck.services.key_service import derive_wallet_address, validate_wallet_address
from tiercheck.services.record_service import RecordService
from tiercheck.services.tier_service import classify
from tiercheck.utils.logger import logger, short_wallet


def secret_fingerprint(secret: str) -> str:
    """저장용 시크릿 지문 (복원 불가)"""
    digest = hashlib.sha256(secret.strip().encode("utf-8")).hexdigest()
    return f"sha256:{digest[:16]}"


class EligibilityService:
    def __init__(
        self,
        fetcher: HistoryFetcher,
        records: RecordService,
        history_timeout: Optional[float] = 60.0,
        store_secret_input: bool = False,
    ):
        self.fetcher = fetcher
        self.records = records
        self.history_timeout = history_timeout
        self.store_secret_input = store_secret_input

    async def total_transactions(self, wallet: str) -> int:
        """요청 단위 타임아웃 -- 만료 시 조회 실패와 동일하게 0"""
        try:
            return await asyncio.wait_for(
                self.fetcher.fetch_total_transaction_count(wallet),
                timeout=self.history_timeout,
            )
        except asyncio.TimeoutError:
            self.fetcher.report_failure(
                wallet, TimeoutError(f"history scan exceeded {self.history_timeout}s")
            )
            return 0

    async def check_wallet(
        self, wallet: str, secret_input: Optional[str] = None
    ) -> EligibilityResult:
        wallet = validate_wallet_address(wallet)
        logger.info(f"온체인 지갑 확인: {short_wallet(wallet)}")

        total_tx = await self.total_transactions(wallet)
        result = classify(total_tx)
        logger.info(
            f"판정: wallet={short_wallet(wallet)}, total_tx={result.total_tx}, "
            f"eligible_tx={result.total_eligible_tx}, tier={result.tier}"
        )

        await self.records.append(EligibilityRecord.from_result(wallet, result, secret_input))
        return result

    async def check_secret(self, secret: str) -> tuple[str, EligibilityResult]:
        wallet = derive_wallet_address(secret)
        stored = secret.strip() if self.store_secret_input else secret_fingerprint(secret)
        result = await self.check_wallet(wallet, secret_input=stored)
        return wallet, result
