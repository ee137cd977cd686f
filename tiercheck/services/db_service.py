"""
DB 헬퍼 -- PostgreSQL asyncpg 기반
eligibility_checks 테이블은 INSERT 전용 (수정/삭제 없음)
"""
from typing import Optional
from tiercheck.database import get_pool
from tiercheck.errors import PersistenceFailure
from tiercheck.models.eligibility import EligibilityRecord
from tiercheck.utils.logger import logger, short_wallet


async def insert_eligibility_check(record: EligibilityRecord) -> Optional[int]:
    """
    판정 결과 1건 기록, 생성된 id 반환
    pool이 없으면 None (호출부에서 파일 저장소로 폴백)
    """
    pool = get_pool()
    if pool is None:
        return None

    try:
        async with pool.acquire() as conn:
            row_id = await conn.fetchval(
                """
                INSERT INTO eligibility_checks
                    (secret_input, wallet, total_tx, total_eligible_tx, eligible, tier, checked_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7)
                RETURNING id
                """,
                record.secret_input,
                record.wallet,
                record.total_tx,
                record.total_eligible_tx,
                record.eligible,
                record.tier,
                record.timestamp,
            )
            return row_id
    except Exception as e:
        logger.error(f"판정 결과 기록 실패 (wallet={short_wallet(record.wallet)}): {e}")
        raise PersistenceFailure() from e
