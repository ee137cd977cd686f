"""
PostgreSQL 연결 + 테이블 생성 모듈
asyncpg 기반 Raw SQL, ORM 미사용
"""
from typing import Optional
from tiercheck.utils.logger import logger

# asyncpg는 선택적 의존성 -- 미설치 환경에서는 JSON 파일 저장소 사용
try:
    import asyncpg
except ImportError:
    asyncpg = None  # type: ignore

_pool: Optional["asyncpg.Pool"] = None  # type: ignore


# ---- DDL ----

# append-only: 애플리케이션은 INSERT만 수행
_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS eligibility_checks (
    id BIGSERIAL PRIMARY KEY,
    secret_input TEXT,
    wallet TEXT NOT NULL,
    total_tx INTEGER NOT NULL CHECK (total_tx >= 0),
    total_eligible_tx INTEGER NOT NULL CHECK (total_eligible_tx >= 0),
    eligible BOOLEAN NOT NULL,
    tier SMALLINT CHECK (tier BETWEEN 1 AND 6),
    checked_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

_CREATE_INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_eligibility_checks_wallet ON eligibility_checks(wallet);
CREATE INDEX IF NOT EXISTS idx_eligibility_checks_checked_at ON eligibility_checks(checked_at);
"""


async def init_database(database_url: str) -> None:
    """커넥션 풀 생성 + 테이블/인덱스 생성"""
    global _pool

    if asyncpg is None:
        logger.warning("asyncpg 미설치 -- DB 비활성화, JSON 파일에 기록")
        return

    if not database_url:
        logger.warning("DATABASE_URL 미설정 -- JSON 파일에 기록")
        return

    try:
        _pool = await asyncpg.create_pool(database_url, min_size=2, max_size=10)
        logger.info("PostgreSQL 커넥션 풀 생성 완료")

        async with _pool.acquire() as conn:
            await conn.execute(_CREATE_TABLES_SQL)
            await conn.execute(_CREATE_INDEXES_SQL)
        logger.info("eligibility_checks 테이블 초기화 완료")

    except Exception as e:
        logger.error(f"PostgreSQL 연결 실패: {e}")
        _pool = None


async def close_database() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("PostgreSQL 커넥션 풀 종료")


def get_pool() -> Optional["asyncpg.Pool"]:  # type: ignore
    """현재 커넥션 풀 반환 (없으면 None)"""
    return _pool
