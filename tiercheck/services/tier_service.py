"""
티어 판정 -- 트랜잭션 수 기반 리워드 티어 결정
I/O 없는 순수 함수. 경계값(100/101, 250/251, ...)이 정확히 매핑되어야 한다.
"""
from typing import Optional

from tiercheck.models.eligibility import EligibilityResult, TierBand

# 유효 트랜잭션 = 전체 트랜잭션 // 6
ELIGIBLE_TX_DIVISOR = 6
# 유효 트랜잭션이 이 값을 "초과"해야 자격 있음
ELIGIBILITY_THRESHOLD = 100

# (최소, 최대(포함), 티어) -- 오름차순, 첫 매칭 우선
TIER_BANDS: list[tuple[int, Optional[int], int]] = [
    (101, 250, 1),
    (251, 400, 2),
    (401, 550, 3),
    (551, 700, 4),
    (701, 850, 5),
    (851, None, 6),
]


def eligible_tx_count(total_tx: int) -> int:
    if isinstance(total_tx, bool) or not isinstance(total_tx, int):
        raise ValueError(f"total_tx must be an integer, got {type(total_tx).__name__}")
    if total_tx < 0:
        raise ValueError(f"total_tx must be non-negative, got {total_tx}")
    return total_tx // ELIGIBLE_TX_DIVISOR


def tier_for(total_eligible_tx: int) -> Optional[int]:
    """유효 트랜잭션 수 -> 티어 (자격 미달이면 None)"""
    if total_eligible_tx <= ELIGIBILITY_THRESHOLD:
        return None
    for low, high, tier in TIER_BANDS:
        if total_eligible_tx >= low and (high is None or total_eligible_tx <= high):
            return tier
    return None


def classify(total_tx: int) -> EligibilityResult:
    """
    전체 트랜잭션 수로 자격/티어 판정
    - 0 -> 유효 0, 자격 없음
    - 606 -> 유효 101, 티어 1
    - 5106 -> 유효 851, 티어 6
    """
    total_eligible_tx = eligible_tx_count(total_tx)
    tier = tier_for(total_eligible_tx)
    return EligibilityResult(
        total_tx=total_tx,
        total_eligible_tx=total_eligible_tx,
        eligible=tier is not None,
        tier=tier,
    )


def tier_bands() -> list[TierBand]:
    return [
        TierBand(tier=tier, min_eligible_tx=low, max_eligible_tx=high)
        for low, high, tier in TIER_BANDS
    ]
