from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CheckEligibilityRequest(BaseModel):
    # 누락 시 422 대신 InvalidSecret(400)으로 응답하기 위해 Optional
    seed: Optional[str] = None


class EligibilityResult(BaseModel):
    """요청당 한 번 계산되는 불변 판정 결과"""

    model_config = ConfigDict(frozen=True)

    total_tx: int = Field(ge=0)
    total_eligible_tx: int = Field(ge=0)
    eligible: bool
    tier: Optional[int] = Field(default=None, ge=1, le=6)


class EligibilityRecord(BaseModel):
    """append-only 저장소에 기록되는 한 건"""

    model_config = ConfigDict(frozen=True)

    secret_input: Optional[str] = None
    wallet: str
    total_tx: int
    total_eligible_tx: int
    eligible: bool
    tier: Optional[int] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_result(
        cls, wallet: str, result: EligibilityResult, secret_input: Optional[str] = None
    ) -> "EligibilityRecord":
        return cls(
            secret_input=secret_input,
            wallet=wallet,
            total_tx=result.total_tx,
            total_eligible_tx=result.total_eligible_tx,
            eligible=result.eligible,
            tier=result.tier,
        )

    def to_json_dict(self) -> dict:
        # data.json 포맷 (camelCase + ISO timestamp)
        return {
            "seed": self.secret_input,
            "wallet": self.wallet,
            "totalTx": self.total_tx,
            "totalEligibleTx": self.total_eligible_tx,
            "eligible": self.eligible,
            "tier": self.tier,
            "timestamp": self.timestamp.isoformat(),
        }


class EligibilityResponse(BaseModel):
    success: bool = True
    wallet: str
    totalTx: int
    totalEligibleTx: int
    eligible: bool
    tier: Optional[int] = None

    @classmethod
    def from_result(cls, wallet: str, result: EligibilityResult) -> "EligibilityResponse":
        return cls(
            wallet=wallet,
            totalTx=result.total_tx,
            totalEligibleTx=result.total_eligible_tx,
            eligible=result.eligible,
            tier=result.tier,
        )


class TierBand(BaseModel):
    tier: int
    min_eligible_tx: int
    max_eligible_tx: Optional[int] = None
