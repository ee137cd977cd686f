"""
자격 판정 엔드포인트
- POST /check-eligibility -- 시드 문구/개인키로 판정
- GET /api/eligibility/wallet/{wallet} -- 지갑 주소로 판정
- GET /api/eligibility/tiers -- 티어 구간표
"""
from fastapi import APIRouter, Depends, Request

from tiercheck.errors import InvalidSecret
from tiercheck.models.common import APIResponse, ErrorResponse
from tiercheck.models.eligibility import CheckEligibilityRequest, EligibilityResponse
from tiercheck.services.eligibility_service import EligibilityService
from tiercheck.services.tier_service import (
    ELIGIBILITY_THRESHOLD,
    ELIGIBLE_TX_DIVISOR,
    tier_bands,
)

router = APIRouter()

CHECK_ELIGIBILITY_PATH = "/check-eligibility"

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_eligibility_service(request: Request) -> EligibilityService:
    """lifespan에서 생성된 프로세스 단위 서비스"""
    return request.app.state.eligibility_service


@router.post(
    CHECK_ELIGIBILITY_PATH,
    response_model=EligibilityResponse,
    responses=_ERROR_RESPONSES,
)
async def check_eligibility(
    req: CheckEligibilityRequest,
    service: EligibilityService = Depends(get_eligibility_service),
):
    """시드 문구 또는 base58 개인키로 지갑 자격/티어 판정"""
    if not req.seed or not req.seed.strip():
        raise InvalidSecret("Seed phrase or private key is required")

    wallet, result = await service.check_secret(req.seed)
    return EligibilityResponse.from_result(wallet, result)


@router.get(
    "/api/eligibility/wallet/{wallet}",
    response_model=EligibilityResponse,
    responses=_ERROR_RESPONSES,
)
async def check_wallet_eligibility(
    wallet: str,
    service: EligibilityService = Depends(get_eligibility_service),
):
    """공개 지갑 주소로 판정 (시크릿 불필요)"""
    result = await service.check_wallet(wallet)
    return EligibilityResponse.from_result(wallet.strip(), result)


@router.get("/api/eligibility/tiers", response_model=APIResponse)
async def get_tiers():
    return APIResponse(
        success=True,
        data={
            "divisor": ELIGIBLE_TX_DIVISOR,
            "threshold": ELIGIBILITY_THRESHOLD,
            "bands": [band.model_dump() for band in tier_bands()],
        },
    )
