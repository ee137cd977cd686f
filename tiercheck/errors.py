"""
TierCheck 예외 정의
- 입력 에러 (400): InvalidSecret, InvalidWalletAddress
- 원장 조회 실패: LedgerFetchFailure (HistoryFetcher 내부에서 0으로 흡수)
- 저장 실패 (500): PersistenceFailure
"""


class TierCheckError(Exception):
    """모든 TierCheck 예외의 기반 클래스"""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(TierCheckError):
    status_code = 400
    error_code = "INVALID_INPUT"


class InvalidSecret(InvalidInput):
    """니모닉도 아니고 올바른 길이의 base58 개인키도 아님"""

    error_code = "INVALID_SECRET"


class InvalidWalletAddress(InvalidInput):
    error_code = "INVALID_WALLET"


class LedgerFetchFailure(TierCheckError):
    """RPC 전송/서비스 에러"""

    error_code = "LEDGER_FETCH_FAILED"


class PersistenceFailure(TierCheckError):
    """판정은 성공했지만 결과 기록에 실패"""

    error_code = "PERSISTENCE_FAILED"

    def __init__(self, message: str = "Failed to save data"):
        super().__init__(message)
