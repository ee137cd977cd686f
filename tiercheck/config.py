import os
from dotenv import load_dotenv

load_dotenv()


def _resolve_solana_rpc() -> str:
    """SOLANA_RPC_URL -> HELIUS_RPC_URL -> HELIUS_API_KEY 조합 -> mainnet-beta 순으로 결정"""
    explicit = os.getenv("SOLANA_RPC_URL", "") or os.getenv("HELIUS_RPC_URL", "")
    if explicit:
        return explicit
    api_key = os.getenv("HELIUS_API_KEY", "")
    if api_key:
        return f"https://mainnet.helius-rpc.com/?api-key={api_key}"
    return "https://api.mainnet-beta.solana.com"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    PORT = int(os.getenv("PORT", 3000))
    DEBUG = _env_bool("DEBUG")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

    # Ledger (Solana JSON-RPC)
    SOLANA_RPC_URL = _resolve_solana_rpc()
    SOLANA_COMMITMENT = os.getenv("SOLANA_COMMITMENT", "confirmed")
    SIGNATURE_PAGE_SIZE = min(max(int(os.getenv("SIGNATURE_PAGE_SIZE", "1000")), 1), 1000)
    HISTORY_TIMEOUT_SECONDS = float(os.getenv("HISTORY_TIMEOUT_SECONDS", "60"))
    RPC_REQUESTS_PER_SECOND = float(os.getenv("RPC_REQUESTS_PER_SECOND", "5"))
    RPC_TIMEOUT_SECONDS = float(os.getenv("RPC_TIMEOUT_SECONDS", "10"))
    RPC_MAX_RETRIES = int(os.getenv("RPC_MAX_RETRIES", "3"))

    # 저장소 / 캐시
    DATABASE_URL = os.getenv("DATABASE_URL", "")
    REDIS_URL = os.getenv("REDIS_URL", "")
    TX_COUNT_CACHE_TTL = int(os.getenv("TX_COUNT_CACHE_TTL", "300"))  # 0이면 캐시 미사용
    DATA_FILE = os.getenv("DATA_FILE", "data.json")
    STORE_SECRET_INPUT = _env_bool("STORE_SECRET_INPUT")


config = Config()
