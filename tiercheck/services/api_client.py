"""
JSON-RPC용 비동기 HTTP 클라이언트
- httpx.AsyncClient 기반
- 429 / 5xx / 연결 에러 재시도 (지수 백오프)
- 초당 요청 수 제한 (RateLimitedClient)
"""
import asyncio
import time
from typing import Optional

import httpx

from tiercheck.utils.logger import logger

# 재시도 없이 즉시 반환하는 클라이언트 에러
NON_RETRYABLE_STATUS = frozenset({400, 401, 403, 404})


def _backoff(attempt: int, retry_after: Optional[str] = None) -> float:
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            pass
    return float(2 ** attempt)


class APIClient:
    """재시도 + 지수 백오프 HTTP 클라이언트"""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        max_retries: int = 3,
        headers: Optional[dict] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.max_retries = max(1, max_retries)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers=headers or {},
            transport=transport,
        )

    async def close(self):
        await self._client.aclose()

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        재시도 정책
        - 429: Retry-After 헤더 우선, 없으면 2^attempt 초 대기
        - 500+: 2^attempt 초 대기 후 재시도
        - 그 외 4xx: 즉시 반환
        - 타임아웃/연결 에러: 재시도 후 마지막 예외를 다시 던짐
        """
        response: Optional[httpx.Response] = None
        last_exception: Optional[Exception] = None

        for attempt in range(self.max_retries):
            is_last = attempt == self.max_retries - 1
            try:
                response = await self._client.request(method, url, **kwargs)
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                last_exception = e
                logger.warning(f"요청 실패: {e!r} (시도 {attempt + 1}/{self.max_retries})")
                if not is_last:
                    await asyncio.sleep(_backoff(attempt))
                continue

            last_exception = None
            status = response.status_code
            if status < 400 or status in NON_RETRYABLE_STATUS:
                return response
            if status != 429 and status < 500:
                return response

            if is_last:
                break
            wait_time = _backoff(attempt, response.headers.get("Retry-After") if status == 429 else None)
            logger.warning(
                f"HTTP {status}. 대기 {wait_time}초 후 재시도 "
                f"(시도 {attempt + 1}/{self.max_retries})"
            )
            await asyncio.sleep(wait_time)

        if last_exception is not None:
            raise last_exception
        return response  # type: ignore[return-value]

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("POST", url, **kwargs)


class RateLimitedClient(APIClient):
    """요청 간 최소 간격을 보장하는 클라이언트 (RPC 요금제 한도 대응)"""

    def __init__(self, requests_per_second: float = 5.0, **kwargs):
        super().__init__(**kwargs)
        self.min_interval = 1.0 / requests_per_second if requests_per_second > 0 else 0.0
        self._last_request_time: float = 0.0
        self._lock = asyncio.Lock()

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        async with self._lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self.min_interval:
                await asyncio.sleep(self.min_interval - elapsed)
            self._last_request_time = time.monotonic()

        return await super().request(method, url, **kwargs)
