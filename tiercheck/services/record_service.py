"""
판정 결과 append-only 저장소
- PostgreSQL 풀이 있으면 DB에 INSERT
- 없으면 JSON 파일(data.json) 배열에 추가
- 기존 기록은 절대 수정/삭제하지 않는다 (파싱 불가 파일은 덮어쓰지 않고 실패)
"""
import asyncio
import json
import os
import tempfile
from pathlib import Path

from tiercheck.database import get_pool
from tiercheck.errors import PersistenceFailure
from tiercheck.models.eligibility import EligibilityRecord
from tiercheck.services import db_service
from tiercheck.utils.logger import logger, short_wallet


class RecordService:
    def __init__(self, data_file: str = "data.json"):
        self.data_file = Path(data_file)
        # 같은 파일에 대한 read-modify-write 직렬화
        self._file_lock = asyncio.Lock()

    @property
    def backend(self) -> str:
        return "postgres" if get_pool() is not None else "file"

    async def append(self, record: EligibilityRecord) -> None:
        if get_pool() is not None:
            await db_service.insert_eligibility_check(record)
        else:
            async with self._file_lock:
                await asyncio.to_thread(self._append_to_file, record)
        logger.info(f"판정 결과 기록: wallet={short_wallet(record.wallet)}, backend={self.backend}")

    def _read_records(self) -> list:
        if not self.data_file.exists():
            return []
        try:
            raw = self.data_file.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceFailure() from e
        if not raw.strip():
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"기존 {self.data_file} 파싱 실패 -- 덮어쓰지 않음: {e}")
            raise PersistenceFailure() from e
        if not isinstance(records, list):
            logger.error(f"기존 {self.data_file} 가 JSON 배열이 아님 -- 덮어쓰지 않음")
            raise PersistenceFailure()
        return records

    def _append_to_file(self, record: EligibilityRecord) -> None:
        records = self._read_records()
        records.append(record.to_json_dict())

        directory = self.data_file.parent
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tiercheck-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.data_file)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.error(f"{self.data_file} 쓰기 실패: {e}")
            raise PersistenceFailure() from e
