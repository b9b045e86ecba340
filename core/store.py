"""메모리 내 기록 저장소"""

import threading
from typing import Iterable, Iterator, Optional, Tuple

from core.models import QCRecord
from core.sample_data import sample_records
from utils.exceptions import RecordNotFoundError


class RecordStore:
    """추가만 가능한 기록 목록. 최신 기록이 맨 앞에 옵니다.

    프로세스가 끝나면 사라지며, 여러 곳에서 추가해도 순서가 깨지지 않도록
    추가는 잠금 안에서 수행합니다. 기록을 바꾸거나 지우는 연산은 없습니다.
    """

    def __init__(self, records: Optional[Iterable[QCRecord]] = None):
        self._records = list(records or [])
        self._lock = threading.Lock()

    @classmethod
    def with_sample_data(cls) -> "RecordStore":
        return cls(sample_records())

    def add(self, record: QCRecord) -> QCRecord:
        with self._lock:
            self._records.insert(0, record)
        return record

    def records(self) -> Tuple[QCRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def get(self, record_id: str) -> QCRecord:
        for record in self.records():
            if record.id == record_id:
                return record
        raise RecordNotFoundError(f"기록을 찾을 수 없습니다: {record_id}")

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[QCRecord]:
        return iter(self.records())
