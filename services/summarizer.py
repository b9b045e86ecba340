"""품질 보고서 AI 요약 서비스

외부 생성형 AI(Gemini REST API)에 기록을 보내 짧은 분석 문구를 받아옵니다.
호출 실패는 예외로 올리지 않고 화면에 보여줄 안내 문구로 바꿉니다.
"""

import os
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import requests

from core.models import QCRecord
from utils.exceptions import NetworkError

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

SUMMARY_FAILED_TEXT = "AI 서비스에 연결하지 못했습니다. API 키를 확인해주세요."
SUMMARY_EMPTY_TEXT = "AI 분석 결과를 받지 못했습니다."
SUMMARY_TIMEOUT_TEXT = "AI 분석 응답 시간이 초과되었습니다. 다시 시도해주세요."
FAILURE_TEXTS = (SUMMARY_FAILED_TEXT, SUMMARY_EMPTY_TEXT, SUMMARY_TIMEOUT_TEXT)

STATE_PENDING = "pending"
STATE_DONE = "done"
STATE_FAILED = "failed"


def build_prompt(record: QCRecord) -> str:
    """기록 내용을 요약 요청 프롬프트로 만듭니다."""
    parameter_lines = "\n".join(
        f"- {p.name}: {p.value} {p.unit} (기준 범위: {p.range_text()})"
        for p in record.parameters
    )
    return f"""당신은 화학제품 제조사의 품질관리 책임자입니다.
아래 시험 보고서를 검토하고 짧고 전문적인 기술 분석을 작성하세요.

보고서 정보:
제품/원료: {record.product_name}
분류: {record.category_label}
배치 번호: {record.batch_number}
일자: {record.date.strftime('%Y-%m-%d')}
담당자: {record.technician}

시험 결과:
{parameter_lines}

현재 상태: {record.status_label} ({record.status.value})
담당자 메모: {record.notes or '없음'}

분석 시 유의사항:
1. ASTM D86(증류) 시험이 포함되면 초류점(IBP), 50%, 종말점(FBP)을 보고 시료의 휘발성을 평가하세요.
2. GC 시험이면 헥산, 벤젠 등의 순도를 확인하고 불순물이 높으면 경고하세요.
3. 밀도, 점도, 인화점 항목을 함께 고려하세요.
4. 사내 시스템에 등록할 공식 문구를 제안하세요.

복잡한 마크다운 없이 일반 텍스트로, 업무용 문체로 작성하세요.
"""


class GeminiSummarizer:
    """Gemini generateContent REST API 클라이언트"""

    def __init__(self, api_key: Optional[str], model: str = DEFAULT_MODEL,
                 timeout: float = 30, endpoint: str = DEFAULT_ENDPOINT,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.endpoint = endpoint
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls, env_var: str = "GEMINI_API_KEY", **kwargs) -> "GeminiSummarizer":
        return cls(os.environ.get(env_var), **kwargs)

    def generate(self, prompt: str) -> str:
        """프롬프트를 보내고 응답 텍스트를 반환합니다. 실패 시 NetworkError."""
        if not self.api_key:
            raise NetworkError("API 키가 설정되지 않았습니다.")

        url = self.endpoint.format(model=self.model)
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout,
                                         headers={"x-goog-api-key": self.api_key})
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"요약 요청 실패: {e}") from e
        except ValueError as e:
            raise NetworkError(f"요약 응답 파싱 실패: {e}") from e

        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            return ""
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict)).strip()

    def summarize(self, record: QCRecord) -> str:
        """기록 분석 문구. 실패하면 안내 문구를 반환합니다."""
        try:
            text = self.generate(build_prompt(record))
        except NetworkError as e:
            print(f"AI 요약 오류: {e}")
            return SUMMARY_FAILED_TEXT
        return text or SUMMARY_EMPTY_TEXT

    __call__ = summarize


@dataclass
class SummaryEntry:
    """기록 ID별 요약 상태"""
    state: str = STATE_PENDING
    text: Optional[str] = None
    started_at: float = field(default_factory=time.monotonic)
    finished: threading.Event = field(default_factory=threading.Event)


class SummaryCache:
    """기록 ID당 요약 요청을 최대 하나만 유지하는 캐시

    이미 진행 중이거나 완료된 ID에 대한 요청은 무시합니다. 실패(또는 시간
    초과)한 ID는 다시 요청할 수 있습니다.
    """

    def __init__(self, summarize: Callable[[QCRecord], str], logger=None,
                 timeout: float = 60.0):
        self._summarize = summarize
        self.logger = logger
        self.timeout = timeout
        self._entries: Dict[str, SummaryEntry] = {}
        self._lock = threading.Lock()

    def _log_event(self, event_type: str, detail: Dict):
        if self.logger:
            self.logger.log_event(event_type, detail)

    def request(self, record: QCRecord) -> bool:
        """요약을 백그라운드로 요청합니다. 새로 보냈으면 True."""
        with self._lock:
            self._expire(record.id)
            entry = self._entries.get(record.id)
            if entry is not None and entry.state != STATE_FAILED:
                return False
            entry = SummaryEntry()
            self._entries[record.id] = entry

        self._log_event('SUMMARY_REQUESTED', {'record_id': record.id, 'batch': record.batch_number})
        worker = threading.Thread(target=self._run, args=(record, entry), daemon=True)
        worker.start()
        return True

    def _run(self, record: QCRecord, entry: SummaryEntry):
        try:
            text = self._summarize(record)
        except Exception as e:
            print(f"AI 요약 오류: {e}")
            text = SUMMARY_FAILED_TEXT

        failed = not text or text in FAILURE_TEXTS
        with self._lock:
            # 시간 초과 후 재요청된 경우 늦게 온 응답은 버림
            if self._entries.get(record.id) is not entry or entry.state != STATE_PENDING:
                return
            entry.state = STATE_FAILED if failed else STATE_DONE
            entry.text = text or SUMMARY_EMPTY_TEXT
            entry.finished.set()

        if failed:
            self._log_event('SUMMARY_FAILED', {'record_id': record.id, 'reason': entry.text})
        else:
            self._log_event('SUMMARY_DONE', {'record_id': record.id, 'length': len(entry.text)})

    def _expire(self, record_id: str, force: bool = False):
        """진행 중인 요청이 제한 시간을 넘으면 실패로 표시합니다. 잠금 안에서 호출."""
        entry = self._entries.get(record_id)
        if entry is None or entry.state != STATE_PENDING:
            return
        if force or time.monotonic() - entry.started_at >= self.timeout:
            entry.state = STATE_FAILED
            entry.text = SUMMARY_TIMEOUT_TEXT
            entry.finished.set()
            self._log_event('SUMMARY_FAILED', {'record_id': record_id, 'reason': 'timeout'})

    def state(self, record_id: str) -> Optional[str]:
        with self._lock:
            self._expire(record_id)
            entry = self._entries.get(record_id)
            return entry.state if entry else None

    def result(self, record_id: str) -> Optional[str]:
        """완료 또는 실패 문구. 요청 전이거나 진행 중이면 None."""
        with self._lock:
            self._expire(record_id)
            entry = self._entries.get(record_id)
            return entry.text if entry else None

    def is_pending(self, record_id: str) -> bool:
        return self.state(record_id) == STATE_PENDING

    def wait(self, record_id: str, timeout: Optional[float] = None) -> Optional[str]:
        """요약이 끝날 때까지(최대 timeout초) 기다린 뒤 결과를 반환합니다."""
        with self._lock:
            entry = self._entries.get(record_id)
        if entry is None:
            return None
        remaining = max(0.0, self.timeout - (time.monotonic() - entry.started_at))
        if timeout is not None and timeout < remaining:
            entry.finished.wait(timeout)
            return self.result(record_id)

        if not entry.finished.wait(remaining):
            with self._lock:
                self._expire(record_id, force=True)
        return self.result(record_id)
