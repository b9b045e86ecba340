import json
import os
from typing import Any, Dict, Optional

from core.filtering import distinct_customers, filter_records
from core.metrics import TREND_WINDOW, density_trend, purity_trend
from core.models import DashboardView, QCRecord, RecordFilter, ReportView
from core.statistics import compute_stats
from core.store import RecordStore
from core.templates import RecordDraft, build_record
from services.summarizer import DEFAULT_ENDPOINT, DEFAULT_MODEL, GeminiSummarizer, SummaryCache
from utils.file_handler import ensure_directory_exists, resource_path
from utils.logger import EventLogger

# #####################################################################
# # 설정 관리 클래스
# #####################################################################

class ConfigManager:
    """애플리케이션 설정을 관리하는 클래스"""

    def __init__(self, config_file: str = "config.json"):
        self.config_file = config_file
        self.config = self._load_config()

    def _config_path(self) -> str:
        return resource_path(self.config_file)

    def _load_config(self) -> Dict[str, Any]:
        """설정 파일을 로드합니다."""
        config_path = self._config_path()
        try:
            if os.path.exists(config_path):
                with open(config_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            # 기본 설정 생성
            return self._create_default_config()
        except (OSError, json.JSONDecodeError) as e:
            print(f"설정 파일 로드 오류: {e}")
            return self._create_default_config()

    def _create_default_config(self) -> Dict[str, Any]:
        """기본 설정을 생성합니다."""
        default_config = {
            "app": {
                "name": "QC Lab Records",
                "version": "v1.0.0",
                "description": "화학제품 품질관리 시험 기록"
            },
            "summarizer": {
                "model": DEFAULT_MODEL,
                "endpoint": DEFAULT_ENDPOINT,
                "timeout": 30,
                "cache_timeout": 60,
                "api_key_env": "GEMINI_API_KEY"
            },
            "metrics": {
                "trend_window": TREND_WINDOW,
                "case_sensitive": True
            },
            "logging": {
                "enabled": True,
                "log_file": "qc_lab_log.csv"
            },
            "data": {
                "seed_sample_records": True
            }
        }
        self.save_config(default_config)
        return default_config

    def get(self, key_path: str, default=None):
        """점 표기법으로 설정값을 가져옵니다. 예: 'app.version'"""
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key_path: str, value):
        """점 표기법으로 설정값을 설정합니다."""
        keys = key_path.split('.')
        config = self.config

        for key in keys[:-1]:
            if not isinstance(config.get(key), dict):
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

    def save_config(self, config_data=None):
        """설정을 파일로 저장합니다."""
        config_path = self._config_path()
        data = config_data if config_data is not None else self.config
        try:
            ensure_directory_exists(os.path.dirname(config_path))
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=4)
        except OSError as e:
            print(f"설정 파일 저장 오류: {e}")

# #####################################################################
# # 화면 연결부
# #####################################################################

class QCLabApp:
    """대시보드, 보고서 목록, 신규 기록 입력 화면에 데이터를 제공합니다.

    기록 저장소는 생성자로 받아 모든 연산에 그대로 전달합니다.
    """

    def __init__(self, store: RecordStore, summarizer=None, logger: Optional[EventLogger] = None,
                 trend_window: int = TREND_WINDOW, case_sensitive: bool = True,
                 summary_timeout: float = 60.0):
        self.store = store
        self.logger = logger
        self.trend_window = trend_window
        self.case_sensitive = case_sensitive
        self.summaries = None
        if summarizer is not None:
            self.summaries = SummaryCache(summarizer, logger=logger, timeout=summary_timeout)

    @classmethod
    def from_config(cls, config: ConfigManager) -> "QCLabApp":
        store = RecordStore.with_sample_data() if config.get('data.seed_sample_records', True) else RecordStore()
        logger = None
        if config.get('logging.enabled', True):
            logger = EventLogger(resource_path(config.get('logging.log_file', 'qc_lab_log.csv')))
        summarizer = GeminiSummarizer.from_env(
            config.get('summarizer.api_key_env', 'GEMINI_API_KEY'),
            model=config.get('summarizer.model', DEFAULT_MODEL),
            timeout=config.get('summarizer.timeout', 30),
            endpoint=config.get('summarizer.endpoint', DEFAULT_ENDPOINT),
        )
        return cls(store, summarizer=summarizer, logger=logger,
                   trend_window=config.get('metrics.trend_window', TREND_WINDOW),
                   case_sensitive=config.get('metrics.case_sensitive', True),
                   summary_timeout=config.get('summarizer.cache_timeout', 60))

    def _log_event(self, event_type: str, detail: Optional[Dict] = None):
        if self.logger:
            self.logger.log_event(event_type, detail)

    def dashboard(self) -> DashboardView:
        records = self.store.records()
        return DashboardView(
            stats=compute_stats(records),
            density_trend=tuple(density_trend(records, self.trend_window, self.case_sensitive)),
            purity_trend=tuple(purity_trend(records, self.trend_window, self.case_sensitive)),
        )

    def report_view(self, spec: Optional[RecordFilter] = None) -> ReportView:
        records = self.store.records()
        return ReportView(
            records=tuple(filter_records(records, spec)),
            customers=tuple(distinct_customers(records)),
        )

    def save_draft(self, draft: RecordDraft) -> QCRecord:
        """초안을 기록으로 확정해 저장소 맨 앞에 추가합니다."""
        record = self.store.add(build_record(draft))
        self._log_event('RECORD_SAVED', {
            'record_id': record.id,
            'batch': record.batch_number,
            'product': record.product_name,
            'status': record.status.value,
            'purpose': record.report_purpose.value,
            'parameters': len(record.parameters),
        })
        return record

    def analyze(self, record_id: str) -> bool:
        """AI 분석을 요청합니다. 이미 요청된 기록이면 False."""
        if self.summaries is None:
            return False
        return self.summaries.request(self.store.get(record_id))

    def analysis_for(self, record_id: str) -> Optional[str]:
        """요약 캐시의 분석 결과를 반환합니다. 저장소의 기록은 바뀌지 않습니다."""
        if self.summaries is None:
            return None
        return self.summaries.result(record_id)

    def close(self):
        if self.logger:
            self.logger.stop_logger()


if __name__ == "__main__":
    config = ConfigManager()
    app = QCLabApp.from_config(config)
    view = app.dashboard()
    print(f"{config.get('app.name')} ({config.get('app.version')})")
    print(f"전체 {view.stats.total}건 / 승인 {view.stats.approved}건 / "
          f"불합격 {view.stats.rejected}건 / 조건부·대기 {view.stats.conditional_or_pending}건")
    app.close()
