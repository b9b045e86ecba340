"""보고서 목록 필터링 및 검색 모듈"""

from typing import Iterable, List, Optional

from core.models import ALL, QCRecord, RecordFilter, ReportPurpose


def _value_of(value) -> Optional[str]:
    """Enum 멤버와 문자열을 같은 형태(문자열)로 맞춥니다."""
    if value is None:
        return None
    return getattr(value, 'value', value)


def _is_wildcard(value) -> bool:
    return value is None or _value_of(value) == ALL


def matches_search(record: QCRecord, search_text: str) -> bool:
    """제품명, 배치 번호, 고객명 중 하나라도 검색어를 포함하면 일치합니다."""
    if not search_text:
        return True
    needle = search_text.lower()
    haystacks = [record.product_name, record.batch_number]
    if record.customer_name:
        haystacks.append(record.customer_name)
    return any(needle in text.lower() for text in haystacks)


def matches_filter(record: QCRecord, spec: RecordFilter) -> bool:
    if not matches_search(record, spec.search_text):
        return False
    if not _is_wildcard(spec.status) and _value_of(record.status) != _value_of(spec.status):
        return False
    if not _is_wildcard(spec.category) and _value_of(record.category) != _value_of(spec.category):
        return False
    if not _is_wildcard(spec.report_purpose):
        purpose = record.report_purpose or ReportPurpose.STANDARD
        if _value_of(purpose) != _value_of(spec.report_purpose):
            return False
    if not _is_wildcard(spec.customer_name) and record.customer_name != spec.customer_name:
        return False
    return True


def filter_records(records: Iterable[QCRecord], spec: Optional[RecordFilter] = None) -> List[QCRecord]:
    """모든 조건을 AND로 적용한 기록 목록을 입력 순서대로 반환합니다."""
    spec = spec or RecordFilter()
    return [record for record in records if matches_filter(record, spec)]


def distinct_customers(records: Iterable[QCRecord]) -> List[str]:
    """고객 선택지: 비어있지 않은 고객명을 처음 나온 순서대로 한 번씩."""
    seen = {}
    for record in records:
        if record.customer_name and record.customer_name not in seen:
            seen[record.customer_name] = True
    return list(seen)
