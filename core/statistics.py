"""상태별 집계 모듈"""

from typing import Iterable

from core.models import QCRecord, QCStatus, RecordStats


def compute_stats(records: Iterable[QCRecord]) -> RecordStats:
    """전체/승인/불합격/조건부+대기 건수를 한 번의 순회로 셉니다.

    CONDITIONAL과 PENDING은 대시보드에서 한 칸으로 합쳐 보여줍니다.
    """
    total = approved = rejected = conditional_or_pending = 0
    for record in records:
        total += 1
        if record.status == QCStatus.APPROVED:
            approved += 1
        elif record.status == QCStatus.REJECTED:
            rejected += 1
        elif record.status in (QCStatus.CONDITIONAL, QCStatus.PENDING):
            conditional_or_pending += 1

    return RecordStats(
        total=total,
        approved=approved,
        rejected=rejected,
        conditional_or_pending=conditional_or_pending,
    )
