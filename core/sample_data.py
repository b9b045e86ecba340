"""프로그램 시작 시 불러오는 예시 기록"""

import datetime
from typing import List, Optional

from core.models import QCParameter, QCRecord, QCStatus, RecordCategory, ReportPurpose


def sample_records(now: Optional[datetime.datetime] = None) -> List[QCRecord]:
    """대시보드와 보고서 화면 확인용 예시 기록 목록"""
    now = now or datetime.datetime.now()
    day = datetime.timedelta(days=1)

    return [
        QCRecord(
            id='1',
            batch_number='HEX-1403-88',
            product_name='Normal Hexane',
            category=RecordCategory.FINAL_PRODUCT,
            date=now - 2 * day,
            technician='김민수',
            status=QCStatus.APPROVED,
            report_purpose=ReportPurpose.DELIVERY,
            customer_name='이스파한 화학공업',
            truck_number='12가 4567',
            driver_name='박준호',
            parameters=(
                QCParameter('GC - Normal Hexane', 98.5, '%', 'ASTM D611', 98.0, 100),
                QCParameter('GC - Benzene', 0.01, '%', 'ASTM D611', 0, 0.05),
                QCParameter('Density @ 15°C', 0.659, 'g/cm3', 'ASTM D4052', 0.655, 0.665),
                QCParameter('Doctor Test', 'Negative', '-', 'ASTM D4952'),
                QCParameter('Total Sulfur', 2, 'ppm', 'ASTM D5453'),
            ),
            notes='순도 매우 양호. 벤젠 극미량. 황 함량 및 닥터 테스트 기준 적합.',
        ),
        QCRecord(
            id='2',
            batch_number='SOL-D86-09',
            product_name='Special Solvent 402',
            category=RecordCategory.INTERMEDIATE,
            date=now - day,
            technician='이서연',
            status=QCStatus.CONDITIONAL,
            report_purpose=ReportPurpose.CUSTOMER_SAMPLE,
            customer_name='연합무역',
            parameters=(
                QCParameter('Flash Point', 38, '°C', 'ASTM D93', 38, 60),
                QCParameter('ASTM D86 - IBP', 152, '°C', 'ASTM D86', 150, 160),
                QCParameter('ASTM D86 - 50%', 175, '°C', 'ASTM D86', 170, 180),
                QCParameter('ASTM D86 - FBP', 205, '°C', 'ASTM D86', 195, 205),
                QCParameter('Density @ 15°C', 0.785, 'g/cm3', 'ASTM D4052', 0.775, 0.795),
                QCParameter('Water Content', 50, 'ppm', 'ASTM D6304'),
            ),
            notes='인화점이 기준 하한 경계값. 재검토 필요.',
        ),
        QCRecord(
            id='3',
            batch_number='ACID-908',
            product_name='Sulfuric Acid',
            category=RecordCategory.RAW_MATERIAL,
            date=now,
            technician='정우진',
            status=QCStatus.APPROVED,
            report_purpose=ReportPurpose.STANDARD,
            parameters=(
                QCParameter('Acid Purity', 98.2, '%', 'Titration', 98, 99),
                QCParameter('Density', 1.84, 'g/cm3', 'ASTM D1298', 1.83, 1.85),
                QCParameter('Methyl Orange Reaction', 'Acidic', '-', 'ISIRI 222'),
            ),
            notes='2번 탱크로리 입고분',
        ),
    ]
