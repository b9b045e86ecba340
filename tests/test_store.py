"""기록 저장소 테스트"""

import unittest
import datetime
import sys
import os

# 상위 디렉토리의 모듈들을 import 하기 위해 경로 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.models import QCRecord, QCStatus, RecordCategory
from core.store import RecordStore
from utils.exceptions import RecordNotFoundError


def _record(record_id):
    return QCRecord(
        id=record_id,
        batch_number=f'B-{record_id}',
        product_name='Toluene',
        category=RecordCategory.RAW_MATERIAL,
        date=datetime.datetime(2024, 5, 1),
        technician='tester',
        status=QCStatus.PENDING,
    )


class TestRecordStore(unittest.TestCase):
    """RecordStore 테스트"""

    def test_empty_store(self):
        store = RecordStore()
        self.assertEqual(len(store), 0)
        self.assertEqual(store.records(), ())

    def test_add_puts_newest_first(self):
        store = RecordStore([_record('1')])
        store.add(_record('2'))
        self.assertEqual([r.id for r in store], ['2', '1'])

    def test_snapshot_is_not_affected_by_later_adds(self):
        store = RecordStore()
        snapshot = store.records()
        store.add(_record('1'))
        self.assertEqual(snapshot, ())
        self.assertEqual(len(store), 1)

    def test_get(self):
        store = RecordStore([_record('1'), _record('2')])
        self.assertEqual(store.get('2').batch_number, 'B-2')
        with self.assertRaises(RecordNotFoundError):
            store.get('missing')

    def test_earlier_records_are_kept_as_is(self):
        store = RecordStore([_record('1'), _record('2')])
        before = store.records()
        store.add(_record('3'))

        after = store.records()
        self.assertIs(after[1], before[0])
        self.assertIs(after[2], before[1])
        self.assertIs(store.get('2'), before[1])

    def test_store_has_no_replace_or_remove(self):
        store = RecordStore()
        for name in ('replace', 'remove', 'update', 'delete'):
            self.assertFalse(hasattr(store, name), name)

    def test_sample_data(self):
        store = RecordStore.with_sample_data()
        self.assertEqual(len(store), 3)
        self.assertEqual(store.get('1').truck_number, '12가 4567')
        self.assertIsNone(store.get('2').truck_number)
        self.assertIsNone(store.get('3').customer_name)


if __name__ == '__main__':
    unittest.main()
