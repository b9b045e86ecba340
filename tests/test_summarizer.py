"""AI 요약 서비스 테스트"""

import unittest
import datetime
import threading
import sys
import os
from unittest.mock import MagicMock

import requests

# 상위 디렉토리의 모듈들을 import 하기 위해 경로 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.models import QCParameter, QCRecord, QCStatus, RecordCategory
from services.summarizer import (
    STATE_DONE, STATE_FAILED, STATE_PENDING, SUMMARY_EMPTY_TEXT, SUMMARY_FAILED_TEXT,
    SUMMARY_TIMEOUT_TEXT, GeminiSummarizer, SummaryCache, build_prompt,
)


def _record(record_id='R1'):
    return QCRecord(
        id=record_id,
        batch_number='HEX-1403-88',
        product_name='Normal Hexane',
        category=RecordCategory.FINAL_PRODUCT,
        date=datetime.datetime(2024, 5, 1),
        technician='김민수',
        status=QCStatus.APPROVED,
        parameters=(
            QCParameter('GC - Normal Hexane', 98.5, '%', 'ASTM D611', 98.0, 100),
            QCParameter('Doctor Test', 'Negative', '-'),
        ),
    )


def _response(json_data=None, status_error=None):
    response = MagicMock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    response.json.return_value = json_data
    return response


class TestBuildPrompt(unittest.TestCase):
    """프롬프트 생성 테스트"""

    def test_contains_record_details(self):
        prompt = build_prompt(_record())
        self.assertIn('Normal Hexane', prompt)
        self.assertIn('HEX-1403-88', prompt)
        self.assertIn('- GC - Normal Hexane: 98.5 % (기준 범위: 98 - 100)', prompt)
        self.assertIn('- Doctor Test: Negative - (기준 범위: ? - ?)', prompt)
        self.assertIn('담당자 메모: 없음', prompt)

    def test_uses_record_labels(self):
        record = _record()
        prompt = build_prompt(record)
        self.assertIn(f'분류: {record.category_label}', prompt)
        self.assertIn(f'현재 상태: {record.status_label} (APPROVED)', prompt)


class TestGeminiSummarizer(unittest.TestCase):
    """Gemini 클라이언트 테스트"""

    def setUp(self):
        """테스트 시작 전 설정"""
        self.session = MagicMock()
        self.summarizer = GeminiSummarizer('test-key', session=self.session, timeout=5)

    def test_success(self):
        self.session.post.return_value = _response({
            'candidates': [{'content': {'parts': [{'text': '순도 양호.'}, {'text': ' 출하 가능.'}]}}]
        })
        self.assertEqual(self.summarizer.summarize(_record()), '순도 양호. 출하 가능.')

        args, kwargs = self.session.post.call_args
        self.assertIn('gemini-2.5-flash:generateContent', args[0])
        self.assertEqual(kwargs['timeout'], 5)
        self.assertEqual(kwargs['headers']['x-goog-api-key'], 'test-key')

    def test_network_error_becomes_placeholder(self):
        self.session.post.side_effect = requests.exceptions.ConnectionError("down")
        self.assertEqual(self.summarizer.summarize(_record()), SUMMARY_FAILED_TEXT)

    def test_http_error_becomes_placeholder(self):
        self.session.post.return_value = _response(status_error=requests.exceptions.HTTPError("403"))
        self.assertEqual(self.summarizer(_record()), SUMMARY_FAILED_TEXT)

    def test_invalid_json_becomes_placeholder(self):
        response = _response()
        response.json.side_effect = ValueError("not json")
        self.session.post.return_value = response
        self.assertEqual(self.summarizer.summarize(_record()), SUMMARY_FAILED_TEXT)

    def test_empty_candidates(self):
        self.session.post.return_value = _response({'candidates': []})
        self.assertEqual(self.summarizer.summarize(_record()), SUMMARY_EMPTY_TEXT)

    def test_missing_api_key(self):
        summarizer = GeminiSummarizer(None, session=self.session)
        self.assertEqual(summarizer.summarize(_record()), SUMMARY_FAILED_TEXT)
        self.session.post.assert_not_called()


class TestSummaryCache(unittest.TestCase):
    """요약 캐시 테스트"""

    def test_done(self):
        cache = SummaryCache(lambda record: f"{record.batch_number} 분석")
        self.assertTrue(cache.request(_record()))
        self.assertEqual(cache.wait('R1', timeout=5), 'HEX-1403-88 분석')
        self.assertEqual(cache.state('R1'), STATE_DONE)

    def test_duplicate_request_is_noop(self):
        calls = []
        release = threading.Event()

        def slow_summarize(record):
            calls.append(record.id)
            release.wait(5)
            return "완료"

        cache = SummaryCache(slow_summarize)
        self.assertTrue(cache.request(_record()))
        self.assertFalse(cache.request(_record()))
        self.assertTrue(cache.is_pending('R1'))
        self.assertIsNone(cache.result('R1'))

        release.set()
        self.assertEqual(cache.wait('R1', timeout=5), "완료")
        self.assertFalse(cache.request(_record()))
        self.assertEqual(calls, ['R1'])

    def test_exception_becomes_failed_placeholder(self):
        def broken(record):
            raise RuntimeError("boom")

        cache = SummaryCache(broken)
        cache.request(_record())
        self.assertEqual(cache.wait('R1', timeout=5), SUMMARY_FAILED_TEXT)
        self.assertEqual(cache.state('R1'), STATE_FAILED)

    def test_failed_request_can_be_retried(self):
        answers = iter(["", "두 번째 분석"])
        cache = SummaryCache(lambda record: next(answers))

        cache.request(_record())
        self.assertEqual(cache.wait('R1', timeout=5), SUMMARY_EMPTY_TEXT)
        self.assertTrue(cache.request(_record()))
        self.assertEqual(cache.wait('R1', timeout=5), "두 번째 분석")

    def test_timeout_marks_failed_and_drops_late_result(self):
        release = threading.Event()

        def stuck(record):
            release.wait(5)
            return "늦은 결과"

        cache = SummaryCache(stuck, timeout=0.05)
        cache.request(_record())
        self.assertEqual(cache.wait('R1'), SUMMARY_TIMEOUT_TEXT)
        self.assertEqual(cache.state('R1'), STATE_FAILED)

        release.set()
        self.assertEqual(cache.result('R1'), SUMMARY_TIMEOUT_TEXT)

    def test_unknown_id(self):
        cache = SummaryCache(lambda record: "x")
        self.assertIsNone(cache.state('nope'))
        self.assertIsNone(cache.result('nope'))
        self.assertIsNone(cache.wait('nope', timeout=0.01))

    def test_request_and_done_are_logged(self):
        logger = MagicMock()
        cache = SummaryCache(lambda record: "분석", logger=logger)
        cache.request(_record())
        cache.wait('R1', timeout=5)

        events = [c.args[0] for c in logger.log_event.call_args_list]
        self.assertEqual(events[0], 'SUMMARY_REQUESTED')
        # 완료 로그는 결과 기록 직후 워커 스레드에서 남음
        for _ in range(100):
            if len(logger.log_event.call_args_list) > 1:
                break
            threading.Event().wait(0.01)
        self.assertIn('SUMMARY_DONE', [c.args[0] for c in logger.log_event.call_args_list])

    def test_pending_state_constant(self):
        release = threading.Event()
        cache = SummaryCache(lambda record: release.wait(5) and "ok")
        cache.request(_record())
        self.assertEqual(cache.state('R1'), STATE_PENDING)
        release.set()
        self.assertEqual(cache.wait('R1', timeout=5), "ok")


if __name__ == '__main__':
    unittest.main()
