"""설정 관리자 테스트"""

import unittest
import tempfile
import os
import json
import shutil
import sys

# 상위 디렉토리의 모듈들을 import 하기 위해 경로 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import QC_lab
from QC_lab import ConfigManager


class TestConfigManager(unittest.TestCase):
    """ConfigManager 클래스 테스트"""

    def setUp(self):
        """테스트 시작 전 설정"""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.temp_dir, "test_config.json")

    def tearDown(self):
        """테스트 종료 후 정리"""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_create_default_config(self):
        """기본 설정 생성 테스트"""
        config_manager = ConfigManager(self.config_file)

        self.assertEqual(config_manager.get('app.name'), 'QC Lab Records')
        self.assertEqual(config_manager.get('summarizer.model'), 'gemini-2.5-flash')
        self.assertEqual(config_manager.get('metrics.trend_window'), 10)
        self.assertTrue(config_manager.get('metrics.case_sensitive'))
        # 기본 설정은 파일로도 저장됨
        self.assertTrue(os.path.exists(self.config_file))

    def test_get_nonexistent_key(self):
        """존재하지 않는 키 조회 테스트"""
        config_manager = ConfigManager(self.config_file)

        self.assertIsNone(config_manager.get('nonexistent.key'))
        self.assertEqual(config_manager.get('nonexistent.key', 'default'), 'default')
        self.assertEqual(config_manager.get('app.name.deeper', 'x'), 'x')

    def test_set_and_get_value(self):
        """값 설정 및 조회 테스트"""
        config_manager = ConfigManager(self.config_file)
        config_manager.set('test.new_key', 'test_value')
        self.assertEqual(config_manager.get('test.new_key'), 'test_value')

    def test_save_config_round_trip(self):
        """저장 후 다시 읽기 테스트"""
        config_manager = ConfigManager(self.config_file)
        config_manager.set('metrics.trend_window', 5)
        config_manager.save_config()

        reloaded = ConfigManager(self.config_file)
        self.assertEqual(reloaded.get('metrics.trend_window'), 5)

    def test_load_existing_config(self):
        """기존 설정 파일 로드 테스트"""
        test_config = {'app': {'name': 'Test App', 'version': 'v0.1.0'}}
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(test_config, f)

        config_manager = ConfigManager(self.config_file)
        self.assertEqual(config_manager.get('app.name'), 'Test App')
        self.assertEqual(config_manager.get('app.version'), 'v0.1.0')

    def test_corrupt_config_falls_back_to_default(self):
        """손상된 설정 파일 테스트"""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            f.write("{not json")

        config_manager = ConfigManager(self.config_file)
        self.assertEqual(config_manager.get('app.name'), 'QC Lab Records')


class TestModuleImport(unittest.TestCase):
    """진입 모듈 import 테스트"""

    def test_import_creates_no_config_instance(self):
        """설정 인스턴스는 직접 실행할 때만 만들어짐"""
        self.assertFalse(hasattr(QC_lab, 'config'))
        self.assertTrue(callable(QC_lab.ConfigManager))


if __name__ == '__main__':
    unittest.main()
