import json
import os
import shutil
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config.app_config import ServiceConfig, parse_custom_keywords
from config.constants import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_GEMINI_PROXY_TARGET,
    DEFAULT_MAX_UPLOAD_BYTES,
    DEFAULT_PORT,
)


class TestServiceConfig(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, "mlog_config.json")

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def _write(self, data):
        with open(self.config_path, "w", encoding="utf-8") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)

    def test_defaults_when_missing(self):
        cfg = ServiceConfig.load(self.config_path, environ={})
        self.assertEqual(cfg.gemini_proxy_target, DEFAULT_GEMINI_PROXY_TARGET)
        self.assertEqual(cfg.gemini_model, DEFAULT_GEMINI_MODEL)
        self.assertEqual(cfg.port, DEFAULT_PORT)
        self.assertEqual(cfg.custom_keywords, "")
        self.assertIsNone(cfg._source)

    def test_load_from_file(self):
        self._write({"custom_keywords": "Sodium|Iris", "port": 8080, "unknown": 1})
        cfg = ServiceConfig.load(self.config_path, environ={})
        self.assertEqual(cfg.keyword_list, ["Sodium", "Iris"])
        self.assertEqual(cfg.port, 8080)
        self.assertEqual(cfg._source, self.config_path)
        self.assertFalse(hasattr(cfg, "unknown"))

    def test_property_and_method_keys_ignored(self):
        self._write({"keyword_list": ["x"], "to_dict": 1, "_source": "evil", "port": 1234})
        cfg = ServiceConfig.load(self.config_path, environ={})
        self.assertEqual(cfg.port, 1234)
        self.assertEqual(cfg.keyword_list, [])
        self.assertEqual(cfg._source, self.config_path)
        self.assertEqual(cfg.to_dict()["port"], 1234)

    def test_keyword_list_in_file(self):
        self._write({"custom_keywords": ["Sodium", "Iris"]})
        cfg = ServiceConfig.load(self.config_path, environ={})
        self.assertEqual(cfg.custom_keywords, "Sodium|Iris")

    def test_env_overrides_file(self):
        self._write({"gemini_model": "from-file", "port": 8080})
        env = {
            "GEMINI_MODEL": "from-env",
            "GEMINI_PROXY_TARGET": "https://proxy.example.com",
            "MLOG_PORT": "9000",
            "MLOG_LOG_JSON": "yes",
            "MLOG_ENABLE_METRICS": "0",
        }
        cfg = ServiceConfig.load(self.config_path, environ=env)
        self.assertEqual(cfg.gemini_model, "from-env")
        self.assertEqual(cfg.gemini_proxy_target, "https://proxy.example.com/")
        self.assertEqual(cfg.port, 9000)
        self.assertTrue(cfg.log_json)
        self.assertFalse(cfg.enable_metrics)

    def test_broken_json_keeps_defaults(self):
        self._write("{not json")
        with self.assertLogs("config.app_config", level="WARNING"):
            cfg = ServiceConfig.load(self.config_path, environ={})
        self.assertEqual(cfg.port, DEFAULT_PORT)

    def test_non_object_json(self):
        self._write([1, 2, 3])
        with self.assertLogs("config.app_config", level="WARNING"):
            cfg = ServiceConfig.load(self.config_path, environ={})
        self.assertIsNone(cfg._source)

    def test_invalid_values_reset(self):
        self._write({
            "port": "abc",
            "max_upload_bytes": -1,
            "gemini_timeout_seconds": 0,
            "gemini_proxy_target": "",
            "log_level": "debug",
            "static_dir": "  ",
        })
        cfg = ServiceConfig.load(self.config_path, environ={})
        self.assertEqual(cfg.port, DEFAULT_PORT)
        self.assertEqual(cfg.max_upload_bytes, DEFAULT_MAX_UPLOAD_BYTES)
        self.assertGreater(cfg.gemini_timeout_seconds, 0)
        self.assertEqual(cfg.gemini_proxy_target, DEFAULT_GEMINI_PROXY_TARGET)
        self.assertEqual(cfg.log_level, "DEBUG")
        self.assertIsNone(cfg.static_dir)

    def test_to_dict_masks_api_key(self):
        cfg = ServiceConfig.load(None, environ={"GEMINI_API_KEY": "secret"})
        self.assertEqual(cfg.gemini_api_key, "secret")
        data = cfg.to_dict()
        self.assertEqual(data["gemini_api_key"], "***")
        self.assertNotIn("_source", data)


class TestParseCustomKeywords(unittest.TestCase):

    def test_split_and_trim(self):
        self.assertEqual(parse_custom_keywords(" Sodium | Iris || "), ["Sodium", "Iris"])

    def test_empty(self):
        self.assertEqual(parse_custom_keywords(""), [])
        self.assertEqual(parse_custom_keywords(None), [])


if __name__ == '__main__':
    unittest.main()
