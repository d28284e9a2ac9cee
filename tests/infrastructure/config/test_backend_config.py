import json
import os
import tempfile
import unittest
import warnings
from pathlib import Path
from unittest.mock import patch

from src.npkeras.infrastructure.config._config import (
    CONFIG_FILENAME,
    HOME_ENV_VAR,
    BackendConfig,
    config_dir,
    load_config,
    save_config,
)


class TestBackendConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = BackendConfig()
        self.assertEqual(cfg.floatx, "float32")
        self.assertEqual(cfg.epsilon, 1e-7)
        self.assertEqual(cfg.image_data_format, "channels_last")

    def test_invalid_values_raise(self):
        with self.assertRaises(ValueError):
            BackendConfig(floatx="int32")
        with self.assertRaises(ValueError):
            BackendConfig(epsilon=-1.0)
        with self.assertRaises(ValueError):
            BackendConfig(epsilon="small")
        with self.assertRaises(ValueError):
            BackendConfig(image_data_format="nhwc")

    def test_from_mapping_ignores_unknown_keys(self):
        cfg = BackendConfig.from_mapping(
            {"floatx": "float64", "backend": "numpy", "epsilon": 1e-3}
        )
        self.assertEqual(cfg.floatx, "float64")
        self.assertEqual(cfg.epsilon, 1e-3)
        self.assertEqual(cfg.image_data_format, "channels_last")

    def test_to_dict(self):
        self.assertEqual(
            BackendConfig().to_dict(),
            {"floatx": "float32", "epsilon": 1e-7, "image_data_format": "channels_last"},
        )


class TestLoadSaveConfig(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_config_dir_honors_env_var(self):
        with patch.dict(os.environ, {HOME_ENV_VAR: str(self.root)}):
            self.assertEqual(config_dir(), self.root)

    def test_missing_file_yields_defaults(self):
        cfg = load_config(self.root / "nope.json")
        self.assertEqual(cfg, BackendConfig())

    def test_roundtrip_through_env_home(self):
        with patch.dict(os.environ, {HOME_ENV_VAR: str(self.root / "home")}):
            written = save_config(
                BackendConfig(floatx="float16", image_data_format="channels_first")
            )
            self.assertEqual(written, self.root / "home" / CONFIG_FILENAME)
            cfg = load_config()
        self.assertEqual(cfg.floatx, "float16")
        self.assertEqual(cfg.image_data_format, "channels_first")

    def test_bad_json_warns_and_defaults(self):
        path = self.root / CONFIG_FILENAME
        path.write_text("{not json", encoding="utf-8")
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            cfg = load_config(path)
        self.assertEqual(cfg, BackendConfig())
        self.assertTrue(any(issubclass(w.category, RuntimeWarning) for w in caught))

    def test_non_object_json_warns_and_defaults(self):
        path = self.root / CONFIG_FILENAME
        path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            cfg = load_config(path)
        self.assertEqual(cfg, BackendConfig())
        self.assertEqual(len(caught), 1)

    def test_invalid_value_in_file_raises(self):
        path = self.root / CONFIG_FILENAME
        path.write_text(json.dumps({"floatx": "bfloat16"}), encoding="utf-8")
        with self.assertRaises(ValueError):
            load_config(path)


if __name__ == "__main__":
    unittest.main()
