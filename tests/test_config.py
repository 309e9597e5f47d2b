"""Tests for config validation and type safety."""

import os
import shutil
import tempfile
import unittest

import yaml

from TexBrew.config import (
    ContainerFamily,
    ExportConfig,
    TextureFormat,
    _merge_dict_to_dataclass,
)
from TexBrew.core import setup_logging


class TestConfigValidation(unittest.TestCase):
    def test_default_config_valid(self):
        config = ExportConfig()
        config.validate()

    def test_invalid_workers(self):
        config = ExportConfig()
        config.max_workers = 0
        with self.assertRaises(ValueError):
            config.validate()

    def test_max_workers_upper_bound(self):
        config = ExportConfig()
        config.max_workers = 129
        with self.assertRaises(ValueError):
            config.validate()

    def test_negative_payload_limit_rejected(self):
        config = ExportConfig()
        config.max_payload_bytes = -1
        with self.assertRaises(ValueError):
            config.validate()

    def test_invalid_log_level_rejected(self):
        config = ExportConfig()
        config.log_level = "LOUD"
        with self.assertRaises(ValueError) as ctx:
            config.validate()
        self.assertIn("log_level", str(ctx.exception))

    def test_invalid_image_size_field_rejected(self):
        config = ExportConfig()
        config.ktx.image_size_field = "height"
        with self.assertRaises(ValueError):
            config.validate()

    def test_errors_are_collected(self):
        config = ExportConfig()
        config.max_workers = 0
        config.output_dir = ""
        with self.assertRaises(ValueError) as ctx:
            config.validate()
        message = str(ctx.exception)
        self.assertIn("max_workers", message)
        self.assertIn("output_dir", message)


class TestContainerOverrides(unittest.TestCase):
    def test_valid_override_resolves(self):
        config = ExportConfig(container_overrides={"etc_rgb4": "PKM", "4": "dds"})
        config.validate()
        self.assertEqual(
            config.resolved_overrides(),
            {TextureFormat.ETC_RGB4: ContainerFamily.PKM,
             TextureFormat.RGBA32: ContainerFamily.DDS},
        )

    def test_unknown_format_rejected(self):
        config = ExportConfig(container_overrides={"BC7": "dds"})
        with self.assertRaises(ValueError):
            config.validate()

    def test_unknown_family_rejected(self):
        config = ExportConfig(container_overrides={"DXT1": "png"})
        with self.assertRaises(ValueError):
            config.validate()

    def test_incapable_family_rejected(self):
        config = ExportConfig(container_overrides={"DXT5": "ktx"})
        with self.assertRaises(ValueError) as ctx:
            config.validate()
        self.assertIn("cannot hold DXT5", str(ctx.exception))


class TestConfigYaml(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_yaml_roundtrip(self):
        path = os.path.join(self.tmpdir, "config.yaml")
        config = ExportConfig()
        config.max_workers = 7
        config.container_overrides = {"ETC_RGB4": "pkm"}
        config.ktx.byte_swap = False
        config.to_yaml(path)
        loaded = ExportConfig.from_yaml(path)
        self.assertEqual(loaded.max_workers, 7)
        self.assertEqual(loaded.container_overrides, {"ETC_RGB4": "pkm"})
        self.assertFalse(loaded.ktx.byte_swap)
        self.assertEqual(
            [n for n in os.listdir(self.tmpdir) if ".tmp." in n], []
        )

    def test_missing_file_uses_defaults(self):
        config = ExportConfig.from_yaml(os.path.join(self.tmpdir, "absent.yaml"))
        self.assertEqual(config.max_workers, ExportConfig().max_workers)

    def test_non_mapping_rejected(self):
        path = os.path.join(self.tmpdir, "list.yaml")
        with open(path, "w", encoding="utf-8") as f:
            f.write("- a\n- b\n")
        with self.assertRaises(ValueError):
            ExportConfig.from_yaml(path)

    def test_malformed_yaml_rejected(self):
        path = os.path.join(self.tmpdir, "bad.yaml")
        with open(path, "w", encoding="utf-8") as f:
            f.write("max_workers: [1, 2\n")
        with self.assertRaises(ValueError):
            ExportConfig.from_yaml(path)

    def test_invalid_values_name_the_file(self):
        path = os.path.join(self.tmpdir, "invalid.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"max_workers": 0}, f)
        with self.assertRaises(ValueError) as ctx:
            ExportConfig.from_yaml(path)
        self.assertIn(path, str(ctx.exception))

    def test_config_version_future_warns(self):
        path = os.path.join(self.tmpdir, "future.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"config_version": 99}, f)
        with self.assertLogs("texture_export.config", level="WARNING") as cm:
            ExportConfig.from_yaml(path)
        self.assertTrue(any("config_version" in msg for msg in cm.output))


class TestMergeDict(unittest.TestCase):
    def test_type_mismatch_rejected(self):
        config = ExportConfig()
        with self.assertLogs("texture_export.config", level="WARNING") as cm:
            _merge_dict_to_dataclass(config, {"max_workers": "many"})
        self.assertEqual(config.max_workers, 4)
        self.assertTrue(any("max_workers" in msg for msg in cm.output))

    def test_exact_float_promoted_to_int(self):
        config = ExportConfig()
        _merge_dict_to_dataclass(config, {"max_workers": 8.0})
        self.assertEqual(config.max_workers, 8)
        self.assertIsInstance(config.max_workers, int)

    def test_unknown_key_warns(self):
        config = ExportConfig()
        with self.assertLogs("texture_export.config", level="WARNING") as cm:
            _merge_dict_to_dataclass(config, {"ktx": {"supercompress": True}})
        self.assertTrue(any("ktx.supercompress" in msg for msg in cm.output))

    def test_null_keeps_default(self):
        config = ExportConfig()
        with self.assertLogs("texture_export.config", level="WARNING"):
            _merge_dict_to_dataclass(config, {"output_dir": None})
        self.assertEqual(config.output_dir, ExportConfig().output_dir)

    def test_nested_section_merged(self):
        config = ExportConfig()
        _merge_dict_to_dataclass(config, {"ktx": {"image_size_field": "payload"}})
        self.assertEqual(config.ktx.image_size_field, "payload")
        self.assertTrue(config.ktx.byte_swap)


class TestSetupLogging(unittest.TestCase):
    def test_invalid_level_defaults_to_info(self):
        import logging
        root = logging.getLogger()
        saved_handlers = root.handlers[:]
        saved_level = root.level
        try:
            setup_logging("NOPE", force=True)
            self.assertEqual(root.level, logging.INFO)
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)


if __name__ == "__main__":
    unittest.main(verbosity=2)
