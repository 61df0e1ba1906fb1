"""
Unit tests for core nestedset components.

Tests configuration management, logging setup and the data models.
"""

import logging
import os
import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from nestedset.config import ConfigManager, config, get_config
from nestedset.log import setup_logging
from nestedset.models import ConversionSettings, Forest, Record, TreeNode, id_key


class TestConfigManager(unittest.TestCase):
    """Test configuration management functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "test_config.yaml"

    def tearDown(self):
        """Clean up test fixtures."""
        if self.config_path.exists():
            self.config_path.unlink()
        os.rmdir(self.temp_dir)

    def test_config_creation_with_defaults(self):
        """Test config manager falls back to defaults when file missing."""
        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.id_field, "id")
        self.assertEqual(config.parent_field, "parent_id")
        self.assertEqual(config.left_field, "left")
        self.assertEqual(config.right_field, "right")
        self.assertEqual(config.depth_field, "depth")
        self.assertTrue(config.emit_depth)
        self.assertIsNone(config.log_file)

    def test_config_loading_from_file(self):
        """Test loading configuration from YAML file merges over defaults."""
        test_config = """
fields:
  left: "lft"
  right: "rgt"
  position: "pid"

output:
  emit_depth: false

logging:
  level: "debug"
"""
        with open(self.config_path, 'w') as f:
            f.write(test_config)

        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.left_field, "lft")
        self.assertEqual(config.right_field, "rgt")
        self.assertEqual(config.get("fields.position"), "pid")
        self.assertFalse(config.emit_depth)
        self.assertEqual(config.log_level, "DEBUG")
        # Untouched keys keep their defaults
        self.assertEqual(config.id_field, "id")
        self.assertEqual(config.children_field, "children")

    def test_invalid_yaml_falls_back_to_defaults(self):
        """Test a broken file leaves the defaults in place."""
        with open(self.config_path, 'w') as f:
            f.write("fields: [unclosed")

        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.left_field, "left")

    def test_non_mapping_yaml_falls_back_to_defaults(self):
        with open(self.config_path, 'w') as f:
            f.write("- just\n- a list\n")

        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.parent_field, "parent_id")

    def test_dot_notation_access(self):
        """Test accessing config values with dot notation."""
        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.get("fields.id"), "id")
        self.assertTrue(config.get("output.emit_depth"))
        self.assertEqual(config.get("nonexistent.key", "default"), "default")
        self.assertEqual(config.get_section("output"), {"emit_depth": True})

    def test_config_reload(self):
        """Test configuration reloading."""
        with open(self.config_path, 'w') as f:
            f.write("fields:\n  id: 'node'")

        config = ConfigManager(str(self.config_path))
        self.assertEqual(config.id_field, "node")

        with open(self.config_path, 'w') as f:
            f.write("fields:\n  id: 'key'")

        config.reload()
        self.assertEqual(config.id_field, "key")

    def test_global_config_instance(self):
        self.assertIs(get_config(), config)
        self.assertIsInstance(config.conversion_settings(), ConversionSettings)

    def test_conversion_settings_from_config(self):
        with open(self.config_path, 'w') as f:
            f.write("fields:\n  parent_id: 'parent'\n  child_count: 'count'\n")

        settings = ConfigManager(str(self.config_path)).conversion_settings()

        self.assertEqual(settings.parent_field, "parent")
        self.assertEqual(settings.child_count_field, "count")
        self.assertIsNone(settings.position_field)

    def test_conversion_settings_rejects_colliding_names(self):
        with open(self.config_path, 'w') as f:
            f.write("fields:\n  left: 'id'\n")

        config = ConfigManager(str(self.config_path))

        with self.assertRaises(ValidationError):
            config.conversion_settings()


class TestSetupLogging(unittest.TestCase):
    """Test logging configuration."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "logging.yaml"
        self.log_path = Path(self.temp_dir) / "nestedset.log"

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers[:]:
            handler.close()
            root.removeHandler(handler)
        for path in (self.config_path, self.log_path):
            if path.exists():
                path.unlink()
        os.rmdir(self.temp_dir)

    def test_log_file_handler(self):
        with open(self.config_path, 'w') as f:
            f.write(f"logging:\n  level: 'WARNING'\n  file: '{self.log_path.as_posix()}'\n")

        setup_logging(ConfigManager(str(self.config_path)))
        logging.info("not written")
        logging.warning("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        self.assertEqual(logging.getLogger().level, logging.WARNING)
        content = self.log_path.read_text(encoding='utf-8')
        self.assertIn("written to file", content)
        self.assertNotIn("not written", content)


class TestDataModels(unittest.TestCase):
    """Test data model validation and functionality."""

    def test_record_creation(self):
        record = Record(position=1, data={"id": "7", "parent_id": "", "name": "Root"})

        self.assertEqual(record.get("name"), "Root")
        self.assertIsNone(record.get("missing"))
        self.assertEqual(record.key("id"), "7")
        self.assertTrue(record.is_root("parent_id"))

    def test_record_position_must_be_positive(self):
        with self.assertRaises(ValidationError):
            Record(position=0, data={})

    def test_root_detection(self):
        self.assertTrue(Record(position=1, data={"id": "1"}).is_root("parent_id"))
        self.assertTrue(Record(position=1, data={"id": "1", "parent_id": None}).is_root("parent_id"))
        self.assertTrue(Record(position=1, data={"id": "1", "parent_id": "  "}).is_root("parent_id"))
        self.assertFalse(Record(position=1, data={"id": "1", "parent_id": 0}).is_root("parent_id"))

    def test_id_key_normalization(self):
        self.assertEqual(id_key(1), "1")
        self.assertEqual(id_key(" 1 "), "1")
        self.assertIsNone(id_key(""))
        self.assertIsNone(id_key(None))

    def test_settings_defaults(self):
        settings = ConversionSettings()

        self.assertEqual(settings.id_field, "id")
        self.assertEqual(settings.parent_field, "parent_id")
        self.assertTrue(settings.emit_depth)
        self.assertIsNone(settings.position_field)

    def test_settings_reject_duplicate_names(self):
        with self.assertRaises(ValidationError):
            ConversionSettings(left_field="right")
        with self.assertRaises(ValidationError):
            ConversionSettings(child_count_field="depth")

    def test_settings_allow_depth_name_reuse_when_depth_disabled(self):
        settings = ConversionSettings(emit_depth=False, child_count_field="depth")

        self.assertEqual(settings.child_count_field, "depth")

    def test_settings_reject_empty_names(self):
        with self.assertRaises(ValidationError):
            ConversionSettings(id_field="")
        with self.assertRaises(ValidationError):
            ConversionSettings(position_field="")

    def test_tree_node_with_children(self):
        child = TreeNode(record=Record(position=2, data={"id": "2"}))
        parent = TreeNode(record=Record(position=1, data={"id": "1"}), children=[child])

        self.assertEqual(len(parent.children), 1)
        self.assertFalse(parent.is_leaf)
        self.assertTrue(child.is_leaf)
        self.assertIsNone(parent.left)

    def test_descendant_count_requires_indices(self):
        node = TreeNode(record=Record(position=1, data={"id": "1"}))

        with self.assertRaises(ValueError):
            node.descendant_count

        node.left, node.right = 1, 8
        self.assertEqual(node.descendant_count, 3)

    def test_forest_preorder(self):
        leaf = TreeNode(record=Record(position=3, data={"id": "3"}))
        middle = TreeNode(record=Record(position=2, data={"id": "2"}), children=[leaf])
        other = TreeNode(record=Record(position=4, data={"id": "4"}))
        root = TreeNode(record=Record(position=1, data={"id": "1"}), children=[middle, other])
        forest = Forest(roots=[root])

        visited = [(node.record.get("id"), parent.record.get("id") if parent else None)
                   for node, parent in forest.iter_preorder()]

        self.assertEqual(visited, [("1", None), ("2", "1"), ("3", "2"), ("4", "1")])
        self.assertEqual(forest.node_count(), 4)
        self.assertEqual(len(forest), 4)
        self.assertFalse(forest.is_indexed())


if __name__ == '__main__':
    unittest.main()
