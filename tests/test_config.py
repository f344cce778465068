import os
import tempfile
import unittest
from unittest.mock import patch

from modal_pad.config import CONFIG_ENV_VAR, DEFAULT_CONFIG, deep_merge, load_config


class TestDeepMerge(unittest.TestCase):

    def test_nested_override(self):
        base = {'a': 1, 'b': {'x': 10, 'y': 20}}
        merged = deep_merge(base, {'b': {'y': 99}, 'c': 3})
        self.assertEqual(merged, {'a': 1, 'b': {'x': 10, 'y': 99}, 'c': 3})
        self.assertEqual(base, {'a': 1, 'b': {'x': 10, 'y': 20}})

    def test_scalar_replaces_dict(self):
        self.assertEqual(deep_merge({'a': {'x': 1}}, {'a': 2}), {'a': 2})


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "config.toml")

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, text):
        with open(self.path, "w", encoding="utf-8") as fh:
            fh.write(text)

    def test_missing_file_gives_defaults(self):
        config = load_config(os.path.join(self.tmpdir.name, "absent.toml"))
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertIsNot(config["editor"], DEFAULT_CONFIG["editor"])

    def test_user_values_override_defaults(self):
        self.write('[editor]\nencoding = "latin-1"\n\n[colors]\nstatus = "#FF0000"\n')
        config = load_config(self.path)
        self.assertEqual(config["editor"]["encoding"], "latin-1")
        self.assertTrue(config["editor"]["detect_encoding"])
        self.assertEqual(config["colors"]["status"], "#FF0000")
        self.assertEqual(config["colors"]["error"], DEFAULT_CONFIG["colors"]["error"])

    def test_invalid_toml_falls_back_to_defaults(self):
        self.write("[editor\nencoding = ")
        with self.assertLogs("modal_pad.config", level="ERROR"):
            config = load_config(self.path)
        self.assertEqual(config, DEFAULT_CONFIG)

    def test_malformed_section_is_replaced(self):
        self.write("editor = 1\n")
        config = load_config(self.path)
        self.assertEqual(config["editor"], DEFAULT_CONFIG["editor"])

    def test_environment_variable_selects_file(self):
        self.write("[editor]\nescape_delay = 100\n")
        with patch.dict(os.environ, {CONFIG_ENV_VAR: self.path}):
            config = load_config()
        self.assertEqual(config["editor"]["escape_delay"], 100)

    def test_unknown_encoding_is_replaced(self):
        self.write('[editor]\nencoding = "utf8-typo"\n')
        with self.assertLogs("modal_pad.config", level="WARNING"):
            config = load_config(self.path)
        self.assertEqual(config["editor"]["encoding"], "utf-8")

    def test_known_encoding_alias_is_kept(self):
        self.write('[editor]\nencoding = "cp1252"\n')
        self.assertEqual(load_config(self.path)["editor"]["encoding"], "cp1252")

    def test_invalid_escape_delay_is_replaced(self):
        for value in ('"fast"', "true", "-5", "2.5"):
            self.write(f"[editor]\nescape_delay = {value}\n")
            config = load_config(self.path)
            self.assertEqual(config["editor"]["escape_delay"], 25, value)

    def test_defaults_are_not_mutated(self):
        self.write('[logging]\nfile_level = "INFO"\n')
        load_config(self.path)
        self.assertEqual(DEFAULT_CONFIG["logging"]["file_level"], "DEBUG")


if __name__ == '__main__':
    unittest.main()
