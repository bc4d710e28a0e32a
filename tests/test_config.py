"""
Tests for evaluation settings and YAML loading.
"""

import pytest

from tageval.config import (
    DEFAULT_TAGS,
    IOU_THRESHOLD,
    EvaluationConfig,
    load_config,
    parse_tag_names,
)


class TestEvaluationConfig:
    """Test EvaluationConfig validation."""

    def test_defaults(self):
        config = EvaluationConfig()

        assert config.tags == ('Button', 'Input', 'Radio', 'Dropdown')
        assert config.iou_threshold == IOU_THRESHOLD == 0.5
        assert config.unknown_tags == 'ignore'
        assert config.extensions == ('.json',)

    def test_tags_become_tuple(self):
        config = EvaluationConfig(tags=['Button', 'Checkbox'])

        assert config.tags == ('Button', 'Checkbox')

    def test_extensions_lowercased(self):
        assert EvaluationConfig(extensions=['.JSON']).extensions == ('.json',)

    @pytest.mark.parametrize("kwargs", [
        {'tags': []},
        {'tags': ['Button', 'Button']},
        {'tags': ['Button', '']},
        {'tags': ['Overall']},
        {'tags': ['overall']},
        {'iou_threshold': 1.5},
        {'iou_threshold': -0.1},
        {'unknown_tags': 'drop'},
        {'extensions': []},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            EvaluationConfig(**kwargs)

    def test_with_overrides_skips_none(self):
        config = EvaluationConfig().with_overrides(iou_threshold=None, unknown_tags='reject')

        assert config.iou_threshold == 0.5
        assert config.unknown_tags == 'reject'

    def test_with_overrides_validates(self):
        with pytest.raises(ValueError):
            EvaluationConfig().with_overrides(iou_threshold=2.0)


class TestParseTagNames:
    """Test list and dict tag formats."""

    def test_list(self):
        assert parse_tag_names(['Button', 'Input']) == ('Button', 'Input')

    def test_dict_ordered_by_id(self):
        assert parse_tag_names({1: 'Input', 0: 'Button', '2': 'Radio'}) == ('Button', 'Input', 'Radio')

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Unexpected 'tags' format"):
            parse_tag_names('Button')


class TestLoadConfig:
    """Test YAML loading."""

    def test_none_returns_defaults(self):
        assert load_config(None) == EvaluationConfig()

    def test_full_file(self, tmp_path):
        path = tmp_path / "tags.yaml"
        path.write_text(
            "tags: [Button, Checkbox]\n"
            "iou_threshold: 0.75\n"
            "unknown_tags: reject\n"
            "extensions: .json\n"
        )

        config = load_config(path)

        assert config.tags == ('Button', 'Checkbox')
        assert config.iou_threshold == 0.75
        assert config.unknown_tags == 'reject'
        assert config.extensions == ('.json',)

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "tags.yaml"
        path.write_text("iou_threshold: 0.3\n")

        config = load_config(path)

        assert config.tags == DEFAULT_TAGS
        assert config.iou_threshold == 0.3

    def test_dict_tags(self, tmp_path):
        path = tmp_path / "tags.yaml"
        path.write_text("tags:\n  0: Button\n  1: Link\n")

        assert load_config(path).tags == ('Button', 'Link')

    def test_empty_file(self, tmp_path):
        path = tmp_path / "tags.yaml"
        path.write_text("")

        assert load_config(path) == EvaluationConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "tags.yaml"
        path.write_text("- Button\n- Input\n")

        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    @pytest.mark.parametrize("text, message", [
        ("iou_threshold:\n", "iou_threshold must be a number"),
        ("iou_threshold: [0.5]\n", "iou_threshold must be a number"),
        ("iou_threshold: abc\n", "iou_threshold must be a number"),
        ("iou_threshold: true\n", "iou_threshold must be a number"),
        ("extensions: 5\n", "extensions must be"),
        ("extensions: [5]\n", "extensions must be"),
        ("extensions:\n", "extensions must be"),
        ("tags: [Button\n", "Invalid YAML"),
    ])
    def test_bad_values_raise_value_error(self, tmp_path, text, message):
        path = tmp_path / "tags.yaml"
        path.write_text(text)

        with pytest.raises(ValueError, match=message):
            load_config(path)

    def test_numeric_string_threshold(self, tmp_path):
        path = tmp_path / "tags.yaml"
        path.write_text("iou_threshold: '0.75'\n")

        assert load_config(path).iou_threshold == 0.75

    def test_single_extension_string(self, tmp_path):
        path = tmp_path / "tags.yaml"
        path.write_text("extensions: .JSON\n")

        assert load_config(path).extensions == ('.json',)
