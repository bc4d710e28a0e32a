"""
Evaluation settings: tag set, IoU threshold and unknown-tag policy.

All components receive the same EvaluationConfig so the tag list is
defined in exactly one place.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import yaml

DEFAULT_TAGS: Tuple[str, ...] = ('Button', 'Input', 'Radio', 'Dropdown')
IOU_THRESHOLD = 0.5

# Summary keys for the pseudo-category holding totals
OVERALL_KEY = 'Overall'
IMAGE_OVERALL_KEY = 'overall'

LABEL_EXTENSIONS: Tuple[str, ...] = ('.json',)
UNKNOWN_TAG_POLICIES = ('ignore', 'reject')


@dataclass(frozen=True)
class EvaluationConfig:
    tags: Tuple[str, ...] = DEFAULT_TAGS
    iou_threshold: float = IOU_THRESHOLD
    unknown_tags: str = 'ignore'
    extensions: Tuple[str, ...] = LABEL_EXTENSIONS

    def __post_init__(self):
        object.__setattr__(self, 'tags', tuple(self.tags))
        object.__setattr__(self, 'extensions', tuple(e.lower() for e in self.extensions))
        validate_tags(self.tags)

        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError(f"iou_threshold must be in [0, 1], got {self.iou_threshold}")
        if self.unknown_tags not in UNKNOWN_TAG_POLICIES:
            raise ValueError(
                f"unknown_tags must be one of {UNKNOWN_TAG_POLICIES}, got '{self.unknown_tags}'"
            )
        if not self.extensions:
            raise ValueError("At least one label file extension is required")

    def with_overrides(self, **changes) -> 'EvaluationConfig':
        """Return a copy with the non-None values in `changes` applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)


def validate_tags(tags: Tuple[str, ...]):
    """Raise ValueError unless `tags` is a non-empty list of unique names."""
    if not tags:
        raise ValueError("Tag list must not be empty")

    seen = set()
    for tag in tags:
        if not isinstance(tag, str) or not tag.strip():
            raise ValueError(f"Tag names must be non-empty strings, got {tag!r}")
        if tag in (OVERALL_KEY, IMAGE_OVERALL_KEY):
            raise ValueError(f"'{tag}' is reserved for the aggregate row")
        if tag in seen:
            raise ValueError(f"Duplicate tag: '{tag}'")
        seen.add(tag)


def parse_tag_names(names: Union[List[str], Dict]) -> Tuple[str, ...]:
    """
    Normalize a `tags` entry from YAML.

    Both list and dict formats are accepted, like the `names` entry of a
    data.yaml file:
        tags: [Button, Input]
        tags: {0: Button, 1: Input}
    """
    if isinstance(names, list):
        return tuple(names)
    elif isinstance(names, dict):
        return tuple(names[k] for k in sorted(names.keys(), key=int))
    else:
        raise ValueError(f"Unexpected 'tags' format in config: {type(names)}")


def parse_threshold(value) -> float:
    """`iou_threshold` from YAML as a float; ValueError for anything non-numeric."""
    if isinstance(value, bool):
        raise ValueError(f"iou_threshold must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"iou_threshold must be a number, got {value!r}") from None


def parse_extensions(value) -> Tuple[str, ...]:
    """`extensions` from YAML: one string or a list of strings."""
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(e, str) for e in value):
        return tuple(value)
    raise ValueError(f"extensions must be a string or a list of strings, got {value!r}")


def load_config(config_path: Optional[Union[str, Path]] = None) -> EvaluationConfig:
    """
    Load evaluation settings from a YAML file.

    Args:
        config_path: Path to YAML file. None returns the defaults.

    Returns:
        EvaluationConfig

    Example YAML:
        tags: [Button, Input, Radio, Dropdown, Checkbox]
        iou_threshold: 0.5
        unknown_tags: reject
        extensions: [.json]
    """
    if config_path is None:
        return EvaluationConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    kwargs = {}
    if 'tags' in data:
        kwargs['tags'] = parse_tag_names(data['tags'])
    if 'iou_threshold' in data:
        kwargs['iou_threshold'] = parse_threshold(data['iou_threshold'])
    if 'unknown_tags' in data:
        kwargs['unknown_tags'] = str(data['unknown_tags'])
    if 'extensions' in data:
        kwargs['extensions'] = parse_extensions(data['extensions'])

    return EvaluationConfig(**kwargs)
