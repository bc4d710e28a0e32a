"""
Typed label sets and document validation.

A label-set document (ground truth or prediction) looks like:
    {
        "image_filename": "login.png",
        "labels": [
            {"tag": "Button", "bbox": [x1, y1, x2, y2]},
            ...
        ]
    }
"""

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Dict, List, Optional, Sequence, Tuple

from .config import UNKNOWN_TAG_POLICIES

Box = Tuple[float, float, float, float]


class LabelSetValidationError(ValueError):
    """Raised when a label-set document does not match the expected schema."""

    def __init__(self, message: str, source: Optional[str] = None, field_path: Optional[str] = None):
        self.source = source
        self.field_path = field_path

        prefix = f"{source}: " if source else ""
        where = f"{field_path}: " if field_path else ""
        super().__init__(f"{prefix}{where}{message}")


@dataclass(frozen=True)
class Label:
    tag: str
    bbox: Box
    id: Optional[str] = None

    def to_dict(self) -> Dict:
        data = {'tag': self.tag, 'bbox': list(self.bbox)}
        if self.id is not None:
            data['id'] = self.id
        return data


@dataclass(frozen=True)
class LabelSet:
    image_filename: str
    labels: Tuple[Label, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.labels)

    def with_tag(self, tag: str) -> List[Label]:
        """Labels of one tag, in document order."""
        return [label for label in self.labels if label.tag == tag]

    def to_dict(self, include_ids: bool = False) -> Dict:
        labels = []
        for label in self.labels:
            data = label.to_dict()
            if not include_ids:
                data.pop('id', None)
            labels.append(data)
        return {'image_filename': self.image_filename, 'labels': labels}


def _parse_bbox(value, source: Optional[str], field_path: str) -> Box:
    if not isinstance(value, (list, tuple)) or len(value) != 4:
        raise LabelSetValidationError(
            f"expected a list of 4 numbers, got {value!r}", source, field_path
        )

    coords = []
    for coord in value:
        # bool is a Real subclass; True/False are never coordinates
        if isinstance(coord, bool) or not isinstance(coord, Real):
            raise LabelSetValidationError(f"non-numeric coordinate {coord!r}", source, field_path)
        try:
            finite = math.isfinite(coord)
        except OverflowError:
            raise LabelSetValidationError("coordinate out of float range", source, field_path) from None
        if not finite:
            raise LabelSetValidationError(f"non-finite coordinate {coord!r}", source, field_path)
        coords.append(coord)

    return tuple(coords)


def parse_label(
    data,
    index: int,
    tags: Optional[Sequence[str]] = None,
    unknown_tags: str = 'ignore',
    source: Optional[str] = None,
) -> Label:
    """Validate one entry of the `labels` array."""
    field_path = f"labels[{index}]"

    if not isinstance(data, dict):
        raise LabelSetValidationError(f"expected an object, got {type(data).__name__}", source, field_path)

    tag = data.get('tag')
    if not isinstance(tag, str):
        raise LabelSetValidationError(f"'tag' must be a string, got {tag!r}", source, f"{field_path}.tag")

    if tags is not None and unknown_tags == 'reject' and tag not in tags:
        raise LabelSetValidationError(
            f"unknown tag '{tag}' (expected one of {list(tags)})", source, f"{field_path}.tag"
        )

    if 'bbox' not in data:
        raise LabelSetValidationError("missing 'bbox'", source, field_path)
    bbox = _parse_bbox(data['bbox'], source, f"{field_path}.bbox")

    label_id = data.get('id')
    if label_id is not None:
        if isinstance(label_id, bool) or not isinstance(label_id, (str, int)):
            raise LabelSetValidationError(
                f"'id' must be a string or integer, got {label_id!r}", source, f"{field_path}.id"
            )
        label_id = str(label_id)

    return Label(tag=tag, bbox=bbox, id=label_id)


def parse_label_set(
    data,
    tags: Optional[Sequence[str]] = None,
    unknown_tags: str = 'ignore',
    source: Optional[str] = None,
    default_filename: Optional[str] = None,
) -> LabelSet:
    """
    Validate a decoded label-set document and build a LabelSet.

    Args:
        data: Decoded JSON document
        tags: Recognized tag names (None accepts any tag)
        unknown_tags: 'ignore' keeps labels with unrecognized tags (matching
                      skips them), 'reject' raises LabelSetValidationError
        source: Document origin used in error messages (e.g. file path)
        default_filename: image_filename to use when the document has none

    Returns:
        LabelSet with labels in document order

    Raises:
        LabelSetValidationError: If the document does not match the schema
    """
    if unknown_tags not in UNKNOWN_TAG_POLICIES:
        raise ValueError(f"unknown_tags must be one of {UNKNOWN_TAG_POLICIES}, got '{unknown_tags}'")

    if not isinstance(data, dict):
        raise LabelSetValidationError(f"expected a JSON object, got {type(data).__name__}", source)

    image_filename = data.get('image_filename', default_filename)
    if image_filename is None:
        raise LabelSetValidationError("missing 'image_filename'", source)
    if not isinstance(image_filename, str):
        raise LabelSetValidationError(
            f"'image_filename' must be a string, got {image_filename!r}", source, 'image_filename'
        )

    if 'labels' not in data:
        raise LabelSetValidationError("missing 'labels'", source)
    raw_labels = data['labels']
    if not isinstance(raw_labels, list):
        raise LabelSetValidationError(
            f"'labels' must be a list, got {type(raw_labels).__name__}", source, 'labels'
        )

    labels = tuple(
        parse_label(item, i, tags=tags, unknown_tags=unknown_tags, source=source)
        for i, item in enumerate(raw_labels)
    )
    return LabelSet(image_filename=image_filename, labels=labels)
