"""
Shared test fixtures.

Label-set documents are written to pytest's tmp_path so every test works
on its own folders.
"""

import json
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
scripts_dir = project_root / "scripts"
for path in (project_root, scripts_dir):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from tageval.labels import Label, LabelSet  # noqa: E402


def make_label_set(labels, image_filename="screen.png") -> LabelSet:
    """Build a LabelSet from (tag, bbox) pairs."""
    return LabelSet(
        image_filename=image_filename,
        labels=tuple(Label(tag=tag, bbox=tuple(bbox)) for tag, bbox in labels),
    )


def make_document(labels, image_filename="screen.png") -> dict:
    return {
        "image_filename": image_filename,
        "labels": [{"tag": tag, "bbox": list(bbox)} for tag, bbox in labels],
    }


@pytest.fixture
def write_json():
    """Write any JSON-serializable object (or raw text) to a path."""
    def _write(path: Path, data) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def label_dirs(tmp_path: Path):
    """Empty ground truth and prediction folders."""
    gt_dir = tmp_path / "ground_truth"
    pred_dir = tmp_path / "predictions"
    gt_dir.mkdir()
    pred_dir.mkdir()
    return gt_dir, pred_dir


@pytest.fixture
def write_pair(label_dirs, write_json):
    """Write a ground truth / prediction pair with the same file name."""
    gt_dir, pred_dir = label_dirs

    def _write(name: str, gt_labels, pred_labels):
        image_filename = Path(name).with_suffix(".png").name
        write_json(gt_dir / name, make_document(gt_labels, image_filename))
        write_json(pred_dir / name, make_document(pred_labels, image_filename))

    return _write
