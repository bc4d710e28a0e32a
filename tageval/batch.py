"""
Batch evaluation over a ground truth folder and a predictions folder.

Files are paired by name: <gt_dir>/login.json is compared against
<pred_dir>/login.json. A pair that cannot be evaluated (missing prediction,
unreadable or malformed document) is skipped and reported; it never stops
the rest of the run.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from tqdm import tqdm

from .config import EvaluationConfig, LABEL_EXTENSIONS
from .io import load_label_set
from .metrics import TagCounts, aggregate_results, evaluate_label_sets

# Reasons recorded for skipped pairs
MISSING_PREDICTION = 'missing_prediction'
INVALID_DOCUMENT = 'invalid_document'
READ_ERROR = 'read_error'


@dataclass
class SkippedPair:
    filename: str
    reason: str
    message: str


@dataclass
class BatchResult:
    """
    Outcome of evaluate_directories().

    `report` is None when no pair could be evaluated; callers report
    "no data" instead of an all-zero table.
    """
    report: Optional[Dict[str, TagCounts]]
    evaluated: List[str] = field(default_factory=list)
    skipped: List[SkippedPair] = field(default_factory=list)
    per_image: Dict[str, Dict[str, TagCounts]] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.report is not None


def list_label_files(directory: Union[str, Path], extensions: Sequence[str] = LABEL_EXTENSIONS) -> List[Path]:
    """
    List label files in a directory, sorted by name.

    Raises:
        OSError: If the directory is missing or unreadable
            (FileNotFoundError, NotADirectoryError, PermissionError)
    """
    directory = Path(directory)
    extensions = {e.lower() for e in extensions}
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in extensions),
        key=lambda p: p.name
    )


def _warn(message: str):
    tqdm.write(message, file=sys.stderr)


def evaluate_directories(
    gt_dir: Union[str, Path],
    pred_dir: Union[str, Path],
    config: Optional[EvaluationConfig] = None,
    show_progress: bool = False
) -> BatchResult:
    """
    Evaluate every ground truth file against its same-named prediction file.

    Args:
        gt_dir: Folder of ground truth label-set documents
        pred_dir: Folder of prediction label-set documents
        config: Tags, IoU threshold and unknown-tag policy (defaults if None)
        show_progress: Show a tqdm progress bar on stderr

    Returns:
        BatchResult with the aggregate report over all evaluated pairs

    Raises:
        OSError: If gt_dir cannot be listed. Per-file problems never raise.
    """
    config = config or EvaluationConfig()
    pred_dir = Path(pred_dir)

    gt_files = list_label_files(gt_dir, config.extensions)

    result = BatchResult(report=None)

    for gt_path in tqdm(gt_files, desc="Evaluating", unit="file", disable=not show_progress):
        pred_path = pred_dir / gt_path.name

        if not pred_path.is_file():
            _warn(f"⚠ WARNING: Prediction file not found for {gt_path.name}. Skipping.")
            result.skipped.append(SkippedPair(gt_path.name, MISSING_PREDICTION, str(pred_path)))
            continue

        try:
            ground_truth = load_label_set(gt_path, config.tags, config.unknown_tags)
            prediction = load_label_set(pred_path, config.tags, config.unknown_tags)
        except ValueError as e:
            # JSONDecodeError, UnicodeDecodeError, LabelSetValidationError
            _warn(f"❌ Error processing file {gt_path.name}: {e}")
            result.skipped.append(SkippedPair(gt_path.name, INVALID_DOCUMENT, str(e)))
            continue
        except OSError as e:
            _warn(f"❌ Error reading file {gt_path.name}: {e}")
            result.skipped.append(SkippedPair(gt_path.name, READ_ERROR, str(e)))
            continue

        result.per_image[gt_path.name] = evaluate_label_sets(
            ground_truth, prediction, config.tags, config.iou_threshold
        )
        result.evaluated.append(gt_path.name)

    if result.per_image:
        result.report = aggregate_results(result.per_image.values(), config.tags)

    return result
