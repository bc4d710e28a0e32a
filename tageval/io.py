"""
I/O utilities for label-set documents and evaluation reports.
"""

import csv
import json
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from .labels import LabelSet, parse_label_set
from .metrics import TagCounts
from .config import OVERALL_KEY

PathLike = Union[str, Path]


def load_label_set(
    path: PathLike,
    tags: Optional[Sequence[str]] = None,
    unknown_tags: str = 'ignore'
) -> LabelSet:
    """
    Load and validate a ground truth or prediction document.

    Args:
        path: Path to a label-set JSON file
        tags: Recognized tag names (None accepts any tag)
        unknown_tags: 'ignore' or 'reject' (see parse_label_set)

    Returns:
        LabelSet. When the document has no image_filename, the JSON file
        name is used instead.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file is not valid JSON
        LabelSetValidationError: If the document does not match the schema
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Label file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    return parse_label_set(
        data,
        tags=tags,
        unknown_tags=unknown_tags,
        source=str(path),
        default_filename=path.name,
    )


def save_label_set(label_set: LabelSet, output_path: PathLike, include_ids: bool = False):
    """
    Export a label set as a ground truth / prediction document.

    Args:
        label_set: Labels to write
        output_path: Path to save JSON file
        include_ids: Also write each label's id (when set)
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(label_set.to_dict(include_ids=include_ids), f, indent=2)


def save_report(document: Dict, output_path: PathLike):
    """
    Save an evaluation document to JSON file.

    Args:
        document: Dict from build_batch_document() or build_image_document()
        output_path: Path to save JSON file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=2)


def save_summary_csv(report: Dict[str, TagCounts], tags: Sequence[str], output_path: PathLike):
    """
    Save a per-tag summary CSV for easy copy-paste into reports.

    Args:
        report: Dict from aggregate_results()
        tags: Tag rows to write; the Overall row is appended
        output_path: Path to save CSV file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow([
            'tag', 'gt_count', 'pred_count', 'tp', 'fp', 'fn', 'precision', 'recall', 'f1'
        ])

        for name in list(tags) + [OVERALL_KEY]:
            counts = report.get(name)
            if counts is None:
                continue
            writer.writerow([
                name,
                counts.ground_truth_count,
                counts.predicted_count,
                counts.true_positives,
                counts.false_positives,
                counts.false_negatives,
                f"{counts.precision:.4f}",
                f"{counts.recall:.4f}",
                f"{counts.f1_score:.4f}"
            ])
