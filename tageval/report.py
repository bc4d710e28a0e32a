"""
Rendering of evaluation results: terminal table and JSON-ready documents.

Formatting never changes the numbers; percentages are rounded for display
only.
"""

from typing import Dict, Optional, Sequence

from .config import IMAGE_OVERALL_KEY, IOU_THRESHOLD, OVERALL_KEY
from .metrics import TagCounts, sum_counts

TABLE_TITLE = "--- Tagging Performance Evaluation ---"

# (header, width) for the numeric columns
_COUNT_COLUMNS = (
    ('GT Count', 8),
    ('Pred Count', 10),
    ('TP', 4),
    ('FP', 4),
    ('FN', 4),
)
_RATE_COLUMNS = (
    ('Precision', 9),
    ('Recall', 6),
    ('F1-Score', 8),
)


def format_percent(value: float) -> str:
    """Fraction (0-1) as a percentage with 2 decimals, e.g. 0.4286 -> '42.86'."""
    return f"{value * 100:.2f}"


def _format_row(name: str, counts: TagCounts, tag_width: int) -> str:
    count_values = (
        counts.ground_truth_count,
        counts.predicted_count,
        counts.true_positives,
        counts.false_positives,
        counts.false_negatives,
    )
    rate_values = (counts.precision, counts.recall, counts.f1_score)

    cells = [name.ljust(tag_width)]
    cells += [str(v).ljust(w) for v, (_, w) in zip(count_values, _COUNT_COLUMNS)]
    cells += [format_percent(v).rjust(w) for v, (_, w) in zip(rate_values, _RATE_COLUMNS)]
    return " | ".join(cells)


def format_report_table(
    report: Dict[str, TagCounts],
    tags: Sequence[str],
    iou_threshold: float = IOU_THRESHOLD,
    title: str = TABLE_TITLE,
    overall_key: str = OVERALL_KEY
) -> str:
    """
    Render a report as a pipe-delimited table.

    Example output:
        Tag       | GT Count | Pred Count | TP   | FP   | FN   | Precision | Recall | F1-Score
        ----------|----------|------------|------|------|------|-----------|--------|---------
        Button    | 4        | 5          | 3    | 2    | 1    |     60.00 |  75.00 |    66.67

    Args:
        report: Dict from aggregate_results() (or any tag -> TagCounts dict)
        tags: Tag rows to print, in order; the overall row is appended
        iou_threshold: Threshold shown in the header
        title: First line of the output
        overall_key: Key of the aggregate row in `report`

    Returns:
        Multi-line string (no trailing newline)
    """
    tag_width = max([len('Tag'), 9] + [len(t) for t in tags] + [len(overall_key)])
    columns = [('Tag', tag_width)] + list(_COUNT_COLUMNS) + list(_RATE_COLUMNS)

    header = " | ".join(name.ljust(width) for name, width in columns).rstrip()
    separator = "|".join("-" * (width + 2) for _, width in columns)
    # First and last cells have only one neighbouring space
    separator = separator[1:-1]

    lines = [
        title,
        f"IoU Threshold: {iou_threshold}",
        "",
        header,
        separator,
    ]

    for name in list(tags) + [overall_key]:
        counts = report.get(name)
        if counts is not None:
            lines.append(_format_row(name, counts, tag_width))

    lines.append("-" * len(separator))
    return "\n".join(lines)


def build_batch_document(
    report: Dict[str, TagCounts],
    tags: Sequence[str],
    iou_threshold: float = IOU_THRESHOLD,
    images_evaluated: Optional[int] = None,
    round_digits: Optional[int] = None
) -> Dict:
    """
    Structured form of an aggregate report, ready for json.dump.

    Returns:
        {
            "iou_threshold": 0.5,
            "images_evaluated": 12,   # only when given
            "summary": {
                "Button": {"true_positives": 9, ..., "precision": 0.9, "recall": 0.75, "f1_score": 0.818},
                ...,
                "Overall": {...}
            }
        }
    """
    document = {'iou_threshold': iou_threshold}
    if images_evaluated is not None:
        document['images_evaluated'] = images_evaluated

    summary = {}
    for name in list(tags) + [OVERALL_KEY]:
        if name in report:
            summary[name] = report[name].to_dict(round_digits)
    document['summary'] = summary

    return document


def build_image_document(
    image_filename: str,
    image_metrics: Dict[str, TagCounts],
    tags: Sequence[str],
    iou_threshold: float = IOU_THRESHOLD,
    round_digits: Optional[int] = 3
) -> Dict:
    """
    Structured evaluation of a single image.

    Rates are rounded to `round_digits` (3 by default) for stable files.
    The `overall` entry sums the per-tag counts.

    Returns:
        {
            "image_filename": "login.png",
            "iou_threshold": 0.5,
            "summary": {
                "Button": {...},
                ...,
                "overall": {...}
            }
        }
    """
    summary = {}
    for tag in tags:
        summary[tag] = image_metrics.get(tag, TagCounts()).to_dict(round_digits)

    overall = sum_counts(image_metrics.get(tag, TagCounts()) for tag in tags)
    summary[IMAGE_OVERALL_KEY] = overall.to_dict(round_digits)

    return {
        'image_filename': image_filename,
        'iou_threshold': iou_threshold,
        'summary': summary,
    }
