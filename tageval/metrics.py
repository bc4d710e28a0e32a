"""
Per-tag detection counts and precision/recall/F1.

Implements:
1. evaluate_label_sets: TP/FP/FN per tag for one image
2. aggregate_results: Sum per-image counts into one report with an Overall row
"""

from dataclasses import asdict, dataclass
from functools import reduce
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .config import IOU_THRESHOLD, OVERALL_KEY
from .labels import LabelSet
from .matching import MatchResult, match_label_sets


def compute_prf(tp: int, fp: int, fn: int) -> Tuple[float, float, float]:
    """Precision, recall and F1 from raw counts; 0.0 wherever undefined."""
    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
    f1 = 2 * (precision * recall) / (precision + recall) if (precision + recall) > 0 else 0.0
    return precision, recall, f1


@dataclass(frozen=True)
class TagCounts:
    """
    Match counts for one tag.

    Invariants:
        ground_truth_count == true_positives + false_negatives
        predicted_count == true_positives + false_positives
    """
    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0
    ground_truth_count: int = 0
    predicted_count: int = 0

    @classmethod
    def from_match(cls, result: MatchResult) -> 'TagCounts':
        tp = len(result.matches)
        fp = len(result.unmatched_preds)
        fn = len(result.unmatched_gts)
        return cls(
            true_positives=tp,
            false_positives=fp,
            false_negatives=fn,
            ground_truth_count=tp + fn,
            predicted_count=tp + fp,
        )

    def __add__(self, other: 'TagCounts') -> 'TagCounts':
        if not isinstance(other, TagCounts):
            return NotImplemented
        return TagCounts(
            true_positives=self.true_positives + other.true_positives,
            false_positives=self.false_positives + other.false_positives,
            false_negatives=self.false_negatives + other.false_negatives,
            ground_truth_count=self.ground_truth_count + other.ground_truth_count,
            predicted_count=self.predicted_count + other.predicted_count,
        )

    @property
    def precision(self) -> float:
        return compute_prf(self.true_positives, self.false_positives, self.false_negatives)[0]

    @property
    def recall(self) -> float:
        return compute_prf(self.true_positives, self.false_positives, self.false_negatives)[1]

    @property
    def f1_score(self) -> float:
        return compute_prf(self.true_positives, self.false_positives, self.false_negatives)[2]

    def to_dict(self, round_digits: Optional[int] = None) -> Dict:
        """Counts plus rates; rates optionally rounded for stable output."""
        data = asdict(self)
        precision, recall, f1 = compute_prf(
            self.true_positives, self.false_positives, self.false_negatives
        )
        if round_digits is not None:
            precision, recall, f1 = (round(v, round_digits) for v in (precision, recall, f1))
        data.update({'precision': precision, 'recall': recall, 'f1_score': f1})
        return data


def sum_counts(counts: Iterable[TagCounts]) -> TagCounts:
    return reduce(lambda a, b: a + b, counts, TagCounts())


def evaluate_label_sets(
    ground_truth: LabelSet,
    prediction: LabelSet,
    tags: Sequence[str],
    iou_threshold: float = IOU_THRESHOLD
) -> Dict[str, TagCounts]:
    """
    Evaluate one image: TP/FP/FN per tag.

    Args:
        ground_truth: Human-drawn labels for the image
        prediction: Predicted labels for the same image
        tags: Tags to evaluate, in report order
        iou_threshold: Minimum IoU for a valid match (default: 0.5)

    Returns:
        Dict mapping tag to TagCounts, in `tags` order

    Example:
        >>> counts = evaluate_label_sets(gt, pred, ['Button', 'Input'])
        >>> counts['Button'].precision
        1.0
    """
    per_tag = match_label_sets(ground_truth, prediction, tags, iou_threshold)
    return {tag: TagCounts.from_match(match.result) for tag, match in per_tag.items()}


def aggregate_results(
    per_image_metrics: Iterable[Dict[str, TagCounts]],
    tags: Sequence[str]
) -> Dict[str, TagCounts]:
    """
    Sum per-image counts into a single report.

    The Overall row holds counts summed over every tag; its rates are
    recomputed from those counts rather than averaged across tags, so tags
    with few samples do not dominate. Summation makes the result independent
    of image order.

    Args:
        per_image_metrics: Iterable of dicts from evaluate_label_sets()
        tags: Tags to report; tags missing from an image contribute zero

    Returns:
        {
            "Button": TagCounts(...),
            ...,
            "Overall": TagCounts(...)
        }
    """
    totals = {tag: TagCounts() for tag in tags}

    for image_metrics in per_image_metrics:
        for tag in tags:
            counts = image_metrics.get(tag)
            if counts is not None:
                totals[tag] = totals[tag] + counts

    report = dict(totals)
    report[OVERALL_KEY] = sum_counts(totals.values())
    return report
