"""
IoU computation and greedy box matching for tag evaluation.
"""

from typing import Dict, List, NamedTuple, Sequence, Tuple
import numpy as np

from .config import IOU_THRESHOLD
from .labels import Label, LabelSet


class MatchResult(NamedTuple):
    """Partition of one tag's boxes into matched and unmatched indices."""
    matches: List[Tuple[int, int]]
    unmatched_gts: List[int]
    unmatched_preds: List[int]


class TagMatch(NamedTuple):
    gt_labels: List[Label]
    pred_labels: List[Label]
    result: MatchResult


def compute_iou(box1: Sequence[float], box2: Sequence[float]) -> float:
    """
    Compute Intersection over Union (IoU) between two bounding boxes.

    Args:
        box1: [x1, y1, x2, y2] in xyxy format
        box2: [x1, y1, x2, y2] in xyxy format

    Returns:
        IoU score (0.0 to 1.0). Zero-area unions give 0.0.
    """
    # Extract coordinates
    x1_1, y1_1, x2_1, y2_1 = box1
    x1_2, y1_2, x2_2, y2_2 = box2

    # Compute intersection area
    inter_x1 = max(x1_1, x1_2)
    inter_y1 = max(y1_1, y1_2)
    inter_x2 = min(x2_1, x2_2)
    inter_y2 = min(y2_1, y2_2)

    inter_width = max(0, inter_x2 - inter_x1)
    inter_height = max(0, inter_y2 - inter_y1)
    inter_area = inter_width * inter_height

    # Compute union area
    box1_area = (x2_1 - x1_1) * (y2_1 - y1_1)
    box2_area = (x2_2 - x1_2) * (y2_2 - y1_2)
    union_area = box1_area + box2_area - inter_area

    # Avoid division by zero
    if union_area == 0:
        return 0.0

    return float(inter_area / union_area)


def compute_iou_matrix(gt_boxes: Sequence[Sequence[float]], pred_boxes: Sequence[Sequence[float]]) -> np.ndarray:
    """IoU for every (gt, pred) pair; rows = ground truth, cols = predictions."""
    iou_matrix = np.zeros((len(gt_boxes), len(pred_boxes)))
    for i, gt_box in enumerate(gt_boxes):
        for j, pred_box in enumerate(pred_boxes):
            iou_matrix[i, j] = compute_iou(gt_box, pred_box)
    return iou_matrix


def greedy_match_boxes(
    gt_boxes: Sequence[Sequence[float]],
    pred_boxes: Sequence[Sequence[float]],
    iou_threshold: float = IOU_THRESHOLD
) -> MatchResult:
    """
    Greedy matching of ground truth boxes to predicted boxes.

    Matching strategy:
    - Visit ground truth boxes in their given order
    - For each, pick the not-yet-used prediction with the highest IoU
      (ties keep the earliest prediction)
    - Match is valid if IoU >= iou_threshold; a used prediction is never
      reconsidered and earlier decisions are never revisited

    This is not an optimal assignment: an earlier ground truth box can claim
    a prediction that a later one overlaps more.

    Args:
        gt_boxes: List of [x1, y1, x2, y2] ground truth boxes
        pred_boxes: List of [x1, y1, x2, y2] predicted boxes
        iou_threshold: Minimum IoU for a valid match

    Returns:
        MatchResult with:
        - matches: List of (gt_idx, pred_idx) tuples in ground truth order
        - unmatched_gts: GT indices without a match (FN)
        - unmatched_preds: pred indices without a match (FP)
    """
    if len(pred_boxes) == 0:
        # No predictions: all GTs are unmatched (FN)
        return MatchResult([], list(range(len(gt_boxes))), [])

    if len(gt_boxes) == 0:
        # No ground truth: all predictions are unmatched (FP)
        return MatchResult([], [], list(range(len(pred_boxes))))

    iou_matrix = compute_iou_matrix(gt_boxes, pred_boxes)

    matched_preds = set()
    matches = []
    unmatched_gts = []

    for gt_idx in range(len(gt_boxes)):
        best_iou = 0.0
        best_pred_idx = -1

        for pred_idx in range(len(pred_boxes)):
            if pred_idx in matched_preds:
                continue
            # Strict '>' keeps the earliest prediction on ties
            if iou_matrix[gt_idx, pred_idx] > best_iou:
                best_iou = iou_matrix[gt_idx, pred_idx]
                best_pred_idx = pred_idx

        if best_pred_idx >= 0 and best_iou >= iou_threshold:
            matches.append((gt_idx, best_pred_idx))
            matched_preds.add(best_pred_idx)
        else:
            unmatched_gts.append(gt_idx)

    unmatched_preds = [i for i in range(len(pred_boxes)) if i not in matched_preds]

    return MatchResult(matches, unmatched_gts, unmatched_preds)


def match_label_sets(
    ground_truth: LabelSet,
    prediction: LabelSet,
    tags: Sequence[str],
    iou_threshold: float = IOU_THRESHOLD
) -> Dict[str, TagMatch]:
    """
    Match one image's predictions to its ground truth, tag by tag.

    Labels whose tag is not in `tags` take no part in matching.

    Returns:
        Dict mapping tag to TagMatch(gt_labels, pred_labels, result), with
        indices in `result` referring to the per-tag label lists
    """
    per_tag = {}
    for tag in tags:
        gt_labels = ground_truth.with_tag(tag)
        pred_labels = prediction.with_tag(tag)

        result = greedy_match_boxes(
            [label.bbox for label in gt_labels],
            [label.bbox for label in pred_labels],
            iou_threshold
        )
        per_tag[tag] = TagMatch(gt_labels, pred_labels, result)

    return per_tag
