"""
Evaluate Image - Single Screenshot Evaluation
=============================================
Compare one ground truth label file against one prediction label file and
write a per-image evaluation JSON (same matcher and counts as the batch
folder evaluation).

Usage:
    python scripts/evaluate_image.py ground_truth_login.json predictions_login.json

    # Custom output path and tag set
    python scripts/evaluate_image.py gt.json pred.json \\
        --output results/evaluation_login.json \\
        --config tags.yaml
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path to import tageval module
sys.path.insert(0, str(Path(__file__).parent.parent))

from tageval.config import IMAGE_OVERALL_KEY, load_config
from tageval.io import load_label_set, save_report
from tageval.metrics import evaluate_label_sets, sum_counts
from tageval.report import build_image_document, format_report_table


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Evaluate predicted UI tags for a single image"
    )
    parser.add_argument("ground_truth", type=str, help="Ground truth JSON file")
    parser.add_argument("predictions", type=str, help="Prediction JSON file")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON path (default: evaluation_<image name>.json next to the predictions)"
    )
    parser.add_argument("--config", type=str, default=None, help="YAML file with tags / iou_threshold")
    parser.add_argument(
        "--iou_threshold",
        type=float,
        default=None,
        help="IoU threshold for matching (default: 0.5 or the config value)"
    )
    return parser.parse_args(argv)


def default_output_path(image_filename: str, predictions_path: str) -> Path:
    """evaluation_<image stem>.json in the predictions file's folder."""
    return Path(predictions_path).parent / f"evaluation_{Path(image_filename).stem}.json"


def main(argv=None):
    args = parse_args(argv)

    try:
        config = load_config(args.config).with_overrides(iou_threshold=args.iou_threshold)
        ground_truth = load_label_set(args.ground_truth, config.tags, config.unknown_tags)
        prediction = load_label_set(args.predictions, config.tags, config.unknown_tags)
    except (OSError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    print(f"✓ Loaded {len(ground_truth)} ground truth labels")
    print(f"✓ Loaded {len(prediction)} predicted labels\n")

    if ground_truth.image_filename != prediction.image_filename:
        print(
            f"⚠ WARNING: image_filename differs: '{ground_truth.image_filename}' (GT) "
            f"vs '{prediction.image_filename}' (predictions)",
            file=sys.stderr
        )

    image_metrics = evaluate_label_sets(ground_truth, prediction, config.tags, config.iou_threshold)
    table_rows = dict(image_metrics)
    table_rows[IMAGE_OVERALL_KEY] = sum_counts(image_metrics.values())

    print(format_report_table(
        table_rows, config.tags, config.iou_threshold,
        title=f"--- Evaluation: {ground_truth.image_filename} ---",
        overall_key=IMAGE_OVERALL_KEY
    ))

    document = build_image_document(
        ground_truth.image_filename, image_metrics, config.tags, config.iou_threshold
    )
    output_path = Path(args.output) if args.output else default_output_path(
        ground_truth.image_filename, args.predictions
    )
    save_report(document, output_path)

    overall_f1 = document['summary'][IMAGE_OVERALL_KEY]['f1_score']
    print(f"\n✓ Saved evaluation report to: {output_path} (Overall F1: {round(overall_f1 * 100)}%)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
