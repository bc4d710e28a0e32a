"""
Evaluate Folders - Batch Tagging Evaluation
===========================================
Compare a folder of ground truth label files against a folder of
prediction label files (paired by file name) and print per-tag
precision/recall/F1.

Usage:
    python scripts/evaluate_folders.py labels/ground_truth labels/predictions

    # Save JSON/CSV/plots and use a custom tag set
    python scripts/evaluate_folders.py labels/ground_truth labels/predictions \\
        --config tags.yaml \\
        --output_json results/report.json \\
        --output_csv results/summary.csv \\
        --plot_dir results/figures

Exit codes:
    0  Report printed, or no file pairs to evaluate
    1  Wrong arguments, unreadable ground truth folder, or bad config
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path to import tageval module
sys.path.insert(0, str(Path(__file__).parent.parent))

from tageval.batch import evaluate_directories
from tageval.config import load_config
from tageval.io import save_report, save_summary_csv
from tageval.report import build_batch_document, format_report_table

NO_DATA_MESSAGE = "No matching file pairs found to evaluate."


class UsageExitParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = UsageExitParser(
        description="Evaluate predicted UI tags against ground truth, folder by folder"
    )

    # Required arguments
    parser.add_argument("gt_dir", type=str, help="Folder of ground truth JSON files")
    parser.add_argument("pred_dir", type=str, help="Folder of prediction JSON files (same file names)")

    # Optional arguments
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with tags / iou_threshold / unknown_tags (default: built-in tags)"
    )
    parser.add_argument(
        "--iou_threshold",
        type=float,
        default=None,
        help="IoU threshold for matching (default: 0.5 or the config value)"
    )
    parser.add_argument(
        "--reject_unknown_tags",
        action="store_true",
        help="Treat labels with unrecognized tags as malformed (default: ignore them)"
    )
    parser.add_argument("--output_json", type=str, default=None, help="Write the report as JSON")
    parser.add_argument("--output_csv", type=str, default=None, help="Write a per-tag CSV summary")
    parser.add_argument("--plot_dir", type=str, default=None, help="Write P/R/F1 and count plots here")
    parser.add_argument("--run_name", type=str, default=None, help="Name used in plot titles")
    parser.add_argument("--no_progress", action="store_true", help="Hide the progress bar")

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    try:
        config = load_config(args.config).with_overrides(
            iou_threshold=args.iou_threshold,
            unknown_tags='reject' if args.reject_unknown_tags else None
        )
    except (OSError, ValueError) as e:
        print(f"❌ Invalid config: {e}", file=sys.stderr)
        return 1

    try:
        result = evaluate_directories(
            args.gt_dir, args.pred_dir, config, show_progress=not args.no_progress
        )
    except OSError as e:
        print(f"❌ Failed to read directories: {e}", file=sys.stderr)
        return 1

    if not result.has_data:
        print(NO_DATA_MESSAGE)
        return 0

    print()
    print(format_report_table(result.report, config.tags, config.iou_threshold))
    print(f"\nEvaluated {len(result.evaluated)} file pair(s), skipped {len(result.skipped)}")

    if args.output_json:
        document = build_batch_document(
            result.report, config.tags, config.iou_threshold,
            images_evaluated=len(result.evaluated)
        )
        save_report(document, args.output_json)
        print(f"✓ Saved report to: {args.output_json}")

    if args.output_csv:
        save_summary_csv(result.report, config.tags, args.output_csv)
        print(f"✓ Saved summary CSV to: {args.output_csv}")

    if args.plot_dir:
        # Imported here so matplotlib is only loaded when plots are requested
        from tageval.plots import plot_all_metrics

        plot_all_metrics(
            result.report, config.tags, args.plot_dir,
            run_name=args.run_name or Path(args.pred_dir).name
        )

    return 0


if __name__ == "__main__":
    sys.exit(main())
