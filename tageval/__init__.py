"""
Tag Evaluation Module for UI Element Detection

Compares human-drawn ground truth boxes against predicted boxes (e.g. from
an LLM or detector) for UI screenshots and reports per-tag and overall
precision, recall and F1.

Main Components:
- config: Tag set, IoU threshold and unknown-tag policy (YAML loadable)
- labels: Typed label sets and document validation
- io: Load/save label-set documents and evaluation reports
- matching: IoU computation and greedy box matching
- metrics: Per-image counts and aggregation
- report: Terminal table and JSON documents
- batch: Evaluate a ground truth folder against a predictions folder
- plots: Visualization functions

Usage:
    from tageval.batch import evaluate_directories
    from tageval.report import format_report_table

    result = evaluate_directories("labels/ground_truth", "labels/predictions")
    if result.has_data:
        print(format_report_table(result.report, ["Button", "Input", "Radio", "Dropdown"]))
"""

__version__ = "1.0.0"
