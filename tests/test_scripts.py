"""
Tests for the command-line scripts.

Scripts live in scripts/ (put on sys.path by conftest) and expose
main(argv) returning the exit code.
"""

import csv
import json

import pytest

import evaluate_folders
import evaluate_image
import generate_sample_pairs

from conftest import make_document


class TestEvaluateFolders:
    """Test scripts/evaluate_folders.py."""

    def test_prints_table(self, label_dirs, write_pair, capsys):
        gt_dir, pred_dir = label_dirs
        write_pair("one.json", [("Button", [0, 0, 100, 100])], [("Button", [0, 0, 100, 100])])

        exit_code = evaluate_folders.main([str(gt_dir), str(pred_dir), "--no_progress"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Tag       | GT Count | Pred Count | TP   | FP   | FN   | Precision | Recall | F1-Score" in out
        assert "IoU Threshold: 0.5" in out
        assert "Overall" in out
        assert "100.00" in out

    @pytest.mark.parametrize("argv", [
        [],
        ["only_one_dir"],
        ["a", "b", "c"],
    ])
    def test_wrong_argument_count_exits_1(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            evaluate_folders.main(argv)

        assert exc_info.value.code == 1
        assert "usage:" in capsys.readouterr().err

    def test_unreadable_gt_dir_exits_1(self, tmp_path, capsys):
        exit_code = evaluate_folders.main([str(tmp_path / "missing"), str(tmp_path), "--no_progress"])

        assert exit_code == 1
        assert "Failed to read directories" in capsys.readouterr().err

    def test_no_pairs_is_not_an_error(self, label_dirs, write_json, capsys):
        gt_dir, pred_dir = label_dirs
        write_json(gt_dir / "orphan.json", make_document([]))

        exit_code = evaluate_folders.main([str(gt_dir), str(pred_dir), "--no_progress"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert evaluate_folders.NO_DATA_MESSAGE in out
        assert "F1-Score" not in out

    def test_skipped_pair_still_exits_0(self, label_dirs, write_pair, write_json, capsys):
        gt_dir, pred_dir = label_dirs
        write_pair("one.json", [("Input", [0, 0, 10, 10])], [("Input", [0, 0, 10, 10])])
        write_json(gt_dir / "orphan.json", make_document([("Input", [0, 0, 10, 10])]))

        exit_code = evaluate_folders.main([str(gt_dir), str(pred_dir), "--no_progress"])

        captured = capsys.readouterr()
        assert exit_code == 0
        assert "orphan.json" in captured.err
        assert "skipped 1" in captured.out

    def test_writes_outputs(self, label_dirs, write_pair, tmp_path):
        gt_dir, pred_dir = label_dirs
        write_pair("one.json", [("Button", [0, 0, 100, 100])], [("Button", [0, 0, 100, 50])])
        json_path = tmp_path / "out" / "report.json"
        csv_path = tmp_path / "out" / "summary.csv"
        plot_dir = tmp_path / "out" / "figures"

        exit_code = evaluate_folders.main([
            str(gt_dir), str(pred_dir), "--no_progress",
            "--output_json", str(json_path),
            "--output_csv", str(csv_path),
            "--plot_dir", str(plot_dir),
        ])

        assert exit_code == 0
        document = json.loads(json_path.read_text())
        assert document["iou_threshold"] == 0.5
        assert document["images_evaluated"] == 1
        assert document["summary"]["Button"]["true_positives"] == 1
        assert document["summary"]["Overall"]["precision"] == 1.0
        with open(csv_path, newline='') as f:
            assert len(list(csv.reader(f))) == 6
        assert (plot_dir / "per_tag_prf.png").exists()
        assert (plot_dir / "tag_counts.png").exists()

    def test_iou_threshold_override(self, label_dirs, write_pair, tmp_path):
        gt_dir, pred_dir = label_dirs
        write_pair("one.json", [("Button", [0, 0, 100, 100])], [("Button", [50, 50, 150, 150])])
        json_path = tmp_path / "report.json"

        evaluate_folders.main([
            str(gt_dir), str(pred_dir), "--no_progress",
            "--iou_threshold", "0.1", "--output_json", str(json_path),
        ])

        document = json.loads(json_path.read_text())
        assert document["iou_threshold"] == 0.1
        assert document["summary"]["Button"]["true_positives"] == 1

    def test_config_file(self, label_dirs, write_pair, tmp_path, capsys):
        gt_dir, pred_dir = label_dirs
        write_pair("one.json", [("Checkbox", [0, 0, 10, 10])], [("Checkbox", [0, 0, 10, 10])])
        config_path = tmp_path / "tags.yaml"
        config_path.write_text("tags: [Checkbox]\n")

        exit_code = evaluate_folders.main([
            str(gt_dir), str(pred_dir), "--no_progress", "--config", str(config_path)
        ])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Checkbox" in out
        assert "Button" not in out

    def test_bad_config_exits_1(self, label_dirs, tmp_path, capsys):
        gt_dir, pred_dir = label_dirs
        config_path = tmp_path / "tags.yaml"
        config_path.write_text("tags: []\n")

        exit_code = evaluate_folders.main([str(gt_dir), str(pred_dir), "--config", str(config_path)])

        assert exit_code == 1
        assert "Invalid config" in capsys.readouterr().err

    @pytest.mark.parametrize("text", ["iou_threshold:\n", "extensions: 5\n", "tags: [Button\n"])
    def test_malformed_config_value_exits_1(self, label_dirs, tmp_path, capsys, text):
        gt_dir, pred_dir = label_dirs
        config_path = tmp_path / "tags.yaml"
        config_path.write_text(text)

        exit_code = evaluate_folders.main([str(gt_dir), str(pred_dir), "--config", str(config_path)])

        assert exit_code == 1
        assert "Invalid config" in capsys.readouterr().err

    def test_reject_unknown_tags_flag(self, label_dirs, write_pair, capsys):
        gt_dir, pred_dir = label_dirs
        write_pair("one.json", [("Slider", [0, 0, 10, 10])], [])

        exit_code = evaluate_folders.main([
            str(gt_dir), str(pred_dir), "--no_progress", "--reject_unknown_tags"
        ])

        captured = capsys.readouterr()
        assert exit_code == 0
        assert evaluate_folders.NO_DATA_MESSAGE in captured.out
        assert "unknown tag 'Slider'" in captured.err


class TestEvaluateImage:
    """Test scripts/evaluate_image.py."""

    def test_writes_image_document(self, tmp_path, write_json, capsys):
        gt_path = write_json(tmp_path / "gt.json", make_document(
            [("Button", [0, 0, 100, 100]), ("Input", [0, 200, 100, 240])], image_filename="login.png"
        ))
        pred_path = write_json(tmp_path / "pred.json", make_document(
            [("Button", [0, 0, 100, 100])], image_filename="login.png"
        ))

        exit_code = evaluate_image.main([str(gt_path), str(pred_path)])

        assert exit_code == 0
        output_path = tmp_path / "evaluation_login.json"
        document = json.loads(output_path.read_text())
        assert document["image_filename"] == "login.png"
        assert document["iou_threshold"] == 0.5
        assert document["summary"]["Button"]["f1_score"] == 1.0
        assert document["summary"]["Input"]["false_negatives"] == 1
        assert document["summary"]["overall"]["precision"] == 1.0
        assert document["summary"]["overall"]["recall"] == 0.5
        assert document["summary"]["overall"]["f1_score"] == 0.667
        out = capsys.readouterr().out
        assert "Loaded 2 ground truth labels" in out
        assert "Loaded 1 predicted labels" in out
        assert "Overall F1: 67%" in out

    def test_custom_output(self, tmp_path, write_json):
        gt_path = write_json(tmp_path / "gt.json", make_document([]))
        pred_path = write_json(tmp_path / "pred.json", make_document([]))
        output_path = tmp_path / "results" / "eval.json"

        exit_code = evaluate_image.main([str(gt_path), str(pred_path), "--output", str(output_path)])

        assert exit_code == 0
        assert json.loads(output_path.read_text())["summary"]["overall"]["f1_score"] == 0.0

    def test_missing_file_exits_1(self, tmp_path, write_json, capsys):
        gt_path = write_json(tmp_path / "gt.json", make_document([]))

        exit_code = evaluate_image.main([str(gt_path), str(tmp_path / "missing.json")])

        assert exit_code == 1
        assert "missing.json" in capsys.readouterr().err

    def test_malformed_file_exits_1(self, tmp_path, write_json):
        gt_path = write_json(tmp_path / "gt.json", make_document([]))
        pred_path = write_json(tmp_path / "pred.json", {"labels": [{"tag": "Button", "bbox": [1, 2]}]})

        assert evaluate_image.main([str(gt_path), str(pred_path)]) == 1

    def test_filename_mismatch_warns(self, tmp_path, write_json, capsys):
        gt_path = write_json(tmp_path / "gt.json", make_document([], image_filename="a.png"))
        pred_path = write_json(tmp_path / "pred.json", make_document([], image_filename="b.png"))

        assert evaluate_image.main([str(gt_path), str(pred_path)]) == 0
        assert "image_filename differs" in capsys.readouterr().err


class TestGenerateSamplePairs:
    """Test scripts/generate_sample_pairs.py."""

    def test_generates_evaluable_folders(self, tmp_path):
        gt_dir, pred_dir = generate_sample_pairs.generate_sample_pairs(tmp_path, num_images=5, seed=1)

        assert len(list(gt_dir.glob("*.json"))) == 6
        assert len(list(pred_dir.glob("*.json"))) == 5
        assert not (pred_dir / "screen_orphan.json").exists()

    def test_deterministic_with_seed(self, tmp_path):
        first, _ = generate_sample_pairs.generate_sample_pairs(tmp_path / "a", num_images=3, seed=9)
        second, _ = generate_sample_pairs.generate_sample_pairs(tmp_path / "b", num_images=3, seed=9)

        for path in first.glob("*.json"):
            assert path.read_text() == (second / path.name).read_text()

    def test_end_to_end_with_folder_evaluation(self, tmp_path, capsys):
        assert generate_sample_pairs.main([str(tmp_path), "--num_images", "4"]) == 0

        exit_code = evaluate_folders.main([
            str(tmp_path / "ground_truth"), str(tmp_path / "predictions"), "--no_progress"
        ])

        captured = capsys.readouterr()
        assert exit_code == 0
        assert "F1-Score" in captured.out
        assert "screen_orphan.json" in captured.err

    def test_invalid_noise(self, tmp_path):
        assert generate_sample_pairs.main([str(tmp_path), "--noise", "0.9"]) == 1
