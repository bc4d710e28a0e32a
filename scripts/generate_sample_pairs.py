"""
Generate Sample Pairs
=====================
Creates a synthetic ground truth folder and a matching predictions folder so
the folder evaluation can be tried without labeling anything.

Predictions are derived from the ground truth with noise:
- some boxes are dropped (creates FN)
- some boxes are jittered (may fall below the IoU threshold)
- some spurious boxes are added (creates FP)
One extra ground truth file gets no prediction counterpart, to exercise the
skip path.

Usage:
    python scripts/generate_sample_pairs.py data/sample --num_images 20 --seed 42
    python scripts/evaluate_folders.py data/sample/ground_truth data/sample/predictions
"""

import argparse
import random
import sys
from pathlib import Path

# Add parent directory to path to import tageval module
sys.path.insert(0, str(Path(__file__).parent.parent))

from tageval.config import DEFAULT_TAGS
from tageval.io import save_label_set
from tageval.labels import Label, LabelSet

SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600


def random_box(rng: random.Random):
    """A UI-element sized box inside the screen."""
    x1 = rng.uniform(0, SCREEN_WIDTH - 200)
    y1 = rng.uniform(0, SCREEN_HEIGHT - 80)
    width = rng.uniform(50, 200)
    height = rng.uniform(30, 80)
    return (round(x1, 1), round(y1, 1), round(x1 + width, 1), round(y1 + height, 1))


def create_ground_truth(image_filename: str, rng: random.Random, tags=DEFAULT_TAGS) -> LabelSet:
    labels = tuple(
        Label(tag=rng.choice(tags), bbox=random_box(rng), id=f"manual-{i}")
        for i in range(rng.randint(2, 8))
    )
    return LabelSet(image_filename=image_filename, labels=labels)


def create_noisy_predictions(ground_truth: LabelSet, rng: random.Random, noise_level=0.3, tags=DEFAULT_TAGS) -> LabelSet:
    """
    Create dummy predictions from ground truth (with noise).

    Args:
        ground_truth: Labels to derive predictions from
        rng: Random generator
        noise_level: Fraction of boxes to drop, and again to jitter (0-0.5)
        tags: Tags for spurious boxes
    """
    labels = []

    for i, gt_label in enumerate(ground_truth.labels):
        # Randomly decide: drop, jitter, or keep
        rand = rng.random()

        if rand < noise_level:
            # Drop this label (creates FN)
            continue
        elif rand < noise_level * 2:
            # Jittered box; large shifts push IoU under the threshold
            x1, y1, x2, y2 = gt_label.bbox
            jitter = [rng.uniform(-25, 25) for _ in range(4)]
            bbox = (
                round(x1 + jitter[0], 1),
                round(y1 + jitter[1], 1),
                round(max(x1 + jitter[0], x2 + jitter[2]), 1),
                round(max(y1 + jitter[1], y2 + jitter[3]), 1),
            )
            labels.append(Label(tag=gt_label.tag, bbox=bbox, id=f"predicted-{i}"))
        else:
            # Perfect prediction
            labels.append(Label(tag=gt_label.tag, bbox=gt_label.bbox, id=f"predicted-{i}"))

    # Add some spurious predictions (creates FP)
    for j in range(rng.randint(0, 2)):
        labels.append(Label(tag=rng.choice(tags), bbox=random_box(rng), id=f"spurious-{j}"))

    return LabelSet(image_filename=ground_truth.image_filename, labels=tuple(labels))


def generate_sample_pairs(output_dir, num_images=10, seed=42, noise_level=0.3):
    """
    Write <output_dir>/ground_truth and <output_dir>/predictions.

    Returns:
        (gt_dir, pred_dir) paths
    """
    rng = random.Random(seed)
    output_dir = Path(output_dir)
    gt_dir = output_dir / "ground_truth"
    pred_dir = output_dir / "predictions"

    for i in range(num_images):
        image_filename = f"screen_{i:03d}.png"
        ground_truth = create_ground_truth(image_filename, rng)
        predictions = create_noisy_predictions(ground_truth, rng, noise_level)

        save_label_set(ground_truth, gt_dir / f"screen_{i:03d}.json")
        save_label_set(predictions, pred_dir / f"screen_{i:03d}.json")

    # Ground truth without predictions: skipped with a warning
    orphan = create_ground_truth("screen_orphan.png", rng)
    save_label_set(orphan, gt_dir / "screen_orphan.json")

    return gt_dir, pred_dir


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Generate synthetic ground truth / prediction folders")
    parser.add_argument("output_dir", type=str, help="Folder to create ground_truth/ and predictions/ in")
    parser.add_argument("--num_images", type=int, default=10, help="Number of paired images (default: 10)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--noise", type=float, default=0.3, help="Drop/jitter fraction, 0-0.5 (default: 0.3)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    if not 0.0 <= args.noise <= 0.5:
        print(f"❌ --noise must be between 0 and 0.5, got {args.noise}", file=sys.stderr)
        return 1

    gt_dir, pred_dir = generate_sample_pairs(args.output_dir, args.num_images, args.seed, args.noise)

    print(f"✓ Wrote {args.num_images + 1} ground truth files to: {gt_dir}")
    print(f"✓ Wrote {args.num_images} prediction files to: {pred_dir}")
    print("\nNext step:")
    print(f"  python scripts/evaluate_folders.py {gt_dir} {pred_dir}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
