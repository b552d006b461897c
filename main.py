# main.py
"""
MAIN EXECUTION SCRIPT FOR GOAL POST ROI DETECTION
Usage: python main.py --input <image or folder> --output <folder>
"""
import argparse
import json
import os
import sys
from datetime import datetime
from pathlib import Path

import cv2
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
from tqdm import tqdm

from goalpost_roi import GoalByII, GoalByIIParams, GoalFilterError
from goalpost_roi.evaluation import evaluate_rois
from goalpost_roi.heatmap import overlay_rois
from goalpost_roi.inputs import (build_integral_images, field_border_mask,
                                 linear_width_map, resize_image)

IMAGE_EXTENSIONS = ['.jpg', '.jpeg', '.png', '.bmp', '.tiff']


def list_images(input_path):
    path = Path(input_path)
    if path.is_file():
        return [path]

    image_files = []
    for ext in IMAGE_EXTENSIONS:
        image_files.extend(path.glob(f'*{ext}'))
        image_files.extend(path.glob(f'*{ext.upper()}'))
    return sorted(set(image_files))


def load_params(args):
    """Parameters from the config file, command line flags take precedence"""
    values = {}
    if args.config:
        values.update(GoalByIIParams.from_json(args.config).to_dict())
    if args.use_mask:
        values['useMask'] = 1
    if args.tag_level is not None:
        values['tagLevel'] = args.tag_level
    return GoalByIIParams.from_dict(values)


def load_annotations(path, scale):
    """Annotated post boxes per image name, scaled like the processed images"""
    with open(path, 'r') as f:
        annotations = json.load(f)
    return {name: [tuple(v * scale for v in box) for box in boxes]
            for name, boxes in annotations.items()}


def save_plot(image, heatmap, rois, save_path):
    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    axes[0].imshow(cv2.cvtColor(overlay_rois(image, rois), cv2.COLOR_BGR2RGB))
    axes[0].set_title(f"ROIs ({len(rois)})")
    axes[0].axis('off')

    axes[1].imshow(cv2.cvtColor(heatmap, cv2.COLOR_BGR2RGB))
    axes[1].set_title("Score heat map (red > 0 > blue)")
    axes[1].axis('off')

    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)


def save_results(image_name, result, params, output_dir):
    """Save ROIs of an image to a JSON file"""
    result_file = os.path.join(output_dir, f"{image_name}_results.json")
    with open(result_file, 'w') as f:
        json.dump({
            'image': image_name,
            'date': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            'params': params.to_dict(),
            'rois': [roi.to_dict() for roi in result.rois],
        }, f, indent=2)
    return result_file


def process_image(goal_filter, image, args):
    """Build the filter inputs of a BGR image and run the filter"""
    white, green, green_mask = build_integral_images(image, args.scale)
    rows, cols = white.shape

    if args.post_width is not None:
        width_map = np.full((rows, cols), args.post_width * args.scale, dtype=np.float32)
    else:
        width_map = linear_width_map(rows, cols, args.width_top * args.scale,
                                     args.width_bottom * args.scale)

    field_border = None
    if goal_filter.params.use_mask > 0:
        field_border = field_border_mask(green_mask, args.mask_scale)

    return goal_filter.process(white, green, width_map, field_border)


def main():
    """Main execution function"""
    parser = argparse.ArgumentParser(description='Goal post regions of interest from integral images')
    parser.add_argument('--input', required=True, help='Input image or folder containing images')
    parser.add_argument('--output', required=True, help='Output folder for results')
    parser.add_argument('--config', help='Path to JSON config file')
    parser.add_argument('--scale', type=float, default=1.0, help='Resize factor applied to images')
    parser.add_argument('--post-width', type=float, help='Constant expected post width (pixels)')
    parser.add_argument('--width-top', type=float, default=4.0, help='Expected post width on the top row')
    parser.add_argument('--width-bottom', type=float, default=20.0, help='Expected post width on the bottom row')
    parser.add_argument('--use-mask', action='store_true', help='Gate anchors with a field border mask')
    parser.add_argument('--mask-scale', type=float, default=1.0, help='Size of the field border mask')
    parser.add_argument('--tag-level', type=int, help='> 0 produces heat maps')
    parser.add_argument('--annotations', help='JSON file: image name -> list of [x1, y1, x2, y2] posts')
    parser.add_argument('--plot', action='store_true', help='Save a matplotlib figure per image')
    parser.add_argument('--limit', type=int, default=0, help='Limit number of images to process')
    args = parser.parse_args()

    if not os.path.exists(args.input):
        print(f"Error: Input '{args.input}' does not exist")
        sys.exit(1)

    try:
        params = load_params(args)
    except (GoalFilterError, OSError, json.JSONDecodeError) as e:
        print(f"Error: invalid configuration: {e}")
        sys.exit(1)

    if args.plot and params.tag_level <= 0:
        params = GoalByIIParams.from_dict({**params.to_dict(), 'tagLevel': 1})

    os.makedirs(args.output, exist_ok=True)
    goal_filter = GoalByII(params)

    annotations = load_annotations(args.annotations, args.scale) if args.annotations else {}

    image_files = list_images(args.input)
    if args.limit > 0:
        image_files = image_files[:args.limit]
    print(f"Found {len(image_files)} images in '{args.input}'")

    processed_count = 0
    evaluations = {}
    for img_path in tqdm(image_files, desc="Frames"):
        image = cv2.imread(str(img_path))
        if image is None:
            tqdm.write(f"Warning: Could not load {img_path}")
            continue

        try:
            result = process_image(goal_filter, image, args)
        except (GoalFilterError, cv2.error) as e:
            tqdm.write(f"Error processing {img_path}: {e}")
            continue

        image = resize_image(image, args.scale)
        cv2.imwrite(os.path.join(args.output, f"{img_path.stem}_rois.jpg"),
                    overlay_rois(image, result.rois))
        if result.heatmap is not None:
            cv2.imwrite(os.path.join(args.output, f"{img_path.stem}_heatmap.png"), result.heatmap)
        if args.plot:
            save_plot(image, result.heatmap, result.rois,
                      os.path.join(args.output, f"{img_path.stem}_plot.png"))
        save_results(img_path.stem, result, params, args.output)

        if img_path.name in annotations:
            evaluations[img_path.name] = evaluate_rois(result.rois, annotations[img_path.name])

        processed_count += 1

    # Summary
    print(f"\n{'='*60}")
    print("PROCESSING COMPLETE")
    print(f"{'='*60}")
    print(f"Total images processed: {processed_count}/{len(image_files)}")
    print(f"Output folder: {args.output}")

    if evaluations:
        for name, metrics in evaluations.items():
            print(f"  {name}: TP={metrics['true_positives']}, "
                  f"P={metrics['precision']:.2f}, R={metrics['recall']:.2f}, "
                  f"AP={metrics['average_precision']:.3f}")
        mean_ap = np.mean([m['average_precision'] for m in evaluations.values()])
        print(f"✓ Mean AP over {len(evaluations)} annotated images: {mean_ap:.3f}")
    print(f"{'='*60}")


if __name__ == "__main__":
    main()
