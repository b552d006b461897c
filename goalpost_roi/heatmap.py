# goalpost_roi/heatmap.py
"""
Debug visualizations of the score field
"""
import cv2
import numpy as np


def render_heatmap(scores, min_score=None, max_score=None):
    """
    Color a score field in blue (negative) or red (positive)

    Args:
        scores: 2D score field
        min_score: score mapped to full blue, defaults to the field minimum
        max_score: score mapped to full red, defaults to the field maximum

    Returns:
        BGR uint8 image of the same size as scores
    """
    scores = np.asarray(scores, dtype=np.float64)
    if min_score is None:
        min_score = scores.min() if scores.size else 0.0
    if max_score is None:
        max_score = scores.max() if scores.size else 0.0

    heatmap = np.zeros(scores.shape + (3,), dtype=np.uint8)

    if max_score > 0:
        ratio = np.clip(scores / max_score, 0.0, 1.0)
        heatmap[..., 2] = np.rint(255 * ratio).astype(np.uint8)
    if min_score < 0:
        ratio = np.clip(scores / min_score, 0.0, 1.0)
        heatmap[..., 0] = np.rint(255 * ratio).astype(np.uint8)

    return heatmap


def overlay_rois(image, rois, color=(0, 255, 0)):
    """
    Draw regions of interest and their scores on a copy of an image

    Args:
        image: BGR or grayscale image
        rois: list of RegionOfInterest, best first
    """
    vis = image.copy()
    if vis.ndim == 2:
        vis = cv2.cvtColor(vis, cv2.COLOR_GRAY2BGR)

    h, w = vis.shape[:2]
    for i, roi in enumerate(rois):
        x1 = int(np.clip(round(roi.x), 0, w - 1))
        y1 = int(np.clip(round(roi.y), 0, h - 1))
        x2 = int(np.clip(round(roi.x + roi.width), 0, w - 1))
        y2 = int(np.clip(round(roi.y + roi.height), 0, h - 1))

        cv2.rectangle(vis, (x1, y1), (x2, y2), color, 2)
        cv2.putText(vis, f"{i+1}: {roi.score}", (x1, max(y1 - 5, 10)),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, color, 1)

    return vis
