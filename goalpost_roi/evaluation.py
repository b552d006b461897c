# goalpost_roi/evaluation.py
"""
Evaluation of regions of interest against annotated goal posts
"""
import numpy as np
from sklearn.metrics import average_precision_score


def calculate_iou(boxA, boxB):
    """Calculate IoU between two (x1, y1, x2, y2) boxes"""
    # determine the (x, y)-coordinates of the intersection rectangle
    xA = max(boxA[0], boxB[0])
    yA = max(boxA[1], boxB[1])
    xB = min(boxA[2], boxB[2])
    yB = min(boxA[3], boxB[3])

    interArea = max(0, xB - xA) * max(0, yB - yA)

    boxAArea = (boxA[2] - boxA[0]) * (boxA[3] - boxA[1])
    boxBArea = (boxB[2] - boxB[0]) * (boxB[3] - boxB[1])

    union = boxAArea + boxBArea - interArea
    if union <= 0:
        return 0.0
    return interArea / float(union)


def roi_to_box(roi):
    return (roi.x, roi.y, roi.x + roi.width, roi.y + roi.height)


def match_rois(rois, gt_boxes, iou_threshold=0.5):
    """
    Greedily match ROIs, best first, to annotated boxes

    Each annotated box is matched at most once.

    Returns:
        List of booleans, True when the ROI at that index is a true positive
    """
    matched = set()
    hits = []
    for roi in rois:
        box = roi_to_box(roi)
        best_iou, best_idx = 0.0, None
        for idx, gt in enumerate(gt_boxes):
            if idx in matched:
                continue
            iou = calculate_iou(box, gt)
            if iou > best_iou:
                best_iou, best_idx = iou, idx
        if best_idx is not None and best_iou >= iou_threshold:
            matched.add(best_idx)
            hits.append(True)
        else:
            hits.append(False)
    return hits


def evaluate_rois(rois, gt_boxes, iou_threshold=0.5):
    """
    Precision, recall and average precision of the ROIs of one frame

    Returns:
        Dictionary with true_positives, precision, recall, average_precision
    """
    hits = match_rois(rois, gt_boxes, iou_threshold)
    true_positives = int(sum(hits))

    precision = true_positives / len(rois) if rois else 0.0
    recall = true_positives / len(gt_boxes) if gt_boxes else 0.0

    # AP is undefined without both positive and negative ROIs
    if true_positives == 0:
        average_precision = 0.0
    elif true_positives == len(hits):
        average_precision = 1.0
    else:
        scores = np.array([roi.score for roi in rois], dtype=np.float64)
        average_precision = float(average_precision_score(np.array(hits, dtype=int), scores))

    # Scaled by the fraction of annotated posts that were found
    if gt_boxes:
        average_precision *= true_positives / len(gt_boxes)

    return {
        'true_positives': true_positives,
        'precision': precision,
        'recall': recall,
        'average_precision': average_precision,
    }
