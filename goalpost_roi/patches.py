# goalpost_roi/patches.py
"""
Patch geometry around a goal post anchor

All builders take an anchor (x, y) and the local post width read from the
width map; the width is multiplied by params.width_scale before sizing.
Anchors and widths may be numpy arrays, in which case every patch field is
an array with one entry per anchor.
"""
from dataclasses import dataclass
from enum import Enum

import numpy as np


class PatchKind(Enum):
    ABOVE = "above"
    ABOVE_LEFT = "above_left"
    ABOVE_RIGHT = "above_right"
    BELOW = "below"
    BOUNDARY = "boundary"
    ROI_SQUARE = "roi_square"


@dataclass(frozen=True)
class Patch:
    """Axis aligned rectangle with floating point corners"""
    x: float
    y: float
    width: float
    height: float
    kind: PatchKind

    def corners(self):
        """
        Integer (x1, y1, x2, y2)

        Origin and size are rounded half to even separately, so the integer
        size of a patch does not depend on its position.
        """
        x1 = np.rint(self.x).astype(np.int64)
        y1 = np.rint(self.y).astype(np.int64)
        x2 = x1 + np.rint(self.width).astype(np.int64)
        y2 = y1 + np.rint(self.height).astype(np.int64)
        return x1, y1, x2, y2


def above_patch(x, y, width, params):
    w = width * params.width_scale
    h = params.above_ratio * w
    return Patch(x - w / 2, y - h, w, h, PatchKind.ABOVE)


def above_left_patch(x, y, width, params):
    """Above patch shifted left by one patch width"""
    above = above_patch(x, y, width, params)
    return Patch(above.x - above.width, above.y, above.width, above.height,
                 PatchKind.ABOVE_LEFT)


def above_right_patch(x, y, width, params):
    """Above patch shifted right by one patch width"""
    above = above_patch(x, y, width, params)
    return Patch(above.x + above.width, above.y, above.width, above.height,
                 PatchKind.ABOVE_RIGHT)


def below_patch(x, y, width, params):
    w = width * params.width_scale
    return Patch(x - w / 2, y, w, params.below_ratio * w, PatchKind.BELOW)


def boundary_patch(x, y, width, params):
    """From the top of the above patch to the bottom of the below patch, wider than the post"""
    w = width * params.width_scale
    boundary_width = params.boundary_width_ratio * w
    top = y - params.above_ratio * w
    height = (params.above_ratio + params.below_ratio) * w
    return Patch(x - boundary_width / 2, top, boundary_width, height, PatchKind.BOUNDARY)


def roi_patch(x, y, width, params):
    """Square centered on the anchor, reported as region of interest"""
    side = params.roi_ratio * width * params.width_scale
    return Patch(x - side / 2, y - side / 2, side, side, PatchKind.ROI_SQUARE)


def scoring_patches(x, y, width, params):
    """
    Build the five patches scored for an anchor

    Returns:
        Dictionary PatchKind -> Patch
    """
    return {
        PatchKind.ABOVE: above_patch(x, y, width, params),
        PatchKind.ABOVE_LEFT: above_left_patch(x, y, width, params),
        PatchKind.ABOVE_RIGHT: above_right_patch(x, y, width, params),
        PatchKind.BELOW: below_patch(x, y, width, params),
        PatchKind.BOUNDARY: boundary_patch(x, y, width, params),
    }
