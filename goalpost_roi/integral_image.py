# goalpost_roi/integral_image.py
"""
Integral images (summed area tables) and the white/green patch scorer
"""
import numpy as np

# Bounds of a single patch score and of the combined anchor score
PATCH_SCORE_MAX = 255
COMBINED_SCORE_MAX = 510


class IntegralImage:
    """Core class for O(1) rectangle sum calculations"""

    def __init__(self, table):
        """
        Wrap a precomputed summed area table

        Args:
            table: 2D integer numpy array of shape (rows + 1, cols + 1),
                   first row and first column are zeros
        """
        table = np.asarray(table)
        if table.ndim != 2:
            raise ValueError("IntegralImage requires 2D array")
        if table.shape[0] < 1 or table.shape[1] < 1:
            raise ValueError(f"Invalid integral image shape {table.shape}")

        self.table = table
        self.height = table.shape[0] - 1
        self.width = table.shape[1] - 1

    @classmethod
    def from_mask(cls, mask):
        """
        Compute integral image of a binary image (non-zero pixels count as 1)

        Args:
            mask: 2D numpy array (height, width)
        """
        mask = np.asarray(mask)
        if mask.ndim != 2:
            raise ValueError("IntegralImage requires 2D array")

        # Compute cumulative sums
        integral = np.cumsum(np.cumsum(mask > 0, axis=0, dtype=np.int32), axis=1, dtype=np.int32)

        # Pad with zeros for easier indexing
        integral = np.pad(integral, ((1, 0), (1, 0)), mode='constant')
        return cls(integral)

    @property
    def shape(self):
        """Shape (rows, cols) of the image the table was built from"""
        return self.height, self.width

    def clamp(self, x1, y1, x2, y2):
        """
        Clamp rectangle corners into the image

        Works on scalars and numpy arrays. The returned rectangle always has
        x2 >= x1 and y2 >= y1, so its area is never negative.
        """
        x1 = np.clip(x1, 0, self.width)
        x2 = np.clip(x2, 0, self.width)
        y1 = np.clip(y1, 0, self.height)
        y2 = np.clip(y2, 0, self.height)
        return x1, y1, np.maximum(x2, x1), np.maximum(y2, y1)

    def rectangle_sum(self, x1, y1, x2, y2):
        """
        Calculate sum in rectangle [x1, x2) x [y1, y2) in O(1)

        Coordinates are clamped to the image, an empty rectangle sums to 0.
        Accepts integer scalars or integer numpy arrays of corners.
        """
        x1, y1, x2, y2 = self.clamp(x1, y1, x2, y2)

        # Standard formula: D - B - C + A
        D = self.table[y2, x2].astype(np.int64)
        B = self.table[y2, x1].astype(np.int64)
        C = self.table[y1, x2].astype(np.int64)
        A = self.table[y1, x1].astype(np.int64)

        return D - B - C + A


def patch_score(patch, white, green):
    """
    Normalized white versus green contrast of a patch

    Args:
        patch: Patch (scalar or vectorized corners)
        white: IntegralImage of white classified pixels
        green: IntegralImage of green classified pixels

    Returns:
        255 * (white - green) / area clamped to [-255, 255], 0 for empty patches
    """
    x1, y1, x2, y2 = white.clamp(*patch.corners())
    area = (x2 - x1) * (y2 - y1)
    diff = white.rectangle_sum(x1, y1, x2, y2) - green.rectangle_sum(x1, y1, x2, y2)

    score = np.zeros(np.shape(area), dtype=np.float64)
    np.divide(PATCH_SCORE_MAX * diff, area, out=score, where=area > 0)
    score = np.clip(score, -PATCH_SCORE_MAX, PATCH_SCORE_MAX)

    if score.ndim == 0:
        return float(score)
    return score


def combined_score(above, below, above_left, above_right, params):
    """
    Combine the patch scores of one anchor

    above - below_coeff * below - side_coeff * (2 * above - above_right - above_left)
    clamped to [-510, 510]
    """
    side_contrast = 2 * np.asarray(above) - above_right - above_left
    combined = above - params.below_coeff * np.asarray(below) - params.side_coeff * side_contrast
    combined = np.clip(combined, -COMBINED_SCORE_MAX, COMBINED_SCORE_MAX)

    if np.ndim(combined) == 0:
        return float(combined)
    return combined
