# goalpost_roi/goal_by_ii.py
"""
Goal post regions of interest from white and green integral images

Based on the approach presented by Berlin United (SPL team) at RoHOW 2017.
For anchors on a decimated grid, patches above and below the anchor are
sized from the expected post width. A post looks white above the anchor,
green below it and contrasts with its left and right neighbours. The best
scoring anchors are reported as regions of interest.

Inputs:
- WhiteII: integral image of (rows + 1, cols + 1), at least 32 bits
- GreenII: integral image of (rows + 1, cols + 1), at least 32 bits
- PostWidth: float image of (rows, cols)
- FieldBorder: binary image of (maskScale * rows, maskScale * cols),
               only used if use_mask > 0
"""
import logging
from dataclasses import dataclass

import numpy as np

from .exceptions import ShapeMismatchError
from .filter import Filter
from .heatmap import render_heatmap
from .integral_image import IntegralImage, patch_score, combined_score, COMBINED_SCORE_MAX
from .params import GoalByIIParams
from .patches import PatchKind, scoring_patches, roi_patch

logger = logging.getLogger(__name__)

# Score of blocks whose anchor was rejected
REJECTED_SCORE = -COMBINED_SCORE_MAX


@dataclass(frozen=True)
class RegionOfInterest:
    """ROI square of an anchor and its combined score"""
    x: float
    y: float
    width: float
    height: float
    score: int

    @property
    def center(self):
        return self.x + self.width / 2, self.y + self.height / 2

    def to_dict(self):
        return {
            'rect': [self.x, self.y, self.width, self.height],
            'score': self.score,
        }


@dataclass
class ScoreField:
    """
    Per pixel combined scores of a frame

    scores is painted uniformly over each decimation block. accepted and
    boundary_scores hold one entry per block, indexed like scores[::d, ::d].
    """
    scores: np.ndarray
    accepted: np.ndarray
    boundary_scores: np.ndarray
    decimation_rate: int

    @property
    def anchor_scores(self):
        d = self.decimation_rate
        return self.scores[::d, ::d]


@dataclass
class GoalByIIResult:
    rois: list
    score_field: ScoreField
    heatmap: np.ndarray = None


@dataclass
class AnchorGrid:
    """Anchor coordinates and per block scratch arrays of a frame size"""
    rows: int
    cols: int
    decimation_rate: int
    grid_y: np.ndarray
    grid_x: np.ndarray
    accepted: np.ndarray
    min_widths: np.ndarray
    boundary_scores: np.ndarray

    @classmethod
    def allocate(cls, rows, cols, decimation_rate):
        grid_y, grid_x = np.meshgrid(np.arange(0, rows, decimation_rate),
                                     np.arange(0, cols, decimation_rate), indexing='ij')
        return cls(rows, cols, decimation_rate, grid_y, grid_x,
                   np.empty(grid_y.shape, dtype=bool),
                   np.empty(grid_y.shape, dtype=np.float64),
                   np.empty(grid_y.shape, dtype=np.float64))

    def fits(self, rows, cols, decimation_rate):
        return (self.rows, self.cols, self.decimation_rate) == (rows, cols, decimation_rate)


def fill_score(img, score, start_x, end_x, start_y, end_y):
    """
    Draw score in [start_x, end_x[ * [start_y, end_y[ of an int32 image

    The block is clipped to the image, nothing outside of it is written.
    """
    rows, cols = img.shape
    start_x, end_x = max(int(start_x), 0), min(int(end_x), cols)
    start_y, end_y = max(int(start_y), 0), min(int(end_y), rows)
    if end_x <= start_x or end_y <= start_y:
        return
    img[start_y:end_y, start_x:end_x] = score


def mask_block_fill(mask_ii, xs, ys, decimation_rate, rows, cols):
    """
    Count foreground mask pixels covering the decimation blocks of anchors

    Returns:
        (foreground, total) arrays, total is the number of mask pixels of
        each block
    """
    scale_x = mask_ii.width / cols
    scale_y = mask_ii.height / rows

    x_end = np.minimum(xs + decimation_rate, cols)
    y_end = np.minimum(ys + decimation_rate, rows)

    # At least one mask pixel per block, even when the mask is smaller than the image
    mx1 = np.floor(xs * scale_x).astype(np.int64)
    my1 = np.floor(ys * scale_y).astype(np.int64)
    mx2 = np.clip(np.ceil(x_end * scale_x).astype(np.int64), mx1 + 1, mask_ii.width)
    my2 = np.clip(np.ceil(y_end * scale_y).astype(np.int64), my1 + 1, mask_ii.height)

    foreground = mask_ii.rectangle_sum(mx1, my1, mx2, my2)
    total = (mx2 - mx1) * (my2 - my1)
    return foreground, total


def accumulate_scores(white, green, width_map, params, field_border=None, out=None, grid=None):
    """
    Compute the score field of a frame

    Args:
        white, green: IntegralImage of white and green classified pixels
        width_map: (rows, cols) expected post width
        params: GoalByIIParams
        field_border: IntegralImage of the field border mask, required
                      when params.use_mask > 0
        out: optional (rows, cols) int32 buffer reused for the scores
        grid: optional AnchorGrid of the same frame size and decimation
              rate, its arrays are overwritten

    Returns:
        ScoreField
    """
    rows, cols = width_map.shape
    d = params.decimation_rate
    if out is None:
        out = np.empty((rows, cols), dtype=np.int32)
    out.fill(REJECTED_SCORE)
    if grid is None:
        grid = AnchorGrid.allocate(rows, cols, d)

    grid_y, grid_x = grid.grid_y, grid.grid_x
    widths = width_map[grid_y, grid_x].astype(np.float64)
    scaled_widths = widths * params.width_scale
    # NaN widths never pass the width test
    scaled_widths = np.where(np.isfinite(scaled_widths), scaled_widths, -np.inf)

    accepted = grid.accepted
    accepted.fill(True)
    min_widths = grid.min_widths
    min_widths.fill(params.min_width)
    boundary_scores = grid.boundary_scores
    boundary_scores.fill(np.nan)
    if params.use_mask > 0:
        foreground, total = mask_block_fill(field_border, grid_x, grid_y, d, rows, cols)
        accepted &= foreground > 0
        # Full confidence in the field border allows narrower posts
        min_widths[foreground == total] = params.filled_mask_min_width
    accepted &= scaled_widths >= min_widths

    n_accepted = int(np.count_nonzero(accepted))
    logger.debug("%d/%d anchors accepted (decimation %d)", n_accepted, accepted.size, d)
    if n_accepted == 0:
        return ScoreField(out, accepted, boundary_scores, d)

    xs = grid_x[accepted]
    ys = grid_y[accepted]
    patches = scoring_patches(xs, ys, widths[accepted], params)
    scores = {kind: patch_score(patch, white, green) for kind, patch in patches.items()}

    combined = combined_score(scores[PatchKind.ABOVE], scores[PatchKind.BELOW],
                              scores[PatchKind.ABOVE_LEFT], scores[PatchKind.ABOVE_RIGHT],
                              params)
    combined = np.rint(combined).astype(np.int32)
    boundary_scores[accepted] = scores[PatchKind.BOUNDARY]

    for x, y, score in zip(xs, ys, combined):
        fill_score(out, score, x, x + d, y, y + d)

    return ScoreField(out, accepted, boundary_scores, d)


def extract_rois(scores, width_map, params, accepted=None):
    """
    Best scoring blocks as regions of interest

    Args:
        scores: (rows, cols) score field, uniform inside decimation blocks
        width_map: (rows, cols) expected post width
        params: GoalByIIParams
        accepted: optional per block boolean grid, blocks set to False are
                  never candidates

    Returns:
        At most params.max_rois RegionOfInterest, by decreasing score, ties
        in raster order
    """
    d = params.decimation_rate
    anchor_scores = scores[::d, ::d]
    candidates = anchor_scores > params.min_score
    if accepted is not None:
        candidates &= accepted

    block_y, block_x = np.nonzero(candidates)
    values = anchor_scores[block_y, block_x].astype(np.int64)
    # lexsort uses the last key as primary key
    order = np.lexsort((block_x, block_y, -values))[:params.max_rois]
    logger.debug("%d candidate blocks, keeping %d", len(values), len(order))

    rois = []
    for i in order:
        x, y = int(block_x[i]) * d, int(block_y[i]) * d
        patch = roi_patch(x, y, float(width_map[y, x]), params)
        rois.append(RegionOfInterest(float(patch.x), float(patch.y),
                                     float(patch.width), float(patch.height),
                                     int(values[i])))
    return rois


def _as_integral(image, name):
    if isinstance(image, IntegralImage):
        return image
    table = np.asarray(image)
    if table.ndim != 2:
        raise ShapeMismatchError(f"{name} must be a single channel 2D image, got shape {table.shape}")
    return IntegralImage(table)


class GoalByII(Filter):
    """
    Identifies the best 'n' regions of interest for goal posts

    Patches considered around each anchor:
    - Above (width approximately of the post)
    - AboveLeft, AboveRight (Above shifted by one post width)
    - Below (width approximately of the post)
    - Boundary (top is top of above, bottom is bottom of below, width is larger)
    """

    def __init__(self, params=None):
        self.params = params if params is not None else GoalByIIParams()
        # Number of rows and columns of the last processed frame
        self.rows = None
        self.cols = None
        # Score buffer and anchor grid reused while the frame size does not change
        self._scores = None
        self._grid = None

    def get_class_name(self):
        return "GoalByII"

    def expected_dependencies(self):
        return 4 if self.params.use_mask > 0 else 3

    def check_inputs(self, white_ii, green_ii, width_map, field_border=None):
        """
        Validate input shapes before any processing

        Returns:
            (white, green, width_map, mask) with integral images wrapped in
            IntegralImage, mask is None when the mask is not used
        """
        width_map = np.asarray(width_map)
        if width_map.ndim != 2 or width_map.size == 0:
            raise ShapeMismatchError(f"PostWidth must be a non empty 2D image, got shape {width_map.shape}")
        rows, cols = width_map.shape

        white = _as_integral(white_ii, "WhiteII")
        green = _as_integral(green_ii, "GreenII")
        for name, ii in (("WhiteII", white), ("GreenII", green)):
            if ii.shape != (rows, cols):
                raise ShapeMismatchError(
                    f"{name} has shape {ii.table.shape}, expected {(rows + 1, cols + 1)}")

        if self.params.use_mask <= 0:
            return white, green, width_map, None

        if field_border is None:
            raise ShapeMismatchError("FieldBorder is required when use_mask > 0")
        if isinstance(field_border, IntegralImage):
            mask = field_border
        else:
            border = np.asarray(field_border)
            if border.ndim != 2:
                raise ShapeMismatchError(f"FieldBorder must be a 2D image, got shape {border.shape}")
            mask = IntegralImage.from_mask(border)

        scale_y = mask.height / rows
        scale_x = mask.width / cols
        if scale_y <= 0 or not np.isclose(scale_x, scale_y):
            raise ShapeMismatchError(
                f"FieldBorder shape {mask.shape} is not a scaled version of {(rows, cols)}")
        return white, green, width_map, mask

    def process(self, white_ii, green_ii, width_map, field_border=None):
        """
        Run the filter on one frame

        The score field of the result shares a buffer with the filter and is
        only valid until the next call.

        Returns:
            GoalByIIResult, heatmap is None unless tag_level > 0
        """
        white, green, width_map, mask = self.check_inputs(white_ii, green_ii, width_map, field_border)
        self.rows, self.cols = width_map.shape

        if self._scores is None or self._scores.shape != (self.rows, self.cols):
            self._scores = np.empty((self.rows, self.cols), dtype=np.int32)
        d = self.params.decimation_rate
        if self._grid is None or not self._grid.fits(self.rows, self.cols, d):
            self._grid = AnchorGrid.allocate(self.rows, self.cols, d)

        score_field = accumulate_scores(white, green, width_map, self.params,
                                        field_border=mask, out=self._scores, grid=self._grid)
        rois = extract_rois(score_field.scores, width_map, self.params,
                            accepted=score_field.accepted)

        heatmap = None
        if self.params.tag_level > 0:
            # Fixed bounds, so colors compare across frames
            heatmap = render_heatmap(score_field.scores, -COMBINED_SCORE_MAX, COMBINED_SCORE_MAX)

        logger.debug("%s: %d ROIs", self.get_class_name(), len(rois))
        return GoalByIIResult(rois, score_field, heatmap)
