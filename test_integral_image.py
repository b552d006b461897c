# test_integral_image.py
import numpy as np
import pytest

from goalpost_roi.integral_image import IntegralImage, patch_score, combined_score
from goalpost_roi.params import GoalByIIParams
from goalpost_roi.patches import Patch, PatchKind


def test_rectangle_sum_matches_brute_force():
    rng = np.random.default_rng(0)
    mask = rng.integers(0, 2, size=(23, 31))
    ii = IntegralImage.from_mask(mask)

    assert ii.table.shape == (24, 32)
    assert ii.shape == (23, 31)

    for _ in range(200):
        x1, x2 = sorted(rng.integers(0, 32, size=2))
        y1, y2 = sorted(rng.integers(0, 24, size=2))
        assert ii.rectangle_sum(x1, y1, x2, y2) == mask[y1:y2, x1:x2].sum()


def test_rectangle_sum_vectorized():
    rng = np.random.default_rng(1)
    mask = rng.integers(0, 2, size=(10, 12))
    ii = IntegralImage.from_mask(mask)

    x1 = np.array([0, 2, 5])
    y1 = np.array([0, 3, 1])
    x2 = np.array([12, 7, 6])
    y2 = np.array([10, 9, 4])
    expected = [mask[b:d, a:c].sum() for a, b, c, d in zip(x1, y1, x2, y2)]
    np.testing.assert_array_equal(ii.rectangle_sum(x1, y1, x2, y2), expected)


def test_rectangle_sum_clamps_to_image():
    mask = np.ones((5, 6), dtype=np.uint8)
    ii = IntegralImage.from_mask(mask)

    assert ii.rectangle_sum(-3, -3, 100, 100) == 30
    assert ii.rectangle_sum(4, 2, 10, 3) == 2
    # Fully outside or inverted rectangles are empty
    assert ii.rectangle_sum(7, 0, 9, 5) == 0
    assert ii.rectangle_sum(4, 4, 2, 2) == 0


def test_from_mask_counts_non_zero_pixels_once():
    mask = np.array([[0, 255], [255, 255]], dtype=np.uint8)
    ii = IntegralImage.from_mask(mask)
    assert ii.rectangle_sum(0, 0, 2, 2) == 3


def test_accepts_precomputed_table():
    table = np.array([[0, 0, 0], [0, 1, 2], [0, 2, 4]], dtype=np.int32)
    ii = IntegralImage(table)
    assert ii.shape == (2, 2)
    assert ii.rectangle_sum(1, 1, 2, 2) == 1


def test_requires_2d_input():
    with pytest.raises(ValueError):
        IntegralImage.from_mask(np.zeros((3, 3, 3)))
    with pytest.raises(ValueError):
        IntegralImage(np.zeros(4))


def test_patch_score_white_green_and_mixed():
    white_mask = np.zeros((4, 4), dtype=np.uint8)
    white_mask[:, :2] = 1
    white = IntegralImage.from_mask(white_mask)
    green = IntegralImage.from_mask(1 - white_mask)

    assert patch_score(Patch(0, 0, 2, 4, PatchKind.ABOVE), white, green) == 255
    assert patch_score(Patch(2, 0, 2, 4, PatchKind.BELOW), white, green) == -255
    assert patch_score(Patch(1, 0, 2, 4, PatchKind.ABOVE), white, green) == 0


def test_patch_score_unclassified_pixels_dilute_score():
    white_mask = np.zeros((2, 2), dtype=np.uint8)
    white_mask[0, 0] = 1
    white = IntegralImage.from_mask(white_mask)
    green = IntegralImage.from_mask(np.zeros((2, 2)))

    assert patch_score(Patch(0, 0, 2, 2, PatchKind.ABOVE), white, green) == pytest.approx(255 / 4)


def test_patch_score_clamped_and_empty_patches():
    white = IntegralImage.from_mask(np.ones((4, 4)))
    green = IntegralImage.from_mask(np.zeros((4, 4)))

    # Partly outside: only the inside part counts
    assert patch_score(Patch(-2, -2, 4, 4, PatchKind.ABOVE), white, green) == 255
    # Entirely outside: neutral
    assert patch_score(Patch(10, 10, 3, 3, PatchKind.ABOVE), white, green) == 0
    assert patch_score(Patch(1, 1, 0, 0, PatchKind.ABOVE), white, green) == 0


def test_patch_score_saturates_for_scaled_tables():
    # Tables built from 0/255 images overflow the nominal range
    table = np.cumsum(np.cumsum(np.full((3, 3), 255), axis=0), axis=1)
    white = IntegralImage(np.pad(table, ((1, 0), (1, 0))))
    green = IntegralImage.from_mask(np.zeros((3, 3)))

    assert patch_score(Patch(0, 0, 3, 3, PatchKind.ABOVE), white, green) == 255


def test_combined_score_formula():
    params = GoalByIIParams(below_coeff=0.5, side_coeff=0.25)
    # 100 - 0.5 * (-50) - 0.25 * (200 - 20 - 60)
    assert combined_score(100, -50, 20, 60, params) == pytest.approx(95)


def test_combined_score_is_bounded():
    params = GoalByIIParams(below_coeff=4.0, side_coeff=3.0)
    rng = np.random.default_rng(2)
    scores = rng.uniform(-255, 255, size=(4, 1000))

    combined = combined_score(*scores, params)
    assert combined.max() <= 510
    assert combined.min() >= -510
    assert combined_score(255, -255, 255, 255, params) == 510
    assert combined_score(-255, 255, -255, -255, params) == -510
