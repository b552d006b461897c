# test_inputs.py
import numpy as np

from goalpost_roi import GoalByII, GoalByIIParams
from goalpost_roi.inputs import (build_integral_images, classify_white_green,
                                 field_border_mask, linear_width_map)


def synthetic_goal_frame():
    """Green field with a white post standing on it, grey background above"""
    image = np.full((60, 80, 3), 120, dtype=np.uint8)
    image[30:, :] = (40, 160, 40)
    image[5:40, 38:44] = (250, 250, 250)
    return image


def test_classify_white_green():
    image = synthetic_goal_frame()
    white, green = classify_white_green(image)

    assert white.shape == green.shape == (60, 80)
    assert white[20, 40] == 255 and green[20, 40] == 0
    assert green[50, 10] == 255 and white[50, 10] == 0
    # grey background is neither
    assert white[10, 10] == 0 and green[10, 10] == 0


def test_build_integral_images_with_scale():
    white, green, green_mask = build_integral_images(synthetic_goal_frame(), scale=0.5)
    assert white.shape == green.shape == (30, 40)
    assert green_mask.shape == (30, 40)


def test_linear_width_map():
    width_map = linear_width_map(5, 3, 2.0, 10.0)
    assert width_map.shape == (5, 3)
    np.testing.assert_allclose(width_map[:, 0], [2, 4, 6, 8, 10])
    assert (width_map == width_map[:, :1]).all()


def test_field_border_mask():
    green = np.zeros((6, 3), dtype=np.uint8)
    green[2, 0] = 255
    green[4:, 1] = 255
    mask = field_border_mask(green)

    np.testing.assert_array_equal(mask[:, 0] > 0, [0, 0, 1, 1, 1, 1])
    np.testing.assert_array_equal(mask[:, 1] > 0, [0, 0, 0, 0, 1, 1])
    assert not mask[:, 2].any()

    assert field_border_mask(green, scale=2).shape == (12, 6)


def test_filter_finds_post_in_synthetic_frame():
    white, green, green_mask = build_integral_images(synthetic_goal_frame())
    width_map = np.full(white.shape, 6.0, dtype=np.float32)
    params = GoalByIIParams(above_ratio=2.0, below_ratio=1.0, side_coeff=-0.5, below_coeff=1.0,
                            decimation_rate=2, min_width=2.0, min_score=200, max_rois=3,
                            use_mask=1)

    result = GoalByII(params).process(white, green, width_map, field_border_mask(green_mask))

    assert result.rois
    best = result.rois[0]
    cx, cy = best.center
    assert 36 <= cx <= 46
    assert 28 <= cy <= 42
