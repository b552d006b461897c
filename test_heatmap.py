# test_heatmap.py
import numpy as np

from goalpost_roi.goal_by_ii import RegionOfInterest
from goalpost_roi.heatmap import overlay_rois, render_heatmap

BLUE, GREEN, RED = 0, 1, 2


def test_heatmap_two_tones_with_given_bounds():
    scores = np.array([[-10, 0, 10, 20, -20]], dtype=np.int32)
    heatmap = render_heatmap(scores, min_score=-10, max_score=10)

    assert heatmap.shape == (1, 5, 3)
    assert heatmap.dtype == np.uint8
    np.testing.assert_array_equal(heatmap[0, :, BLUE], [255, 0, 0, 0, 255])
    np.testing.assert_array_equal(heatmap[0, :, RED], [0, 0, 255, 255, 0])
    assert not heatmap[..., GREEN].any()


def test_heatmap_defaults_to_field_bounds():
    scores = np.array([[-5, 1, 5]], dtype=np.int32)
    heatmap = render_heatmap(scores)

    np.testing.assert_array_equal(heatmap[0, :, RED], [0, 51, 255])
    np.testing.assert_array_equal(heatmap[0, :, BLUE], [255, 0, 0])


def test_heatmap_of_negative_field_has_no_red():
    scores = np.full((3, 4), -510, dtype=np.int32)
    scores[1, 1] = -100
    heatmap = render_heatmap(scores)

    assert not heatmap[..., RED].any()
    assert heatmap[0, 0, BLUE] == 255
    assert 0 < heatmap[1, 1, BLUE] < 255


def test_overlay_rois_draws_on_a_copy():
    image = np.zeros((40, 40, 3), dtype=np.uint8)
    rois = [RegionOfInterest(5.0, 5.0, 20.0, 20.0, 300), RegionOfInterest(-10.0, 30.0, 60.0, 60.0, 120)]

    vis = overlay_rois(image, rois)

    assert vis.shape == image.shape
    assert vis.any()
    assert not image.any()


def test_overlay_rois_on_grayscale_image():
    image = np.zeros((20, 30), dtype=np.uint8)
    vis = overlay_rois(image, [RegionOfInterest(2.0, 2.0, 5.0, 5.0, 10)])
    assert vis.shape == (20, 30, 3)
