# goalpost_roi/inputs.py
"""
Simple producers for the filter inputs

On the robot these come from earlier stages of the vision pipeline; the
versions here build them from a single BGR image so the filter can be run
on recorded frames.
"""
import cv2
import numpy as np

from .integral_image import IntegralImage

# HSV ranges (OpenCV hue in [0, 180])
WHITE_LOWER = (0, 0, 200)
WHITE_UPPER = (180, 50, 255)
GREEN_LOWER = (35, 60, 40)
GREEN_UPPER = (85, 255, 255)


def classify_white_green(image):
    """
    Classify pixels of a BGR image as white-like and green-like

    Returns:
        (white, green) uint8 masks, 255 for classified pixels
    """
    hsv = cv2.cvtColor(image, cv2.COLOR_BGR2HSV)
    white = cv2.inRange(hsv, np.array(WHITE_LOWER, dtype=np.uint8), np.array(WHITE_UPPER, dtype=np.uint8))
    green = cv2.inRange(hsv, np.array(GREEN_LOWER, dtype=np.uint8), np.array(GREEN_UPPER, dtype=np.uint8))
    return white, green


def resize_image(image, scale):
    if scale == 1:
        return image
    h, w = image.shape[:2]
    size = (max(1, int(round(w * scale))), max(1, int(round(h * scale))))
    return cv2.resize(image, size, interpolation=cv2.INTER_AREA)


def build_integral_images(image, scale=1.0):
    """
    White and green integral images of a BGR image

    Args:
        image: BGR image
        scale: resize factor applied before classification

    Returns:
        (white IntegralImage, green IntegralImage, green mask)
    """
    white, green = classify_white_green(resize_image(image, scale))
    return IntegralImage.from_mask(white), IntegralImage.from_mask(green), green


def linear_width_map(rows, cols, top_width, bottom_width):
    """Expected post width growing linearly from the top row to the bottom row"""
    column = np.linspace(top_width, bottom_width, rows, dtype=np.float32)
    return np.repeat(column[:, np.newaxis], cols, axis=1)


def field_border_mask(green, scale=1):
    """
    Field mask: in each column, every pixel from the first green pixel down

    Args:
        green: (rows, cols) green classification
        scale: size of the mask relative to green

    Returns:
        uint8 mask of (scale * rows, scale * cols), 255 inside the field
    """
    green = np.asarray(green) > 0
    mask = np.logical_or.accumulate(green, axis=0).astype(np.uint8) * 255
    if scale != 1:
        rows, cols = mask.shape
        size = (int(round(cols * scale)), int(round(rows * scale)))
        mask = cv2.resize(mask, size, interpolation=cv2.INTER_NEAREST)
    return mask
