# goalpost_roi/params.py
"""
Configuration of the GoalByII filter

Parameters are an immutable value object validated once at construction.
JSON files may use either the snake_case field names or the camelCase names
used by the robot's parameter store (widthScale, maxRois, ...).
"""
import json
import math
import numbers
from dataclasses import dataclass, fields, asdict

from .exceptions import ParameterError

# camelCase name -> field name
CAMEL_CASE_NAMES = {
    'widthScale': 'width_scale',
    'aboveRatio': 'above_ratio',
    'belowRatio': 'below_ratio',
    'boundaryWidthRatio': 'boundary_width_ratio',
    'roiRatio': 'roi_ratio',
    'minWidth': 'min_width',
    'filledMaskMinWidth': 'filled_mask_min_width',
    'minScore': 'min_score',
    'maxRois': 'max_rois',
    'belowCoeff': 'below_coeff',
    'sideCoeff': 'side_coeff',
    'decimationRate': 'decimation_rate',
    'tagLevel': 'tag_level',
    'useMask': 'use_mask',
}

INT_FIELDS = ('max_rois', 'decimation_rate', 'tag_level', 'use_mask')


@dataclass(frozen=True)
class GoalByIIParams:
    # Multiplier applied to every local width before patch sizing
    width_scale: float = 1.0
    # Above patch height: above_ratio * width * width_scale
    above_ratio: float = 2.0
    # Below patch height: below_ratio * width * width_scale
    below_ratio: float = 1.0
    # Boundary patch width: boundary_width_ratio * width * width_scale
    boundary_width_ratio: float = 3.0
    # Side of the ROI square: roi_ratio * width * width_scale
    roi_ratio: float = 2.0
    # Minimal scaled width to accept an anchor
    min_width: float = 2.0
    # Minimal scaled width when the mask block is entirely filled
    filled_mask_min_width: float = 1.0
    # Minimal combined score for a ROI, scores are in [-510, 510]
    min_score: float = 100.0
    max_rois: int = 4
    # Weight of (above - below)
    below_coeff: float = 1.0
    # Weight of (2 * above - above_right - above_left), subtracted from the
    # score: negative values reward posts standing out from their neighbours
    side_coeff: float = -0.5
    # Score function is only computed every decimation_rate pixels
    decimation_rate: int = 2
    # 0: no heat map produced
    tag_level: int = 0
    # 0: field border mask is ignored
    use_mask: int = 0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ParameterError(f"{f.name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ParameterError(f"{f.name} must be finite, got {value}")
            if f.name in INT_FIELDS and int(value) != value:
                raise ParameterError(f"{f.name} must be an integer, got {value}")

        for name in ('width_scale', 'above_ratio', 'below_ratio',
                     'boundary_width_ratio', 'roi_ratio'):
            if getattr(self, name) <= 0:
                raise ParameterError(f"{name} must be > 0, got {getattr(self, name)}")

        for name in ('min_width', 'filled_mask_min_width', 'max_rois',
                     'tag_level', 'use_mask'):
            if getattr(self, name) < 0:
                raise ParameterError(f"{name} must be >= 0, got {getattr(self, name)}")

        if self.decimation_rate < 1:
            raise ParameterError(f"decimation_rate must be >= 1, got {self.decimation_rate}")

        # Integer parameters given as 2.0 in JSON are stored as int
        for name in INT_FIELDS:
            object.__setattr__(self, name, int(getattr(self, name)))

    @classmethod
    def from_dict(cls, values):
        """Build parameters from a dictionary, missing entries use the defaults"""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = CAMEL_CASE_NAMES.get(key, key)
            if name not in known:
                raise ParameterError(f"Unknown parameter '{key}'")
            if name in kwargs:
                raise ParameterError(f"Parameter '{key}' given twice")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_json(cls, config_path):
        """Load parameters from a JSON file, merged over the defaults"""
        with open(config_path, 'r') as f:
            config = json.load(f)
        if not isinstance(config, dict):
            raise ParameterError(f"{config_path} must contain a JSON object")
        return cls.from_dict(config)

    def to_dict(self):
        """camelCase dictionary, suitable for writing back to JSON"""
        field_to_camel = {v: k for k, v in CAMEL_CASE_NAMES.items()}
        return {field_to_camel[k]: v for k, v in asdict(self).items()}

    def save_json(self, config_path):
        with open(config_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
