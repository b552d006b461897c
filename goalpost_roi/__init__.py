# goalpost_roi/__init__.py
from .exceptions import GoalFilterError, ShapeMismatchError, ParameterError
from .goal_by_ii import GoalByII, GoalByIIResult, RegionOfInterest, ScoreField
from .integral_image import IntegralImage
from .params import GoalByIIParams

__all__ = ['GoalByII', 'GoalByIIParams', 'GoalByIIResult', 'RegionOfInterest',
           'ScoreField', 'IntegralImage', 'GoalFilterError', 'ShapeMismatchError',
           'ParameterError']
