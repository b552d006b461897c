# goalpost_roi/exceptions.py


class GoalFilterError(Exception):
    """Base class for errors raised by the goal ROI filter"""


class ShapeMismatchError(GoalFilterError, ValueError):
    """An input's dimensions disagree with the expected rows/cols/mask scale"""


class ParameterError(GoalFilterError, ValueError):
    """Invalid or unknown configuration value"""
