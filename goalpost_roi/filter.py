# goalpost_roi/filter.py
from abc import ABC, abstractmethod


class Filter(ABC):
    """
    Narrow interface between a vision filter and the pipeline running it

    The pipeline resolves expected_dependencies() inputs, calls process()
    once per frame and identifies the filter by get_class_name().
    """

    @abstractmethod
    def get_class_name(self):
        """Stable name of the filter"""

    @abstractmethod
    def expected_dependencies(self):
        """Number of inputs process() requires"""

    @abstractmethod
    def process(self, *inputs):
        """Run one processing step on the inputs of a frame"""
