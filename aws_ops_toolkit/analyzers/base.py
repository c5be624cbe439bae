"""
Base analyzer class with common functionality
"""

from abc import ABC, abstractmethod


class BaseAnalyzer(ABC):
    """Base class for all analyzers"""

    title = ""

    def __init__(self, config, data_processor):
        self.config = config
        self.data_processor = data_processor

    @abstractmethod
    def analyze(self, *args, **kwargs):
        """
        Run the analysis

        Returns:
            DataFrame: One row per reported record
        """
