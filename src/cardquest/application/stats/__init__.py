# Application Stats Package
from .metrics_calculator import MasteryCalculator, MasterySummary, difficulty_label

__all__ = ["MasteryCalculator", "MasterySummary", "difficulty_label"]
