from .math_tools import MathTools
from .one_rm import OneRMCalculator

__all__ = ["MathTools", "OneRMCalculator"]
