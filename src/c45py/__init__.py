# c45py/__init__.py
"""
c45py: C4.5 split selection and an unpruned C4.5 tree in Python.

Exports:
    - C45ModelSelection, ModelSelection, SplitEvaluationError
    - C45Split, NoSplit, ClassifierSplitModel
    - Distribution
    - Dataset, Attribute
    - C45Classifier
"""
from .dataset import Attribute, Dataset
from .distribution import Distribution
from .split import C45Split, ClassifierSplitModel, NoSplit
from .selection import C45ModelSelection, ModelSelection, SplitEvaluationError
from .tree import C45Classifier

__all__ = [
    "Attribute",
    "Dataset",
    "Distribution",
    "C45Split",
    "ClassifierSplitModel",
    "NoSplit",
    "C45ModelSelection",
    "ModelSelection",
    "SplitEvaluationError",
    "C45Classifier",
]
__version__ = "0.1.0"
