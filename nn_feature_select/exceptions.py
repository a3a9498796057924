"""
nn_feature_select.exceptions
============================
Errors and warnings raised while loading data and driving the search.

Every fatal condition derives from :class:`FeatureSelectionError`; the
command-line front end turns these into exit code 1.  Library code only
raises.
"""

from __future__ import annotations


__all__ = [
    "CellParseWarning",
    "EmptyDatasetError",
    "FeatureSelectionError",
    "FileOpenError",
    "InvalidChoiceError",
    "RaggedDatasetError",
]


class FeatureSelectionError(Exception):
    """Base class for fatal errors."""


class FileOpenError(FeatureSelectionError, OSError):
    """The input data file could not be opened."""


class EmptyDatasetError(FeatureSelectionError, ValueError):
    """Parsing produced no samples."""


class RaggedDatasetError(FeatureSelectionError, ValueError):
    """Parsed rows do not all have the same number of values."""


class InvalidChoiceError(FeatureSelectionError, ValueError):
    """The search method chosen at the prompt is not 1 or 2."""


class CellParseWarning(UserWarning):
    """A token in the input file is not a number and was skipped."""
