"""
nn_feature_select.data
======================
Reading labeled numeric data from text files and z-score scaling.

File format: one sample per line, values separated by commas and/or
whitespace, class label first.  A value that is not a number is skipped
with a :class:`~nn_feature_select.exceptions.CellParseWarning`; the rest of
the line is kept.
"""

from __future__ import annotations

import logging
import warnings
from os import PathLike
from typing import Iterable, Union

import numpy as np
from sklearn.preprocessing import StandardScaler

from .exceptions import (
    CellParseWarning,
    EmptyDatasetError,
    FileOpenError,
    RaggedDatasetError,
)


__all__ = [
    "load_dataset",
    "normalize_features",
    "parse_lines",
    "read_data_file",
]

logger = logging.getLogger(__name__)

PathType = Union[str, PathLike]


def _warn_skipped(line_number: int, token: str, line: str, reason: str) -> None:
    warnings.warn(
        f"line {line_number}: {reason} {token!r} in {line!r}; skipping cell.",
        CellParseWarning,
        stacklevel=3,
    )


def parse_lines(lines: Iterable[str]) -> list[list[float]]:
    """Parse text lines into rows of floats.

    Tokens that are not numbers, or whose value is not finite (``1e400``,
    ``inf``, ``nan``), are skipped with a warning.  Lines that yield no
    value at all (blank, or nothing parseable) are dropped.  Rows are
    returned as parsed and may differ in length.
    """
    rows = []
    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        row = []
        for token in line.replace(",", " ").split():
            try:
                value = float(token)
            except ValueError:
                _warn_skipped(line_number, token, line, "could not convert")
                continue
            if not np.isfinite(value):
                _warn_skipped(line_number, token, line, "value out of range for")
                continue
            row.append(value)
        if row:
            rows.append(row)
    return rows


def read_data_file(path: PathType) -> list[list[float]]:
    """Read and parse a data file into raw rows.

    Raises
    ------
    FileOpenError
        If the file cannot be opened.
    """
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as fh:
            return parse_lines(fh)
    except OSError as exc:
        raise FileOpenError(f"Could not open file {path}") from exc


def load_dataset(path: PathType) -> np.ndarray:
    """Read a data file into a ``(n_samples, n_features + 1)`` array.

    Raises
    ------
    FileOpenError
        If the file cannot be opened.
    EmptyDatasetError
        If no row could be parsed.
    RaggedDatasetError
        If rows have different numbers of values.
    """
    rows = read_data_file(path)
    if not rows:
        raise EmptyDatasetError(f"No data read from {path}.")

    widths = {len(row) for row in rows}
    if len(widths) > 1:
        raise RaggedDatasetError(
            f"Rows in {path} have differing numbers of values: {sorted(widths)}."
        )

    data = np.array(rows, dtype=float)
    logger.info("Loaded %d samples with %d features from %s",
                data.shape[0], data.shape[1] - 1, path)
    return data


def normalize_features(data: np.ndarray) -> np.ndarray:
    """Z-score every feature column of ``data`` in place.

    The label column (0) is left alone.  Standard deviation is the
    population one; a constant column is only mean-centered, so it becomes
    all zeros.

    Returns
    -------
    np.ndarray
        ``data`` itself.
    """
    if data.ndim != 2 or data.shape[0] == 0 or data.shape[1] <= 1:
        return data
    data[:, 1:] = StandardScaler().fit_transform(data[:, 1:])
    return data
