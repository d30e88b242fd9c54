"""Rating-matrix loading and validation.

The recommender core assumes a rectangular, non-empty, non-negative integer
matrix. Everything that can go wrong while producing one is reported here as a
`RatingsLoadError` subclass so callers decide how to surface it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, Union

import numpy as np
import pandas as pd


logger = logging.getLogger(__name__)

# Rows = users, columns = items, 0 = unrated.
RatingMatrix = np.ndarray

_INT_PATTERN = r"[+-]?\d+"


class RatingsLoadError(ValueError):
    """Base class for every failure to produce a RatingMatrix."""


class RatingsFileError(RatingsLoadError):
    """The ratings file is missing or cannot be read."""


class EmptyRatingsError(RatingsLoadError):
    """The ratings source holds no users or no items."""


class InconsistentRowLengthError(RatingsLoadError):
    """A row has a different number of values than the first row."""


class NonNumericRatingError(RatingsLoadError):
    """A cell is not an integer."""


class NegativeRatingError(RatingsLoadError):
    """A cell holds a rating below zero."""


class RatingOutOfRangeError(RatingsLoadError):
    """A cell holds an integer too large for int64."""


def as_rating_matrix(rows: Union[Sequence[Sequence[int]], np.ndarray]) -> RatingMatrix:
    """Validate nested rows and freeze them into a read-only int64 matrix."""
    if isinstance(rows, np.ndarray):
        arr = rows
    else:
        rows = [list(r) for r in rows]
        if not rows:
            raise EmptyRatingsError("ratings matrix has no users")
        width = len(rows[0])
        for row_no, row in enumerate(rows[1:], start=2):
            if len(row) != width:
                raise InconsistentRowLengthError(f"row {row_no} has {len(row)} values, expected {width}")
        arr = np.asarray(rows)

    if arr.ndim != 2:
        raise InconsistentRowLengthError(f"ratings matrix must be 2-dimensional, got ndim={arr.ndim}")
    if arr.shape[0] == 0:
        raise EmptyRatingsError("ratings matrix has no users")
    if arr.shape[1] == 0:
        raise EmptyRatingsError("ratings matrix has no items")
    if not np.issubdtype(arr.dtype, np.integer):
        raise NonNumericRatingError(f"ratings must be integers, got dtype={arr.dtype}")
    if (arr < 0).any():
        bad = sorted(set(arr[arr < 0].tolist()))
        raise NegativeRatingError(f"ratings must be >= 0, found: {bad}")

    matrix = np.array(arr, dtype=np.int64, copy=True)
    matrix.setflags(write=False)
    return matrix


def load_rating_matrix(path: Union[Path, str]) -> RatingMatrix:
    """Load a header-less, comma-delimited rating table.

    Notes
    -----
    Every cell is read as a string and validated here rather than letting
    pandas infer dtypes, so that "3.5", "abc" or an empty cell are rejected
    instead of silently becoming floats or NaN. Blank lines are skipped.
    """
    path = Path(path)
    try:
        df = pd.read_csv(
            path,
            header=None,
            sep=",",
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as exc:
        raise EmptyRatingsError(f"{path} contains no ratings") from exc
    except pd.errors.ParserError as exc:
        raise InconsistentRowLengthError(f"{path}: inconsistent row lengths ({exc})") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise RatingsFileError(f"could not read ratings file {path}: {exc}") from exc

    if df.empty:
        raise EmptyRatingsError(f"{path} contains no ratings")

    cells = df.apply(lambda col: col.str.strip())
    blank = (cells.isna() | cells.eq("")).to_numpy()
    is_int = cells.apply(lambda col: col.str.fullmatch(_INT_PATTERN).eq(True)).to_numpy(dtype=bool)

    width = df.shape[1]
    for row_no, (row_blank, row_int) in enumerate(zip(blank, is_int), start=1):
        if row_int.all():
            continue
        if row_blank.any():
            # Short rows are padded with empty cells by the parser.
            filled = int(np.argmax(row_blank))
            if row_blank[filled:].all() and row_int[:filled].all():
                raise InconsistentRowLengthError(f"{path}: row {row_no} has {filled} values, expected {width}")
        bad_col = int(np.argmin(row_int))
        raise NonNumericRatingError(
            f"{path}: non-numeric value {df.iat[row_no - 1, bad_col]!r} at row {row_no}, column {bad_col + 1}"
        )

    try:
        values = cells.astype("int64").to_numpy()
    except (OverflowError, ValueError) as exc:
        raise RatingOutOfRangeError(f"{path}: rating does not fit in a 64-bit integer ({exc})") from exc

    matrix = as_rating_matrix(values)
    logger.info("Loaded ratings from %s: users=%d items=%d", path, matrix.shape[0], matrix.shape[1])
    return matrix
