from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from src.data import (
    EmptyRatingsError,
    InconsistentRowLengthError,
    NegativeRatingError,
    NonNumericRatingError,
    RatingOutOfRangeError,
    RatingsFileError,
    RatingsLoadError,
    as_rating_matrix,
    load_rating_matrix,
)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "ratings.csv"
    path.write_text(text)
    return path


def test_load_rating_matrix(tmp_path: Path) -> None:
    matrix = load_rating_matrix(_write(tmp_path, "5,0,3\n4,0,0\n0,5,4\n"))

    np.testing.assert_array_equal(matrix, [[5, 0, 3], [4, 0, 0], [0, 5, 4]])
    assert matrix.dtype == np.int64
    assert not matrix.flags.writeable


def test_load_tolerates_spaces_and_blank_lines(tmp_path: Path) -> None:
    matrix = load_rating_matrix(_write(tmp_path, "5, 0,3\n\n4,0 ,0\n"))
    np.testing.assert_array_equal(matrix, [[5, 0, 3], [4, 0, 0]])


def test_single_column(tmp_path: Path) -> None:
    matrix = load_rating_matrix(_write(tmp_path, "5\n0\n"))
    assert matrix.shape == (2, 1)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RatingsFileError):
        load_rating_matrix(tmp_path / "nope.csv")


def test_empty_file(tmp_path: Path) -> None:
    with pytest.raises(EmptyRatingsError):
        load_rating_matrix(_write(tmp_path, ""))


@pytest.mark.parametrize("text", ["5,0,3\n4,0,0,1\n", "5,0,3\n4,0\n"])
def test_inconsistent_row_lengths(tmp_path: Path, text: str) -> None:
    with pytest.raises(InconsistentRowLengthError):
        load_rating_matrix(_write(tmp_path, text))


@pytest.mark.parametrize("text", ["5,x,3\n", "5,3.5,3\n", "5,,3\n4,0,0\n"])
def test_non_numeric_values(tmp_path: Path, text: str) -> None:
    with pytest.raises(NonNumericRatingError):
        load_rating_matrix(_write(tmp_path, text))


def test_negative_rating(tmp_path: Path) -> None:
    with pytest.raises(NegativeRatingError):
        load_rating_matrix(_write(tmp_path, "5,-1,3\n"))


def test_load_errors_share_a_base_class(tmp_path: Path) -> None:
    with pytest.raises(RatingsLoadError):
        load_rating_matrix(_write(tmp_path, "a,b\n"))
    assert issubclass(RatingsLoadError, ValueError)


def test_as_rating_matrix_validates_rows() -> None:
    with pytest.raises(InconsistentRowLengthError):
        as_rating_matrix([[1, 2], [3]])
    with pytest.raises(EmptyRatingsError):
        as_rating_matrix([])
    with pytest.raises(EmptyRatingsError):
        as_rating_matrix([[]])
    with pytest.raises(NonNumericRatingError):
        as_rating_matrix([[1.5, 2.0]])


def test_as_rating_matrix_copies_and_freezes() -> None:
    source = np.array([[1, 0], [0, 2]], dtype=np.int32)
    matrix = as_rating_matrix(source)

    source[0, 0] = 9
    assert matrix[0, 0] == 1
    assert matrix.dtype == np.int64
    with pytest.raises(ValueError):
        matrix[0, 0] = 3


def test_sample_ratings_file_loads(sample_ratings_path: Path) -> None:
    matrix = load_rating_matrix(sample_ratings_path)

    assert matrix.shape == (6, 8)
    assert (matrix >= 0).all()


def test_rating_too_large_for_int64(tmp_path: Path) -> None:
    with pytest.raises(RatingOutOfRangeError):
        load_rating_matrix(_write(tmp_path, "5,99999999999999999999\n1,2\n"))
