import numpy as np
import pandas as pd
import pytest

from hictable.lib import checks
from hictable.lib.checks import UsageError, FormatError


def test_error_taxonomy():
    for err in (checks.UsageError, checks.FormatError, checks.DataError):
        assert issubclass(err, checks.HicTableError)
        assert issubclass(err, ValueError)


def test_is_valid_subset_options():
    assert checks.is_valid_subset_options()
    assert checks.is_valid_subset_options(subset_dist=10)
    assert checks.is_valid_subset_options(subset_index=[0, 10, 0, 10])
    assert checks.is_valid_subset_options(subset_index=np.array([0, 10, 0, 10]))

    assert checks.is_valid_subset_options(1, [0, 1, 0, 1]) is False
    with pytest.raises(UsageError, match="only one"):
        checks.is_valid_subset_options(1, [0, 1, 0, 1], raise_errors=True)

    for bad_index in ([0, 1, 2], [0, 1, 2, 3, 4], [[0, 1], [2, 3]], ["a", 1, 2, 3]):
        with pytest.raises(UsageError):
            checks.is_valid_subset_options(subset_index=bad_index, raise_errors=True)

    with pytest.raises(UsageError):
        checks.is_valid_subset_options(subset_dist="far", raise_errors=True)

    assert checks.is_valid_subset_options(subset_dist=np.nan) is False
    with pytest.raises(UsageError, match="NaN"):
        checks.is_valid_subset_options(subset_dist=float("nan"), raise_errors=True)


def test_is_valid_exclude_overlap():
    for value in (0, 0.2, 1, 1.0):
        assert checks.is_valid_exclude_overlap(value)
    for value in (-0.1, 1.01, np.nan, "0.2", None):
        assert checks.is_valid_exclude_overlap(value) is False
    with pytest.raises(UsageError):
        checks.is_valid_exclude_overlap(2, raise_errors=True)


def test_is_valid_exclude_regions():
    positional = pd.DataFrame([["chr1", 0, 100], ["chr1", 50, 200]])
    assert checks.is_valid_exclude_regions(positional)

    bedframe = pd.DataFrame(
        {"chrom": ["chr1"], "start": [0], "end": [100], "name": ["cnv"]}
    )
    assert checks.is_valid_exclude_regions(bedframe)

    four_columns = pd.DataFrame([["chr1", 0, 100, "cnv"]])
    with pytest.raises(UsageError, match="3 columns"):
        checks.is_valid_exclude_regions(four_columns, raise_errors=True)

    with pytest.raises(UsageError):
        checks.is_valid_exclude_regions([["chr1", 0, 100]], raise_errors=True)

    # end before start is not an interval
    with pytest.raises(UsageError):
        checks.is_valid_exclude_regions(
            pd.DataFrame([["chr1", 100, 0]]), raise_errors=True
        )


def test_is_hic_table():
    table = pd.DataFrame(
        [["chr1", 0, 1000, "chr1", 1000, 2000, 10.0, 20.0, 1.0, 1.0]],
        columns=["chr1", "start1", "end1", "chr2", "start2", "end2", "IF1", "IF2", "D", "M"],
    )
    assert checks.is_hic_table(table)
    assert checks.is_hic_table(table.iloc[:0])
    assert checks.is_hic_table(table.values) is False
    assert checks.is_hic_table(table.drop(columns="M")) is False

    two_chroms = table.assign(chr2="chr2")
    with pytest.raises(FormatError, match="single chromosome"):
        checks.is_hic_table(two_chroms, raise_errors=True)
