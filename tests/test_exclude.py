import logging

import numpy as np
import pandas as pd
import pytest
from numpy import testing

import hictable
from hictable.api import exclude
from hictable.lib.checks import UsageError


@pytest.fixture
def hic_table():
    sparse1 = pd.DataFrame(
        [[0, 1000, 10], [0, 2000, 5], [2000, 2000, 7], [2000, 3000, 4]]
    )
    sparse2 = pd.DataFrame(
        [[0, 1000, 20], [0, 3000, 8], [2000, 2000, 6], [2000, 3000, 2]]
    )
    return hictable.create_hic_table(
        sparse1, sparse2, chrom="chr1", scale=False, include_zeros=True
    )


def _regions(rows):
    return pd.DataFrame(rows, columns=["chrom", "start", "end"])


def test_make_exclusion_regions():
    regions = pd.DataFrame(
        [["chr1", 500, 1500], ["chr1", 700, 900], ["chr1", 1400, 1600], ["chr2", 0, 10]]
    )
    merged = exclude.make_exclusion_regions(regions)
    assert list(merged.columns) == ["chrom", "start", "end"]
    assert merged.values.tolist() == [["chr1", 500, 1600], ["chr2", 0, 10]]

    # bedframes may carry extra columns
    bedframe = _regions([["chr1", 0, 100]]).assign(name="cnv")
    assert len(exclude.make_exclusion_regions(bedframe)) == 1

    with pytest.raises(UsageError):
        exclude.make_exclusion_regions(pd.DataFrame([["chr1", 0, 100, "cnv"]]))


def test_region_overlap_fraction(hic_table):
    bins = exclude.region_overlap_fraction(
        hic_table, _regions([["chr1", 500, 1500], ["chr1", 600, 900]])
    )
    assert bins["start"].tolist() == [0, 1000, 2000, 3000]
    testing.assert_array_equal(bins["end"] - bins["start"], 1000)
    # overlapping regions are not counted twice
    testing.assert_allclose(bins["overlap_fraction"], [0.5, 0.5, 0, 0])

    bins = exclude.region_overlap_fraction(hic_table, _regions([["chr2", 0, 5000]]))
    testing.assert_allclose(bins["overlap_fraction"], 0)


def test_exclude_regions(hic_table, caplog):
    caplog.set_level(logging.INFO)
    # bins [0, 1000) and [1000, 2000) are half covered, [2000, 3000) is not
    kept = exclude.exclude_regions(
        hic_table, _regions([["chr1", 500, 1500]]), exclude_overlap=0.2
    )
    assert list(zip(kept["start1"], kept["start2"])) == [(2000, 2000), (2000, 3000)]
    assert "3 interactions excluded" in caplog.text

    # 50% is not enough for a threshold of 0.6
    kept = exclude.exclude_regions(
        hic_table, _regions([["chr1", 500, 1500]]), exclude_overlap=0.6
    )
    pd.testing.assert_frame_equal(kept, hic_table)
    assert "No overlap between data and regions" in caplog.text

    # threshold of 1 needs full coverage
    kept = exclude.exclude_regions(
        hic_table, _regions([["chr1", 3000, 4000]]), exclude_overlap=1
    )
    assert list(zip(kept["start1"], kept["start2"])) == [
        (0, 1000),
        (0, 2000),
        (2000, 2000),
    ]


def test_exclude_regions_zero_overlap(hic_table, caplog):
    caplog.set_level(logging.INFO)
    # bin 0 covered by 10%, bin 1000 by 5%, bins 2000 and 3000 not at all
    regions = _regions([["chr1", 900, 1000], ["chr1", 1000, 1050]])

    kept = exclude.exclude_regions(hic_table, regions, exclude_overlap=0)
    assert list(zip(kept["start1"], kept["start2"])) == [(2000, 2000), (2000, 3000)]

    kept = exclude.exclude_regions(hic_table, regions, exclude_overlap=0.1)
    assert list(zip(kept["start1"], kept["start2"])) == [(2000, 2000), (2000, 3000)]
    assert (kept["start1"] != 0).all()

    kept = exclude.exclude_regions(hic_table, regions[1:], exclude_overlap=0.1)
    assert len(kept) == len(hic_table)

    assert "exclude_overlap of 0 replaced by 0.05" in caplog.text

    # no bin overlaps at all: nothing is removed
    caplog.clear()
    kept = exclude.exclude_regions(
        hic_table, _regions([["chr2", 0, 100]]), exclude_overlap=0
    )
    pd.testing.assert_frame_equal(kept, hic_table)
    assert "replaced by" not in caplog.text
    assert "No overlap between data and regions" in caplog.text


def test_exclude_regions_errors(hic_table):
    regions = _regions([["chr1", 0, 100]])
    for bad_overlap in (-0.5, 1.5, np.nan):
        with pytest.raises(UsageError):
            exclude.exclude_regions(hic_table, regions, exclude_overlap=bad_overlap)
    with pytest.raises(UsageError):
        exclude.exclude_regions(hic_table, "chr1:0-100")
    with pytest.raises(ValueError):
        exclude.exclude_regions(hic_table.drop(columns="D"), regions)


def test_create_hic_table_excludes(hic_table):
    table = hictable.create_hic_table(
        pd.DataFrame([[0, 1000, 10], [0, 2000, 5], [2000, 2000, 7], [2000, 3000, 4]]),
        pd.DataFrame([[0, 1000, 20], [0, 3000, 8], [2000, 2000, 6], [2000, 3000, 2]]),
        chrom="chr1",
        scale=False,
        include_zeros=True,
        exclude_regions=pd.DataFrame([["chr1", 500, 1500]]),
    )
    pd.testing.assert_frame_equal(
        table, hic_table[hic_table["start1"] == 2000].reset_index(drop=True)
    )

    # empty tables pass through
    empty = hictable.create_hic_table(
        pd.DataFrame([[0, 1000, 10]]),
        pd.DataFrame([[0, 2000, 20]]),
        chrom="chr1",
        exclude_regions=_regions([["chr1", 0, 1000]]),
    )
    assert empty.shape == (0, 10)
