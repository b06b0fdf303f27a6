import logging

logging.basicConfig(level=logging.INFO)

import numpy as np
import pandas as pd
import bioframe

from ..lib import schemas
from ..lib.checks import (
    is_hic_table,
    is_valid_exclude_overlap,
    is_valid_exclude_regions,
)


def make_exclusion_regions(regions):
    """
    Reduce a set of genomic intervals to non-overlapping ones, so that
    overlapping exclusion regions are not counted twice.

    Parameters
    ----------
    regions : pandas.DataFrame
        A bedframe with chrom, start, end columns, or a DataFrame with
        exactly 3 columns in the order chrom start end.

    Returns
    -------
    regions : pandas.DataFrame
        Merged intervals with chrom, start, end columns.
    """
    is_valid_exclude_regions(regions, raise_errors=True)
    if not set(schemas.region_columns).issubset(regions.columns):
        regions = regions.set_axis(schemas.region_columns, axis=1)
    regions = regions[schemas.region_columns].astype(
        {"chrom": str, "start": "int64", "end": "int64"}
    )
    merged = bioframe.merge(regions)
    return merged[schemas.region_columns].reset_index(drop=True)


def _table_bins(hic_table):
    """Distinct genomic bins referenced by either side of the table."""
    anchors = [
        hic_table[[f"chr{side}", f"start{side}", f"end{side}"]].set_axis(
            schemas.region_columns, axis=1
        )
        for side in (1, 2)
    ]
    bins = pd.concat(anchors, ignore_index=True).drop_duplicates()
    bins = bins.astype({"chrom": str, "start": "int64", "end": "int64"})
    return bins.sort_values(["chrom", "start"]).reset_index(drop=True)


def region_overlap_fraction(hic_table, regions):
    """
    Compute the fraction of every bin of a joint table that is covered by
    exclusion regions.

    Parameters
    ----------
    hic_table : pandas.DataFrame
        Joint table.
    regions : pandas.DataFrame
        Exclusion regions, see ``make_exclusion_regions``. Merged here if
        they overlap.

    Returns
    -------
    bins : pandas.DataFrame
        chrom, start, end of every distinct bin, with the number of covered
        bases in "coverage" and the covered fraction in "overlap_fraction".
    """
    regions = make_exclusion_regions(regions)
    bins = _table_bins(hic_table)
    if len(bins) == 0 or len(regions) == 0:
        covered = bins.assign(coverage=np.zeros(len(bins), dtype="int64"))
    else:
        covered = bioframe.coverage(bins, regions)
        covered["coverage"] = covered["coverage"].fillna(0).astype("int64")
        covered = covered.sort_values(["chrom", "start"]).reset_index(drop=True)
    covered["overlap_fraction"] = covered["coverage"] / (covered["end"] - covered["start"])
    return covered


def exclude_regions(hic_table, regions, exclude_overlap=0.2):
    """
    Remove interactions involving bins covered by exclusion regions.

    Parameters
    ----------
    hic_table : pandas.DataFrame
        Joint table.
    regions : pandas.DataFrame
        A bedframe or a chrom start end DataFrame of regions to exclude,
        e.g. known CNVs or blacklisted regions.
    exclude_overlap : float
        The proportion of a bin that has to be covered by regions for it to
        be excluded. Default 0.2, i.e. 20% or more overlap. If 0, any
        overlap leads to exclusion. If 1, only fully covered bins are
        excluded.

    Returns
    -------
    hic_table : pandas.DataFrame
        New table without interactions of excluded bins.
    """
    is_valid_exclude_overlap(exclude_overlap, raise_errors=True)
    is_hic_table(hic_table, raise_errors=True)

    bins = region_overlap_fraction(hic_table, regions)
    fractions = bins["overlap_fraction"].to_numpy()

    threshold = exclude_overlap
    if threshold == 0:
        # 0 would match every bin, use the smallest actual overlap instead
        nonzero = fractions[fractions > 0]
        if len(nonzero):
            threshold = nonzero.min()
            logging.info(f"exclude_overlap of 0 replaced by {threshold}")
        else:
            threshold = np.inf

    to_remove = bins[fractions >= threshold]
    if len(to_remove) == 0:
        logging.info("No overlap between data and regions in exclude_regions")
        return hic_table.reset_index(drop=True)

    removed_starts = to_remove["start"].to_numpy()
    mask = hic_table["start1"].isin(removed_starts) | hic_table["start2"].isin(
        removed_starts
    )
    logging.info(f"{mask.sum()} interactions excluded")
    return hic_table[~mask].reset_index(drop=True)
