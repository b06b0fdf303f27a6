import logging

logging.basicConfig(level=logging.INFO)

from functools import partial

import numpy as np
import pandas as pd

from ..lib import schemas
from ..lib.checks import (
    DataError,
    FormatError,
    is_valid_subset_options,
    is_valid_exclude_overlap,
    is_valid_exclude_regions,
)
from ..lib.common import make_bin_grid, pool_decorator
from ..lib.formats import detect_format, normalize_inputs
from .subset import subset_by_distance, subset_by_index
from .exclude import exclude_regions as _exclude_regions


def _sum_duplicates(sparse, name):
    dups = sparse.duplicated(subset=["region1", "region2"], keep=False)
    if not dups.any():
        return sparse
    n_keys = sparse[dups].drop_duplicates(subset=["region1", "region2"]).shape[0]
    logging.warning(
        f"{n_keys} duplicated (region1, region2) pairs in {name}, summing their frequencies"
    )
    return sparse.groupby(["region1", "region2"], as_index=False, sort=False)["IF"].sum()


def join_sparse(sparse1, sparse2, include_zeros=False):
    """
    Align two sparse contact matrices on (region1, region2).

    Parameters
    ----------
    sparse1, sparse2 : pandas.DataFrame
        Canonical triplets (region1, region2, IF).
    include_zeros : bool
        If False, keep only the pairs present in both matrices (inner join).
        If True, keep the pairs present in any of them (outer join) and set
        the missing interaction frequencies to 0.

    Returns
    -------
    joined : pandas.DataFrame
        Columns region1, region2, IF1, IF2, sorted by region1, region2.
    """
    sparse1 = _sum_duplicates(sparse1, "sparse_mat1").rename(columns={"IF": "IF1"})
    sparse2 = _sum_duplicates(sparse2, "sparse_mat2").rename(columns={"IF": "IF2"})

    how = "outer" if include_zeros else "inner"
    joined = pd.merge(sparse1, sparse2, on=["region1", "region2"], how=how)
    if include_zeros:
        joined[["IF1", "IF2"]] = joined[["IF1", "IF2"]].fillna(0)
    if joined.shape[0] == 0:
        logging.warning("No interactions in common between the two matrices")

    joined = joined.astype(
        {"region1": "int64", "region2": "int64", "IF1": "float64", "IF2": "float64"}
    )
    return joined.sort_values(["region1", "region2"]).reset_index(drop=True)


def compute_md(joined, binsize, scale=True, include_zeros=False):
    """
    Compute the unit distance D and the log2 ratio M of every interaction.

    Parameters
    ----------
    joined : pandas.DataFrame
        Output of ``join_sparse``.
    binsize : int
        Size of the bins in base pairs.
    scale : bool
        If True, adjust IF2 for the total read counts:
        IF2_scaled = IF2 / (sum(IF2) / sum(IF1)).
    include_zeros : bool
        If True, M = log2((IF2 + 1) / (IF1 + 1)), otherwise
        M = log2(IF2 / IF1). Must match the join policy.

    Returns
    -------
    md : pandas.DataFrame
        New table with the D and M columns added.
    """
    md = joined.copy()
    if scale and md.shape[0] > 0:
        total1, total2 = md["IF1"].sum(), md["IF2"].sum()
        if total1 == 0 or total2 == 0:
            raise DataError(
                "Cannot scale the matrices, the sum of interaction frequencies "
                f"is zero (IF1: {total1}, IF2: {total2})"
            )
        scale_factor = total2 / total1
        logging.debug(f"scaling IF2 by {scale_factor}")
        md["IF2"] = md["IF2"] / scale_factor

    md["D"] = np.abs(md["region2"] - md["region1"]) / binsize
    with np.errstate(divide="ignore", invalid="ignore"):
        if include_zeros:
            md["M"] = np.log2((md["IF2"] + 1) / (md["IF1"] + 1))
        else:
            md["M"] = np.log2(md["IF2"] / md["IF1"])
    return md


def _to_hic_table(md, chrom, binsize):
    return pd.DataFrame(
        {
            "chr1": chrom,
            "start1": md["region1"],
            "end1": md["region1"] + binsize,
            "chr2": chrom,
            "start2": md["region2"],
            "end2": md["region2"] + binsize,
            "IF1": md["IF1"],
            "IF2": md["IF2"],
            "D": md["D"],
            "M": md["M"],
        },
        columns=schemas.hic_table_columns,
    ).astype(schemas.hic_table_dtypes)


def create_hic_table(
    sparse_mat1,
    sparse_mat2,
    chrom=None,
    scale=True,
    include_zeros=False,
    subset_dist=None,
    subset_index=None,
    exclude_regions=None,
    exclude_overlap=0.2,
):
    """
    Create a joint table from two sparse upper triangular Hi-C matrices of
    the same chromosome.

    Both matrices have to be in the same format: 3 column sparse upper
    triangular matrices (start of region 1, start of region 2, interaction
    frequency), 7 column BEDPE tables (chrom1, start1, end1, chrom2, start2,
    end2, interaction frequency), or bedpe-style tables with named
    chrom1, start1, end1, chrom2, start2, end2 columns and a single column
    of interaction frequencies (e.g. cooler pixels with ``join=True``).

    Parameters
    ----------
    sparse_mat1, sparse_mat2 : pandas.DataFrame or array-like
        Sparse upper triangular contact matrices of the first and the
        second dataset.
    chrom : str, optional
        The chromosome name, i.e. 'chr1' or 'chrX'. Only needed for the 3
        column format, otherwise taken from the matrices.
    scale : bool
        Adjust the IFs of the second matrix for total read counts:
        IF2_scaled = IF2 / (sum(IF2) / sum(IF1)). Default True.
    include_zeros : bool
        Include pairwise interactions where one of the interaction
        frequencies is 0. Default False.
    subset_dist : float, optional
        Only keep interactions up to this matrix unit distance. Warning: a
        table subset by distance can not be turned into a full matrix, use
        ``subset_index`` for that. Mutually exclusive with ``subset_index``.
    subset_index : sequence of 4 numbers, optional
        (i_start, i_end, j_start, j_end): only keep the window of the full
        contact matrix with i_start <= i <= i_end and j_start <= j <= j_end
        (0-based, as in ``sparse_to_dense``: the first bin is 0, so 1-based
        bounds must be shifted down by one). Mutually exclusive with
        ``subset_dist``.
    exclude_regions : pandas.DataFrame, optional
        A bedframe or a chrom start end DataFrame. Interactions involving
        bins covered by these regions are removed, e.g. regions with a
        known CNV or blacklisted regions.
    exclude_overlap : float
        The proportion of overlap required to exclude a bin. Default 0.2.
        Set to 0 to exclude any amount of overlap.

    Returns
    -------
    hic_table : pandas.DataFrame
        Columns chr1, start1, end1, chr2, start2, end2, IF1, IF2, D, M.
    """
    is_valid_subset_options(subset_dist, subset_index, raise_errors=True)
    if exclude_regions is not None:
        is_valid_exclude_regions(exclude_regions, raise_errors=True)
    is_valid_exclude_overlap(exclude_overlap, raise_errors=True)

    sparse1, sparse2, chrom = normalize_inputs(sparse_mat1, sparse_mat2, chrom=chrom)
    bins, binsize = make_bin_grid(sparse1, sparse2)

    joined = join_sparse(sparse1, sparse2, include_zeros=include_zeros)
    md = compute_md(joined, binsize, scale=scale, include_zeros=include_zeros)
    hic_table = _to_hic_table(md, chrom, binsize)

    if subset_dist is not None:
        hic_table = subset_by_distance(hic_table, subset_dist)
    elif subset_index is not None:
        hic_table = subset_by_index(hic_table, subset_index, bins=bins)

    if exclude_regions is not None:
        hic_table = _exclude_regions(
            hic_table, exclude_regions, exclude_overlap=exclude_overlap
        )
    return hic_table


def _split_by_chrom(mat):
    fmt = detect_format(mat)
    if fmt == schemas.PIXELS:
        chroms = mat["chrom1"].astype(str)
    elif fmt == schemas.BEDPE:
        chroms = mat.iloc[:, 0].astype(str)
    else:
        raise FormatError(
            "Only 7 column BEDPE or paired interval tables can be split by chromosome"
        )
    return {chrom: mat[chroms == chrom] for chrom in pd.unique(chroms)}


def _create_chrom_table(chrom, chrom_mats, **kwargs):
    mat1, mat2 = chrom_mats[chrom]
    return create_hic_table(mat1, mat2, **kwargs)


@pool_decorator
def create_hic_tables(
    sparse_mat1,
    sparse_mat2,
    scale=True,
    include_zeros=False,
    subset_dist=None,
    subset_index=None,
    exclude_regions=None,
    exclude_overlap=0.2,
    nproc=1,
    map_functor=map,
):
    """
    Create one joint table per chromosome from two genome-wide sparse
    matrices in the 7 column BEDPE or the paired interval format.

    Parameters
    ----------
    sparse_mat1, sparse_mat2 : pandas.DataFrame
        Genome-wide contact matrices, intra-chromosomal interactions only.
    scale, include_zeros, subset_dist, subset_index, exclude_regions, exclude_overlap
        Passed to ``create_hic_table`` for every chromosome.
    nproc : int, optional
        How many processes to use for calculation. Ignored if map_functor is passed.
    map_functor : callable, optional
        Map function to dispatch the chromosomes to workers.
        If left unspecified, pool_decorator applies the following defaults: if nproc>1 this defaults to multiprocess.Pool;
        If nproc=1 this defaults the builtin map.

    Returns
    -------
    hic_tables : dict
        Joint tables keyed by chromosome, for chromosomes present in both
        matrices, in the order they appear in ``sparse_mat1``.
    """
    is_valid_subset_options(subset_dist, subset_index, raise_errors=True)
    split1 = _split_by_chrom(sparse_mat1)
    split2 = _split_by_chrom(sparse_mat2)

    chroms = [chrom for chrom in split1 if chrom in split2]
    skipped = set(split1).symmetric_difference(split2)
    if skipped:
        logging.warning(
            f"Skipping chromosomes found in only one of the matrices: {sorted(skipped)}"
        )

    f = partial(
        _create_chrom_table,
        chrom_mats={chrom: (split1[chrom], split2[chrom]) for chrom in chroms},
        scale=scale,
        include_zeros=include_zeros,
        subset_dist=subset_dist,
        subset_index=subset_index,
        exclude_regions=exclude_regions,
        exclude_overlap=exclude_overlap,
    )
    return dict(zip(chroms, map_functor(f, chroms)))
