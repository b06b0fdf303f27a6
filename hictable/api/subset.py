import numpy as np

from ..lib.checks import is_hic_table, is_valid_subset_options, DataError


def subset_by_distance(hic_table, subset_dist):
    """
    Keep only interactions up to a matrix unit distance.

    Warning: rows are kept with their original coordinates, so a table
    subset by distance can not be turned back into a full square matrix.
    Use ``subset_by_index`` for that.

    Parameters
    ----------
    hic_table : pandas.DataFrame
        Joint table with a D column.
    subset_dist : float
        Largest unit distance D to keep.

    Returns
    -------
    hic_table : pandas.DataFrame
        New table with interactions at D <= subset_dist.
    """
    is_valid_subset_options(subset_dist=subset_dist, raise_errors=True)
    is_hic_table(hic_table, raise_errors=True)
    return hic_table[hic_table["D"] <= subset_dist].reset_index(drop=True)


def assign_matrix_indices(hic_table, bins=None):
    """
    Add 0-based row (i) and column (j) indices of the full contact matrix
    to every interaction of the joint table.

    Parameters
    ----------
    hic_table : pandas.DataFrame
        Joint table.
    bins : array-like, optional
        Canonical ordering of bin start coordinates. Defaults to the sorted
        distinct start1/start2 values of the table.

    Returns
    -------
    hic_table : pandas.DataFrame
        Copy of the table with i and j columns.
    """
    if bins is None:
        bins = np.unique(hic_table[["start1", "start2"]].to_numpy().ravel())
    bins = np.asarray(bins)
    out = hic_table.copy()
    for col, idx_col in (("start1", "i"), ("start2", "j")):
        starts = out[col].to_numpy()
        idx = np.searchsorted(bins, starts)
        found = (idx < len(bins)) & (bins[np.minimum(idx, len(bins) - 1)] == starts)
        if not found.all():
            raise DataError(
                f"{(~found).sum()} {col} coordinates are missing from the bin ordering"
            )
        out[idx_col] = idx
    return out


def subset_by_index(hic_table, subset_index, bins=None):
    """
    Keep a rectangular window of the full contact matrix.

    Parameters
    ----------
    hic_table : pandas.DataFrame
        Joint table.
    subset_index : sequence of 4 numbers
        (i_start, i_end, j_start, j_end), inclusive 0-based row and column
        bounds in the full contact matrix, as produced by ``sparse_to_dense``.
        Index 0 is the first bin; 1-based bounds must be shifted down by one.
    bins : array-like, optional
        Canonical ordering of bin start coordinates, see
        ``assign_matrix_indices``.

    Returns
    -------
    hic_table : pandas.DataFrame
        New table with interactions inside the window.
    """
    is_valid_subset_options(subset_index=subset_index, raise_errors=True)
    is_hic_table(hic_table, raise_errors=True)
    i_start, i_end, j_start, j_end = subset_index

    indexed = assign_matrix_indices(hic_table, bins=bins)
    mask = (
        (indexed["i"] >= i_start)
        & (indexed["i"] <= i_end)
        & (indexed["j"] >= j_start)
        & (indexed["j"] <= j_end)
    )
    return indexed[mask].drop(columns=["i", "j"]).reset_index(drop=True)
