import logging
from functools import wraps

import numpy as np
import pandas as pd
import multiprocess as mp

from .checks import DataError


def pool_decorator(func):
    """
    A decorator function that enables multiprocessing for a given function.
    The function must have a ``map_functor`` argument.

    Parameters
    ----------
    func : callable
        The function to be decorated.

    Returns
    -------
    A wrapper function that enables multiprocessing for the given function.
    If ``nproc`` > 1 a ``multiprocess.Pool`` is created and its ``map`` is
    passed as ``map_functor``, unless a custom ``map_functor`` is provided.
    """

    @wraps(func)
    def decorated(*args, **kwargs):
        pool = None
        if "map_functor" in kwargs.keys():
            logging.info("using an externally provided map_functor")
        else:
            if kwargs.get("nproc", 1) > 1:
                logging.info(f"creating a Pool of {kwargs['nproc']} workers")
                pool = mp.Pool(kwargs["nproc"])
                kwargs["map_functor"] = pool.map
            else:
                logging.info("fallback to serial implementation.")
                kwargs["map_functor"] = map
        try:
            result = func(*args, **kwargs)
        finally:
            if pool is not None:
                pool.close()
        return result

    return decorated


def make_bin_grid(*sparse_mats):
    """
    Resolve the common bin grid of sparse contact matrices.

    Parameters
    ----------
    *sparse_mats : pandas.DataFrame
        Canonical sparse triplets with region1 and region2 columns.

    Returns
    -------
    bins : numpy.ndarray
        Sorted distinct bin start coordinates found in any of the matrices.
    binsize : int
        Minimal distance between two consecutive coordinates.
    """
    coords = [
        np.asarray(mat[col], dtype=np.int64)
        for mat in sparse_mats
        for col in ("region1", "region2")
    ]
    bins = np.unique(np.concatenate(coords)) if coords else np.array([], dtype=np.int64)
    if len(bins) < 2:
        raise DataError(
            f"Cannot infer the bin size from {len(bins)} distinct coordinate(s); "
            "at least two distinct bins are required"
        )
    binsize = int(np.diff(bins).min())

    off_grid = (bins - bins[0]) % binsize != 0
    if off_grid.any():
        logging.warning(
            f"{off_grid.sum()} coordinates do not fall on the {binsize}bp bin grid"
        )
    return bins, binsize


def sparse_to_dense(sparse, value_col=None, bins=None):
    """
    Convert a sparse upper triangular matrix into a dense symmetric one.

    Parameters
    ----------
    sparse : pandas.DataFrame
        Either a canonical triplet (region1, region2, IF) or a hic_table,
        in which case ``value_col`` names the column to fill the matrix with.
    value_col : str, optional
        Column with the values. Defaults to "IF" for triplets.
    bins : array-like, optional
        Bin start coordinates labelling rows and columns. Defaults to the
        sorted distinct coordinates of ``sparse``.

    Returns
    -------
    mat : pandas.DataFrame
        Square symmetric matrix indexed by bin start on both axes. Row
        positions are the i/j indices used by ``subset_index``.
    """
    if "region1" in sparse.columns:
        r1, r2 = sparse["region1"], sparse["region2"]
        value_col = "IF" if value_col is None else value_col
    else:
        r1, r2 = sparse["start1"], sparse["start2"]
        if value_col is None:
            raise ValueError("value_col is required to densify a hic_table")
    if bins is None:
        bins = np.unique(np.concatenate([r1.to_numpy(), r2.to_numpy()]))
    bins = np.asarray(bins)

    i = np.searchsorted(bins, r1.to_numpy())
    j = np.searchsorted(bins, r2.to_numpy())
    values = sparse[value_col].to_numpy(dtype=float)

    n = len(bins)
    mat = np.zeros((n, n))
    mat[i, j] = values
    mat[j, i] = values
    return pd.DataFrame(mat, index=bins, columns=bins)


def dense_to_sparse(mat, drop_zeros=True):
    """
    Convert a dense symmetric matrix into a sparse upper triangular one.

    Parameters
    ----------
    mat : pandas.DataFrame
        Square matrix with bin start coordinates as index and columns.
    drop_zeros : bool
        Skip pixels with zero values. Default True.

    Returns
    -------
    sparse : pandas.DataFrame
        Canonical triplet (region1, region2, IF).
    """
    if mat.shape[0] != mat.shape[1]:
        raise ValueError(f"Matrix must be square, got shape {mat.shape}")
    values = mat.to_numpy(dtype=float)
    i, j = np.triu_indices(values.shape[0])
    sparse = pd.DataFrame(
        {
            "region1": np.asarray(mat.index)[i].astype(np.int64),
            "region2": np.asarray(mat.columns)[j].astype(np.int64),
            "IF": values[i, j],
        }
    )
    if drop_zeros:
        sparse = sparse[sparse["IF"] != 0]
    return sparse.reset_index(drop=True)
