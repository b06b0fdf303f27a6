import logging

import numpy as np
import pandas as pd

from . import schemas
from .checks import FormatError


def _as_frame(mat):
    if isinstance(mat, pd.DataFrame):
        return mat
    try:
        return pd.DataFrame(mat)
    except Exception as e:
        raise FormatError(
            f"Cannot interpret an object of type {type(mat)} as a contact matrix"
        ) from e


def detect_format(mat):
    """
    Determine the encoding of a contact matrix.

    Parameters
    ----------
    mat : pandas.DataFrame or array-like
        Sparse upper triangular contact matrix.

    Returns
    -------
    fmt : str or None
        "pixels" for a bedpe-style table with named paired columns
        (chrom1, start1, end1, chrom2, start2, end2) and a single value
        column, "bedpe" for 7 positional columns, "sparse" for 3 positional
        columns (region1, region2, IF), None for anything else.
    """
    mat = _as_frame(mat)
    columns = [str(c) for c in mat.columns]
    if set(schemas.paired_columns).issubset(columns):
        if len(columns) == len(schemas.paired_columns) + 1:
            return schemas.PIXELS
        return None
    if mat.shape[1] == 7:
        return schemas.BEDPE
    if mat.shape[1] == 3:
        return schemas.SPARSE
    return None


def _paired_to_sparse(paired, value_col):
    inter = paired["chrom1"].astype(str) != paired["chrom2"].astype(str)
    if inter.any():
        raise FormatError(
            "hictable is designed to analyze only intra-chromosomal interactions. "
            f"Please remove {inter.sum()} inter-chromosomal interactions."
        )
    chroms = pd.unique(paired["chrom1"].astype(str))
    if len(chroms) > 1:
        raise FormatError(
            f"Contact matrix spans several chromosomes {list(chroms)}; "
            "split it by chromosome or use create_hic_tables"
        )
    sparse = pd.DataFrame(
        {
            "region1": paired["start1"].to_numpy(),
            "region2": paired["start2"].to_numpy(),
            "IF": paired[value_col].to_numpy(),
        }
    )
    chrom = chroms[0] if len(chroms) else None
    return sparse, chrom


def to_sparse(mat, fmt=None):
    """
    Project a contact matrix of any accepted encoding onto the canonical
    sparse triplet.

    Parameters
    ----------
    mat : pandas.DataFrame or array-like
        Contact matrix in "sparse", "bedpe" or "pixels" encoding.
    fmt : str, optional
        Encoding of mat. Detected when None.

    Returns
    -------
    sparse : pandas.DataFrame
        Columns region1, region2 (int64) and IF (float64).
    chrom : str or None
        Chromosome found in the data, None for the "sparse" encoding.
    """
    mat = _as_frame(mat)
    fmt = detect_format(mat) if fmt is None else fmt

    if fmt == schemas.PIXELS:
        paired = mat.set_axis([str(c) for c in mat.columns], axis=1)
        (value_col,) = [c for c in paired.columns if c not in schemas.paired_columns]
        sparse, chrom = _paired_to_sparse(paired, value_col)
    elif fmt == schemas.BEDPE:
        paired = mat.set_axis(schemas.paired_columns + ["IF"], axis=1)
        sparse, chrom = _paired_to_sparse(paired, "IF")
    elif fmt == schemas.SPARSE:
        sparse = mat.set_axis(schemas.sparse_columns, axis=1)
        chrom = None
    else:
        raise FormatError(f"Unsupported contact matrix format: {fmt}")

    coords = sparse[["region1", "region2"]].apply(pd.to_numeric, errors="coerce")
    if coords.isna().to_numpy().any() or (coords % 1 != 0).to_numpy().any():
        raise FormatError(
            "Contact matrix coordinates must be integers and frequencies numeric"
        )
    try:
        sparse = sparse.assign(region1=coords["region1"], region2=coords["region2"])
        sparse = sparse.astype({"region1": "int64", "region2": "int64", "IF": "float64"})
    except (TypeError, ValueError) as e:
        raise FormatError(
            "Contact matrix coordinates must be integers and frequencies numeric"
        ) from e

    lower = sparse["region1"] > sparse["region2"]
    if lower.any():
        logging.warning(
            f"{lower.sum()} entries have region1 > region2 and do not follow "
            "the upper triangular convention"
        )
    return sparse.reset_index(drop=True), chrom


def normalize_inputs(sparse_mat1, sparse_mat2, chrom=None):
    """
    Bring two contact matrices of the same encoding onto canonical
    sparse triplets and resolve their chromosome.

    Parameters
    ----------
    sparse_mat1, sparse_mat2 : pandas.DataFrame or array-like
        Contact matrices, both in the "sparse", "bedpe" or "pixels" encoding.
    chrom : str, optional
        Chromosome name. Required for the "sparse" encoding, otherwise
        taken from the data.

    Returns
    -------
    sparse1, sparse2 : pandas.DataFrame
        Canonical triplets (region1, region2, IF).
    chrom : str
        Chromosome of both matrices.
    """
    fmt1 = detect_format(sparse_mat1)
    fmt2 = detect_format(sparse_mat2)
    if (fmt1 == schemas.PIXELS) != (fmt2 == schemas.PIXELS):
        raise FormatError("Make sure the classes of the sparse matrices match")
    if fmt1 is None or fmt1 != fmt2:
        raise FormatError(
            "Enter both sparse matrices in the same format; either 7 column BEDPE, "
            "paired interval table or 3 column sparse upper triangular matrix"
        )

    sparse1, chrom1 = to_sparse(sparse_mat1, fmt1)
    sparse2, chrom2 = to_sparse(sparse_mat2, fmt2)

    if fmt1 == schemas.SPARSE:
        if chrom is None or (isinstance(chrom, float) and np.isnan(chrom)):
            raise FormatError("Enter a value for chrom")
        return sparse1, sparse2, str(chrom)

    if chrom1 is not None and chrom2 is not None and chrom1 != chrom2:
        raise FormatError(
            f"Contact matrices describe different chromosomes: {chrom1} and {chrom2}"
        )
    data_chrom = chrom1 if chrom1 is not None else chrom2
    if data_chrom is None:
        if chrom is None:
            raise FormatError("Enter a value for chrom")
        data_chrom = chrom
    elif chrom is not None and str(chrom) != data_chrom:
        logging.warning(
            f"chrom={chrom} is ignored, using {data_chrom} found in the contact matrices"
        )
    return sparse1, sparse2, str(data_chrom)
