import numbers

import numpy as np
import pandas as pd
import bioframe

from . import schemas


class HicTableError(ValueError):
    """Base class for errors raised while building a hic_table."""


class UsageError(HicTableError):
    """Conflicting or malformed options."""


class FormatError(HicTableError):
    """Unsupported, mismatched or inconsistent input encodings."""


class DataError(HicTableError):
    """Input data that cannot be reconciled, e.g. a degenerate bin grid."""


def is_hic_table(df, raise_errors=False):
    """
    Check if df looks like a hic_table, i.e.:
     - is a DataFrame
     - has the joint table columns, castable to their dtypes
     - describes a single chromosome, intra-chromosomal only

    Parameters
    ----------
    df : pandas.DataFrame
        Table to be validated.
    raise_errors : bool
        raise expection instead of returning False

    Returns
    -------
    is_hic_table : bool
        True when df passes the checks, False otherwise
    """
    try:
        if not isinstance(df, pd.DataFrame):
            raise FormatError(f"hic_table must be DataFrame, it is {type(df)} instead")

        missing_columns = set(schemas.hic_table_columns) - set(df.columns)
        if missing_columns:
            raise FormatError(
                "hic_table does not match the expected schema:\n"
                f"columns {missing_columns} are missing"
            )
        try:
            df.astype(schemas.hic_table_dtypes)
        except Exception as e:
            raise FormatError(
                "hic_table does not match the expected schema:\n"
                f"columns {schemas.hic_table_columns} cannot be cast to required data types."
            ) from e

        chroms = pd.unique(df[["chr1", "chr2"]].values.ravel())
        if len(chroms) > 1:
            raise FormatError(
                f"hic_table must describe a single chromosome, found {list(chroms)}"
            )
    except Exception as e:
        if raise_errors:
            raise e
        return False
    return True


def is_valid_subset_options(subset_dist=None, subset_index=None, raise_errors=False):
    """
    Check that at most one subsetting mode is requested and that
    subset_index, when given, holds exactly 4 numbers
    (i_start, i_end, j_start, j_end).
    """
    try:
        if subset_dist is not None and subset_index is not None:
            raise UsageError("Enter a value for only one of the subsetting options")
        if subset_dist is not None and not isinstance(subset_dist, numbers.Real):
            raise UsageError(f"subset_dist must be a number, got {subset_dist!r}")
        if subset_dist is not None and np.isnan(subset_dist):
            raise UsageError("subset_dist must not be NaN")
        if subset_index is not None:
            if np.ndim(subset_index) != 1 or len(subset_index) != 4:
                raise UsageError(
                    "subset_index must be a vector of 4 numbers: (i_start, i_end, j_start, j_end) "
                    "where they correspond to i and j indices of the matrix that you want to subset to"
                )
            if not all(isinstance(x, numbers.Real) for x in subset_index):
                raise UsageError(f"subset_index must contain numbers, got {subset_index!r}")
    except Exception as e:
        if raise_errors:
            raise e
        return False
    return True


def is_valid_exclude_overlap(exclude_overlap, raise_errors=False):
    """Check that exclude_overlap is a fraction within [0, 1]."""
    try:
        if not isinstance(exclude_overlap, numbers.Real) or not (
            0 <= exclude_overlap <= 1
        ):
            raise UsageError("Enter a value between 0 and 1 for exclude_overlap")
    except Exception as e:
        if raise_errors:
            raise e
        return False
    return True


def is_valid_exclude_regions(regions, raise_errors=False):
    """
    Check that regions can be used to exclude parts of a hic_table:
    either a bedframe with named chrom, start, end columns,
    or a DataFrame with exactly 3 columns in the order chrom start end.
    """
    try:
        if not isinstance(regions, pd.DataFrame):
            raise UsageError(
                "Enter a DataFrame or a bedframe for exclude_regions, "
                f"got {type(regions)}"
            )
        if not set(schemas.region_columns).issubset(regions.columns):
            if regions.shape[1] != 3:
                raise UsageError("Enter a DataFrame with 3 columns, chrom start end.")
            regions = regions.set_axis(schemas.region_columns, axis=1)
        try:
            bioframe.is_bedframe(
                regions[schemas.region_columns].astype(
                    {"chrom": str, "start": "int64", "end": "int64"}
                ),
                raise_errors=True,
            )
        except Exception as e:
            raise UsageError("exclude_regions is not a valid set of intervals") from e
    except Exception as e:
        if raise_errors:
            raise e
        return False
    return True
