import pandas as pd

from ..lib import schemas


def has_header(file_path, sep="\t", comment="#"):
    """
    A table has a header when its first line holds a non-numeric value
    past the first column, where every accepted format stores coordinates.
    """
    first = pd.read_csv(
        file_path, sep=sep, comment=comment, header=None, nrows=1, dtype=str
    )
    return bool(pd.to_numeric(first.iloc[0, 1:], errors="coerce").isna().any())


def read_contact_table(file_path, sep="\t"):
    """
    Read a sparse contact matrix from a tab-separated file.

    A header naming the chrom1, start1, end1, chrom2, start2, end2 columns
    marks a paired interval table; otherwise columns are kept positional
    and the format is decided by their number.
    """
    if not has_header(file_path, sep=sep):
        return pd.read_csv(file_path, sep=sep, comment="#", header=None)
    table = pd.read_csv(file_path, sep=sep, comment="#")
    if set(schemas.paired_columns).issubset(table.columns):
        return table
    return table.set_axis(range(table.shape[1]), axis=1)


def read_regions_table(file_path, sep="\t"):
    """Read exclusion regions from a BED-like file, chrom start end first."""
    table = pd.read_csv(
        file_path,
        sep=sep,
        comment="#",
        header=0 if has_header(file_path, sep=sep) else None,
    )
    return table.iloc[:, :3].set_axis(schemas.region_columns, axis=1)
