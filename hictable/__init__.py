# -*- coding: utf-8 -*-
"""
hictable
~~~~~~~~

Joint tables of two sparse Hi-C contact maps.

:author: hictable developers
:license: MIT

"""
__version__ = "0.1.0"

from . import lib

from .lib import (
    HicTableError,
    UsageError,
    FormatError,
    DataError,
    sparse_to_dense,
    dense_to_sparse,
)

from .api.hic_table import create_hic_table, create_hic_tables
from .api.subset import subset_by_distance, subset_by_index
from .api.exclude import exclude_regions
