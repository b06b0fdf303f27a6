from .checks import (
    HicTableError,
    UsageError,
    FormatError,
    DataError,
    is_hic_table,
    is_valid_subset_options,
    is_valid_exclude_overlap,
    is_valid_exclude_regions,
)
from .common import (
    pool_decorator,
    make_bin_grid,
    sparse_to_dense,
    dense_to_sparse,
)
from .formats import detect_format, to_sparse, normalize_inputs
