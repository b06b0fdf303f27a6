# schemas of datastructures commonly used in hictable
# including column definitions and dtypes of the joint table

# input encodings accepted for a pair of contact maps
SPARSE = "sparse"  # region1, region2, IF
BEDPE = "bedpe"  # chrom1, start1, end1, chrom2, start2, end2, IF (positional)
PIXELS = "pixels"  # named bedpe-style columns + one value column
INPUT_FORMATS = (SPARSE, BEDPE, PIXELS)

sparse_columns = ["region1", "region2", "IF"]

paired_columns = ["chrom1", "start1", "end1", "chrom2", "start2", "end2"]

region_columns = ["chrom", "start", "end"]

hic_table_dtypes = {
    "chr1": "object",
    "start1": "int64",
    "end1": "int64",
    "chr2": "object",
    "start2": "int64",
    "end2": "int64",
    "IF1": "float64",
    "IF2": "float64",
    "D": "float64",
    "M": "float64",
}

hic_table_columns = list(hic_table_dtypes)
