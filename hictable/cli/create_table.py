import click

from . import cli
from .util import read_contact_table, read_regions_table
from .. import api


@cli.command()
@click.argument("sparse1_path", metavar="SPARSE1_PATH", type=click.Path(exists=True), nargs=1)
@click.argument("sparse2_path", metavar="SPARSE2_PATH", type=click.Path(exists=True), nargs=1)
@click.option(
    "--chrom",
    help="The chromosome name for the matrices, i.e. chr1 or chrX."
    " Only needed for 3 column sparse matrices.",
    type=str,
    default=None,
)
@click.option(
    "--scale/--no-scale",
    help="Adjust the IFs of the second matrix for total read counts.",
    default=True,
    show_default=True,
)
@click.option(
    "--include-zeros",
    help="Include interactions where one of the interaction frequencies is 0.",
    is_flag=True,
    default=False,
)
@click.option(
    "--subset-dist",
    help="Only keep interactions up to this matrix unit distance."
    " Mutually exclusive with --subset-index.",
    type=float,
    default=None,
)
@click.option(
    "--subset-index",
    help="Only keep the window I_START <= i <= I_END, J_START <= j <= J_END"
    " of the full contact matrix (0-based). Mutually exclusive with --subset-dist.",
    type=int,
    nargs=4,
    default=None,
)
@click.option(
    "--exclude-regions",
    help="A BED-like file with regions to exclude, e.g. known CNVs or blacklists.",
    type=click.Path(exists=True),
    default=None,
)
@click.option(
    "--exclude-overlap",
    help="The proportion of a bin that has to overlap excluded regions"
    " for the bin to be removed. Set to 0 to exclude any overlap.",
    type=float,
    default=0.2,
    show_default=True,
)
@click.option(
    "--output",
    "-o",
    help="Specify output file name to store the joint table in a tsv format.",
    type=str,
    required=False,
)
def create_table(
    sparse1_path,
    sparse2_path,
    chrom,
    scale,
    include_zeros,
    subset_dist,
    subset_index,
    exclude_regions,
    exclude_overlap,
    output,
):
    """
    Create a joint table of two sparse upper triangular Hi-C matrices of the
    same chromosome.

    SPARSE1_PATH, SPARSE2_PATH : tab-separated contact matrices, either both
    in 3 column sparse format (region1 region2 IF), both in 7 column BEDPE
    format, or both with a chrom1 start1 end1 chrom2 start2 end2 header and a
    single value column.

    """
    sparse_mat1 = read_contact_table(sparse1_path)
    sparse_mat2 = read_contact_table(sparse2_path)
    regions = read_regions_table(exclude_regions) if exclude_regions else None

    hic_table = api.hic_table.create_hic_table(
        sparse_mat1,
        sparse_mat2,
        chrom=chrom,
        scale=scale,
        include_zeros=include_zeros,
        subset_dist=subset_dist,
        subset_index=list(subset_index) if subset_index else None,
        exclude_regions=regions,
        exclude_overlap=exclude_overlap,
    )

    # output to file if specified:
    if output:
        hic_table.to_csv(output, sep="\t", index=False, na_rep="nan")
    # or print into stdout otherwise:
    else:
        print(hic_table.to_csv(sep="\t", index=False, na_rep="nan"))
