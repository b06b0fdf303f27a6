from . import exclude, hic_table, subset

__all__ = ["exclude", "hic_table", "subset"]
