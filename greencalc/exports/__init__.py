from .tables import dicts_to_csv, summary_csv, summary_rows, yearly_csv, yearly_table

__all__ = ["dicts_to_csv", "summary_csv", "summary_rows", "yearly_csv", "yearly_table"]
