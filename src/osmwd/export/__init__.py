"""
osmwd.export - Output file generation
"""

from osmwd.export.csv import (
    generate_suspects_csv,
    generate_wd_dump_csv,
    write_csv_outputs,
)

__all__ = [
    "generate_suspects_csv",
    "generate_wd_dump_csv",
    "write_csv_outputs",
]
