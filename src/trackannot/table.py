# src/trackannot/table.py
from __future__ import annotations
from pathlib import Path

import pandas as pd

# missing cells are written as "."
MISSING = "."


def read_table(path: str | Path) -> pd.DataFrame:
    """Read a TSV(+gz) table with a header row; every cell is kept as text."""
    return pd.read_csv(path, sep="\t", dtype=str, keep_default_na=False)


def write_table(df: pd.DataFrame, path: str | Path) -> None:
    df.to_csv(path, sep="\t", index=False, na_rep=MISSING)
