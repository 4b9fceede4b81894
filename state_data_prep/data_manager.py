"""Data manager for reading raw extracts and persisting prepared tables.

Each prep stage produces exactly one finalized table.  ``save_table``
writes it once, atomically, so an interrupted run never leaves a half
written file behind.  Raw spreadsheets are read with every cell as text;
numeric coercion is the normalizers' job.
"""

import os
import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .config import REPO_ROOT

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


# ---------------------------------------------------------------------------
# Output directory
# ---------------------------------------------------------------------------
def resolve_output_dir() -> Path:
    """Return (and create) the directory prepared tables are written to.

    ``PROCESSED_DATA_DIR`` wins when set; otherwise ``processed_data/`` at
    the repository root.  An unwritable directory fails on save rather than
    silently moving the outputs elsewhere.
    """
    env = os.getenv("PROCESSED_DATA_DIR")
    path = Path(env).expanduser().resolve() if env else REPO_ROOT / "processed_data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def _atomic_write(path: Path, write) -> None:
    """Write via ``write(tmp_path)`` then rename onto ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    # keep the real suffix last so the Excel writer accepts the temp name
    tmp_path = path.with_name(f".{path.stem}.tmp{path.suffix}")
    try:
        write(tmp_path)
        tmp_path.replace(path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def save_table(
    df: pd.DataFrame,
    name: str,
    output_dir: Optional[PathLike] = None,
    *,
    excel: bool = False,
) -> Path:
    """Persist a finalized table as ``<name>.csv`` (and ``<name>.xlsx``).

    Returns the path of the CSV file.
    """
    out_dir = Path(output_dir) if output_dir is not None else resolve_output_dir()
    csv_path = out_dir / f"{name}.csv"
    _atomic_write(csv_path, lambda p: df.to_csv(p, index=False))
    logger.info("Saved %s (%d rows) to %s", name, len(df), csv_path)

    if excel:
        xlsx_path = out_dir / f"{name}.xlsx"
        _atomic_write(
            xlsx_path, lambda p: df.to_excel(p, index=False, engine="openpyxl")
        )
        logger.info("Exported %s to %s", name, xlsx_path)
    return csv_path


def load_table(name: str, output_dir: Optional[PathLike] = None) -> pd.DataFrame:
    """Read back a table written by ``save_table``."""
    out_dir = Path(output_dir) if output_dir is not None else resolve_output_dir()
    return pd.read_csv(out_dir / f"{name}.csv", dtype={"geoid": str})


def read_raw_table(path: PathLike, sheet_name: Optional[str] = None) -> pd.DataFrame:
    """Read a raw extract (Excel or CSV) with every cell as text."""
    path = Path(path)
    logger.info("Reading raw extract %s", path)
    if path.suffix.lower() in EXCEL_SUFFIXES:
        return pd.read_excel(
            path, sheet_name=sheet_name if sheet_name is not None else 0, dtype=str
        )
    return pd.read_csv(path, dtype=str)
