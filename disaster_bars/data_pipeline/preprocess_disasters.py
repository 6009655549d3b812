"""
preprocess_disasters.py
-----------------------
Reads the disaster events CSV and turns each row into a (type, year) record.

Rows are never rejected with an error. A row whose type is empty or whose
year is not a plain base-10 integer gets a skip reason and is left out of
the working dataset by `valid_records`.
"""
import os
import re
from typing import Optional

import pandas as pd

# Source columns (dotted names as exported from EM-DAT via R)
TYPE_FIELD = "Disaster.Type"
YEAR_FIELD = "Start.Year"
REQUIRED_FIELDS = [TYPE_FIELD, YEAR_FIELD]

# Parsed columns
TYPE_COL = "Disaster Type"
YEAR_COL = "Year"
REASON_COL = "Skip Reason"

REASON_NO_TYPE = "missing disaster type"
REASON_BAD_YEAR = "unparsable year"

_INT_RE = re.compile(r"[+-]?[0-9]+")


def parse_year(value) -> Optional[int]:
    """Return the trimmed field as an int, or None if it is not an integer literal."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return int(value)
    # numeric columns holding a null come through as float64
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    s = str(value).strip()
    if not _INT_RE.fullmatch(s):
        return None
    return int(s)


def _skip_reason(disaster_type, year) -> object:
    if not isinstance(disaster_type, str) or disaster_type == "":
        return REASON_NO_TYPE
    if year is None:
        return REASON_BAD_YEAR
    return pd.NA


def load_disaster_csv(filepath: str) -> pd.DataFrame:
    """Load the raw CSV with every field kept as text."""
    if not os.path.exists(filepath):
        raise FileNotFoundError(filepath)

    df = pd.read_csv(filepath, dtype=str, keep_default_na=False)
    missing = [c for c in REQUIRED_FIELDS if c not in df.columns]
    if missing:
        raise ValueError(f"{os.path.basename(filepath)} is missing columns: {', '.join(missing)}")

    print(f"Loaded rows: {len(df)}")
    if len(df):
        print(f"Sample row: {df.iloc[0][REQUIRED_FIELDS].to_dict()}")
    return df


def parse_records(df: pd.DataFrame) -> pd.DataFrame:
    """
    Project raw rows onto (Disaster Type, Year) and tag each with its outcome.

    The returned frame keeps the input order and index. `Skip Reason` is NA
    for valid records.
    """
    types = df[TYPE_FIELD] if TYPE_FIELD in df.columns else pd.Series(index=df.index, dtype=object)
    years = df[YEAR_FIELD] if YEAR_FIELD in df.columns else pd.Series(index=df.index, dtype=object)

    parsed = pd.DataFrame(index=df.index)
    parsed[TYPE_COL] = types.astype(object).where(types.notna(), None)
    parsed[YEAR_COL] = pd.array([parse_year(v) for v in years], dtype="Int64")
    parsed[REASON_COL] = [
        _skip_reason(t, None if pd.isna(y) else y)
        for t, y in zip(parsed[TYPE_COL], parsed[YEAR_COL])
    ]
    return parsed


def valid_records(parsed: pd.DataFrame) -> pd.DataFrame:
    """Keep only rows with a non-empty type and a parsed year."""
    keep = parsed[REASON_COL].isna()
    out = parsed.loc[keep, [TYPE_COL, YEAR_COL]].copy()
    out[YEAR_COL] = out[YEAR_COL].astype("int64")
    return out


def skipped_summary(parsed: pd.DataFrame) -> pd.Series:
    """Number of skipped rows per reason (empty Series when nothing was skipped)."""
    reasons = parsed[REASON_COL].dropna()
    return reasons.value_counts().rename("Rows")


if __name__ == "__main__":
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    raw = load_disaster_csv(os.path.join(project_root, "data", "df_subset.csv"))
    parsed = parse_records(raw)
    print(valid_records(parsed).head())
    print(skipped_summary(parsed))
