"""
aggregate_types.py
------------------
Counts disaster events per (Disaster Type, Year).

The metric table has exactly one row per observed combination. Missing
combinations are not zero-filled.
"""
import os
from typing import Iterable, List, Mapping, Tuple, Union

import pandas as pd

from disaster_bars.data_pipeline.preprocess_disasters import (
    TYPE_COL,
    YEAR_COL,
    TYPE_FIELD,
    YEAR_FIELD,
    load_disaster_csv,
    parse_records,
    skipped_summary,
    valid_records,
)

VALUE_COL = "Count"
METRIC_COLS = [TYPE_COL, YEAR_COL, VALUE_COL]


def _empty_metric_table() -> pd.DataFrame:
    return pd.DataFrame({
        TYPE_COL: pd.Series(dtype=object),
        YEAR_COL: pd.Series(dtype="int64"),
        VALUE_COL: pd.Series(dtype="int64"),
    })


def aggregate_counts(valid: pd.DataFrame) -> pd.DataFrame:
    """
    Count valid records by (Disaster Type, Year).

    Records are stable-sorted by type then year first so the table comes out
    in the same order on every load.
    """
    if valid.empty:
        return _empty_metric_table()

    ordered = valid.sort_values([TYPE_COL, YEAR_COL], kind="mergesort")
    metric = (
        ordered.groupby([TYPE_COL, YEAR_COL], sort=False)
        .size()
        .reset_index(name=VALUE_COL)
    )
    metric[YEAR_COL] = metric[YEAR_COL].astype("int64")
    metric[VALUE_COL] = metric[VALUE_COL].astype("int64")
    return metric[METRIC_COLS].reset_index(drop=True)


def category_set(metric: pd.DataFrame) -> List[str]:
    """Distinct disaster types in the table, ascending."""
    return sorted(metric[TYPE_COL].unique().tolist())


def _as_raw_frame(records: Union[pd.DataFrame, Iterable[Mapping]]) -> pd.DataFrame:
    if isinstance(records, pd.DataFrame):
        frame = records
    else:
        rows = [
            {TYPE_FIELD: r.get("disasterType"), YEAR_FIELD: r.get("year")}
            for r in records
        ]
        frame = pd.DataFrame(rows, columns=[TYPE_FIELD, YEAR_FIELD], dtype=object)
    # Already-parsed frames use the output column names
    if TYPE_COL in frame.columns and TYPE_FIELD not in frame.columns:
        frame = frame.rename(columns={TYPE_COL: TYPE_FIELD, YEAR_COL: YEAR_FIELD})
    return frame


def aggregate(records: Union[pd.DataFrame, Iterable[Mapping]]) -> Tuple[pd.DataFrame, List[str]]:
    """
    Build the metric table and category list from raw records.

    `records` is either a raw CSV frame or any iterable of mappings with
    `disasterType` and `year` keys. Invalid records are dropped silently.
    """
    parsed = parse_records(_as_raw_frame(records))
    metric = aggregate_counts(valid_records(parsed))
    return metric, category_set(metric)


def load_metric_table(filepath: str, report_skipped: bool = False) -> Tuple[pd.DataFrame, List[str], pd.Series]:
    """Load the CSV at `filepath` and aggregate it. Also returns the skipped-row summary."""
    raw = load_disaster_csv(filepath)
    parsed = parse_records(raw)
    metric = aggregate_counts(valid_records(parsed))
    categories = category_set(metric)
    skipped = skipped_summary(parsed)

    print(f"Aggregated {len(metric)} (type, year) rows across {len(categories)} disaster types")
    if report_skipped:
        if skipped.empty:
            print("No rows skipped.")
        else:
            for reason, n in skipped.items():
                print(f"   Skipped {n} rows: {reason}")

    return metric, categories, skipped


if __name__ == "__main__":
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    table, types, _ = load_metric_table(os.path.join(project_root, "data", "df_subset.csv"), report_skipped=True)
    print(table.head(20))
    print(f"Disaster types: {types}")
