from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import pandas as pd

__all__ = ["NodeItem", "to_dataframe"]


@dataclass
class NodeItem:
    """One output record, paired with the index of the input item it came from.

    ``error`` is set only on records standing in for a failed item; their
    ``json`` is ``{"error": <message>}``.
    """

    json: dict[str, Any]
    paired_item: int
    error: BaseException | None = field(default=None, repr=False, compare=False)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Host wire shape: ``{"json": ..., "pairedItem": {"item": i}}``."""
        out: dict[str, Any] = {"json": self.json, "pairedItem": {"item": self.paired_item}}
        if self.error is not None:
            out["error"] = f"{type(self.error).__name__}: {self.error}"
        return out


def to_dataframe(items: Sequence[NodeItem | Mapping[str, Any]]) -> pd.DataFrame:
    """Flatten output records into one row each.

    Nested fields become dotted columns (``channel.id``, ``channel.name``);
    the originating index is kept in a ``pairedItem`` column.
    """
    if not items:
        return pd.DataFrame()

    rows = []
    for item in items:
        if isinstance(item, NodeItem):
            rows.append({**item.json, "pairedItem": item.paired_item})
        else:
            rows.append({**item["json"], "pairedItem": item["pairedItem"]["item"]})

    df = pd.json_normalize(rows, sep=".")

    if "uploadDate" in df.columns:
        df["uploadDate"] = pd.to_datetime(df["uploadDate"], errors="coerce", utc=True)

    return df
