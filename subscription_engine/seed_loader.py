"""Load the initial region directory from a CSV file."""
from __future__ import annotations

from pathlib import Path
from typing import Dict

import pandas as pd

DEFAULT_REGIONS: Dict[str, int] = {
    "New York USA": 2459115,
    "Los Angeles USA": 2442047,
    "Mumbai India": 2295411,
    "New Delhi India": 2295019,
    "London UK": 44418,
    "Sydney Australia": 1105779,
    "Toronto Canada": 4118,
}

REQUIRED_COLUMNS = ("region", "woeid")


class SeedError(ValueError):
    """Raised when a seed file cannot be turned into a region directory."""


def load_seed_regions(csv_path: Path | str | None = None) -> Dict[str, int]:
    """Return the region -> WOEID seed mapping.

    Parameters
    ----------
    csv_path:
        CSV with ``region`` and ``woeid`` columns. *None* returns
        :data:`DEFAULT_REGIONS`.
    """
    if csv_path is None:
        return dict(DEFAULT_REGIONS)

    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise SeedError(f"seed file not found: {csv_path}")

    # Region names are kept exactly as written; lookups are exact-match.
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    df.columns = [str(col).strip() for col in df.columns]

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise SeedError(f"{csv_path.name} is missing column(s): {', '.join(missing)}")

    woeids = pd.to_numeric(df["woeid"].str.strip(), errors="coerce")
    bad_rows = df[woeids.isna() | (woeids % 1 != 0) | (woeids == 0)]
    if not bad_rows.empty:
        first = bad_rows.iloc[0]
        raise SeedError(f"{csv_path.name}: invalid WOEID {first['woeid']!r} for region {first['region']!r}")

    seed: Dict[str, int] = {}
    for region, woeid in zip(df["region"], woeids.astype("int64")):
        if region == "":
            raise SeedError(f"{csv_path.name}: empty region name")
        previous = seed.get(region)
        if previous is not None and previous != woeid:
            raise SeedError(f"{csv_path.name}: region {region!r} listed with WOEIDs {previous} and {woeid}")
        seed[region] = int(woeid)
    return seed
