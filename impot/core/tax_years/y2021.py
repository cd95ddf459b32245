from __future__ import annotations

# (min, max, rate); max None marks the open-ended top tranche.
BRACKETS_2021 = [
    (0,      10084,  "0%"),
    (10085,  25710,  "11%"),
    (25711,  73516,  "30%"),
    (73517,  158122, "41%"),
    (158123, None,   "45%"),
]
