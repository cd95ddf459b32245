from __future__ import annotations

BRACKETS_2020 = [
    (0,      10064,  "0%"),
    (10065,  25659,  "11%"),
    (25660,  73369,  "30%"),
    (73370,  157806, "41%"),
    (157807, None,   "45%"),
]
