from __future__ import annotations

BRACKETS_2019 = [
    (0,      10064,  "0%"),
    (10065,  27794,  "14%"),
    (27795,  74517,  "30%"),
    (74518,  157806, "41%"),
    (157807, None,   "45%"),
]
