from __future__ import annotations

# Income earned in 2021, taxed in 2022.
# (min, max, rate); max None marks the open-ended top tranche.
BRACKETS_2022 = [
    (0,      10225,  "0%"),
    (10226,  26070,  "11%"),
    (26071,  74545,  "30%"),
    (74546,  160336, "41%"),
    (160337, None,   "45%"),
]
