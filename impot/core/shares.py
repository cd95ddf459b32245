from __future__ import annotations

_SINGLE = 1.0
_COUPLE = 2.0
_HALF_SHARE_CHILDREN = 2


def get_shares(is_in_couple: bool, children: int) -> float:
    """Number of shares (quotient familial) for a household.

    The first two children count for half a share each, every further child
    for a full share. A single taxpayer raising at least one child gets an
    extra half share.
    """
    shares = _COUPLE if is_in_couple else _SINGLE
    if children <= 0:
        return shares
    shares += 0.5 * min(children, _HALF_SHARE_CHILDREN)
    shares += 1.0 * max(0, children - _HALF_SHARE_CHILDREN)
    if not is_in_couple:
        shares += 0.5
    return shares


__all__ = ["get_shares"]
