import pytest

from impot.core.shares import get_shares


@pytest.mark.parametrize(
  ("couple", "children", "expected"),
  [
    (False, 0, 1.0),
    (True, 0, 2.0),
    (True, 3, 4.0),
    (False, 4, 4.5),
    (True, 4, 5.0),
    (False, 2, 2.5),
  ],
)
def test_shares_for_household(couple: bool, children: int, expected: float) -> None:
  assert get_shares(couple, children) == expected


def test_isolated_parent_gets_extra_half_share() -> None:
  assert get_shares(False, 1) == 2.0
  assert get_shares(True, 1) == 2.5


def test_shares_grow_with_children() -> None:
  for couple in (False, True):
    previous = get_shares(couple, 0)
    for children in range(1, 8):
      current = get_shares(couple, children)
      assert current >= previous
      previous = current


def test_couple_never_has_fewer_shares_than_single() -> None:
  for children in range(0, 8):
    assert get_shares(True, children) >= get_shares(False, children)
