import hypothesis.strategies as st
from hypothesis import given

from impot.core.engine import calculate_reverse_tax, calculate_tax
from impot.core.shares import get_shares
from tests.fixtures.households import make_household, table_2022

TABLE = table_2022()

incomes = st.integers(min_value=0, max_value=2_000_000)
children = st.integers(min_value=0, max_value=8)


@given(incomes, st.booleans(), children)
def test_tax_is_never_negative_and_balances(income: int, couple: bool, kids: int):
  result = calculate_tax(make_household(income, couple=couple, children=kids), TABLE)
  assert result.tax >= 0
  assert result.tax + result.remainder == result.income == income


@given(incomes, st.integers(min_value=1, max_value=50_000), st.booleans(), children)
def test_tax_never_decreases_with_income(income: int, raise_by: int, couple: bool, kids: int):
  lower = calculate_tax(make_household(income, couple=couple, children=kids), TABLE)
  higher = calculate_tax(make_household(income + raise_by, couple=couple, children=kids), TABLE)
  assert higher.tax >= lower.tax
  assert higher.remainder >= lower.remainder


@given(st.booleans(), children)
def test_shares_are_progressive(couple: bool, kids: int):
  assert get_shares(couple, kids + 1) >= get_shares(couple, kids)
  assert get_shares(True, kids) >= get_shares(False, kids)


@given(st.integers(min_value=0, max_value=1_000_000), st.booleans(), children)
def test_reverse_round_trip(income: int, couple: bool, kids: int):
  forward = calculate_tax(make_household(income, couple=couple, children=kids), TABLE)
  back = calculate_reverse_tax(
    make_household(remainder=forward.remainder, couple=couple, children=kids), TABLE
  )
  assert back.remainder == forward.remainder
  assert abs(back.income - income) <= 1
