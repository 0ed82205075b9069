"""Unit tests for Settings bounds."""

import pytest
from pydantic import ValidationError

from config.settings import Settings


def test_min_stake_defaults_to_one_cent() -> None:
    assert Settings(JWT_SECRET="x").MIN_STAKE == 1


@pytest.mark.parametrize("value", [0, -1000])
def test_min_stake_must_be_positive(value) -> None:
    with pytest.raises(ValidationError):
        Settings(JWT_SECRET="x", MIN_STAKE=value)
