"""Unit tests for ct_account request/response models."""

import pytest
from pydantic import ValidationError

from src.ct_account.application.schemas import BalanceResponse, DepositRequest, Money
from src.ct_account.domain.models import Account


class TestDepositRequest:
    def test_positive(self) -> None:
        assert DepositRequest(amount_cents=500).amount_cents == 500

    @pytest.mark.parametrize("amount", [0, -100])
    def test_non_positive_rejected(self, amount: int) -> None:
        with pytest.raises(ValidationError):
            DepositRequest(amount_cents=amount)


class TestMoney:
    def test_of(self) -> None:
        assert Money.of(1999) == Money(cents=1999, display="$19.99")


class TestBalanceResponse:
    def test_from_account(self) -> None:
        account = Account(
            id="a-1", user_id="u-1", balance=3000, pending_balance=7000, version=3
        )
        resp = BalanceResponse.from_account(account)
        assert resp.user_id == "u-1"
        assert resp.available.display == "$30.00"
        assert resp.pending.display == "$70.00"
        assert resp.total.cents == 10000
