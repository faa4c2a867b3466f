from modules.ledger.models import CreditBalance
from modules.reveals import BalanceView


def balance(credits, unlimited=False):
    return CreditBalance(user_id="user-1", credits_remaining=credits, unlimited=unlimited)


class TestBalanceView:
    def test_publishes_changes_only(self, clock):
        view = BalanceView("user-1", clock=clock)
        seen = []
        view.subscribe(seen.append)

        view.update(balance(80))
        view.update(balance(80))
        view.update(balance(79))

        assert [b.credits_remaining for b in seen] == [80, 79]
        assert view.balance.credits_remaining == 79

    def test_warns_once_at_threshold(self, clock):
        view = BalanceView("user-1", threshold=50, clock=clock)
        warnings = []
        view.subscribe_warnings(warnings.append)

        assert view.update(balance(51)) is None
        warning = view.update(balance(50))
        assert warning is not None
        assert warning.credits_remaining == 50
        assert "50 credits left" in warning.message
        assert view.update(balance(40)) is None

        assert warnings == [warning]

    def test_rearms_above_threshold_after_cooldown(self, clock):
        view = BalanceView("user-1", threshold=50, cooldown_seconds=3600, clock=clock)

        assert view.update(balance(30)) is not None
        view.update(balance(100))
        # Re-armed, but still inside the cooldown window
        assert view.update(balance(45)) is None

        clock.advance(3601)
        view.update(balance(100))
        assert view.update(balance(44)) is not None

    def test_empty_balance_does_not_warn(self, clock):
        view = BalanceView("user-1", clock=clock)
        assert view.update(balance(0)) is None

    def test_unlimited_does_not_warn(self, clock):
        view = BalanceView("user-1", clock=clock)
        assert view.update(balance(3, unlimited=True)) is None
