from modules.navigation import IntendedDestinationStore


class TestIntendedDestinationStore:
    def test_remember_and_pop(self):
        store = IntendedDestinationStore()
        assert store.remember("/dashboard/leads?page=2") is True
        assert store.peek() == "/dashboard/leads?page=2"
        assert store.pop() == "/dashboard/leads?page=2"
        assert store.pop() is None

    def test_last_write_wins(self):
        store = IntendedDestinationStore()
        store.remember("/dashboard")
        store.remember("/welcome")
        assert store.peek() == "/welcome"

    def test_sign_in_flow_paths_are_not_recorded(self):
        store = IntendedDestinationStore()
        store.remember("/dashboard")
        for path in ("/login", "/signup?ref=ad", "/auth/callback", ""):
            assert store.remember(path) is False
        assert store.peek() == "/dashboard"

    def test_custom_unrecorded_routes(self):
        store = IntendedDestinationStore(unrecorded_routes=["/sso"])
        assert store.remember("/sso/okta") is False
        assert store.remember("/login") is True
