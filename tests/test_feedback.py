from unittest.mock import MagicMock

from payloads import ADMIN, FAN

from rfstore.models.feedback import Navigator, Notifier, Severity
from rfstore.models.session import StoreSession


class TestNotifier:
    def test_notify_defaults_to_info(self) -> None:
        notifier = Notifier()

        notification = notifier.notify("Saved")

        assert notification.severity is Severity.INFO
        assert notifier.latest == notification

    def test_severity_shortcuts(self) -> None:
        notifier = Notifier()
        notifier.success("a")
        notifier.warning("b")
        notifier.error("c")

        assert [n.severity for n in notifier.active] == [
            Severity.SUCCESS,
            Severity.WARNING,
            Severity.ERROR,
        ]
        assert notifier.messages(Severity.WARNING) == ["b"]

    def test_ids_are_unique(self) -> None:
        notifier = Notifier()

        first = notifier.notify("a")
        second = notifier.notify("a")

        assert first.id != second.id

    def test_dismiss(self) -> None:
        notifier = Notifier()
        kept = notifier.notify("keep")
        gone = notifier.notify("gone")

        assert notifier.dismiss(gone.id)
        assert not notifier.dismiss(gone.id)
        assert notifier.active == [kept]
        assert notifier.messages() == ["keep", "gone"]

    def test_clear_keeps_history(self) -> None:
        notifier = Notifier()
        notifier.error("Failed to fetch inventory")

        notifier.clear()

        assert notifier.latest is None
        assert notifier.messages(Severity.ERROR) == ["Failed to fetch inventory"]


class TestNavigator:
    def test_starts_at_home(self) -> None:
        navigator = Navigator()

        assert navigator.current == "/"
        assert navigator.history == ["/"]

    def test_navigate_records_history(self) -> None:
        navigator = Navigator("/cart")

        navigator.navigate("/login")

        assert navigator.current == "/login"
        assert navigator.history == ["/cart", "/login"]


class TestStoreSession:
    def test_anonymous(self) -> None:
        session = StoreSession(api=MagicMock())

        assert not session.is_authenticated
        assert not session.is_admin
        assert session.user_id is None

    def test_roles(self) -> None:
        assert not StoreSession(api=MagicMock(), user=FAN).is_admin
        assert StoreSession(api=MagicMock(), user=ADMIN).is_admin

    def test_with_user_shares_sinks(self) -> None:
        session = StoreSession(api=MagicMock(), user=FAN)

        switched = session.with_user(ADMIN)

        assert switched.user_id == ADMIN.id
        assert switched.api is session.api
        assert switched.notifier is session.notifier
        assert switched.navigator is session.navigator
        assert session.user == FAN

    def test_sessions_do_not_share_sinks(self) -> None:
        first = StoreSession(api=MagicMock())
        second = StoreSession(api=MagicMock())

        first.notifier.error("x")

        assert second.notifier.messages() == []
