from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rfstore.models.feedback import Navigator, Notifier
from rfstore.models.records import User

if TYPE_CHECKING:
    from rfstore.client.api import StoreApiClient


@dataclass
class StoreSession:
    """
    Everything a screen needs to talk to the store on behalf of one user.

    Passed explicitly to every controller. `user` is None for anonymous
    visitors; the API client carries the session cookie.
    """

    api: "StoreApiClient"
    user: User | None = None
    notifier: Notifier = field(default_factory=Notifier)
    navigator: Navigator = field(default_factory=Navigator)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin

    @property
    def user_id(self) -> int | None:
        return self.user.id if self.user is not None else None

    def with_user(self, user: User | None) -> "StoreSession":
        """Same client and feedback sinks, different user."""
        return StoreSession(
            api=self.api,
            user=user,
            notifier=self.notifier,
            navigator=self.navigator,
        )
