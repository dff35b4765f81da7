"""In-memory navigation sessions.

Each session owns one NavigationController, the server-side counterpart of
a mounted menu. The session acts as the host shell: navigation requests
from the controller become the session's next current route.
"""

import logging
import uuid
from collections import OrderedDict
from collections.abc import Iterable

from isomenu.core.controller import NavigationController
from isomenu.core.menu import MenuNode
from isomenu.core.types import Role, RouteId

logger = logging.getLogger(__name__)


class NavigationSession:
    """Navigation controller bound to a session id."""

    def __init__(
        self,
        session_id: str,
        menu: tuple[MenuNode, ...],
        *,
        roles: Iterable[Role] = (),
        current_route: str = "",
        rail_mode: bool = False,
    ) -> None:
        self.session_id = session_id
        self.history: list[RouteId] = []
        self.controller = NavigationController(
            menu,
            roles=roles,
            current_route=current_route,
            rail_mode=rail_mode,
            on_navigate=self._navigate,
        )

    def _navigate(self, route_id: RouteId) -> None:
        self.history.append(route_id)
        self.controller.set_route(route_id)


class SessionStore:
    """Bounded store of navigation sessions.

    When full, creating a session evicts the least recently used one.
    """

    def __init__(self, menu: tuple[MenuNode, ...], *, max_sessions: int = 256) -> None:
        self._menu = menu
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, NavigationSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create(
        self,
        *,
        roles: Iterable[Role] = (),
        current_route: str = "",
        rail_mode: bool = False,
    ) -> NavigationSession:
        """Create and register a new session."""
        while len(self._sessions) >= self._max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.warning(f"Session limit reached, evicted session {evicted_id}")

        session_id = uuid.uuid4().hex
        session = NavigationSession(
            session_id,
            self._menu,
            roles=roles,
            current_route=current_route,
            rail_mode=rail_mode,
        )
        self._sessions[session_id] = session
        logger.info(f"Created navigation session {session_id}")
        return session

    def get(self, session_id: str) -> NavigationSession | None:
        """Get a session by id, marking it recently used."""
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def remove(self, session_id: str) -> bool:
        """Remove a session, returning False if it didn't exist."""
        if self._sessions.pop(session_id, None) is None:
            return False
        logger.info(f"Removed navigation session {session_id}")
        return True
