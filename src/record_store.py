import datetime
import logging
import threading
from typing import Dict, Iterable, List, Optional

from src.records import Response, Session


class ThreadSafeRecordStore:
    """A thread-safe in-memory store of conversation responses and sessions.

    The store is the collaborator that hands record snapshots to the
    analytics pipeline.  Records are immutable, so the lists it returns can
    be shared freely between pipeline stages.
    """

    def __init__(self) -> None:
        self._responses: Dict[str, Response] = {}
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def add_session(self, session: Session) -> None:
        """
        Adds a session to the store.
        Raises ValueError if a session with the same ID already exists.
        """
        with self._lock:
            if session.id in self._sessions:
                raise ValueError(f"Session with ID {session.id} already exists.")
            self._sessions[session.id] = session

    def add_response(self, response: Response) -> None:
        """
        Adds a response to the store.
        Raises ValueError if a response with the same ID already exists.
        """
        with self._lock:
            if response.id in self._responses:
                raise ValueError(f"Response with ID {response.id} already exists.")
            self._responses[response.id] = response

    def load(self, sessions: Iterable[Session], responses: Iterable[Response]) -> None:
        """Bulk-add *sessions* then *responses*; stops at the first duplicate."""
        for session in sessions:
            self.add_session(session)
        for response in responses:
            self.add_response(response)
        self._logger.debug(
            "Record store holds %d sessions and %d responses",
            len(self._sessions),
            len(self._responses),
        )

    def get_session(self, session_id: str) -> Optional[Session]:
        """Retrieves a session by its ID. Returns None if not found."""
        with self._lock:
            return self._sessions.get(session_id)

    def fetch_responses(
        self,
        survey_id: Optional[str] = None,
        theme_id: Optional[str] = None,
        start: Optional[datetime.datetime] = None,
        end: Optional[datetime.datetime] = None,
    ) -> List[Response]:
        """Return matching responses, oldest first.

        A response belongs to a survey through its session; responses whose
        session is unknown are excluded whenever *survey_id* is given.  The
        date range is inclusive on both ends.
        """
        with self._lock:
            responses = list(self._responses.values())
            sessions = dict(self._sessions)

        selected = []
        for response in responses:
            if survey_id is not None:
                session = sessions.get(response.session_id)
                if session is None or session.survey_id != survey_id:
                    continue
            if theme_id is not None and response.theme_id != theme_id:
                continue
            if start is not None and response.created_at < start:
                continue
            if end is not None and response.created_at > end:
                continue
            selected.append(response)

        selected.sort(key=lambda r: r.created_at)
        return selected

    def fetch_sessions(
        self,
        survey_id: Optional[str] = None,
        start: Optional[datetime.datetime] = None,
        end: Optional[datetime.datetime] = None,
    ) -> List[Session]:
        """Return matching sessions, most recently started first."""
        with self._lock:
            sessions = list(self._sessions.values())

        selected = [
            s
            for s in sessions
            if (survey_id is None or s.survey_id == survey_id)
            and (start is None or s.started_at >= start)
            and (end is None or s.started_at <= end)
        ]
        selected.sort(key=lambda s: s.started_at, reverse=True)
        return selected

    def count(self) -> int:
        """Returns the total number of stored responses."""
        with self._lock:
            return len(self._responses)
