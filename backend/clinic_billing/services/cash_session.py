"""Cash session collaborator.

Settlements are always taken inside an operator's open cash session, which
also supplies the default exchange rate of the day. Session lifecycle lives
elsewhere; this module only asks whether a session is open and parses the
answer strictly.
"""

import logging
from abc import ABC, abstractmethod

import httpx
from pydantic import ValidationError as PydanticValidationError

from clinic_billing.core.config import settings
from clinic_billing.core.exceptions import CollaboratorError, NoActiveSession
from clinic_billing.schemas.cash_session import CashSessionEnvelope, CashSessionInfo
from clinic_billing.schemas.settlement import SettlementRequest

logger = logging.getLogger(__name__)


class CashSessionService(ABC):
    """Looks up cash sessions by id."""

    @abstractmethod
    def get_session(self, session_id: str) -> CashSessionInfo | None:
        """Return the session, or ``None`` if the service does not know it."""
        ...  # pragma: no cover

    def require_active(self, session_id: str) -> CashSessionInfo:
        session = self.get_session(session_id)
        if session is None or not session.is_active:
            raise NoActiveSession(
                f"Cash session {session_id} is not open", session_id=session_id
            )
        return session


class StaticCashSessionService(CashSessionService):
    """In-memory sessions, for local runs and tests."""

    def __init__(self, sessions: list[CashSessionInfo] | None = None) -> None:
        self.sessions = {session.session_id: session for session in sessions or []}

    def get_session(self, session_id: str) -> CashSessionInfo | None:
        return self.sessions.get(session_id)


class HttpCashSessionService(CashSessionService):
    """Asks the cashier service over HTTP.

    ``GET {base_url}/cash-session/{session_id}`` answers 200 with an envelope
    ``{"code": 200 | 404, "data": {...}}``.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self.base_url = (base_url or settings.CASH_SESSION_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.CASH_SESSION_API_TIMEOUT

    def get_session(self, session_id: str) -> CashSessionInfo | None:
        url = f"{self.base_url}/cash-session/{session_id}"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                resp = client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Cash session lookup failed for %s: %s", session_id, exc)
            raise CollaboratorError(
                "Cash session service is unavailable", session_id=session_id
            ) from exc

        try:
            envelope = CashSessionEnvelope.model_validate(resp.json())
        except (ValueError, PydanticValidationError) as exc:
            logger.warning("Malformed cash session payload for %s: %s", session_id, exc)
            raise CollaboratorError(
                "Cash session service returned a malformed payload", session_id=session_id
            ) from exc

        if envelope.code == 404:
            return None
        if envelope.code != 200 or envelope.data is None:
            raise CollaboratorError(
                f"Cash session service answered with code {envelope.code}",
                session_id=session_id,
                code=envelope.code,
            )

        data = envelope.data
        return CashSessionInfo(
            session_id=data.id,
            is_active=data.is_active,
            base_currency=data.base_currency,
            default_exchange_rate=data.exchange_rate,
        )


def get_cash_session_service() -> CashSessionService:
    """FastAPI dependency: the configured session service."""
    if settings.cash_session_api_enabled:
        return HttpCashSessionService()
    return StaticCashSessionService()


def prepare_settlement_request(
    request: SettlementRequest, sessions: CashSessionService
) -> SettlementRequest:
    """Check the session is open and embed its default rate when none was given.

    The returned request is the one handed to the engine; the engine never
    looks up rates on its own.

    Raises:
        NoActiveSession: If the session is unknown or closed.
    """
    session = sessions.require_active(request.session_id)
    if request.exchange_rate is not None or session.default_exchange_rate is None:
        return request
    return request.model_copy(update={"exchange_rate": session.default_exchange_rate})
