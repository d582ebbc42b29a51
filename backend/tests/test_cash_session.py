"""Tests for the cash session collaborator."""

import uuid
from decimal import Decimal
from unittest.mock import MagicMock, patch

import httpx
import pytest

from clinic_billing.core.config import settings
from clinic_billing.core.exceptions import CollaboratorError, NoActiveSession
from clinic_billing.models.currency import Currency
from clinic_billing.schemas.cash_session import CashSessionInfo
from clinic_billing.schemas.settlement import ManualPayment, SettlementRequest
from clinic_billing.services.cash_session import (
    HttpCashSessionService,
    StaticCashSessionService,
    get_cash_session_service,
    prepare_settlement_request,
)


def _mock_client(mock_client_cls, payload=None, get_side_effect=None):
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = payload

    mock_client = MagicMock()
    mock_client.__enter__ = MagicMock(return_value=mock_client)
    mock_client.__exit__ = MagicMock(return_value=False)
    if get_side_effect is not None:
        mock_client.get.side_effect = get_side_effect
    else:
        mock_client.get.return_value = mock_response
    mock_client_cls.return_value = mock_client
    return mock_client, mock_response


def _session(session_id="S-1", is_active=True, rate=Decimal("40")):
    return CashSessionInfo(
        session_id=session_id,
        is_active=is_active,
        base_currency=Currency.USD,
        default_exchange_rate=rate,
    )


def _request(rate=None):
    return SettlementRequest(
        invoice_id=uuid.uuid4(),
        session_id="S-1",
        manual_payment=ManualPayment(amount=Decimal("10"), currency=Currency.UYU, method="CASH"),
        exchange_rate=rate,
    )


@pytest.fixture
def service():
    return HttpCashSessionService(base_url="http://cashier.test/webhook/", timeout=2.0)


class TestHttpCashSessionService:
    def test_active_session(self, service):
        """Test a 200 envelope is parsed into a CashSessionInfo."""
        payload = {
            "code": 200,
            "data": {
                "id": "S-1",
                "is_active": True,
                "base_currency": "USD",
                "exchange_rate": "39.5",
                "opened_by": "someone",
            },
        }
        with patch("clinic_billing.services.cash_session.httpx.Client") as mock_client_cls:
            mock_client, _ = _mock_client(mock_client_cls, payload)
            session = service.get_session("S-1")

        mock_client_cls.assert_called_once_with(timeout=2.0)
        mock_client.get.assert_called_once_with("http://cashier.test/webhook/cash-session/S-1")
        assert session == CashSessionInfo(
            session_id="S-1",
            is_active=True,
            base_currency=Currency.USD,
            default_exchange_rate=Decimal("39.5"),
        )

    def test_not_found_envelope(self, service):
        """Test a 404 code means no session."""
        with patch("clinic_billing.services.cash_session.httpx.Client") as mock_client_cls:
            _mock_client(mock_client_cls, {"code": 404, "data": None})
            assert service.get_session("S-1") is None

    def test_unexpected_code(self, service):
        """Test any other code is a collaborator failure."""
        with patch("clinic_billing.services.cash_session.httpx.Client") as mock_client_cls:
            _mock_client(mock_client_cls, {"code": 500})
            with pytest.raises(CollaboratorError) as exc_info:
                service.get_session("S-1")
        assert exc_info.value.details["code"] == 500

    def test_ok_code_without_data(self, service):
        """Test a 200 code with no data is rejected."""
        with patch("clinic_billing.services.cash_session.httpx.Client") as mock_client_cls:
            _mock_client(mock_client_cls, {"code": 200, "data": None})
            with pytest.raises(CollaboratorError):
                service.get_session("S-1")

    @pytest.mark.parametrize(
        "payload",
        [
            {"data": {"id": "S-1", "is_active": True, "base_currency": "USD"}},
            {"code": 200, "data": {"id": "S-1", "is_active": True, "base_currency": "EUR"}},
            {
                "code": 200,
                "data": {
                    "id": "S-1",
                    "is_active": True,
                    "base_currency": "USD",
                    "exchange_rate": "-1",
                },
            },
            {
                "code": 200,
                "data": {
                    "id": "S-1",
                    "is_active": True,
                    "base_currency": "USD",
                    "exchange_rate": "39.123456789",
                },
            },
            {"code": 200, "data": {"is_active": True, "base_currency": "USD"}},
            [],
        ],
    )
    def test_malformed_payload(self, service, payload):
        """Test payloads that do not match the envelope are rejected."""
        with patch("clinic_billing.services.cash_session.httpx.Client") as mock_client_cls:
            _mock_client(mock_client_cls, payload)
            with pytest.raises(CollaboratorError):
                service.get_session("S-1")

    def test_non_json_body(self, service):
        """Test a body that is not JSON is rejected."""
        with patch("clinic_billing.services.cash_session.httpx.Client") as mock_client_cls:
            _, mock_response = _mock_client(mock_client_cls)
            mock_response.json.side_effect = ValueError("Expecting value")
            with pytest.raises(CollaboratorError):
                service.get_session("S-1")

    def test_connection_error(self, service):
        """Test transport failures surface as CollaboratorError."""
        with patch("clinic_billing.services.cash_session.httpx.Client") as mock_client_cls:
            _mock_client(
                mock_client_cls, get_side_effect=httpx.ConnectError("Connection refused")
            )
            with pytest.raises(CollaboratorError):
                service.get_session("S-1")

    def test_http_error_status(self, service):
        """Test a non-2xx HTTP status surfaces as CollaboratorError."""
        with patch("clinic_billing.services.cash_session.httpx.Client") as mock_client_cls:
            _, mock_response = _mock_client(mock_client_cls, {"code": 200})
            mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
                "Bad Gateway", request=MagicMock(), response=MagicMock()
            )
            with pytest.raises(CollaboratorError):
                service.get_session("S-1")

    def test_require_active_closed_session(self, service):
        """Test a closed session is refused."""
        payload = {
            "code": 200,
            "data": {"id": "S-1", "is_active": False, "base_currency": "USD"},
        }
        with patch("clinic_billing.services.cash_session.httpx.Client") as mock_client_cls:
            _mock_client(mock_client_cls, payload)
            with pytest.raises(NoActiveSession):
                service.require_active("S-1")


class TestStaticCashSessionService:
    def test_known_session(self):
        """Test known sessions are returned."""
        sessions = StaticCashSessionService([_session()])
        assert sessions.require_active("S-1").default_exchange_rate == Decimal("40")

    def test_unknown_session(self):
        """Test unknown sessions are not active."""
        with pytest.raises(NoActiveSession) as exc_info:
            StaticCashSessionService().require_active("S-9")
        assert exc_info.value.details["session_id"] == "S-9"

    def test_inactive_session(self):
        """Test closed sessions are not active."""
        with pytest.raises(NoActiveSession):
            StaticCashSessionService([_session(is_active=False)]).require_active("S-1")


class TestGetCashSessionService:
    def test_static_when_url_unset(self):
        """Test no configured URL means no sessions are open."""
        with patch.object(settings, "CASH_SESSION_API_URL", ""):
            assert isinstance(get_cash_session_service(), StaticCashSessionService)

    def test_http_when_url_set(self):
        """Test a configured URL selects the HTTP service."""
        with patch.object(settings, "CASH_SESSION_API_URL", "http://cashier.test"):
            service = get_cash_session_service()
        assert isinstance(service, HttpCashSessionService)
        assert service.base_url == "http://cashier.test"


class TestPrepareSettlementRequest:
    def test_embeds_session_rate(self):
        """Test the session default rate fills a request without one."""
        request = _request()
        prepared = prepare_settlement_request(request, StaticCashSessionService([_session()]))

        assert prepared.exchange_rate == Decimal("40")
        assert request.exchange_rate is None

    def test_request_rate_overrides_session(self):
        """Test an explicit rate on the request wins."""
        request = _request(rate=Decimal("41.25"))
        prepared = prepare_settlement_request(request, StaticCashSessionService([_session()]))
        assert prepared.exchange_rate == Decimal("41.25")

    def test_session_without_rate(self):
        """Test a session with no default rate leaves the request alone."""
        request = _request()
        prepared = prepare_settlement_request(
            request, StaticCashSessionService([_session(rate=None)])
        )
        assert prepared.exchange_rate is None

    def test_requires_open_session(self):
        """Test preparation fails without an open session."""
        with pytest.raises(NoActiveSession):
            prepare_settlement_request(_request(), StaticCashSessionService())
