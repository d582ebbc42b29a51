"""Shared test fixtures for all test modules."""

import contextlib
import uuid
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import clinic_billing.models  # noqa: F401  (registers tables on Base.metadata)
from clinic_billing.core import database as db_module
from clinic_billing.core.database import Base, get_db
from clinic_billing.models.credit import CreditKind
from clinic_billing.models.currency import Currency
from clinic_billing.models.invoice import PaymentStatus
from clinic_billing.repositories.credit_repository import CreditRepository
from clinic_billing.repositories.invoice_repository import InvoiceRepository
from clinic_billing.schemas.credit import CreditCreate
from clinic_billing.schemas.invoice import InvoiceCreate
from clinic_billing.services.payment_methods import PaymentMethodCatalog

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

# Session rate used across tests: UYU per USD
SESSION_RATE = Decimal("40")


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    db_module.init_db()

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def payer_id():
    """A patient the invoices and credits belong to."""
    return uuid.uuid4()


@pytest.fixture
def payment_methods(db_session):
    """Seed the standard payment method catalog."""
    catalog = PaymentMethodCatalog(db_session)
    catalog.seed_defaults()
    return catalog


@pytest.fixture
def make_invoice(db_session, payer_id):
    """Factory for invoices booked by the ordering side."""

    def _make(
        total: str = "100",
        paid: str = "0",
        currency: Currency = Currency.USD,
        status: PaymentStatus | None = None,
    ):
        paid_amount = Decimal(paid)
        if status is None:
            status = PaymentStatus.PARTIAL if paid_amount > 0 else PaymentStatus.UNPAID
        return InvoiceRepository(db_session).create(
            InvoiceCreate(
                payer_id=payer_id,
                currency=currency,
                total=Decimal(total),
                paid_amount=paid_amount,
                payment_status=status,
            )
        )

    return _make


@pytest.fixture
def make_credit(db_session, payer_id):
    """Factory for credits issued by payments or credit notes."""

    def _make(
        amount: str,
        currency: Currency = Currency.USD,
        kind: CreditKind = CreditKind.DIRECT_PAYMENT,
        owner_id: uuid.UUID | None = None,
    ):
        return CreditRepository(db_session).create(
            CreditCreate(
                payer_id=owner_id or payer_id,
                kind=kind,
                currency=currency,
                amount=Decimal(amount),
            )
        )

    return _make


@pytest.fixture
def session_factory():
    """Open extra sessions on the test database, closing them afterwards."""
    sessions = []

    def _open():
        session = _TestSessionLocal()
        sessions.append(session)
        return session

    yield _open
    for session in sessions:
        session.close()
