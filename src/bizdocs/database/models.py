"""SQLAlchemy models for bizdocs database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    Enum,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from bizdocs.domain.entities import DocumentType, ItemType, TransactionStatus

Base = declarative_base()

MONEY = Numeric(15, 2)
RATE = Numeric(9, 6)


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def _enum(enum_cls, name: str) -> Enum:
    # Store the lowercase values, not the member names
    return Enum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])


class StoreProfile(Base):
    """Store profile model."""

    __tablename__ = "store_profiles"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=False)
    npwp = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)


class CatalogItem(Base):
    """Catalog item model."""

    __tablename__ = "catalog_items"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    item_type = Column(_enum(ItemType, "item_type"), nullable=False)
    unit_price = Column(MONEY, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    lines = relationship("TransactionLine", back_populates="catalog_item")


class Transaction(Base):
    """Transaction header model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    transaction_number = Column(String, unique=True, nullable=False)
    customer_name = Column(String, nullable=False)
    customer_address = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)
    status = Column(_enum(TransactionStatus, "transaction_status"), default=TransactionStatus.DRAFT, nullable=False)
    subtotal = Column(MONEY, nullable=False)
    ppn_enabled = Column(Boolean, default=True, nullable=False)
    ppn_rate = Column(RATE, nullable=False)
    ppn_amount = Column(MONEY, default=0, nullable=False)
    regional_tax_enabled = Column(Boolean, default=False, nullable=False)
    regional_tax_rate = Column(RATE, nullable=False)
    regional_tax_amount = Column(MONEY, default=0, nullable=False)
    pph22_enabled = Column(Boolean, default=False, nullable=False)
    pph22_rate = Column(RATE, nullable=False)
    pph22_amount = Column(MONEY, default=0, nullable=False)
    pph23_enabled = Column(Boolean, default=False, nullable=False)
    pph23_rate = Column(RATE, nullable=False)
    pph23_amount = Column(MONEY, default=0, nullable=False)
    stamp_duty_required = Column(Boolean, default=False, nullable=False)
    stamp_duty_amount = Column(MONEY, default=0, nullable=False)
    total_amount = Column(MONEY, nullable=False)
    notes = Column(Text, nullable=True)
    transaction_date = Column(DateTime, default=_utcnow, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    lines = relationship(
        "TransactionLine",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionLine.id",
        passive_deletes=True,
    )
    documents = relationship(
        "Document",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="Document.id",
        passive_deletes=True,
    )


class TransactionLine(Base):
    """Transaction line model."""

    __tablename__ = "transaction_lines"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False)
    catalog_item_id = Column(Integer, ForeignKey("catalog_items.id"), nullable=True)
    item_code = Column(String, nullable=False)
    item_name = Column(String, nullable=False)
    quantity = Column(Numeric(10, 3), nullable=False)
    unit_price = Column(MONEY, nullable=False)
    discount_percentage = Column(Numeric(5, 2), default=0, nullable=False)
    line_total = Column(MONEY, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="lines")
    catalog_item = relationship("CatalogItem", back_populates="lines")


class Document(Base):
    """Generated document model."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False)
    document_type = Column(_enum(DocumentType, "document_type"), nullable=False)
    document_number = Column(String, unique=True, nullable=False)
    document_date = Column(DateTime, nullable=False)
    recipient_name = Column(String, nullable=True)
    custom_notes = Column(Text, nullable=True)
    html_content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="documents")


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on foreign key enforcement for SQLite connections."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str, timeout: float = 5.0) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    Args:
        database_url: SQLAlchemy database URL
        timeout: Seconds to wait for a locked database or a pooled connection
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(database_url, echo=False, connect_args={"timeout": timeout})
    else:
        engine = create_engine(database_url, echo=False, pool_timeout=timeout)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
