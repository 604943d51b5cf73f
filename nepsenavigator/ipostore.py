"""Relational store of announced issues and their closing reminders."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Text, create_engine, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, sessionmaker

from nepsenavigator import applog
from nepsenavigator.applog import LogLevel

_DATA_FIELDS = (
    "company_name", "stock_symbol", "share_registrar", "sector_name", "share_type",
    "price_per_unit", "rating", "units", "min_units", "max_units", "total_amount",
    "opening_date_ad", "opening_date_bs", "closing_date_ad", "closing_date_bs",
    "closing_date_closing_time", "status", "kind",
)
_CRON_FIELDS = (
    "stock_symbol", "opening_date_ad", "opening_date_bs", "closing_date_ad",
    "closing_date_bs", "closing_date_closing_time", "status",
)


def _now():
    return datetime.now(timezone.utc)


class StoreError(Exception):
    """A database operation failed."""


class _Base(DeclarativeBase):
    pass


class _Record:
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=_now
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=_now, onupdate=_now
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )


class NepseData(_Record, _Base):
    """An announced issue, keyed by its unique symbol."""

    __tablename__ = "nepse_data"

    unique_symbol: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    company_name: Mapped[str] = mapped_column(Text, default="")
    stock_symbol: Mapped[str] = mapped_column(Text, default="")
    share_registrar: Mapped[str] = mapped_column(Text, default="")
    sector_name: Mapped[str] = mapped_column(Text, default="")
    share_type: Mapped[str] = mapped_column(Text, default="")
    price_per_unit: Mapped[str] = mapped_column(Text, default="")
    rating: Mapped[str] = mapped_column(Text, default="")
    units: Mapped[str] = mapped_column(Text, default="")
    min_units: Mapped[str] = mapped_column(Text, default="")
    max_units: Mapped[str] = mapped_column(Text, default="")
    total_amount: Mapped[str] = mapped_column(Text, default="")
    opening_date_ad: Mapped[str] = mapped_column(Text, default="")
    opening_date_bs: Mapped[str] = mapped_column(Text, default="")
    closing_date_ad: Mapped[str] = mapped_column(Text, default="")
    closing_date_bs: Mapped[str] = mapped_column(Text, default="")
    closing_date_closing_time: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(Text, default="")
    kind: Mapped[str] = mapped_column("type", Text, default="")


class CronJob(_Record, _Base):
    """A closing-time reminder for an open issue."""

    __tablename__ = "cron_jobs"

    unique_symbol: Mapped[str] = mapped_column(
        Text, ForeignKey("nepse_data.unique_symbol"), nullable=False
    )
    stock_symbol: Mapped[str] = mapped_column(Text, default="")
    opening_date_ad: Mapped[str] = mapped_column(Text, default="")
    opening_date_bs: Mapped[str] = mapped_column(Text, default="")
    closing_date_ad: Mapped[str] = mapped_column(Text, default="")
    closing_date_bs: Mapped[str] = mapped_column(Text, default="")
    closing_date_closing_time: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(Text, default="")
    nepse_data: Mapped[Optional[NepseData]] = relationship(lazy="selectin")


class IPOStore:
    """Issues and reminders kept in a SQL database; deletion is soft."""

    def __init__(self, url):
        try:
            self._engine = create_engine(url)
            _Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            applog.log(LogLevel.ERROR, "failed initializing database: %s", exc)
            raise StoreError(f"failed initializing database: {exc}") from exc
        self._sessions = sessionmaker(self._engine, expire_on_commit=False)
        applog.log(LogLevel.INFO, "Connected to database")

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @staticmethod
    def _upsert(session, data):
        values = {name: getattr(data, name) or "" for name in _DATA_FIELDS}
        existing = session.scalars(
            select(NepseData).where(NepseData.unique_symbol == data.unique_symbol)
        ).first()
        if existing is None:
            session.add(NepseData(unique_symbol=data.unique_symbol, **values))
        else:
            for name, value in values.items():
                setattr(existing, name, value)
            existing.updated_at = _now()
            existing.deleted_at = None
        session.flush()

    def check_and_update_ipo_status(self, unique_symbol, status):
        """True when the issue is unknown or its stored status differs."""
        try:
            with self._sessions() as session:
                existing = session.scalars(
                    select(NepseData)
                    .where(
                        NepseData.unique_symbol == unique_symbol,
                        NepseData.deleted_at.is_(None),
                    )
                    .order_by(NepseData.id)
                    .limit(1)
                ).first()
        except SQLAlchemyError as exc:
            applog.log(LogLevel.ERROR, "Error querying IPO status: %s", exc)
            return False
        if existing is None:
            return True
        applog.log(
            LogLevel.INFO,
            "Existing Status: %s, New Status: %s, IPO Name: %s",
            existing.status, status, unique_symbol,
        )
        return existing.status != status

    def create_or_update(self, data):
        """Insert the issue, or overwrite the stored one with the same symbol."""
        try:
            with self._sessions.begin() as session:
                self._upsert(session, data)
        except SQLAlchemyError as exc:
            applog.log(LogLevel.ERROR, "Failed to create/update nepse data: %s", exc)
            raise StoreError(f"failed to create/update nepse data: {exc}") from exc
        applog.log(
            LogLevel.INFO, "Successfully created/updated nepse data for %s", data.unique_symbol
        )

    def delete_ipo(self, unique_symbol):
        """Mark the issue deleted; return whether there was one."""
        active = (
            NepseData.unique_symbol == unique_symbol,
            NepseData.deleted_at.is_(None),
        )
        try:
            with self._sessions.begin() as session:
                count = session.scalar(
                    select(func.count()).select_from(NepseData).where(*active)
                )
                if count:
                    session.execute(
                        update(NepseData).where(*active).values(deleted_at=_now())
                    )
        except SQLAlchemyError as exc:
            applog.log(LogLevel.ERROR, "Error deleting IPO: %s", exc)
            raise StoreError(f"failed deleting {unique_symbol}: {exc}") from exc
        if count:
            applog.log(LogLevel.INFO, "IPO deleted successfully!")
        return bool(count)

    def read(self, status, stock_type):
        """All stored issues with this status and kind."""
        try:
            with self._sessions() as session:
                records = list(
                    session.scalars(
                        select(NepseData)
                        .where(
                            NepseData.status == status,
                            NepseData.kind == stock_type,
                            NepseData.deleted_at.is_(None),
                        )
                        .order_by(NepseData.id)
                    )
                )
        except SQLAlchemyError as exc:
            applog.log(LogLevel.ERROR, "Failed to read from database: %s", exc)
            raise StoreError(f"failed to read from database: {exc}") from exc
        applog.log(
            LogLevel.INFO, "Successfully read from database: %d records found", len(records)
        )
        return records

    def store_cron(self, cron):
        """Save the reminder and its issue; False when a reminder already exists."""
        nepse = cron.nepse_data
        if nepse is None:
            raise ValueError("cron job carries no nepse data")
        try:
            with self._sessions.begin() as session:
                self._upsert(session, nepse)
                existing = session.scalars(
                    select(CronJob)
                    .where(
                        CronJob.unique_symbol == cron.unique_symbol,
                        CronJob.deleted_at.is_(None),
                    )
                    .limit(1)
                ).first()
                if existing is not None:
                    applog.log(
                        LogLevel.INFO,
                        "Cron job for %s already exists, skipping",
                        cron.unique_symbol,
                    )
                    return False
                session.add(
                    CronJob(
                        unique_symbol=cron.unique_symbol,
                        **{name: getattr(cron, name) or "" for name in _CRON_FIELDS},
                    )
                )
        except SQLAlchemyError as exc:
            applog.log(LogLevel.ERROR, "Failed to store cron job: %s", exc)
            raise StoreError(f"failed to store cron job: {exc}") from exc
        applog.log(LogLevel.INFO, "Successfully stored cron job for %s", cron.unique_symbol)
        return True

    def read_cron(self):
        """All stored reminders, each with its issue loaded."""
        try:
            with self._sessions() as session:
                jobs = list(
                    session.scalars(
                        select(CronJob)
                        .where(CronJob.deleted_at.is_(None))
                        .order_by(CronJob.id)
                    )
                )
        except SQLAlchemyError as exc:
            applog.log(LogLevel.ERROR, "failed to load data: %s", exc)
            raise StoreError("failed to load data") from exc
        applog.log(LogLevel.INFO, "read all the documents")
        return jobs

    def update_status(self, unique_symbol, status):
        """Set the issue's status; return the number of rows changed."""
        try:
            with self._sessions.begin() as session:
                result = session.execute(
                    update(NepseData)
                    .where(
                        NepseData.unique_symbol == unique_symbol,
                        NepseData.deleted_at.is_(None),
                    )
                    .values(status=status, updated_at=_now())
                )
                rows = result.rowcount
        except SQLAlchemyError as exc:
            applog.log(LogLevel.ERROR, "Error updating IPO status: %s", exc)
            raise StoreError(f"failed updating status of {unique_symbol}: {exc}") from exc
        if rows == 0:
            applog.log(LogLevel.WARN, "No records updated for StockSymbol: %s", unique_symbol)
        else:
            applog.log(LogLevel.INFO, "IPO status updated successfully!")
        return rows

    def close(self):
        """Release the database connections."""
        self._engine.dispose()