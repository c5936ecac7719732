from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from fx_quotes.db import models
from fx_quotes.domain.quotes import FxRate
from fx_quotes.services.rates import RatesRepository


class SqlRatesRepository(RatesRepository):
    """Rates stored in the ``fx_rates`` table; the newest row per pair wins."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    async def get_rate(self, from_currency: str, to_currency: str) -> FxRate | None:
        return await asyncio.to_thread(self.latest, from_currency, to_currency)

    def latest(self, from_currency: str, to_currency: str) -> FxRate | None:
        stmt = (
            select(models.FxRateOrm)
            .where(
                models.FxRateOrm.from_currency == from_currency.upper(),
                models.FxRateOrm.to_currency == to_currency.upper(),
            )
            .order_by(models.FxRateOrm.timestamp_utc.desc(), models.FxRateOrm.id.desc())
            .limit(1)
        )
        with self._session_factory() as session:
            orm_rate = session.scalars(stmt).first()
            if orm_rate is None:
                return None
            return self._to_domain(orm_rate)

    def add(self, rate: FxRate) -> FxRate:
        orm_rate = models.FxRateOrm(
            from_currency=rate.from_currency.upper(),
            to_currency=rate.to_currency.upper(),
            rate=rate.rate,
            timestamp_utc=_as_utc(rate.timestamp_utc),
        )
        with self._session_factory() as session:
            session.add(orm_rate)
            session.commit()
            session.refresh(orm_rate)
            return self._to_domain(orm_rate)

    @staticmethod
    def _to_domain(orm_rate: models.FxRateOrm) -> FxRate:
        return FxRate(
            from_currency=orm_rate.from_currency,
            to_currency=orm_rate.to_currency,
            rate=orm_rate.rate,
            timestamp_utc=_as_utc(orm_rate.timestamp_utc),
        )


def _as_utc(timestamp: datetime) -> datetime:
    # SQLite drops tzinfo, stored values are always UTC.
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


__all__ = ["SqlRatesRepository"]
