"""
Tariff service: per-route kilogram rates.

The lookup is read-only and never raises for a missing route:
absence is a normal outcome that the cost calculation answers
with the default rate.
"""

import logging
from datetime import datetime

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from freight_ops.exceptions import NotFoundError, ValidationError
from freight_ops.models.base import utcnow
from freight_ops.models.city import City
from freight_ops.models.tariff import Tariff
from freight_ops.schemas.master_data import TariffCreate

logger = logging.getLogger(__name__)


class TariffService:

    def __init__(self, db: Session):
        self.db = db

    def _effective_filter(self, as_of: datetime):
        return (
            Tariff.is_active.is_(True),
            or_(Tariff.effective_from.is_(None), Tariff.effective_from <= as_of),
            or_(Tariff.effective_until.is_(None), Tariff.effective_until >= as_of),
        )

    def find_active_tariff(
        self,
        origin_city_id: int,
        destination_city_id: int,
        as_of: datetime | None = None,
    ) -> Tariff | None:
        """
        Return the tariff in force for a route at a given moment.

        A tariff is in force when it is active and as_of falls
        inside [effective_from, effective_until]; a missing bound
        is open. The route is unique at the database level, so at
        most one row is expected. Should several match anyway, the
        most recently effective one wins.
        """
        as_of = as_of or utcnow()
        return self.db.execute(
            select(Tariff)
            .where(
                Tariff.origin_city_id == origin_city_id,
                Tariff.destination_city_id == destination_city_id,
                *self._effective_filter(as_of),
            )
            .order_by(Tariff.effective_from.desc().nulls_last(), Tariff.id.desc())
            .limit(1)
        ).scalar_one_or_none()

    def create_tariff(self, request: TariffCreate) -> Tariff:
        """
        Create a tariff for a route.

        Raises ValidationError for unknown cities, a route from a
        city to itself, an inverted effective window, or a route
        that already has a tariff.
        """
        for city_id in (request.origin_city_id, request.destination_city_id):
            if self.db.get(City, city_id) is None:
                raise ValidationError(f"City {city_id} not found")

        if request.origin_city_id == request.destination_city_id:
            raise ValidationError("Origin and destination must differ")

        if (
            request.effective_from is not None
            and request.effective_until is not None
            and request.effective_until < request.effective_from
        ):
            raise ValidationError("effective_until is before effective_from")

        existing = self.db.execute(
            select(Tariff).where(
                Tariff.origin_city_id == request.origin_city_id,
                Tariff.destination_city_id == request.destination_city_id,
            )
        ).scalar_one_or_none()
        if existing:
            raise ValidationError(
                f"A tariff already exists for route "
                f"{request.origin_city_id} -> {request.destination_city_id}"
            )

        tariff = Tariff(
            origin_city_id=request.origin_city_id,
            destination_city_id=request.destination_city_id,
            kg_rate=request.kg_rate,
            volume_coeff_v1=request.volume_coeff_v1,
            volume_coeff_v2=request.volume_coeff_v2,
            volume_coeff_v3=request.volume_coeff_v3,
            effective_from=request.effective_from or utcnow(),
            effective_until=request.effective_until,
        )
        self.db.add(tariff)
        self.db.flush()
        logger.info(
            "Created tariff %s -> %s at %s/kg",
            tariff.origin_city_id, tariff.destination_city_id, tariff.kg_rate,
        )
        return tariff

    def get_tariff(self, tariff_id: int) -> Tariff:
        tariff = self.db.get(Tariff, tariff_id)
        if not tariff:
            raise NotFoundError(f"Tariff {tariff_id} not found")
        return tariff

    def list_active_tariffs(self, as_of: datetime | None = None) -> list[Tariff]:
        as_of = as_of or utcnow()
        return list(self.db.execute(
            select(Tariff)
            .where(*self._effective_filter(as_of))
            .order_by(Tariff.id)
        ).scalars().all())

    def deactivate_tariff(self, tariff_id: int) -> Tariff:
        tariff = self.get_tariff(tariff_id)
        tariff.is_active = False
        self.db.flush()
        return tariff
