"""
LTA service: air waybill workflow.

Creating an LTA:
1. Resolves origin and destination cities
2. Enforces the client rule (mandatory for TO_INVOICE)
3. Generates unique LTA and tracking numbers
4. Prices the shipment from the route tariff
5. Persists the LTA and its first status history row
6. Posts the receivable through the AccountingService

Status changes go through the LTA state machine and always
append to the status history. The caller controls the commit.
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from freight_ops.config import get_settings
from freight_ops.exceptions import (
    InvalidStatusTransition,
    NotFoundError,
    ValidationError,
)
from freight_ops.models.enums import LTAStatus, PaymentMode
from freight_ops.models.lta import LTA, QR_STATUSES
from freight_ops.models.lta_status_history import LTAStatusHistory
from freight_ops.schemas.lta import LTACreate, LTAUpdate
from freight_ops.services import pricing
from freight_ops.services.accounting_service import AccountingService, PostingResult
from freight_ops.services.master_data_service import MasterDataService
from freight_ops.services.tariff_service import TariffService

logger = logging.getLogger(__name__)


@dataclass
class LTACreationResult:
    lta: LTA
    posting: PostingResult

    @property
    def posting_warning(self) -> str | None:
        return self.posting.warning


class LTAService:

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()
        self.master_data = MasterDataService(db)
        self.tariff_service = TariffService(db)
        self.accounting_service = AccountingService(db)

    # --- Creation ---

    def create_lta(
        self, request: LTACreate, created_by: str | None = None
    ) -> LTACreationResult:
        """
        Create an LTA in DRAFT (or the requested) status.

        Raises ValidationError for an unknown city, or for a
        TO_INVOICE LTA without an existing client. A failed ledger
        posting does not undo the LTA; it is reported in the
        result's posting warning.
        """
        origin = self.master_data.find_city(request.origin_city_id)
        if not origin:
            raise ValidationError(
                f"Origin city not found: {request.origin_city_id}"
            )
        destination = self.master_data.find_city(request.destination_city_id)
        if not destination:
            raise ValidationError(
                f"Destination city not found: {request.destination_city_id}"
            )

        client = None
        if request.payment_mode == PaymentMode.TO_INVOICE:
            if request.client_id is None:
                raise ValidationError(
                    "Client is required when payment mode is TO_INVOICE"
                )
            client = self.master_data.find_client(request.client_id)
            if not client:
                raise ValidationError(f"Client not found: {request.client_id}")
        elif request.client_id is not None:
            # Optional outside TO_INVOICE: keep it when it resolves
            client = self.master_data.find_client(request.client_id)

        calculated_cost = pricing.calculate_cost(
            request.total_weight,
            self.tariff_service.find_active_tariff(origin.id, destination.id),
            self.settings.DEFAULT_KG_RATE,
        )
        status = request.status or LTAStatus.DRAFT

        lta = LTA(
            lta_number=self.generate_lta_number(),
            tracking_number=self.generate_tracking_number(),
            payment_mode=request.payment_mode,
            total_weight=request.total_weight,
            package_nature=request.package_nature,
            package_count=request.package_count,
            calculated_cost=calculated_cost,
            status=status,
            shipper_name=request.shipper_name,
            shipper_address=request.shipper_address,
            consignee_name=request.consignee_name,
            consignee_address=request.consignee_address,
            special_instructions=request.special_instructions,
            declared_value=request.declared_value,
            pickup_date=request.pickup_date,
            delivery_date=request.delivery_date,
        )
        lta.origin_city = origin
        lta.destination_city = destination
        lta.client = client
        if status in QR_STATUSES:
            self._refresh_qr_code(lta)

        self.db.add(lta)
        self.db.flush()

        self._record_history(
            lta, None, status, created_by or self.settings.SYSTEM_USER, "LTA created"
        )
        self.db.flush()
        logger.info(
            "Created LTA %s (%s -> %s, %s kg, cost %s)",
            lta.lta_number, origin.iata_code, destination.iata_code,
            lta.total_weight, lta.calculated_cost,
        )

        posting = self.accounting_service.post_lta_creation(lta)
        return LTACreationResult(lta=lta, posting=posting)

    def generate_lta_number(self) -> str:
        """LTA-XXXXXXXX, regenerated until no existing LTA uses it."""
        while True:
            lta_number = f"LTA-{uuid.uuid4().hex[:8].upper()}"
            if not self._exists(LTA.lta_number == lta_number):
                return lta_number

    def generate_tracking_number(self) -> str:
        """TRK-XXXXXXXXXXXX, regenerated until no existing LTA uses it."""
        while True:
            tracking_number = f"TRK-{uuid.uuid4().hex[:12].upper()}"
            if not self._exists(LTA.tracking_number == tracking_number):
                return tracking_number

    def _exists(self, condition) -> bool:
        return self.db.execute(
            select(LTA.id).where(condition).limit(1)
        ).first() is not None

    # --- Pricing ---

    def calculate_cost(
        self, origin_city_id: int, destination_city_id: int, weight
    ) -> Decimal:
        """Price a route from its tariff in force, or the default kg rate."""
        tariff = self.tariff_service.find_active_tariff(
            origin_city_id, destination_city_id
        )
        return pricing.calculate_cost(weight, tariff, self.settings.DEFAULT_KG_RATE)

    def ensure_cost_calculated(self, lta: LTA) -> LTA:
        """Fill in a missing cost. A stored cost is never recomputed."""
        if (
            lta.calculated_cost is None
            and lta.origin_city_id is not None
            and lta.destination_city_id is not None
            and lta.total_weight is not None
        ):
            lta.calculated_cost = self.calculate_cost(
                lta.origin_city_id, lta.destination_city_id, lta.total_weight
            )
        return lta

    # --- Status workflow ---

    def update_status(
        self,
        lta_id: int,
        new_status: LTAStatus,
        changed_by: str | None = None,
        reason: str | None = None,
    ) -> LTA:
        """
        Move an LTA to a new status.

        The tracking number is kept as issued at creation. Moving
        to CONFIRMED or IN_TRANSIT refreshes the QR payload. Every
        call appends one status history row.
        """
        lta = self.db.get(LTA, lta_id)
        if not lta:
            logger.warning("LTA not found with id %s", lta_id)
            raise NotFoundError(f"LTA {lta_id} not found")

        if not lta.can_transition_to(new_status):
            raise InvalidStatusTransition(
                f"Cannot transition from {lta.status.value} "
                f"to {new_status.value}"
            )

        old_status = lta.status
        lta.status = new_status
        if new_status in QR_STATUSES:
            self._refresh_qr_code(lta)

        self._record_history(
            lta, old_status, new_status,
            changed_by or self.settings.SYSTEM_USER, reason,
        )
        self.db.flush()
        logger.info(
            "LTA %s status %s -> %s",
            lta.lta_number, old_status.value, new_status.value,
        )
        return lta

    def _refresh_qr_code(self, lta: LTA) -> None:
        if lta.tracking_number:
            lta.qr_code = (
                f"{self.settings.TRACKING_BASE_URL}?number={lta.tracking_number}"
            )

    def _record_history(
        self,
        lta: LTA,
        previous_status: LTAStatus | None,
        new_status: LTAStatus,
        changed_by: str | None,
        reason: str | None,
    ) -> LTAStatusHistory:
        history = LTAStatusHistory(
            lta_id=lta.id,
            previous_status=previous_status,
            new_status=new_status,
            changed_by=changed_by,
            change_reason=reason,
        )
        self.db.add(history)
        return history

    def get_status_history(self, tracking_number: str) -> list[LTAStatusHistory]:
        """Status history of an LTA, oldest change first."""
        history = self.db.execute(
            select(LTAStatusHistory)
            .join(LTA, LTA.id == LTAStatusHistory.lta_id)
            .where(LTA.tracking_number == tracking_number)
            .order_by(LTAStatusHistory.changed_at, LTAStatusHistory.id)
        ).scalars().all()
        return list(history)

    @staticmethod
    def is_valid(lta: LTA) -> bool:
        return lta.is_valid()

    # --- Editing ---

    def update_lta(self, lta_id: int, request: LTAUpdate) -> LTA:
        """
        Edit the descriptive fields of an LTA.

        A stored cost is kept even when the weight changes; it is
        only filled in when missing. The client rule is checked at
        creation and not again here.
        """
        lta = self.get_lta(lta_id)
        changes = request.model_dump(exclude_unset=True)
        for required in ("lta_number", "total_weight"):
            if required in changes and changes[required] is None:
                raise ValidationError(f"{required} cannot be cleared")

        new_number = changes.get("lta_number")
        if (
            new_number
            and new_number != lta.lta_number
            and self._exists(LTA.lta_number == new_number)
        ):
            raise ValidationError(f"LTA number already exists: {new_number}")

        for field, value in changes.items():
            setattr(lta, field, value)
        self.ensure_cost_calculated(lta)
        self.db.flush()
        logger.info("Updated LTA %s (%s)", lta.lta_number, ", ".join(changes))
        return lta

    def delete_lta(self, lta_id: int) -> None:
        """
        Delete an LTA and its status history.

        An LTA with recorded payments cannot be deleted. Its
        journal entries stay in the books.
        """
        lta = self.get_lta(lta_id)
        if lta.payments:
            raise ValidationError(
                f"LTA {lta.lta_number} has recorded payments and cannot be deleted"
            )

        self.db.delete(lta)
        self.db.flush()
        logger.info("Deleted LTA %s", lta.lta_number)

    # --- Queries ---

    def get_lta(self, lta_id: int) -> LTA:
        lta = self.db.get(LTA, lta_id)
        if not lta:
            raise NotFoundError(f"LTA {lta_id} not found")
        return lta

    def get_lta_by_number(self, lta_number: str) -> LTA:
        lta = self.db.execute(
            select(LTA).where(LTA.lta_number == lta_number)
        ).scalar_one_or_none()
        if not lta:
            raise NotFoundError(f"LTA {lta_number} not found")
        return lta

    def get_lta_by_tracking_number(self, tracking_number: str) -> LTA:
        lta = self.db.execute(
            select(LTA).where(LTA.tracking_number == tracking_number)
        ).scalar_one_or_none()
        if not lta:
            raise NotFoundError(
                f"No LTA with tracking number {tracking_number}"
            )
        return lta

    def list_ltas(
        self,
        status: LTAStatus | None = None,
        shipper: str | None = None,
        consignee: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[LTA]:
        """Newest LTAs first, optionally filtered."""
        stmt = select(LTA)
        if status is not None:
            stmt = stmt.where(LTA.status == status)
        if shipper:
            stmt = stmt.where(LTA.shipper_name.ilike(f"%{shipper}%"))
        if consignee:
            stmt = stmt.where(LTA.consignee_name.ilike(f"%{consignee}%"))
        stmt = stmt.order_by(LTA.created_at.desc(), LTA.id.desc())
        ltas = self.db.execute(stmt.limit(limit).offset(offset)).scalars().all()
        return [self.ensure_cost_calculated(lta) for lta in ltas]

    def count_by_status(self, status: LTAStatus) -> int:
        return self.db.execute(
            select(func.count(LTA.id)).where(LTA.status == status)
        ).scalar_one()
