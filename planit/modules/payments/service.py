from supabase import Client
from postgrest.exceptions import APIError
from planit.core.errors import PlanitError, NotFoundError, UnauthorizedError, ErrorCode, translate_api_error
from planit.database.rows import first_row
from planit.modules.payments.schemas import PaymentUpsert, PaymentResponse
from planit.modules.trips.service import TripService
from typing import Optional
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def upsert_payment(self, payment_data: PaymentUpsert, user_id: str) -> PaymentResponse:
        """Record a self-reported payment. Re-reporting replaces the details but keeps any verification."""
        try:
            TripService(self.supabase).get_trip_for_participant(payment_data.trip_id, user_id)
            payload = payment_data.model_dump(mode="json")
            payload["user_id"] = user_id
            payload["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("payments")\
                .upsert(payload, on_conflict="trip_id,user_id,type")\
                .execute()
            row = first_row(result)
            if not row:
                raise PlanitError("Failed to save payment")
            logger.info(
                f"Payment {row['id']} reported by {user_id}: {row['amount_cents']} cents via {row['method']}"
            )
            return PaymentResponse(**row)
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e)

    def get_payment(self, trip_id: str, user_id: str, payment_type: str = "deposit") -> Optional[PaymentResponse]:
        try:
            TripService(self.supabase).get_trip_for_participant(trip_id, user_id)
            result = self.supabase.table("payments")\
                .select("*")\
                .eq("trip_id", trip_id)\
                .eq("user_id", user_id)\
                .eq("type", payment_type)\
                .limit(1)\
                .execute()
            row = first_row(result)
            return PaymentResponse(**row) if row else None
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e)

    def _get_by_id(self, payment_id: str) -> Optional[dict]:
        return first_row(
            self.supabase.table("payments").select("*").eq("id", payment_id).limit(1).execute()
        )

    def verify_payment(self, payment_id: str, admin_id: str) -> PaymentResponse:
        """Stamp a payment as verified. Only the trip's organizer may; verifying twice keeps the first stamp."""
        try:
            payment = self._get_by_id(payment_id)
            if not payment:
                raise NotFoundError(f"Payment {payment_id} not found", code=ErrorCode.PAYMENT_NOT_FOUND)

            trip = first_row(
                self.supabase.table("trips")
                .select("id, created_by")
                .eq("id", payment["trip_id"])
                .limit(1)
                .execute()
            )
            if not trip:
                raise NotFoundError(f"Trip for payment {payment_id} not found", code=ErrorCode.PAYMENT_NOT_FOUND)
            if trip.get("created_by") != admin_id:
                raise UnauthorizedError(f"{admin_id} does not organize trip {trip['id']}")

            if payment.get("verified_at"):
                return PaymentResponse(**payment)

            self.supabase.table("payments")\
                .update({
                    "verified_at": datetime.now(timezone.utc).isoformat(),
                    "verified_by": admin_id,
                })\
                .eq("id", payment_id)\
                .is_("verified_at", "null")\
                .execute()
            logger.info(f"Payment {payment_id} verified by {admin_id}")
            return PaymentResponse(**self._get_by_id(payment_id))
        except PlanitError:
            raise
        except APIError as e:
            raise translate_api_error(e, not_found_code=ErrorCode.PAYMENT_NOT_FOUND)
