"""
Supabase Weight Repository Implementation.

Implements the WeightRepository protocol over the ``weight_tracking`` table.
"""
from typing import Optional, List, Dict, Any
import logging

from infrastructure.db.gateway import SupabaseGateway

logger = logging.getLogger(__name__)

WEIGHT_TABLE = "weight_tracking"


class SupabaseWeightRepository:
    """
    Supabase implementation of WeightRepository.
    """

    def __init__(self, gateway: SupabaseGateway):
        """
        Initialize with the data gateway.

        Args:
            gateway: SupabaseGateway instance (injected)
        """
        self._gateway = gateway

    def list_weights(self, user_id: str, *, since: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._gateway.select(
            WEIGHT_TABLE,
            eq={"user_id": user_id},
            gte={"date": since} if since else None,
            order="date",
        ).unwrap() or []

    def get_latest_weight(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self._gateway.select(
            WEIGHT_TABLE,
            eq={"user_id": user_id},
            order="date",
            desc=True,
            maybe_single=True,
        ).unwrap()

    def get_weight(self, user_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
        return self._gateway.select(
            WEIGHT_TABLE,
            eq={"id": entry_id, "user_id": user_id},
            maybe_single=True,
        ).unwrap()

    def get_weight_by_date(self, user_id: str, day: str) -> Optional[Dict[str, Any]]:
        return self._gateway.select(
            WEIGHT_TABLE,
            eq={"user_id": user_id, "date": day},
            maybe_single=True,
        ).unwrap()

    def insert_weight(self, user_id: str, day: str, weight_kg: float) -> Dict[str, Any]:
        row = self._gateway.insert(
            WEIGHT_TABLE,
            {"user_id": user_id, "date": day, "weight_kg": weight_kg},
            single=True,
        ).unwrap()
        logger.info(f"Logged weight for user {user_id} on {day}")
        return row

    def update_weight(self, user_id: str, entry_id: str, values: Dict[str, Any]) -> bool:
        rows = self._gateway.update(
            WEIGHT_TABLE, values, eq={"id": entry_id, "user_id": user_id}
        ).unwrap()
        return bool(rows)

    def delete_weight(self, user_id: str, entry_id: str) -> bool:
        rows = self._gateway.delete(
            WEIGHT_TABLE, eq={"id": entry_id, "user_id": user_id}
        ).unwrap()
        return bool(rows)
