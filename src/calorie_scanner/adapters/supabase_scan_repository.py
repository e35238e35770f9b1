"""Supabase repository for scan records."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from calorie_scanner.domain.scans import ScanRecord, ScanResult
from calorie_scanner.services.scans import ScanRepository

_COLUMNS = (
    "id, user_id, context, food_name, calories, ingredients, risk_level, "
    "risk_reason, humor_comment, brand_note, burn_off, created_at"
)


@dataclass
class SupabaseScanRepository(ScanRepository):
    """Supabase implementation for scan records."""

    client: Client

    def create_scan(
        self, user_id: str, result: ScanResult, context: str
    ) -> ScanRecord:
        """Insert a scan row; id and created_at come from the database."""
        payload = result.to_json()
        response = (
            self.client.table("scans")
            .insert(
                {
                    "user_id": user_id,
                    "context": context,
                    "food_name": payload["foodName"],
                    "calories": payload["calories"],
                    "ingredients": payload["ingredients"],
                    "risk_level": payload["riskLevel"],
                    "risk_reason": payload["riskReason"],
                    "humor_comment": payload["humorComment"],
                    "brand_note": payload["brandNote"],
                    "burn_off": payload["burnOff"],
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create scan")
        return _parse_scan(response.data[0])

    def count_scans_since(self, user_id: str, since: datetime) -> int:
        """Count the user's scans created at or after `since`."""
        response = (
            self.client.table("scans")
            .select("id", count="exact")
            .eq("user_id", user_id)
            .gte("created_at", since.isoformat())
            .execute()
        )
        if response.count is not None:
            return response.count
        return len(response.data or [])

    def list_scans(self, user_id: str, since: datetime | None) -> list[ScanRecord]:
        """Return the user's scans newest first."""
        query = self.client.table("scans").select(_COLUMNS).eq("user_id", user_id)
        if since is not None:
            query = query.gte("created_at", since.isoformat())
        response = query.order("created_at", desc=True).execute()
        return [_parse_scan(row) for row in response.data or []]

    def get_scan(self, scan_id: UUID) -> ScanRecord | None:
        """Return a scan by id."""
        response = (
            self.client.table("scans")
            .select(_COLUMNS)
            .eq("id", str(scan_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_scan(response.data[0])

    def delete_scan(self, scan_id: UUID) -> None:
        """Delete a scan by id."""
        self.client.table("scans").delete().eq("id", str(scan_id)).execute()

    def delete_user_scans(self, user_id: str) -> int:
        """Delete all scans for a user."""
        response = (
            self.client.table("scans").delete().eq("user_id", user_id).execute()
        )
        return len(response.data or [])


def _parse_scan(row: dict[str, object]) -> ScanRecord:
    result = ScanResult.model_validate(
        {
            "foodName": row.get("food_name"),
            "calories": row.get("calories", 0),
            "ingredients": row.get("ingredients") or [],
            "riskLevel": row.get("risk_level"),
            "riskReason": row.get("risk_reason"),
            "humorComment": row.get("humor_comment"),
            "brandNote": row.get("brand_note"),
            "burnOff": row.get("burn_off"),
        }
    )
    return ScanRecord(
        id=UUID(str(row["id"])),
        user_id=str(row["user_id"]),
        context=str(row.get("context") or ""),
        result=result,
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
