from typing import List, Optional


class RatingRepository:
    def upsert(self, technician_id: str, user_id: str, appointment_id: str, rating: int, comment: Optional[str] = None) -> None:
        """One rating per (technician, user); a repeat replaces the earlier one."""
        ...

    def ratings_for_technician(self, technician_id: str) -> List[int]:
        ...
