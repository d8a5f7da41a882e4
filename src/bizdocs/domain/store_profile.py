"""Store profile domain service."""

from typing import Optional

from bizdocs.database.base import Database
from bizdocs.domain.entities import StoreProfile as StoreProfileEntity
from bizdocs.domain.errors import NotFoundError, ValidationError, store_profile_not_found
from bizdocs.domain.validation import check_email, require_text


class StoreProfileService:
    """Service for the seller's profile."""

    def __init__(self, db: Database):
        """Initialize store profile service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_profile(self, name: str, address: str, phone: str, email: str, npwp: str) -> StoreProfileEntity:
        """Create a store profile.

        Raises:
            ValidationError: If a field is empty or the email is malformed
        """
        profile_id = self.db.create_store_profile(
            name=require_text("name", name),
            address=require_text("address", address),
            phone=require_text("phone", phone),
            email=check_email("email", require_text("email", email)),
            npwp=require_text("npwp", npwp),
        )
        return self.db.get_store_profile(profile_id)

    def get_profile(self) -> Optional[StoreProfileEntity]:
        """Get the store profile (the first one created)."""
        return self.db.get_first_store_profile()

    def update_profile(
        self,
        profile_id: int,
        name: Optional[str] = None,
        address: Optional[str] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        npwp: Optional[str] = None,
    ) -> StoreProfileEntity:
        """Update the supplied (non-None) fields of a store profile.

        Raises:
            NotFoundError: If the profile doesn't exist
            ValidationError: If a supplied field is empty or malformed
        """
        if self.db.get_store_profile(profile_id) is None:
            raise NotFoundError(store_profile_not_found(profile_id))

        fields = {"name": name, "address": address, "phone": phone, "email": email, "npwp": npwp}
        supplied = {key: require_text(key, value) for key, value in fields.items() if value is not None}
        if "email" in supplied:
            supplied["email"] = check_email("email", supplied["email"])
        if not supplied:
            raise ValidationError("No store profile fields to update")

        self.db.update_store_profile(profile_id, **supplied)
        return self.db.get_store_profile(profile_id)
