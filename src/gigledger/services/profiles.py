"""ProfileService: resolve the caller identity handed over by the authenticator.

The service never authenticates anyone; it only turns an already
authenticated profile id into a :class:`Profile` record.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from gigledger.services.base import BaseService
from gigledger.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from gigledger.domain.types import Profile


class ProfileService(BaseService):
    """Caller lookup."""

    def authenticate(self, profile_id: int | None) -> Profile | None:
        """Return the caller's profile, or None if there is no such caller."""
        if profile_id is None:
            return None
        return self._accounts.get_profile(profile_id)

    def get_profile(self, profile_id: int | None) -> ServiceResult:
        try:
            profile = self.authenticate(profile_id)
        except SQLAlchemyError:
            return ServiceResult.failure(
                "get_profile", ErrorCode.STORAGE_ERROR, "Profile lookup failed"
            )
        if profile is None:
            suffix = f" with ID {profile_id}" if profile_id is not None else ""
            return ServiceResult.failure(
                "get_profile", ErrorCode.UNAUTHORIZED, f"Unauthorized: no profile{suffix}"
            )
        return ServiceResult(ok=True, op="get_profile", data=profile.model_dump(mode="json"))
