"""Account store: profile identity, role, and balance.

Balances change only through :meth:`AccountStore.apply_delta`, which runs
a single conditional ``UPDATE`` so the non-negative check and the write
happen atomically in the database, never as read-modify-write in Python.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from gigledger.domain.money import to_amount
from gigledger.domain.types import Profile, Role
from gigledger.infrastructure.database.schema import profiles
from gigledger.infrastructure.repositories._base import SqlRepository

if TYPE_CHECKING:
    from gigledger.infrastructure.ledger import LedgerTransaction


def _row_to_profile(row: Any) -> Profile:
    return Profile(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        profession=row.profession,
        role=Role(row.role),
        balance=row.balance,
    )


class AccountStore(SqlRepository):
    """Reads and atomic balance updates on the ``profiles`` table."""

    def get_profile(
        self, profile_id: int, txn: LedgerTransaction | None = None
    ) -> Profile | None:
        with self._conn(txn) as conn:
            row = conn.execute(select(profiles).where(profiles.c.id == profile_id)).first()
        return _row_to_profile(row) if row is not None else None

    def get_balance(
        self, profile_id: int, txn: LedgerTransaction | None = None
    ) -> Decimal | None:
        """Current balance, or None for an unknown profile.

        Never cached: each call reads the row again.
        """
        with self._conn(txn) as conn:
            return conn.execute(
                select(profiles.c.balance).where(profiles.c.id == profile_id)
            ).scalar_one_or_none()

    def lock_profiles(self, profile_ids: list[int], txn: LedgerTransaction) -> dict[int, Profile]:
        """Lock and read *profile_ids* in ascending id order.

        The fixed order is what keeps two payments that share a pair of
        accounts from locking them in opposite order. Unknown ids are
        absent from the returned mapping.
        """
        locked: dict[int, Profile] = {}
        for profile_id in sorted(set(profile_ids)):
            stmt = select(profiles).where(profiles.c.id == profile_id)
            if txn.supports_row_locks:
                stmt = stmt.with_for_update()
            row = txn.conn.execute(stmt).first()
            if row is not None:
                locked[profile_id] = _row_to_profile(row)
        return locked

    def apply_delta(self, profile_id: int, delta: Decimal, txn: LedgerTransaction) -> bool:
        """Add *delta* to a balance inside *txn*.

        Returns False, leaving the row untouched, when the resulting
        balance would be negative or the profile does not exist.
        """
        delta = to_amount(delta)
        stmt = (
            update(profiles)
            .where(profiles.c.id == profile_id)
            .values(balance=profiles.c.balance + delta)
        )
        if delta < 0:
            stmt = stmt.where(profiles.c.balance >= -delta)
        result = txn.conn.execute(stmt)
        return result.rowcount == 1

    def add_profile(
        self,
        txn: LedgerTransaction,
        *,
        first_name: str,
        last_name: str,
        role: Role | str,
        balance: Decimal | int | str = 0,
        profession: str = "",
        profile_id: int | None = None,
    ) -> Profile:
        """Insert a profile (account creation lives outside the payment path)."""
        values: dict[str, Any] = {
            "first_name": first_name,
            "last_name": last_name,
            "profession": profession,
            "role": Role(role).value,
            "balance": to_amount(balance),
        }
        if profile_id is not None:
            values["id"] = profile_id
        result = txn.conn.execute(insert(profiles).values(**values))
        new_id = profile_id if profile_id is not None else result.inserted_primary_key[0]
        profile = self.get_profile(int(new_id), txn)
        assert profile is not None
        return profile
