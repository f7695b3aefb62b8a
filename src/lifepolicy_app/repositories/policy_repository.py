"""Policy repository with encrypted customer identifiers."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from lifepolicy_app.core.crypto import CryptoService, lookup_hash
from lifepolicy_app.core.errors import ConcurrentModificationError, PolicyNotFoundError
from lifepolicy_app.models.policy import Policy, PolicyStatus
from lifepolicy_app.repositories.db_pool import ThreadLocalConnection

logger = logging.getLogger(__name__)

POLICY_COLUMNS = """
    policy_number,
    customer_id_encrypted,
    product_id,
    face_amount,
    premium,
    issue_date,
    status,
    last_modified,
    version
"""


class PolicyRepository:
    """SQLite policy store with optimistic version checks.

    ``save`` inserts version 1 and otherwise updates only when the stored
    row is exactly one version behind the policy being saved.
    """

    def __init__(self, pool: ThreadLocalConnection, crypto_service: CryptoService):
        self._pool = pool
        self._crypto = crypto_service

    def _to_policy(self, row: sqlite3.Row | dict[str, Any]) -> Policy:
        return Policy(
            policy_number=row["policy_number"],
            customer_id=self._crypto.decrypt_text(row["customer_id_encrypted"]),
            product_id=row["product_id"],
            face_amount=Decimal(row["face_amount"]),
            premium=Decimal(row["premium"]),
            issue_date=date.fromisoformat(row["issue_date"]),
            status=PolicyStatus(row["status"]),
            last_modified=datetime.fromisoformat(row["last_modified"]),
            version=int(row["version"]),
        )

    def find_by_number(self, policy_number: str) -> Policy | None:
        row = self._pool.fetchone(
            f"SELECT {POLICY_COLUMNS} FROM policies WHERE policy_number = ?",
            (policy_number,),
        )
        return self._to_policy(row) if row else None

    def list_by_customer(self, customer_id: str, limit: int = 50, offset: int = 0) -> list[Policy]:
        """List a customer's policies, newest first."""
        rows = self._pool.fetchall(
            f"""
            SELECT {POLICY_COLUMNS}
            FROM policies
            WHERE customer_id_hash = ?
            ORDER BY issue_date DESC, created_at DESC
            LIMIT ? OFFSET ?
            """,
            (lookup_hash(customer_id), limit, offset),
        )
        return [self._to_policy(row) for row in rows]

    def save(self, policy: Policy) -> Policy:
        """Insert or update a policy and return the stored value."""
        if policy.version == 1:
            self._insert(policy)
        else:
            self._update(policy)
        return policy

    def _insert(self, policy: Policy) -> None:
        try:
            self._pool.execute(
                """
                INSERT INTO policies (
                    policy_number,
                    customer_id_encrypted,
                    customer_id_hash,
                    product_id,
                    face_amount,
                    premium,
                    issue_date,
                    status,
                    last_modified,
                    version
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    policy.policy_number,
                    self._crypto.encrypt_text(policy.customer_id),
                    lookup_hash(policy.customer_id),
                    policy.product_id,
                    str(policy.face_amount),
                    str(policy.premium),
                    policy.issue_date.isoformat(),
                    policy.status.value,
                    policy.last_modified.isoformat(),
                    policy.version,
                ),
            )
        except sqlite3.IntegrityError as error:
            raise ConcurrentModificationError(
                f"Policy {policy.policy_number} already exists"
            ) from error

    def _update(self, policy: Policy) -> None:
        # Only lifecycle fields change after issuance.
        cursor = self._pool.execute(
            """
            UPDATE policies
            SET status = ?,
                last_modified = ?,
                version = ?
            WHERE policy_number = ? AND version = ?
            """,
            (
                policy.status.value,
                policy.last_modified.isoformat(),
                policy.version,
                policy.policy_number,
                policy.version - 1,
            ),
        )
        if cursor.rowcount == 1:
            return

        stored = self._pool.fetchone(
            "SELECT version FROM policies WHERE policy_number = ?",
            (policy.policy_number,),
        )
        if stored is None:
            raise PolicyNotFoundError(policy.policy_number)
        logger.warning(
            "Stale write for policy %s: stored version %s, expected %s",
            policy.policy_number,
            stored["version"],
            policy.version - 1,
        )
        raise ConcurrentModificationError(
            f"Policy {policy.policy_number} was modified concurrently "
            f"(stored version {stored['version']}, expected {policy.version - 1})"
        )
