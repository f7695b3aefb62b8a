"""Database schema management."""

from __future__ import annotations

from lifepolicy_app.repositories.db_pool import ThreadLocalConnection


def initialize_schema(pool: ThreadLocalConnection) -> None:
    """Create required tables and indexes if they do not exist."""
    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS policies (
            policy_number TEXT PRIMARY KEY,
            customer_id_encrypted BLOB NOT NULL,
            customer_id_hash TEXT NOT NULL,
            product_id TEXT NOT NULL,
            face_amount TEXT NOT NULL,
            premium TEXT NOT NULL,
            issue_date TEXT NOT NULL,
            status TEXT NOT NULL,
            last_modified TEXT NOT NULL,
            version INTEGER NOT NULL,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
    )

    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS payments (
            payment_id TEXT PRIMARY KEY,
            policy_number TEXT NOT NULL,
            amount TEXT NOT NULL,
            payment_method TEXT NOT NULL,
            payment_date TEXT NOT NULL,
            status TEXT NOT NULL,
            confirmation_number TEXT,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (policy_number) REFERENCES policies(policy_number) ON DELETE RESTRICT
        )
        """
    )

    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS policy_loans (
            loan_id TEXT PRIMARY KEY,
            policy_number TEXT NOT NULL,
            loan_amount TEXT NOT NULL,
            interest_rate TEXT NOT NULL,
            loan_date TEXT NOT NULL,
            status TEXT NOT NULL,
            disbursement_date TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (policy_number) REFERENCES policies(policy_number) ON DELETE RESTRICT
        )
        """
    )

    pool.execute(
        """
        CREATE TABLE IF NOT EXISTS audit_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            action TEXT NOT NULL,
            entity TEXT NOT NULL,
            entity_id TEXT,
            detail TEXT,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
    )

    pool.execute("CREATE INDEX IF NOT EXISTS idx_policies_customer ON policies(customer_id_hash)")
    pool.execute("CREATE INDEX IF NOT EXISTS idx_payments_policy ON payments(policy_number)")
    pool.execute("CREATE INDEX IF NOT EXISTS idx_policy_loans_policy ON policy_loans(policy_number)")
    pool.execute("CREATE INDEX IF NOT EXISTS idx_audit_logs_created_at ON audit_logs(created_at)")
    pool.execute("CREATE INDEX IF NOT EXISTS idx_audit_logs_entity ON audit_logs(entity, entity_id)")
