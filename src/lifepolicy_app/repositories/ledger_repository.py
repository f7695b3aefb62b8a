"""Payment and policy loan records."""

from __future__ import annotations

from typing import Any

from lifepolicy_app.models.policy import LoanResult, Payment, PaymentResult, PolicyLoan
from lifepolicy_app.repositories.db_pool import ThreadLocalConnection


class LedgerRepository:
    """Persists payment attempts and disbursed loans."""

    def __init__(self, pool: ThreadLocalConnection):
        self._pool = pool

    def add_payment(self, payment: Payment, result: PaymentResult) -> None:
        self._pool.execute(
            """
            INSERT INTO payments (
                payment_id,
                policy_number,
                amount,
                payment_method,
                payment_date,
                status,
                confirmation_number
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                result.payment_id,
                payment.policy_number,
                str(payment.amount),
                payment.payment_method.value,
                payment.payment_date.isoformat(),
                result.status.value,
                result.confirmation_number,
            ),
        )

    def add_loan(self, loan: PolicyLoan, result: LoanResult) -> None:
        self._pool.execute(
            """
            INSERT INTO policy_loans (
                loan_id,
                policy_number,
                loan_amount,
                interest_rate,
                loan_date,
                status,
                disbursement_date
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                result.loan_id,
                loan.policy_number,
                str(loan.loan_amount),
                str(loan.interest_rate),
                loan.loan_date.isoformat(),
                result.status.value,
                result.disbursement_date.isoformat(),
            ),
        )

    def list_payments(self, policy_number: str, limit: int = 100, offset: int = 0) -> list[dict[str, Any]]:
        rows = self._pool.fetchall(
            """
            SELECT payment_id, policy_number, amount, payment_method, payment_date,
                   status, confirmation_number
            FROM payments
            WHERE policy_number = ?
            ORDER BY payment_date DESC
            LIMIT ? OFFSET ?
            """,
            (policy_number, limit, offset),
        )
        return [dict(row) for row in rows]

    def list_loans(self, policy_number: str, limit: int = 100, offset: int = 0) -> list[dict[str, Any]]:
        rows = self._pool.fetchall(
            """
            SELECT loan_id, policy_number, loan_amount, interest_rate, loan_date,
                   status, disbursement_date
            FROM policy_loans
            WHERE policy_number = ?
            ORDER BY loan_date DESC
            LIMIT ? OFFSET ?
            """,
            (policy_number, limit, offset),
        )
        return [dict(row) for row in rows]
