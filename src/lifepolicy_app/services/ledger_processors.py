"""In-house payment and loan processors that settle into the local ledger."""

from __future__ import annotations

import logging

from lifepolicy_app.models.policy import (
    LoanResult,
    LoanStatus,
    Payment,
    PaymentResult,
    PaymentStatus,
    PolicyLoan,
)
from lifepolicy_app.repositories.ledger_repository import LedgerRepository
from lifepolicy_app.services.ports import Clock, IdGenerator

logger = logging.getLogger(__name__)


class LedgerPaymentProcessor:
    """Marks payments completed and records them; no external gateway involved."""

    def __init__(self, ledger_repo: LedgerRepository, id_generator: IdGenerator):
        self._ledger_repo = ledger_repo
        self._ids = id_generator

    def process(self, payment: Payment) -> PaymentResult:
        result = PaymentResult(
            payment_id=self._ids.next_payment_id(),
            status=PaymentStatus.COMPLETED,
            confirmation_number=self._ids.next_confirmation_number(),
        )
        self._ledger_repo.add_payment(payment, result)
        logger.debug("Recorded payment %s for %s", result.payment_id, payment.policy_number)
        return result


class LedgerLoanDisbursement:
    """Disburses loans by recording them as active."""

    def __init__(self, ledger_repo: LedgerRepository, id_generator: IdGenerator, clock: Clock):
        self._ledger_repo = ledger_repo
        self._ids = id_generator
        self._clock = clock

    def disburse(self, loan: PolicyLoan) -> LoanResult:
        result = LoanResult(
            loan_id=self._ids.next_loan_id(),
            status=LoanStatus.ACTIVE,
            disbursement_date=self._clock.now(),
        )
        self._ledger_repo.add_loan(loan, result)
        logger.debug("Recorded loan %s for %s", result.loan_id, loan.policy_number)
        return result
