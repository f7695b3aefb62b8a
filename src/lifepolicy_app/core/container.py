"""Application dependency container."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from lifepolicy_app.core.clock import SystemClock
from lifepolicy_app.core.config import (
    AppConfig,
    configure_logging,
    ensure_runtime_keys,
    get_required_env,
    load_config,
)
from lifepolicy_app.core.crypto import CryptoService
from lifepolicy_app.core.ids import UuidIdGenerator
from lifepolicy_app.repositories.audit_repository import AuditRepository
from lifepolicy_app.repositories.db_pool import ThreadLocalConnection
from lifepolicy_app.repositories.ledger_repository import LedgerRepository
from lifepolicy_app.repositories.policy_repository import PolicyRepository
from lifepolicy_app.repositories.schema import initialize_schema
from lifepolicy_app.services.ledger_processors import LedgerLoanDisbursement, LedgerPaymentProcessor
from lifepolicy_app.services.policy_service import PolicyService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Wires repositories and services."""

    config: AppConfig
    policy_service: PolicyService
    policy_repo: PolicyRepository
    ledger_repo: LedgerRepository
    audit_repo: AuditRepository


def build_container(config_path: Path | None = None) -> ServiceContainer:
    """Build dependencies, initialize schema and prune expired audit logs."""
    config = load_config(config_path)
    configure_logging(config.logging)
    ensure_runtime_keys(config.database.path)
    crypto = CryptoService.from_base64_key(get_required_env(config.encryption.key_env))

    pool = ThreadLocalConnection(config)
    initialize_schema(pool)

    audit_repo = AuditRepository(pool)
    removed = audit_repo.cleanup_old_logs(config.logging.retention_days)
    if removed:
        logger.info("Cleaned %s audit logs older than %s days", removed, config.logging.retention_days)

    policy_repo = PolicyRepository(pool, crypto)
    ledger_repo = LedgerRepository(pool)
    clock = SystemClock()
    id_generator = UuidIdGenerator()

    policy_service = PolicyService(
        store=policy_repo,
        id_generator=id_generator,
        payment_processor=LedgerPaymentProcessor(ledger_repo, id_generator),
        loan_service=LedgerLoanDisbursement(ledger_repo, id_generator, clock),
        clock=clock,
        rules=config.rules,
        audit_repo=audit_repo,
    )
    return ServiceContainer(
        config=config,
        policy_service=policy_service,
        policy_repo=policy_repo,
        ledger_repo=ledger_repo,
        audit_repo=audit_repo,
    )
