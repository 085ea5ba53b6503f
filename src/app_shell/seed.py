"""Apply the ``seed`` section of rules.yaml to the route and ledger stores."""

import logging

from src.domain.entities import BankEntry, Route
from src.ports.repo import LedgerRepoPort, RouteRepoPort
from src.rules.models import SeedRules

logger = logging.getLogger(__name__)


def apply_seed(
    seed: SeedRules,
    route_repo: RouteRepoPort,
    ledger_repo: LedgerRepoPort,
) -> tuple[int, int]:
    """
    Insert seed routes and bank entries that are not stored yet.

    Stored records are never overwritten, so a consumed seed entry stays
    consumed and a moved baseline stays moved.
    Returns (routes_created, entries_created).
    """
    routes_created = 0
    for seed_route in seed.routes:
        if route_repo.get_by_id(seed_route.id) is None:
            route_repo.save(Route(**seed_route.model_dump()))
            routes_created += 1

    entries_created = 0
    for seed_entry in seed.bank_entries:
        existing = {e.id for e in ledger_repo.get_entries(seed_entry.route_id)}
        if seed_entry.id in existing:
            continue
        ledger_repo.save_entry(BankEntry(**seed_entry.model_dump()))
        entries_created += 1

    logger.info("Seeded %d routes and %d bank entries", routes_created, entries_created)
    return routes_created, entries_created
