import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteLedgerRepo, SQLitePoolRepo, SQLiteRouteRepo
from src.api.deps import Settings
from src.app_shell.config import ConfigurationError, validate_ops_rules
from src.app_shell.seed import apply_seed
from src.components.banking import (
    ApplyBankedInput,
    BankingService,
    BankSurplusInput,
    GetBalanceInput,
    run_apply,
    run_bank,
    run_get_balance,
)
from src.components.pooling import (
    CreatePoolInput,
    ListPoolsInput,
    PoolingService,
    run_create,
    run_list as run_list_pools,
)
from src.components.routes import RouteService, run_compare, run_list
from src.domain.compliance import BalanceCalculator
from src.domain.errors import ComplianceError
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger("cli")


@dataclass
class CliContext:
    """Services wired against the SQLite store."""

    settings: Settings
    rules: Rules
    route_repo: SQLiteRouteRepo
    ledger_repo: SQLiteLedgerRepo
    routes: RouteService
    banking: BankingService
    pooling: PoolingService

    @classmethod
    def create(cls, settings: Settings, rules: Rules) -> "CliContext":
        route_repo = SQLiteRouteRepo(settings.db_path)
        ledger_repo = SQLiteLedgerRepo(settings.db_path)
        pool_repo = SQLitePoolRepo(settings.db_path)
        calculator = BalanceCalculator(
            target_intensity=rules.compliance.target_intensity,
            mj_per_tonne=rules.compliance.energy_mj_per_tonne,
        )
        return cls(
            settings=settings,
            rules=rules,
            route_repo=route_repo,
            ledger_repo=ledger_repo,
            routes=RouteService(route_repo, calculator),
            banking=BankingService(route_repo, ledger_repo, calculator),
            pooling=PoolingService(
                route_repo,
                pool_repo,
                calculator,
                min_members=rules.pooling.min_members,
            ),
        )


def get_context() -> CliContext:
    settings = Settings()
    if not settings.rules_path.exists():
        logger.error(f"Rules file {settings.rules_path} not found.")
        sys.exit(1)

    try:
        rules = load_rules(settings.rules_path)
        # The CLI always works against the SQLite file
        validate_ops_rules(rules, "sqlite")
    except (ConfigurationError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)
    return CliContext.create(settings, rules)


def handle_migrate(ctx: CliContext, args: argparse.Namespace) -> None:
    Path(ctx.settings.data_dir).mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(ctx.settings.db_path, ctx.settings.migrations_dir).run_migrations()
    print(f"Applied {len(applied)} migration(s).")


def handle_seed(ctx: CliContext, args: argparse.Namespace) -> None:
    routes_created, entries_created = apply_seed(ctx.rules.seed, ctx.route_repo, ctx.ledger_repo)
    print(f"Seeded {routes_created} route(s) and {entries_created} bank entr(y/ies).")


def handle_routes(ctx: CliContext, args: argparse.Namespace) -> None:
    result = run_list(ctx.routes)
    for view in result.routes:
        route = view.route
        marker = "*" if route.is_baseline else " "
        print(
            f"{marker} {route.id:<8} {route.vessel_type:<12} {route.fuel_type:<5} "
            f"{route.year} {route.ghg_intensity:>8.4f} CB={view.compliance_balance:,.2f}"
        )
    print(f"{result.total} route(s)")


def handle_compare(ctx: CliContext, args: argparse.Namespace) -> None:
    result = run_compare(ctx.routes)
    print(f"Target intensity: {result.target_intensity} gCO2e/MJ")
    for row in result.rows:
        status = "compliant" if row.is_compliant else "non-compliant"
        print(f"{row.route_id:<8} {row.ghg_intensity:>8.4f} {row.percent_diff:+.2f}% {status}")


def handle_balance(ctx: CliContext, args: argparse.Namespace) -> None:
    snapshot = run_get_balance(GetBalanceInput(route_id=args.route_id), ctx.banking)
    print(f"{snapshot.route_id} {snapshot.year}: {snapshot.balance:,.2f} ({snapshot.status})")


def handle_bank(ctx: CliContext, args: argparse.Namespace) -> None:
    result = run_bank(BankSurplusInput(route_id=args.route_id, amount=args.amount), ctx.banking)
    print(f"Banked {result.entry.amount:,.2f} as {result.entry.id}.")
    print(f"Available: {result.available_after:,.2f}")


def handle_apply(ctx: CliContext, args: argparse.Namespace) -> None:
    input_data = ApplyBankedInput(
        route_id=args.route_id,
        apply_year=args.apply_year,
        amount=args.amount,
    )
    result = run_apply(input_data, ctx.banking)
    print(
        f"Applied {result.consumed_total:,.2f} from {len(result.consumed)} entr(y/ies) "
        f"to {result.apply_year}."
    )
    print(f"Available: {result.available_after:,.2f}")


def handle_pool(ctx: CliContext, args: argparse.Namespace) -> None:
    input_data = CreatePoolInput(
        route_ids=tuple(args.route_ids),
        pool_name=args.name,
        year=args.year,
    )
    result = run_create(input_data, ctx.pooling)
    print(f"{result.message} ({result.pool_id})")
    for member in result.members:
        print(
            f"  {member.route_id:<8} {member.initial_cb:>18,.2f} -> "
            f"{member.adjusted_cb:>18,.2f} ({member.allocation_used:+,.2f})"
        )


def handle_pools(ctx: CliContext, args: argparse.Namespace) -> None:
    result = run_list_pools(ListPoolsInput(year=args.year), ctx.pooling)
    for pool in result.pools:
        members = ", ".join(m.route_id for m in pool.members)
        print(f"{pool.id} {pool.name} [{members}]")
    print(f"{result.total} pool(s)")


HANDLERS = {
    "migrate": handle_migrate,
    "seed": handle_seed,
    "routes": handle_routes,
    "compare": handle_compare,
    "balance": handle_balance,
    "bank": handle_bank,
    "apply": handle_apply,
    "pool": handle_pool,
    "pools": handle_pools,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="FuelEU compliance ledger CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply database migrations")
    subparsers.add_parser("seed", help="Insert seed routes and bank entries")
    subparsers.add_parser("routes", help="List routes")
    subparsers.add_parser("compare", help="Compare routes against the target intensity")

    balance_parser = subparsers.add_parser("balance", help="Show a route's compliance balance")
    balance_parser.add_argument("route_id")

    bank_parser = subparsers.add_parser("bank", help="Bank part of a route's surplus")
    bank_parser.add_argument("route_id")
    bank_parser.add_argument("amount", type=float)

    apply_parser = subparsers.add_parser("apply", help="Apply banked surplus to a year")
    apply_parser.add_argument("route_id")
    apply_parser.add_argument("apply_year", type=int)
    apply_parser.add_argument("amount", type=float)

    pool_parser = subparsers.add_parser("pool", help="Create a compliance pool")
    pool_parser.add_argument("--name", required=True, help="Pool name")
    pool_parser.add_argument("--year", required=True, type=int, help="Compliance year")
    pool_parser.add_argument("route_ids", nargs="+", help="Member route IDs")

    pools_parser = subparsers.add_parser("pools", help="List pools for a year")
    pools_parser.add_argument("--year", required=True, type=int)

    return parser


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)

    ctx = get_context()

    try:
        HANDLERS[args.command](ctx, args)
    except ComplianceError as e:
        logger.error(f"{e.code}: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
