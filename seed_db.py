import os
import sys

# Add root to pythonpath
sys.path.append(os.getcwd())

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteLedgerRepo, SQLiteRouteRepo
from src.api.deps import Settings
from src.app_shell.seed import apply_seed
from src.rules.loader import load_rules


def seed():
    settings = Settings()
    os.makedirs(settings.data_dir, exist_ok=True)
    print(f"Seeding to {settings.db_path}")

    SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()

    rules = load_rules(settings.rules_path)
    routes_created, entries_created = apply_seed(
        rules.seed,
        SQLiteRouteRepo(settings.db_path),
        SQLiteLedgerRepo(settings.db_path),
    )
    print(f"Created {routes_created} routes and {entries_created} bank entries.")


if __name__ == "__main__":
    seed()
