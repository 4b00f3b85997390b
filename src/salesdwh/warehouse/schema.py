"""
Warehouse schema initialization.

Creates the raw, cleansed and curated namespaces and their tables if absent.
"""

from sqlalchemy import Engine, inspect
from sqlalchemy.schema import CreateSchema

from salesdwh.utils.logging import get_logger
from salesdwh.warehouse.tables import NAMESPACES, metadata, tables_in

log = get_logger(__name__)


class WarehouseNotInitializedError(RuntimeError):
    """Raised when a layer's tables are missing before it is loaded."""

    def __init__(self, namespace: str, missing: list[str]) -> None:
        self.namespace = namespace
        self.missing = missing
        message = (
            f"Warehouse namespace '{namespace}' is missing tables: "
            f"{', '.join(missing)}. Run 'salesdwh init' first."
        )
        super().__init__(message)


def missing_tables(engine: Engine, namespace: str) -> list[str]:
    """Names of the tables of a namespace that do not exist yet."""
    inspector = inspect(engine)
    return [
        table.name
        for table in tables_in(namespace)
        if not inspector.has_table(table.name, schema=namespace)
    ]


def initialize_warehouse(engine: Engine) -> dict[str, list[str]]:
    """
    Create all namespaces and tables that do not exist yet.

    Safe to call repeatedly; existing tables and their rows are untouched.

    Args:
        engine: Warehouse engine.

    Returns:
        Mapping of namespace to the table names created by this call.
    """
    log.info("Initializing warehouse", namespaces=list(NAMESPACES))

    if engine.dialect.name != "sqlite":
        # SQLite namespaces are attached databases, created on connect
        with engine.begin() as conn:
            for namespace in NAMESPACES:
                conn.execute(CreateSchema(namespace, if_not_exists=True))

    created = {namespace: missing_tables(engine, namespace) for namespace in NAMESPACES}
    metadata.create_all(engine, checkfirst=True)

    for namespace, names in created.items():
        if names:
            log.info("Created tables", namespace=namespace, tables=names)
        else:
            log.debug("Namespace already initialized", namespace=namespace)

    return created


def ensure_initialized(engine: Engine, namespace: str) -> None:
    """
    Check that every table of a namespace exists.

    Raises:
        WarehouseNotInitializedError: If any table is missing.
    """
    missing = missing_tables(engine, namespace)
    if missing:
        raise WarehouseNotInitializedError(namespace, missing)
