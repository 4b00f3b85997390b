"""
Warehouse engine creation.

A SQLite warehouse is one main database file plus one attached database per
layer, so that ``raw.crm_cust_info`` and ``cleansed.crm_cust_info`` are
addressed exactly like schema-qualified tables on a server database.
"""

from pathlib import Path

from sqlalchemy import Engine, create_engine, event, make_url

from salesdwh.config.settings import WarehouseConfig
from salesdwh.utils.logging import get_logger
from salesdwh.warehouse.tables import NAMESPACES

log = get_logger(__name__)


def namespace_files(directory: Path) -> dict[str, Path]:
    """Attached database file of each namespace for a SQLite warehouse."""
    return {namespace: directory / f"{namespace}.db" for namespace in NAMESPACES}


def create_warehouse_engine(config: WarehouseConfig) -> Engine:
    """
    Create the SQLAlchemy engine of the warehouse.

    For SQLite warehouses the namespace databases are attached on every new
    DBAPI connection. Attaching a missing file creates it, which is how the
    namespaces come into existence.

    Args:
        config: Warehouse configuration.

    Returns:
        SQLAlchemy engine.
    """
    if config.url is not None and not config.is_sqlite:
        log.info("Connecting to warehouse", url=config.url)
        return create_engine(config.url, echo=config.echo)

    if config.url is not None:
        # Attached namespace files sit next to the main database file
        url = config.url
        database = make_url(url).database
        if database and database != ":memory:":
            directory = Path(database).parent
        else:
            directory = config.directory
    else:
        directory = config.directory
        url = f"sqlite:///{directory / 'warehouse.db'}"

    directory.mkdir(parents=True, exist_ok=True)
    files = namespace_files(directory)

    engine = create_engine(url, echo=config.echo)

    @event.listens_for(engine, "connect")
    def _attach_namespaces(dbapi_connection, connection_record) -> None:  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        try:
            for namespace, path in files.items():
                cursor.execute(f"ATTACH DATABASE ? AS {namespace}", (str(path),))
        finally:
            cursor.close()

    log.info("Connecting to SQLite warehouse", directory=str(directory))
    return engine
