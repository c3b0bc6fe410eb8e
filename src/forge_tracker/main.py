"""Application wiring for the Forge tracker."""

from typing import Optional

from . import __version__
from .config import ForgeConfig, get_config
from .db.database import create_database_engine, create_session_factory, init_db
from .repositories.interfaces import KeyValueStore
from .repositories.sqlalchemy_impl import SQLAlchemyKeyValueStore
from .services.tracker import TickClock, TrackerService
from .session.controller import Clock, SessionController, utc_now
from .store.domain_store import DomainStore
from .utils.logging_config import get_logger

logger = get_logger("main")


def create_storage(config: ForgeConfig) -> SQLAlchemyKeyValueStore:
    """
    Open the configured database and return a key-value store over it.

    The returned store owns its engine; closing it releases the connection pool.
    """
    engine = create_database_engine(
        config.database.url,
        echo=config.database.echo,
        enable_query_logging=config.database.log_queries,
    )
    init_db(engine)
    session_factory = create_session_factory(engine)
    return SQLAlchemyKeyValueStore(session_factory(), engine=engine)


def create_tracker(
    config: Optional[ForgeConfig] = None,
    storage: Optional[KeyValueStore] = None,
    clock_source: Clock = utc_now,
) -> TrackerService:
    """
    Build a ready-to-use tracker.

    Args:
        config: Configuration; defaults to the loaded application config
        storage: Key-value store; defaults to the configured database
        clock_source: Wall clock sampled once, on the first read before any tick

    Returns:
        TrackerService with domains and selection already loaded
    """
    if config is None:
        config = get_config()
    if storage is None:
        storage = create_storage(config)

    store = DomainStore(
        storage,
        domains_key=config.storage.domains_key,
        selected_domain_key=config.storage.selected_domain_key,
        default_icon=config.storage.default_icon,
    )
    store.load()

    clock = TickClock(clock_source)
    controller = SessionController(store, clock)

    logger.info(f"{config.app.app_name} {__version__} ready")
    return TrackerService(store, controller, clock)
