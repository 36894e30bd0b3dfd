import logging
from typing import Optional

from .api import SentimentAnalyzerAPI
from .application.ports.kv_store import KeyValueStore
from .application.ports.scorer import Scorer
from .application.services.analysis_service import AnalysisService
from .application.services.export_service import CsvExporter
from .application.services.history_store import HistoryStore
from .config import Settings, settings as default_settings
from .infrastructure.persistence.memory_kv_store import InMemoryKeyValueStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT,
    )


def build_kv_store(settings: Settings) -> KeyValueStore:
    backend = settings.storage_backend_normalized
    if backend == "memory":
        logger.info("Using in-memory history storage")
        return InMemoryKeyValueStore()
    if backend == "sql":
        from .database import build_engine, create_db_and_tables
        from .infrastructure.persistence.sql.kv_store_sql import SqlKeyValueStore

        engine = build_engine(settings.DATABASE_URL)
        create_db_and_tables(engine)
        logger.info("Using SQL history storage")
        return SqlKeyValueStore(engine)
    if backend == "redis":
        from .infrastructure.persistence.redis_kv_store import RedisKeyValueStore

        if not settings.REDIS_URL:
            raise ValueError("REDIS_URL must be set when STORAGE_BACKEND is 'redis'")
        logger.info("Using Redis history storage")
        return RedisKeyValueStore(settings.REDIS_URL, prefix=settings.REDIS_PREFIX)
    raise ValueError(f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}'")


def build_scorer() -> Scorer:
    from .infrastructure.scoring.afinn_scorer import AfinnScorer

    return AfinnScorer()


def create_api(
    settings: Optional[Settings] = None,
    scorer: Optional[Scorer] = None,
    kv_store: Optional[KeyValueStore] = None,
) -> SentimentAnalyzerAPI:
    """Wire the analyzer together and load the saved history."""
    settings = settings or default_settings
    history_store = HistoryStore(
        kv_store=kv_store if kv_store is not None else build_kv_store(settings),
        storage_key=settings.HISTORY_STORAGE_KEY,
        limit=settings.HISTORY_LIMIT,
    )
    history_store.load()

    analysis_service = AnalysisService(
        scorer=scorer if scorer is not None else build_scorer(),
        history_store=history_store,
    )
    exporter = CsvExporter(
        date_format=settings.CSV_DATE_FORMAT,
        time_format=settings.CSV_TIME_FORMAT,
        filename_prefix=settings.EXPORT_FILENAME_PREFIX,
    )
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} ready")
    return SentimentAnalyzerAPI(
        analysis_service=analysis_service,
        history_store=history_store,
        exporter=exporter,
    )
