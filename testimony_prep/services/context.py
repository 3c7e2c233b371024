"""Wires settings, storage and services together"""

from dataclasses import dataclass
from typing import Optional

from testimony_prep.db import KeyValueStore, MemoryStore, SQLiteStore
from testimony_prep.services.analysis import AnalysisClient
from testimony_prep.services.ingest import DocumentIngestPipeline
from testimony_prep.services.limits import LimitEvaluator
from testimony_prep.services.sessions import SessionStore
from testimony_prep.services.usage import UsageLedger
from testimony_prep.utils.config import Settings, get_settings
from testimony_prep.utils.llm import CompletionClient


@dataclass
class PrepContext:
    settings: Settings
    store: KeyValueStore
    tab_store: KeyValueStore
    ledger: UsageLedger
    evaluator: LimitEvaluator
    sessions: SessionStore
    ingest: DocumentIngestPipeline
    client: CompletionClient
    analysis: AnalysisClient


def build_context(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    client: Optional[CompletionClient] = None,
) -> PrepContext:
    """Build the service graph; defaults to the SQLite store at ``storage_path``"""
    settings = settings or get_settings()
    if store is None:
        store = SQLiteStore(settings.storage_path)

    ledger = UsageLedger(store, settings)
    evaluator = LimitEvaluator(ledger, settings)
    sessions = SessionStore(store)
    client = client or CompletionClient(settings)

    return PrepContext(
        settings=settings,
        store=store,
        tab_store=MemoryStore(),
        ledger=ledger,
        evaluator=evaluator,
        sessions=sessions,
        ingest=DocumentIngestPipeline(sessions, ledger, evaluator),
        client=client,
        analysis=AnalysisClient(client, settings),
    )
