"""
Session manager: derives the transaction session once and signs requests with it.

Initialization fetches the home page and the on-demand script. Concurrent
callers share one in-flight initialization; after that, token generation is
a pure computation over the frozen session.
"""

import time
import asyncio
from typing import Mapping, Optional

from transaction.config    import TransactionConfig
from transaction.dom       import Element, parse
from transaction.extractor import ON_DEMAND_FILE_URL, get_indices, get_key, get_key_bytes
from transaction.models    import IndexSet, KeyMaterial
from transaction.signature import get_animation_key, generate_transaction_id
from session_manager.models import TransactionSession
from api.fetch_client import FetchClient, handle_x_migration
from observability import get_logger, metrics

logger = get_logger(__name__)


def create_session(document: Element, indices: IndexSet) -> TransactionSession:
    """
    Build a session from an already parsed home page and its indices.

    Raises:
        MissingKeyError, FrameIndexError, InvalidFrameError, IndicesNotFoundError
    """
    key = get_key(document)
    key_bytes = get_key_bytes(key)
    animation_key = get_animation_key(key_bytes, indices, document)

    return TransactionSession(
        key_material=KeyMaterial(key=key, key_bytes=tuple(key_bytes)),
        indices=indices,
        animation_key=animation_key,
    )


async def derive_session(
    html: str,
    fetch,
    headers: Optional[Mapping[str, str]] = None,
    url_template: str = ON_DEMAND_FILE_URL
) -> TransactionSession:
    """Parse the home page, fetch its on-demand script and build the session."""
    document = parse(html)
    indices = await get_indices(document, fetch, headers, url_template)
    return create_session(document, indices)


class SessionManager:
    """Owns the transaction session for one client."""

    def __init__(
        self,
        config: Optional[TransactionConfig] = None,
        fetch=None
    ):
        """
        Initialize session manager.

        Args:
            config: Client configuration (loaded from the environment if omitted)
            fetch: Coroutine ``fetch(method, url, headers, data=None)``; a
                   dedicated FetchClient is created when omitted so that
                   initialization cookies stay out of the caller's jar
        """
        self.config = config or TransactionConfig.load()

        self._client: Optional[FetchClient] = None
        if fetch is None:
            self._client = FetchClient.from_config(self.config)
            fetch = self._client.fetch
        self.fetch = fetch

        self.lock = asyncio.Lock()
        self._session: Optional[TransactionSession] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def session(self) -> Optional[TransactionSession]:
        return self._session

    @property
    def is_initialized(self) -> bool:
        return self._session is not None

    async def initialize(self) -> TransactionSession:
        """
        Return the session, deriving it on first use.

        Concurrent callers await the same initialization. A failure reaches
        every waiter and leaves the manager uninitialized, so the next call
        starts over with fresh fetches.
        """
        if self._session is not None:
            return self._session

        async with self.lock:
            if self._session is not None:
                return self._session
            if self._pending is None:
                self._pending = asyncio.create_task(self._derive())
                self._pending.add_done_callback(self._derived)
            pending = self._pending

        return await asyncio.shield(pending)

    def _derived(self, task: asyncio.Task) -> None:
        # Runs before any waiter resumes, even when every waiter was cancelled
        if self._pending is task:
            self._pending = None
        if task.cancelled() or task.exception() is not None:
            return
        self._session = task.result()

    async def _derive(self) -> TransactionSession:
        start = time.time()
        logger.info("Initializing transaction session")

        headers = self.config.init_headers()
        try:
            html = await handle_x_migration(
                self.fetch,
                headers,
                home_url=self.config.home_url,
                migrate_url=self.config.migrate_url,
            )
            session = await derive_session(html, self.fetch, headers, self.config.ondemand_url)
        except Exception as e:
            duration = time.time() - start
            metrics.record_initialization(type(e).__name__, duration)
            metrics.record_error(type(e).__name__)
            logger.error(f"Session initialization failed: {type(e).__name__}: {e}")
            raise

        duration = time.time() - start
        metrics.record_initialization("success", duration)
        logger.info(
            f"Transaction session ready in {duration:.2f}s",
            extra={
                "duration_seconds": round(duration, 3),
                "row_index": session.indices.row_index,
                "key_byte_indices": list(session.indices.key_byte_indices),
            }
        )
        return session

    def invalidate(self) -> None:
        """Drop the cached session; the next call derives a new one."""
        if self._session is not None:
            logger.info("Transaction session invalidated")
        self._session = None

    async def generate_transaction_id(
        self,
        method: str,
        path: str,
        time_now: Optional[int] = None,
        random_byte: Optional[int] = None
    ) -> str:
        """Initialize if needed, then sign ``method`` and ``path``."""
        session = await self.initialize()
        return generate_transaction_id(
            method,
            path,
            session,
            time_now=time_now,
            random_byte=random_byte,
        )

    async def close(self) -> None:
        """Close the fetch client this manager created, if any."""
        if self._client is not None:
            await self._client.close()
