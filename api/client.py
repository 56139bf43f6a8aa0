"""
Request client that stamps every call with an X-Client-Transaction-Id header.
"""

import uuid
from typing import Mapping, Optional
from urllib.parse import urlparse

from transaction.config import TransactionConfig
from session_manager import SessionManager
from api.fetch_client import FetchClient
from observability import get_logger, request_id_ctx

logger = get_logger(__name__)

TRANSACTION_HEADER = "X-Client-Transaction-Id"


class Client:
    """Signs outgoing requests with a transaction id derived once per session."""
    
    def __init__(
        self,
        config: Optional[TransactionConfig] = None,
        http: Optional[FetchClient] = None,
        session_manager: Optional[SessionManager] = None
    ):
        """
        Initialize the client.
        
        Args:
            config: Client configuration (loaded from the environment if omitted)
            http: Client used for the signed requests
            session_manager: Session owner; gets its own fetch client by default
        """
        self.config = config or TransactionConfig.load()
        self.http = http or FetchClient.from_config(self.config)
        self.session_manager = session_manager or SessionManager(self.config)
    
    async def transaction_id(self, method: str, url: str) -> str:
        """Transaction id for ``method`` on the path of ``url``."""
        return await self.session_manager.generate_transaction_id(method, urlparse(url).path)
    
    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        **kwargs
    ):
        """
        Send a signed request.
        
        Args:
            method: HTTP method
            url: Absolute URL; only its path is signed
            headers: Extra request headers
            **kwargs: Passed through to FetchClient.request
        
        Returns:
            The upstream response
        """
        request_headers = dict(headers or {})
        request_headers[TRANSACTION_HEADER] = await self.transaction_id(method, url)
        
        token = request_id_ctx.set(str(uuid.uuid4()))
        try:
            logger.debug(f"{method} {url}")
            return await self.http.request(method, url, headers=request_headers, **kwargs)
        finally:
            request_id_ctx.reset(token)
    
    async def close(self) -> None:
        await self.http.close()
        await self.session_manager.close()
