"""
Pydantic models for transaction sessions.
"""

from datetime import datetime, timezone
from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field

from transaction.models import KeyMaterial, IndexSet


class TransactionSession(BaseModel):
    """Everything derived once per session; frozen after initialization."""
    
    model_config = ConfigDict(frozen=True)
    
    key_material: KeyMaterial
    indices: IndexSet
    animation_key: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    
    @property
    def key(self) -> str:
        return self.key_material.key
    
    @property
    def key_bytes(self) -> Tuple[int, ...]:
        return self.key_material.key_bytes
    
    @property
    def age_seconds(self) -> float:
        """Seconds since the session was derived."""
        return (datetime.now(timezone.utc) - self.created_at).total_seconds()
