"""
Pydantic models for the material derived from the home page.
"""

from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


class KeyMaterial(BaseModel):
    """Site verification key, as text and as decoded bytes."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Base64 key from the verification meta tag")
    key_bytes: Tuple[int, ...] = Field(..., description="Decoded key bytes")

    @field_validator("key_bytes")
    @classmethod
    def validate_key_bytes(cls, v):
        """Every entry must fit in an unsigned byte."""
        if any(byte < 0 or byte > 255 for byte in v):
            raise ValueError("key bytes must be in range 0-255")
        return v


class IndexSet(BaseModel):
    """Indices read from the on-demand script."""

    model_config = ConfigDict(frozen=True)

    row_index: int
    key_byte_indices: Tuple[int, ...]

    @field_validator("key_byte_indices")
    @classmethod
    def validate_indices(cls, v):
        """Derivation cannot proceed without key byte indices."""
        if not v:
            raise ValueError("key_byte_indices cannot be empty")
        return v
