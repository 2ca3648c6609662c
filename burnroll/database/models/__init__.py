"""Database models package."""

from burnroll.database.models.base import Base, TimestampMixin
from burnroll.database.models.character import (
    Character,
    CharacterRelationship,
    CharacterTrait,
    TraitModifier,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "Character",
    "CharacterRelationship",
    "CharacterTrait",
    "TraitModifier",
]
