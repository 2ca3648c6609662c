"""Trait data model and the store/prompt protocols."""

from burnroll.traits.ports import CharacterStore, PromptSurface, StoreWriteError
from burnroll.traits.types import (
    AdvancementRecord,
    CharacterCondition,
    ModifierTarget,
    Relationship,
    RollModifier,
    Trait,
    TraitKind,
)

__all__ = [
    "AdvancementRecord",
    "CharacterCondition",
    "CharacterStore",
    "ModifierTarget",
    "PromptSurface",
    "Relationship",
    "RollModifier",
    "StoreWriteError",
    "Trait",
    "TraitKind",
]
