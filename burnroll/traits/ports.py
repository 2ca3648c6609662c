"""Collaborator protocols for the roll engine.

The engine reads characters from a CharacterStore and asks the player
questions through a PromptSurface. Both are supplied by the caller; see
``burnroll.managers.character_store`` and ``burnroll.cli.prompts`` for the
implementations shipped with the CLI.
"""

from typing import Any, Protocol, Sequence, runtime_checkable

from burnroll.traits.types import CharacterCondition, Relationship, RollModifier, Trait


class StoreWriteError(RuntimeError):
    """A store rejected an update. Nothing from that update was written."""

    pass


@runtime_checkable
class CharacterStore(Protocol):
    """Protocol for character storage.

    Reads return snapshots. Every update is applied wholesale or not at
    all; a rejected update raises StoreWriteError.
    """

    def get_condition(self, character_key: str) -> CharacterCondition | None:
        """Return wound penalties, or None if the character is unknown."""
        ...

    def get_trait(self, character_key: str, trait_key: str) -> Trait | None:
        """Return a trait snapshot, or None if it does not exist."""
        ...

    def get_roll_modifiers(self, character_key: str, trait_key: str) -> list[RollModifier]:
        """Return modifiers that can apply to rolls of this trait."""
        ...

    def get_relationship(self, character_key: str, relationship_key: str) -> Relationship | None:
        """Return a relationship snapshot, or None if it does not exist."""
        ...

    def update_trait(self, character_key: str, trait_key: str, **changes: Any) -> Trait:
        """Apply field changes to a trait and return the new snapshot.

        Accepted fields: exponent, learning, routine, difficult,
        challenging, learning_progress, tax.
        """
        ...

    def update_tax(self, character_key: str, trait_key: str, tax: int) -> Trait:
        """Set the tax carried by a stat."""
        ...

    def update_learning_progress(self, character_key: str, trait_key: str, progress: int) -> Trait:
        """Set the beginner's luck progress of a skill."""
        ...

    def update_relationship_progress(
        self, character_key: str, relationship_key: str, progress: int
    ) -> Relationship:
        """Set the building progress of a relationship."""
        ...


@runtime_checkable
class PromptSurface(Protocol):
    """Protocol for asking the player to confirm or choose.

    Calls block until answered. A dismissed prompt counts as "no".
    """

    def confirm(self, title: str, body: str) -> bool:
        """Ask a yes/no question."""
        ...

    def choose(self, title: str, options: Sequence[str]) -> str | None:
        """Ask the player to pick one option. None means dismissed."""
        ...
