"""SQLAlchemy-backed character store.

Implements the CharacterStore protocol the roll engine talks to, plus the
authoring operations the CLI uses to build characters. Reads hand out
frozen snapshots; ORM rows never leave this module.
"""

import logging
from typing import Any

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError

from burnroll.database.models.character import (
    Character,
    CharacterRelationship,
    CharacterTrait,
    TraitModifier,
)
from burnroll.dice.types import Shade
from burnroll.managers.base import BaseManager
from burnroll.traits.ports import StoreWriteError
from burnroll.traits.types import (
    AdvancementRecord,
    CharacterCondition,
    ModifierTarget,
    Relationship,
    RollModifier,
    Trait,
    TraitKind,
)


logger = logging.getLogger(__name__)

# Trait columns the roll engine is allowed to change
UPDATABLE_TRAIT_FIELDS = frozenset(
    {"exponent", "learning", "routine", "difficult", "challenging", "learning_progress", "tax"}
)

# Columns that can never go below zero
NON_NEGATIVE_FIELDS = UPDATABLE_TRAIT_FIELDS - {"learning"}


def trait_snapshot(row: CharacterTrait) -> Trait:
    """Convert a trait row into a frozen Trait."""
    return Trait(
        key=row.trait_key,
        name=row.name,
        kind=row.kind,
        exponent=row.exponent,
        open=row.open_ended,
        shade=row.shade,
        aptitude=row.aptitude,
        root_traits=tuple(root for root in (row.root1, row.root2) if root),
        learning=row.learning,
        record=AdvancementRecord(
            routine=row.routine,
            difficult=row.difficult,
            challenging=row.challenging,
            learning_progress=row.learning_progress,
            tax=row.tax,
        ),
    )


def relationship_snapshot(row: CharacterRelationship) -> Relationship:
    """Convert a relationship row into a frozen Relationship."""
    return Relationship(
        key=row.relationship_key,
        name=row.name,
        building=row.building,
        building_progress=row.building_progress,
    )


class SqlCharacterStore(BaseManager):
    """Character store backed by a SQLAlchemy session.

    Every update commits on its own. A failed commit is rolled back and
    surfaces as StoreWriteError.
    """

    # ------------------------------------------------------------------
    # CharacterStore protocol
    # ------------------------------------------------------------------

    def get_condition(self, character_key: str) -> CharacterCondition | None:
        character = self._get_character(character_key)
        if character is None:
            return None
        return CharacterCondition(
            wound_dice=character.wound_dice,
            ob_penalty=character.ob_penalty,
        )

    def get_trait(self, character_key: str, trait_key: str) -> Trait | None:
        row = self._get_trait_row(character_key, trait_key)
        return trait_snapshot(row) if row else None

    def get_roll_modifiers(self, character_key: str, trait_key: str) -> list[RollModifier]:
        row = self._get_trait_row(character_key, trait_key)
        if row is None:
            return []
        return [
            RollModifier(
                name=modifier.name,
                amount=modifier.amount,
                target=modifier.target,
                optional=modifier.optional,
            )
            for modifier in sorted(row.modifiers, key=lambda m: m.id)
        ]

    def get_relationship(self, character_key: str, relationship_key: str) -> Relationship | None:
        row = self._get_relationship_row(character_key, relationship_key)
        return relationship_snapshot(row) if row else None

    def update_trait(self, character_key: str, trait_key: str, **changes: Any) -> Trait:
        """Apply field changes to a trait.

        Raises:
            StoreWriteError: If the trait is missing, a field is not
                updatable, a counter would go negative, or the commit fails.
        """
        unknown = set(changes) - UPDATABLE_TRAIT_FIELDS
        if unknown:
            raise StoreWriteError(f"Cannot update trait fields: {sorted(unknown)}")
        for name in NON_NEGATIVE_FIELDS & set(changes):
            if changes[name] < 0:
                raise StoreWriteError(f"{name} cannot be negative (got {changes[name]})")

        row = self._require_trait_row(character_key, trait_key)
        for name, value in changes.items():
            setattr(row, name, value)
        self._commit(f"update {character_key}/{trait_key}")
        self.db.refresh(row)
        return trait_snapshot(row)

    def update_tax(self, character_key: str, trait_key: str, tax: int) -> Trait:
        return self.update_trait(character_key, trait_key, tax=tax)

    def update_learning_progress(self, character_key: str, trait_key: str, progress: int) -> Trait:
        return self.update_trait(character_key, trait_key, learning_progress=progress)

    def update_relationship_progress(
        self, character_key: str, relationship_key: str, progress: int
    ) -> Relationship:
        row = self._get_relationship_row(character_key, relationship_key)
        if row is None:
            raise StoreWriteError(
                f"Character '{character_key}' has no relationship '{relationship_key}'"
            )
        row.building_progress = self._clamp(progress)
        self._commit(f"update relationship {character_key}/{relationship_key}")
        self.db.refresh(row)
        return relationship_snapshot(row)

    # ------------------------------------------------------------------
    # Authoring
    # ------------------------------------------------------------------

    def create_character(self, character_key: str, name: str | None = None) -> Character:
        """Create a character.

        Raises:
            ValueError: If the key is already taken.
        """
        if self._get_character(character_key) is not None:
            raise ValueError(f"Character '{character_key}' already exists")

        character = Character(character_key=character_key, name=name or character_key.title())
        self.db.add(character)
        self._commit(f"create character {character_key}")
        logger.info(f"Created character {character_key}")
        return character

    def get_character(self, character_key: str) -> Character | None:
        return self._get_character(character_key)

    def list_traits(self, character_key: str) -> list[Trait]:
        character = self._get_character(character_key)
        if character is None:
            return []
        return [trait_snapshot(row) for row in sorted(character.traits, key=lambda t: t.id)]

    def list_relationships(self, character_key: str) -> list[Relationship]:
        character = self._get_character(character_key)
        if character is None:
            return []
        return [
            relationship_snapshot(row)
            for row in sorted(character.relationships, key=lambda r: r.id)
        ]

    def add_trait(
        self,
        character_key: str,
        trait_key: str,
        name: str | None = None,
        kind: TraitKind = TraitKind.STAT,
        exponent: int = 0,
        shade: Shade = Shade.BLACK,
        open_ended: bool = False,
        aptitude: int | None = None,
        roots: tuple[str, ...] = (),
        learning: bool = False,
    ) -> Trait:
        """Add a trait to a character.

        Raises:
            ValueError: If the character is missing, the trait exists,
                or the trait definition is invalid.
        """
        character = self._require_character(character_key)
        if self._get_trait_row(character_key, trait_key) is not None:
            raise ValueError(f"Character '{character_key}' already has trait '{trait_key}'")
        if exponent < 0:
            raise ValueError(f"Exponent must be non-negative, got {exponent}")
        if len(roots) > 2:
            raise ValueError(f"A trait has at most two roots, got {roots}")

        row = CharacterTrait(
            character_id=character.id,
            trait_key=trait_key,
            name=name or trait_key.replace("_", " ").title(),
            kind=kind,
            exponent=exponent,
            shade=shade,
            open_ended=open_ended,
            aptitude=aptitude,
            root1=roots[0] if len(roots) > 0 else None,
            root2=roots[1] if len(roots) > 1 else None,
            learning=learning,
        )
        self.db.add(row)
        self._commit(f"add trait {character_key}/{trait_key}")
        self.db.refresh(row)
        return trait_snapshot(row)

    def add_relationship(
        self,
        character_key: str,
        relationship_key: str,
        name: str | None = None,
        building: bool = False,
    ) -> Relationship:
        character = self._require_character(character_key)
        if self._get_relationship_row(character_key, relationship_key) is not None:
            raise ValueError(
                f"Character '{character_key}' already has relationship '{relationship_key}'"
            )

        row = CharacterRelationship(
            character_id=character.id,
            relationship_key=relationship_key,
            name=name or relationship_key.replace("_", " ").title(),
            building=building,
        )
        self.db.add(row)
        self._commit(f"add relationship {character_key}/{relationship_key}")
        self.db.refresh(row)
        return relationship_snapshot(row)

    def add_modifier(
        self,
        character_key: str,
        trait_key: str,
        name: str,
        amount: int,
        target: ModifierTarget = ModifierTarget.DICE,
        optional: bool = False,
    ) -> RollModifier:
        row = self._get_trait_row(character_key, trait_key)
        if row is None:
            raise ValueError(f"Character '{character_key}' has no trait '{trait_key}'")

        self.db.add(
            TraitModifier(
                trait_id=row.id,
                name=name,
                amount=amount,
                target=target,
                optional=optional,
            )
        )
        self._commit(f"add modifier {name} to {character_key}/{trait_key}")
        return RollModifier(name=name, amount=amount, target=target, optional=optional)

    def set_condition(
        self,
        character_key: str,
        wound_dice: int | None = None,
        ob_penalty: int | None = None,
    ) -> CharacterCondition:
        """Set wound penalties. Omitted values are left unchanged."""
        character = self._require_character(character_key)
        if wound_dice is not None:
            character.wound_dice = self._clamp(wound_dice)
        if ob_penalty is not None:
            character.ob_penalty = self._clamp(ob_penalty)
        self._commit(f"set condition for {character_key}")
        return CharacterCondition(
            wound_dice=character.wound_dice,
            ob_penalty=character.ob_penalty,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Store write failed ({action}): {e}")
            raise StoreWriteError(f"Could not {action}") from e

    def _get_character(self, character_key: str) -> Character | None:
        return (
            self.db.query(Character)
            .filter(Character.character_key == character_key)
            .first()
        )

    def _require_character(self, character_key: str) -> Character:
        character = self._get_character(character_key)
        if character is None:
            raise ValueError(f"Character '{character_key}' not found")
        return character

    def _get_trait_row(self, character_key: str, trait_key: str) -> CharacterTrait | None:
        return (
            self.db.query(CharacterTrait)
            .join(Character, CharacterTrait.character_id == Character.id)
            .filter(
                and_(
                    Character.character_key == character_key,
                    CharacterTrait.trait_key == trait_key,
                )
            )
            .first()
        )

    def _require_trait_row(self, character_key: str, trait_key: str) -> CharacterTrait:
        row = self._get_trait_row(character_key, trait_key)
        if row is None:
            raise StoreWriteError(f"Character '{character_key}' has no trait '{trait_key}'")
        return row

    def _get_relationship_row(
        self, character_key: str, relationship_key: str
    ) -> CharacterRelationship | None:
        return (
            self.db.query(CharacterRelationship)
            .join(Character, CharacterRelationship.character_id == Character.id)
            .filter(
                and_(
                    Character.character_key == character_key,
                    CharacterRelationship.relationship_key == relationship_key,
                )
            )
            .first()
        )
