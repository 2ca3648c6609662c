"""Character models: characters, their traits, relationships and modifiers."""

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from burnroll.database.models.base import Base, TimestampMixin
from burnroll.dice.types import Shade
from burnroll.traits.types import ModifierTarget, TraitKind


def _enum_values(enum_cls):
    return [e.value for e in enum_cls]


class Character(Base, TimestampMixin):
    """A player character or NPC that can make tests."""

    __tablename__ = "characters"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    character_key: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="Unique key (e.g., 'aldric')",
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Physical condition
    wound_dice: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Dice lost to wounds",
    )
    ob_penalty: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Obstacle added by wounds",
    )

    # Relationships
    traits: Mapped[list["CharacterTrait"]] = relationship(
        back_populates="character",
        cascade="all, delete-orphan",
    )
    relationships: Mapped[list["CharacterRelationship"]] = relationship(
        back_populates="character",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Character {self.character_key}>"


class CharacterTrait(Base, TimestampMixin):
    """A stat, skill or attribute with its advancement bookkeeping."""

    __tablename__ = "character_traits"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    character_id: Mapped[int] = mapped_column(
        ForeignKey("characters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Trait identity
    trait_key: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Key within the character (e.g., 'will', 'sword')",
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    kind: Mapped[TraitKind] = mapped_column(
        Enum(TraitKind, values_callable=_enum_values),
        default=TraitKind.STAT,
        nullable=False,
    )

    # Dice
    exponent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    open_ended: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    shade: Mapped[Shade] = mapped_column(
        Enum(Shade, values_callable=_enum_values),
        default=Shade.BLACK,
        nullable=False,
    )

    # Skill learning
    aptitude: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Tests needed to learn by beginner's luck",
    )
    root1: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Trait key of the first root stat",
    )
    root2: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Trait key of the second root stat",
    )
    learning: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Only usable through beginner's luck",
    )
    learning_progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Advancement
    routine: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    difficult: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    challenging: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    tax: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Dice lost to tax",
    )

    # Relationships
    character: Mapped["Character"] = relationship(back_populates="traits")
    modifiers: Mapped[list["TraitModifier"]] = relationship(
        back_populates="trait",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("character_id", "trait_key", name="uq_character_trait"),
    )

    def __repr__(self) -> str:
        return f"<CharacterTrait {self.trait_key} {self.shade.value}{self.exponent}>"


class TraitModifier(Base):
    """A standing modifier to rolls of one trait (gear, traits, conditions)."""

    __tablename__ = "trait_modifiers"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    trait_id: Mapped[int] = mapped_column(
        ForeignKey("character_traits.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    target: Mapped[ModifierTarget] = mapped_column(
        Enum(ModifierTarget, values_callable=_enum_values),
        default=ModifierTarget.DICE,
        nullable=False,
    )
    optional: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Applied only when the player selects it",
    )

    trait: Mapped["CharacterTrait"] = relationship(back_populates="modifiers")

    def __repr__(self) -> str:
        return f"<TraitModifier {self.name} {self.amount:+d} {self.target.value}>"


class CharacterRelationship(Base, TimestampMixin):
    """A relationship usable as a named contact on Circles tests."""

    __tablename__ = "character_relationships"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    character_id: Mapped[int] = mapped_column(
        ForeignKey("characters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    relationship_key: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    building: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Still being built through circles tests",
    )
    building_progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    character: Mapped["Character"] = relationship(back_populates="relationships")

    __table_args__ = (
        UniqueConstraint("character_id", "relationship_key", name="uq_character_relationship"),
    )

    def __repr__(self) -> str:
        return f"<CharacterRelationship {self.relationship_key}>"
