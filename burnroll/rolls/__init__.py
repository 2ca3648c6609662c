"""Roll orchestration: requests, base data, handlers and dispatch."""

# Types
from burnroll.rolls.types import (
    BaseRollData,
    RawNumber,
    RollCategory,
    RollReport,
    RollRequest,
    RollValidationError,
)

# Base data
from burnroll.rolls.base_data import (
    build_dice_sources,
    extract_base_data,
    parse_int,
    sum_checked_options,
)

# Handlers
from burnroll.rolls.handlers import (
    AttributeRollHandler,
    CirclesRollHandler,
    LearningRollHandler,
    RollAttempt,
    RollHandler,
    SkillRollHandler,
    StatRollHandler,
    TaxRollHandler,
)
from burnroll.rolls.dispatcher import RollDispatcher

__all__ = [
    # Types
    "BaseRollData",
    "RawNumber",
    "RollCategory",
    "RollReport",
    "RollRequest",
    "RollValidationError",
    # Base data
    "build_dice_sources",
    "extract_base_data",
    "parse_int",
    "sum_checked_options",
    # Handlers
    "AttributeRollHandler",
    "CirclesRollHandler",
    "LearningRollHandler",
    "RollAttempt",
    "RollHandler",
    "SkillRollHandler",
    "StatRollHandler",
    "TaxRollHandler",
    "RollDispatcher",
]
