"""Routes roll requests to the handler for their category."""

import logging
from typing import Callable

from burnroll.advancement.engine import AdvancementEngine
from burnroll.config import Settings, get_settings
from burnroll.rolls.handlers import HANDLERS, RollHandler
from burnroll.rolls.types import RollCategory, RollReport, RollRequest
from burnroll.traits.ports import CharacterStore, PromptSurface


logger = logging.getLogger(__name__)


class RollDispatcher:
    """Entry point for rolling any kind of test.

    Example:
        >>> dispatcher = RollDispatcher(store, prompts)
        >>> report = dispatcher.roll(RollRequest(RollCategory.SKILL, "aldric", "sword", difficulty=3))
    """

    def __init__(
        self,
        store: CharacterStore,
        prompts: PromptSurface,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.engine = AdvancementEngine(store, prompts, self.settings)
        self.handlers: dict[RollCategory, RollHandler] = {
            category: handler_cls(store, self.engine, self.settings)
            for category, handler_cls in HANDLERS.items()
        }

    def handler_for(self, category: RollCategory) -> RollHandler:
        return self.handlers[RollCategory(category)]

    def roll(
        self,
        request: RollRequest,
        on_resolved: Callable[[RollReport], None] | None = None,
    ) -> RollReport:
        """Run a roll attempt end to end.

        Args:
            request: Player input for the attempt.
            on_resolved: Called with the report after the dice are rolled
                and before advancement asks the player anything.

        Returns:
            The roll report, including what advancement recorded.

        Raises:
            RollValidationError: If the attempt is rejected. Nothing is
                rolled or written in that case.
        """
        handler = self.handler_for(request.category)
        logger.debug(f"Rolling {request.category.value} test for {request.character_key}")
        return handler.run(request, on_resolved)
