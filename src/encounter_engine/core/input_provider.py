"""Boundary through which human decisions reach the engine.

Whenever a player-controlled actor must decide something (react to an
attack, pick a combat action, pick an item) the engine awaits an
InputProvider. The engine never assumes a transport: a terminal, a web
socket or a test script can all sit behind this contract.

InteractiveInputProvider is the implementation a UI layer drives: the
engine's request becomes a pending ChoiceRequest, the UI is notified through
``on_choice_request`` and answers with :meth:`resolve_choice` or
:meth:`cancel_choice`.

Contract:
    - At most one request is outstanding per provider.
    - A request may carry a timeout; on expiry it fails, it never resolves.
    - With no UI handler registered the request fails immediately.
"""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable
from uuid import uuid4

from encounter_engine.core.exceptions import (
    ChoiceAlreadyPendingError,
    ChoiceCancelledError,
    ChoiceTimeoutError,
    ProviderUnavailableError,
    ValidationError,
)
from encounter_engine.core.logging import get_logger


logger = get_logger(__name__)


class ChoiceContextType(StrEnum):
    """Situation in which a decision is requested."""

    COMBAT_REACTION = "combat_reaction"
    ADVENTURE_DECISION = "adventure_decision"
    CAMP_ACTION = "camp_action"


@dataclass(frozen=True)
class ChoiceOption:
    """One selectable option.

    Attributes:
        id: Value returned when the option is picked.
        label: Text shown to the player.
    """

    id: str
    label: str


@dataclass(frozen=True)
class ChoiceContext:
    """Who is deciding and why.

    Attributes:
        actor_name: Name of the acting character.
        kind: Situation in which the decision is requested.
        metadata: Extra information for the UI (e.g. the attacker's name).
    """

    actor_name: str
    kind: ChoiceContextType
    metadata: dict[str, Any] = field(default_factory=dict)


CONFIRM_YES = "yes"
CONFIRM_NO = "no"


class InputProvider(ABC):
    """Source of decisions for player-controlled actors."""

    @abstractmethod
    async def request_choice(
        self,
        title: str,
        options: Sequence[ChoiceOption],
        context: ChoiceContext,
        *,
        timeout: float | None = None,
    ) -> str:
        """Ask for one option out of ``options``.

        Args:
            title: Prompt shown to the player.
            options: Selectable options.
            context: Who is deciding and why.
            timeout: Seconds to wait before failing, or None.

        Returns:
            The ``id`` of the selected option.

        Raises:
            InputProviderError: If the request cannot be answered.
        """

    @abstractmethod
    async def request_confirmation(
        self,
        message: str,
        *,
        timeout: float | None = None,
    ) -> bool:
        """Ask a yes/no question.

        Args:
            message: Question shown to the player.
            timeout: Seconds to wait before failing, or None.

        Returns:
            True for yes, False for no.

        Raises:
            InputProviderError: If the request cannot be answered.
        """


@dataclass
class ChoiceRequest:
    """A decision the engine is waiting on.

    Attributes:
        request_id: Unique identifier of the request.
        title: Prompt shown to the player.
        options: Selectable options.
        context: Who is deciding and why.
        deadline: Monotonic time after which the request fails, if any.
    """

    request_id: str
    title: str
    options: tuple[ChoiceOption, ...]
    context: ChoiceContext
    deadline: float | None = None
    _future: asyncio.Future[str] | None = field(default=None, repr=False)

    def option_ids(self) -> list[str]:
        """Return the ids of the offered options."""
        return [option.id for option in self.options]


ChoiceHandler = Callable[[ChoiceRequest], None]


class InteractiveInputProvider(InputProvider):
    """Input provider answered asynchronously by a UI layer.

    Attributes:
        on_choice_request: UI callback notified of every new request.
        default_timeout: Timeout used when a request does not specify one.
    """

    def __init__(
        self,
        *,
        on_choice_request: ChoiceHandler | None = None,
        default_timeout: float | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            on_choice_request: UI callback notified of every new request.
            default_timeout: Timeout used when a request does not specify one.
        """
        self.on_choice_request = on_choice_request
        self.default_timeout = default_timeout
        self._pending: ChoiceRequest | None = None

    @property
    def pending(self) -> ChoiceRequest | None:
        """The outstanding request, if any."""
        return self._pending

    @property
    def has_pending(self) -> bool:
        """Whether a request is waiting for an answer."""
        return self._pending is not None

    async def request_choice(
        self,
        title: str,
        options: Sequence[ChoiceOption],
        context: ChoiceContext,
        *,
        timeout: float | None = None,
    ) -> str:
        """Publish a request to the UI and wait for its answer.

        Raises:
            ChoiceAlreadyPendingError: If another request is outstanding.
            ProviderUnavailableError: If no UI handler is registered.
            ChoiceTimeoutError: If the deadline passes first.
            ChoiceCancelledError: If the UI cancels the request.
            ValidationError: If ``options`` is empty.
        """
        if self._pending is not None:
            logger.warning(
                "Choice requested while another is pending",
                pending_id=self._pending.request_id,
                title=title,
            )
            raise ChoiceAlreadyPendingError(
                "Another choice request is already pending",
                request_id=self._pending.request_id,
            )
        if not options:
            raise ValidationError("A choice needs at least one option", field_name="options")
        if self.on_choice_request is None:
            raise ProviderUnavailableError("No UI handler registered for choice requests")

        effective_timeout = timeout if timeout is not None else self.default_timeout
        loop = asyncio.get_running_loop()
        request = ChoiceRequest(
            request_id=uuid4().hex,
            title=title,
            options=tuple(options),
            context=context,
            deadline=(
                time.monotonic() + effective_timeout if effective_timeout is not None else None
            ),
            _future=loop.create_future(),
        )
        self._pending = request
        logger.debug(
            "Choice requested",
            request_id=request.request_id,
            actor=context.actor_name,
            kind=context.kind,
            options=request.option_ids(),
        )

        try:
            self.on_choice_request(request)
            if effective_timeout is None:
                return await request._future
            return await asyncio.wait_for(request._future, effective_timeout)
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Choice request timed out",
                request_id=request.request_id,
                timeout=effective_timeout,
            )
            raise ChoiceTimeoutError(
                "Choice request timed out",
                timeout_seconds=effective_timeout,
                request_id=request.request_id,
            ) from exc
        finally:
            if self._pending is request:
                self._pending = None

    async def request_confirmation(
        self,
        message: str,
        *,
        timeout: float | None = None,
    ) -> bool:
        """Ask a yes/no question as a two-option choice."""
        selected = await self.request_choice(
            message,
            [ChoiceOption(CONFIRM_YES, "Yes"), ChoiceOption(CONFIRM_NO, "No")],
            ChoiceContext(actor_name="", kind=ChoiceContextType.ADVENTURE_DECISION),
            timeout=timeout,
        )
        return selected == CONFIRM_YES

    def resolve_choice(self, option_id: str) -> bool:
        """Answer the pending request.

        Args:
            option_id: Id of the selected option.

        Returns:
            True if a pending request was resolved, False otherwise.
        """
        request = self._pending
        if request is None or request._future is None or request._future.done():
            logger.warning("No pending choice to resolve", option_id=option_id)
            return False
        if option_id not in request.option_ids():
            logger.warning(
                "Invalid choice for pending request",
                request_id=request.request_id,
                option_id=option_id,
                options=request.option_ids(),
            )
            return False

        request._future.set_result(option_id)
        logger.debug("Choice resolved", request_id=request.request_id, option_id=option_id)
        return True

    def cancel_choice(self, reason: str = "User cancelled") -> bool:
        """Fail the pending request.

        Args:
            reason: Explanation attached to the ChoiceCancelledError.

        Returns:
            True if a pending request was cancelled, False if none was pending.
        """
        request = self._pending
        if request is None or request._future is None or request._future.done():
            return False

        request._future.set_exception(
            ChoiceCancelledError(reason, request_id=request.request_id)
        )
        logger.info("Choice cancelled", request_id=request.request_id, reason=reason)
        return True


__all__ = [
    "ChoiceContextType",
    "ChoiceOption",
    "ChoiceContext",
    "ChoiceRequest",
    "ChoiceHandler",
    "InputProvider",
    "InteractiveInputProvider",
    "CONFIRM_YES",
    "CONFIRM_NO",
]
