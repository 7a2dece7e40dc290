"""Controller driving the generation request lifecycle for one mode."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Any, Generic, TypeVar

from banana_studio.exceptions import (
    AlreadyInProgressError,
    AuthDialogError,
    AuthorizationRequiredError,
    StorageUnavailableError,
    ValidationError,
)
from banana_studio.interfaces import AuthorizationGate, RemoteGenerator, SessionObserver
from banana_studio.models import FailureKind, GenerationRecord, Phase, SessionState
from banana_studio.services.authorization import DIALOG_FAILED_MESSAGE
from banana_studio.services.failure_classifier import (
    DEFAULT_RULES,
    ClassificationRule,
    classify_failure,
)
from banana_studio.services.record_store import BoundedRecordStore

from .modes import GenerationMode

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "The result was generated but could not be saved to history."

P = TypeVar("P")
A = TypeVar("A")


def _new_record_id() -> str:
    return uuid.uuid4().hex


class GenerationSessionController(Generic[P, A]):
    """Drive one outstanding generation request at a time for a single mode.

    The controller owns the mode's SessionState. A request moves the state
    from IDLE to IN_FLIGHT and then to SUCCEEDED, FAILED or RATE_LIMITED
    when the remote call resolves. Successful results are written to the
    history store before SUCCEEDED is reported, so anyone observing
    SUCCEEDED can find the record in the history.

    Remote and storage failures never propagate out of the controller;
    they become state transitions or are logged. The only exceptions
    raised to callers are local rejections of a submit.
    """

    def __init__(
        self,
        mode: GenerationMode[P, A],
        store: BoundedRecordStore[P],
        generator: RemoteGenerator,
        gate: AuthorizationGate,
        observer: SessionObserver | None = None,
        interactive_reauth: bool = True,
        rules: Sequence[ClassificationRule] = DEFAULT_RULES,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = _new_record_id,
    ):
        """Initialize the controller.

        Args:
            mode: Generation mode (image or video)
            store: History store for this mode
            generator: Remote generation client
            gate: Authorization gate shared by all modes
            observer: Optional listener notified after every transition
            interactive_reauth: Allow prompting for a new key when the
                session expires (only if the gate is interactive)
            rules: Failure classification rules, evaluated in order
            clock: Source of record timestamps
            id_factory: Source of record IDs
        """
        self.mode = mode
        self.store = store
        self.generator = generator
        self.gate = gate
        self.observer = observer
        self.interactive_reauth = interactive_reauth
        self.rules = tuple(rules)
        self._clock = clock
        self._id_factory = id_factory
        self._last_created_at = 0.0
        self._timestamp_floor_loaded = False
        self._pending: asyncio.Future[SessionState[P]] | None = None
        self._state: SessionState[P] = SessionState(draft=mode.default_parameters())

    @property
    def mode_name(self) -> str:
        return self.mode.name

    def current_state(self) -> SessionState[P]:
        """Return a snapshot of the current session state."""
        return self._state.snapshot()

    def update_draft(self, **changes: Any) -> P:
        """Edit the draft parameters.

        The draft can be edited while a request is in flight; the running
        request keeps the parameters it was submitted with.

        Args:
            **changes: Parameter fields to change

        Returns:
            The new draft

        Raises:
            ValidationError: If a changed value is not supported
        """
        draft = replace(self._state.draft, **changes)  # type: ignore[type-var]
        self._state.draft = draft
        return draft

    async def submit(
        self, parameters: P | None = None, attachments: A | None = None
    ) -> SessionState[P]:
        """Submit a generation request and wait for it to resolve.

        Args:
            parameters: Parameters to generate with (defaults to the draft)
            attachments: Optional mode-specific inputs (reference images,
                first/last frames)

        Returns:
            Snapshot of the state after the request resolved, or the
            unchanged state if the prompt was empty

        Raises:
            AlreadyInProgressError: If a request is already in flight
            ValidationError: If the attachments belong to another mode
            AuthorizationRequiredError: If the session is not authorized
        """
        if self._state.phase is Phase.IN_FLIGHT:
            raise AlreadyInProgressError(f"A {self.mode_name} generation is already in progress")

        params = self._state.draft if parameters is None else parameters
        if not params.has_prompt:  # type: ignore[attr-defined]
            logger.debug(f"Ignoring {self.mode_name} submit with empty prompt")
            return self.current_state()

        if attachments is not None and not isinstance(attachments, self.mode.attachments_type):
            raise ValidationError(
                f"{self.mode_name.capitalize()} requests take "
                f"{self.mode.attachments_type.__name__}, got {type(attachments).__name__}"
            )

        if not self.gate.is_authorized():
            raise AuthorizationRequiredError("Select an API key before generating")

        # Set synchronously so a second submit on the same loop is rejected
        self._transition(
            phase=Phase.IN_FLIGHT,
            failure_kind=None,
            error_message=None,
            draft=params,
        )

        # The request runs in its own task so it still resolves and is
        # recorded if the caller stops waiting.
        self._pending = asyncio.ensure_future(self._run_request(params, attachments))
        return await asyncio.shield(self._pending)

    async def wait_until_resolved(self) -> SessionState[P]:
        """Wait for the outstanding request, if any, and return the state.

        Useful after the caller of ``submit`` was cancelled or timed out.
        """
        pending = self._pending
        if pending is not None and not pending.done():
            await asyncio.shield(pending)
        return self.current_state()

    def dismiss_error(self) -> SessionState[P]:
        """Return to IDLE from FAILED or RATE_LIMITED. No-op otherwise."""
        if self._state.phase in (Phase.FAILED, Phase.RATE_LIMITED):
            self._transition(phase=Phase.IDLE, failure_kind=None, error_message=None)
        return self.current_state()

    async def authorize(self) -> bool:
        """Request authorization from the gate.

        Returns:
            True if the gate granted authorization
        """
        try:
            await self.gate.request_authorization()
        except AuthDialogError as e:
            logger.warning(f"Authorization failed: {e}")
            if self._state.phase is not Phase.IN_FLIGHT:
                self._transition(
                    phase=Phase.FAILED,
                    failure_kind=FailureKind.GENERIC,
                    error_message=DIALOG_FAILED_MESSAGE,
                )
            return False
        self.gate.set_authorized(True)
        return True

    async def list_history(self) -> list[GenerationRecord[P]]:
        """Return the mode's history, newest first.

        Returns:
            Records sorted by creation time descending, or an empty list
            if the history cannot be read
        """
        try:
            records = await self.store.get_all()
        except StorageUnavailableError:
            logger.exception(f"Failed to load {self.mode_name} history")
            return []
        return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)

    async def delete_history_item(self, record_id: str) -> bool:
        """Delete one history record.

        Returns:
            True if the store accepted the delete (including missing IDs),
            False if the store could not be written
        """
        try:
            await self.store.delete(record_id)
        except StorageUnavailableError:
            logger.exception(f"Failed to delete {self.mode_name} history item {record_id}")
            return False
        return True

    async def clear_history(self) -> bool:
        """Delete all history records for this mode.

        Returns:
            True on success, False if the store could not be written
        """
        try:
            await self.store.clear()
        except StorageUnavailableError:
            logger.exception(f"Failed to clear {self.mode_name} history")
            return False
        return True

    async def restore_from_history(self, record_id: str) -> GenerationRecord[P] | None:
        """Load a past record's parameters and artifact into the session.

        Args:
            record_id: ID of the record to restore

        Returns:
            The restored record, or None if it is not in the history
        """
        for record in await self.list_history():
            if record.id == record_id:
                self._transition(
                    draft=record.parameters,
                    latest_artifact_reference=record.artifact_reference,
                    latest_record=record,
                )
                return record
        return None

    async def _run_request(self, params: P, attachments: A | None) -> SessionState[P]:
        try:
            try:
                artifact_reference = await self.mode.dispatch(self.generator, params, attachments)
            except Exception as e:
                await self._handle_failure(e)
            else:
                await self._commit_success(params, artifact_reference)
        except Exception:
            logger.exception(f"Unexpected error while finishing {self.mode_name} request")
        finally:
            # Never leave the session stuck in flight, even when cancelled
            if self._state.phase is Phase.IN_FLIGHT:
                self._transition(
                    phase=Phase.FAILED,
                    failure_kind=FailureKind.GENERIC,
                    error_message=self.mode.default_error_message,
                )
        return self.current_state()

    async def _commit_success(self, params: P, artifact_reference: str) -> None:
        await self._load_timestamp_floor()
        record = GenerationRecord(
            id=self._id_factory(),
            kind=self.mode_name,
            artifact_reference=artifact_reference,
            prompt_text=params.prompt,  # type: ignore[attr-defined]
            parameters=params,
            created_at=self._next_timestamp(),
        )

        try:
            await self.store.put(record)
        except Exception:
            # Storage errors and records the store cannot encode
            logger.exception(f"Failed to save {self.mode_name} history item {record.id}")
            self._transition(
                phase=Phase.FAILED,
                failure_kind=FailureKind.GENERIC,
                error_message=SAVE_FAILED_MESSAGE,
                latest_artifact_reference=artifact_reference,
            )
            return

        self._transition(
            phase=Phase.SUCCEEDED,
            latest_artifact_reference=artifact_reference,
            latest_record=record,
        )

    async def _handle_failure(self, error: Exception) -> None:
        classification = classify_failure(
            error, self.rules, default_message=self.mode.default_error_message
        )
        logger.warning(
            f"{self.mode_name.capitalize()} generation failed "
            f"({classification.kind.value}): {error}"
        )

        if classification.kind is FailureKind.RATE_LIMITED:
            self._transition(
                phase=Phase.RATE_LIMITED,
                failure_kind=None,
                error_message=classification.message,
            )
            return

        if classification.kind is FailureKind.AUTH_EXPIRED:
            self.gate.set_authorized(False)

        self._transition(
            phase=Phase.FAILED,
            failure_kind=classification.kind,
            error_message=classification.message,
        )

        if classification.kind is FailureKind.AUTH_EXPIRED:
            if self.interactive_reauth and self.gate.interactive:
                await self._reauthorize()

    async def _reauthorize(self) -> None:
        """Prompt for a new key; the failed request still needs a resubmit."""
        try:
            await self.gate.request_authorization()
        except AuthDialogError as e:
            logger.warning(f"Re-authorization failed: {e}")
            return
        self.gate.set_authorized(True)

    async def _load_timestamp_floor(self) -> None:
        """Start timestamps after the newest stored record, once per controller.

        Keeps new records sorting newest even if the wall clock went
        backwards since they were written.
        """
        if self._timestamp_floor_loaded:
            return
        try:
            newest = await self.store.newest_created_at()
        except StorageUnavailableError as e:
            logger.warning(f"Could not read newest {self.mode_name} history timestamp: {e}")
            return
        self._timestamp_floor_loaded = True
        if newest is not None:
            self._last_created_at = max(self._last_created_at, newest)

    def _next_timestamp(self) -> float:
        """Return a creation time strictly later than the previous record's."""
        created_at = max(self._clock(), self._last_created_at + 1e-6)
        self._last_created_at = created_at
        return created_at

    def _transition(self, **changes: Any) -> None:
        previous = self._state.phase
        for name, value in changes.items():
            setattr(self._state, name, value)
        if self._state.phase is not previous:
            logger.debug(
                f"{self.mode_name} session: {previous.value} -> {self._state.phase.value}"
            )
        if self.observer is not None:
            try:
                self.observer.on_state_changed(self.mode_name, self.current_state())
            except Exception:
                logger.exception("Session observer raised")
