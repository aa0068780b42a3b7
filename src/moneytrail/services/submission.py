"""Submission of transaction drafts and user feedback."""

from __future__ import annotations

import enum
import secrets
from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass, field
from threading import Lock
from typing import TYPE_CHECKING, Any, Callable, Hashable, Optional, Protocol

from flask import flash

from ..logging_config import get_logger
from .transactions import TransactionRequest

if TYPE_CHECKING:  # pragma: no cover
    from ..blueprints.transactions.forms import TransactionForm

logger = get_logger(__name__)

SUCCESS_MESSAGE = "Transaction created successfully"
GENERIC_FAILURE_MESSAGE = "Failed to create transaction!"
DEFAULT_LISTING_PATH = "/transactions"


class Notifier(Protocol):
    """Sink for transient user notifications."""

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class FlashNotifier:
    """Notifier backed by Flask's message flashing."""

    def success(self, message: str) -> None:
        flash(message, "success")

    def error(self, message: str) -> None:
        flash(message, "danger")


class SubmissionTokens:
    """One-time tokens handed out with each rendered form.

    A token is consumed by the first submission that presents it, so a
    double-clicked or replayed POST finds it gone. Each owner keeps at most
    ``max_per_owner`` outstanding tokens; the oldest are dropped first.
    """

    def __init__(self, max_per_owner: int = 20) -> None:
        self.max_per_owner = max_per_owner
        self._issued: dict[Hashable, OrderedDict[str, None]] = {}
        self._lock = Lock()

    def issue(self, owner: Hashable) -> str:
        token = secrets.token_urlsafe(16)
        with self._lock:
            tokens = self._issued.setdefault(owner, OrderedDict())
            tokens[token] = None
            while len(tokens) > self.max_per_owner:
                tokens.popitem(last=False)
        return token

    def consume(self, owner: Hashable, token: Optional[str]) -> bool:
        """Return True exactly once per issued token."""

        if not token:
            return False
        with self._lock:
            tokens = self._issued.get(owner)
            if tokens is None or token not in tokens:
                return False
            del tokens[token]
            return True


class SubmissionStatus(str, enum.Enum):
    CREATED = "created"
    REJECTED = "rejected"  # collaborator returned success=False with a message
    FAILED = "failed"  # malformed or message-less failure result
    ERRORED = "errored"  # collaborator raised
    INVALID = "invalid"
    BUSY = "busy"


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    status: SubmissionStatus
    message: Optional[str] = None
    errors: Mapping[str, list[str]] = field(default_factory=dict)
    transaction_id: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status is SubmissionStatus.CREATED


class SubmissionPipeline:
    """Validate a draft, hand it to the creation call and report the result.

    Only one submission runs at a time per pipeline; calls made while one is
    in flight return a ``BUSY`` outcome without touching the collaborator.
    ``claim`` extends that guard across requests: when it returns False the
    submission is treated as a duplicate and reported as ``BUSY`` too.
    Exceptions raised by the collaborator are logged and produce no
    notification.
    """

    def __init__(
        self,
        create_transaction: Callable[[TransactionRequest], Any],
        notifier: Notifier,
        revalidate: Callable[[str], Any],
        *,
        on_close: Optional[Callable[[], None]] = None,
        claim: Optional[Callable[[], bool]] = None,
        listing_path: str = DEFAULT_LISTING_PATH,
    ) -> None:
        self._create_transaction = create_transaction
        self.notifier = notifier
        self._revalidate = revalidate
        self._on_close = on_close
        self._claim = claim
        self.listing_path = listing_path
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def submit(self, form: TransactionForm) -> SubmissionOutcome:
        if self._in_progress:
            logger.warning("Ignoring transaction submission while another is in flight")
            return SubmissionOutcome(SubmissionStatus.BUSY)
        if self._claim is not None and not self._claim():
            logger.warning("Ignoring duplicate transaction submission")
            return SubmissionOutcome(SubmissionStatus.BUSY)

        result = form.validate()
        if not result.valid:
            return SubmissionOutcome(SubmissionStatus.INVALID, errors=result.errors)

        self._in_progress = True
        form.submitting = True
        try:
            response = self._create_transaction(form.to_request())
        except Exception:
            logger.exception("Error submitting transaction")
            outcome = SubmissionOutcome(SubmissionStatus.ERRORED)
        else:
            outcome = self._settle(response)
        finally:
            self._in_progress = False
            form.submitting = False
        return outcome

    def _settle(self, response: Any) -> SubmissionOutcome:
        if isinstance(response, Mapping) and response.get("success"):
            self.notifier.success(SUCCESS_MESSAGE)
            self._revalidate(self.listing_path)
            if self._on_close is not None:
                self._on_close()
            return SubmissionOutcome(
                SubmissionStatus.CREATED,
                message=SUCCESS_MESSAGE,
                transaction_id=response.get("id"),
            )

        error = response.get("error") if isinstance(response, Mapping) else None
        if error:
            self.notifier.error(str(error))
            return SubmissionOutcome(SubmissionStatus.REJECTED, message=str(error))

        logger.warning("Unexpected transaction creation result: %r", response)
        self.notifier.error(GENERIC_FAILURE_MESSAGE)
        return SubmissionOutcome(SubmissionStatus.FAILED, message=GENERIC_FAILURE_MESSAGE)
