"""
Submission boundary: runs the state machine around one adapter call.

Every failure of the adapter (or anything else) is turned into the error state
with a display message; nothing raised by the adapter escapes a submission.
"""

from collections.abc import Iterator

from nanogen.core.adapter import generate_or_edit
from nanogen.core.config import Config
from nanogen.core.providers import ImageTransport
from nanogen.core.state import (
    UNEXPECTED_ERROR_MESSAGE,
    Dismiss,
    Event,
    GenerationFailed,
    GenerationSucceeded,
    Snapshot,
    Submit,
    reduce,
)
from nanogen.core.types import GenerationResult
from nanogen.logging_config import get_logger
from nanogen.utils.exceptions import NanogenError, ValidationError

logger = get_logger(__name__)


def exception_to_message(exc: BaseException) -> str:
    """Map library and unknown exceptions to a short user-facing message."""
    if isinstance(exc, ValidationError):
        msg = exc.args[0] if exc.args else "Validation failed."
        if getattr(exc, "field", None):
            msg = f"{msg} (field: {exc.field})"
        return msg
    if isinstance(exc, NanogenError):
        return exc.args[0] if exc.args else "An error occurred."
    return str(exc) if exc.args and str(exc) else UNEXPECTED_ERROR_MESSAGE


def submit_stream(
    snapshot: Snapshot,
    *,
    config: Config | None = None,
    transport: ImageTransport | None = None,
) -> Iterator[Snapshot]:
    """
    Submit the snapshot's request; yield the loading snapshot, then the settled one.

    Yields nothing when the submission is rejected (empty prompt or already loading),
    so no request is sent.
    """
    loading = reduce(snapshot, Submit())
    if loading is snapshot:
        logger.debug("Submit ignored status=%s", snapshot.status.value)
        return
    logger.debug("Submission started edit=%s", loading.is_edit)
    yield loading

    try:
        image_url = generate_or_edit(
            loading.prompt,
            loading.source_image,
            loading.aspect_ratio,
            config=config,
            transport=transport,
        )
    except Exception as e:
        message = exception_to_message(e)
        logger.info("Submission failed: %s", message)
        yield reduce(loading, GenerationFailed(message))
        return

    result = GenerationResult(image_url=image_url, prompt=loading.prompt, is_edit=loading.is_edit)
    logger.debug("Submission succeeded")
    yield reduce(loading, GenerationSucceeded(result))


class Session:
    """Holds the single current Snapshot and drives submissions against it."""

    def __init__(
        self,
        config: Config | None = None,
        transport: ImageTransport | None = None,
        snapshot: Snapshot | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._snapshot = snapshot or Snapshot()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def dispatch(self, event: Event) -> Snapshot:
        """Apply an input event (prompt, image, ratio, dismiss) and return the new snapshot."""
        self._snapshot = reduce(self._snapshot, event)
        return self._snapshot

    def submit(self) -> Snapshot:
        """Run one submission to completion. A rejected submit leaves the snapshot untouched."""
        for snap in submit_stream(self._snapshot, config=self._config, transport=self._transport):
            self._snapshot = snap
        return self._snapshot

    def dismiss(self) -> Snapshot:
        return self.dispatch(Dismiss())
