"""
Submission state machine.

The UI state is an immutable Snapshot; reduce(snapshot, event) returns the next
snapshot and never performs I/O. Status lifecycle:

    idle|success|error --Submit--> loading --Succeeded--> success
                                           --Failed-----> error --Dismiss--> idle

Submit is ignored for an empty/whitespace prompt or while loading. Input edits
(prompt, source image, aspect ratio) are ignored while loading.
"""

from dataclasses import dataclass, replace
from enum import Enum

from nanogen.core.types import DEFAULT_ASPECT_RATIO, AspectRatio, GenerationResult


class SubmissionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SubmissionState:
    status: SubmissionStatus = SubmissionStatus.IDLE
    message: str | None = None  # set only when status is ERROR


@dataclass(frozen=True)
class Snapshot:
    """Everything the UI shows: inputs, submission state and the current result."""

    prompt: str = ""
    source_image: str | None = None  # data URI
    aspect_ratio: AspectRatio = DEFAULT_ASPECT_RATIO
    submission: SubmissionState = SubmissionState()
    result: GenerationResult | None = None

    @property
    def status(self) -> SubmissionStatus:
        return self.submission.status

    @property
    def is_loading(self) -> bool:
        return self.submission.status is SubmissionStatus.LOADING

    @property
    def is_edit(self) -> bool:
        return bool(self.source_image)

    @property
    def can_submit(self) -> bool:
        return bool(self.prompt.strip()) and not self.is_loading

    @property
    def inputs_enabled(self) -> bool:
        return not self.is_loading

    @property
    def visible_result(self) -> GenerationResult | None:
        """The result, but only while it is valid to display (status success)."""
        if self.submission.status is SubmissionStatus.SUCCESS:
            return self.result
        return None

    @property
    def mode_label(self) -> str:
        return "Edit Image" if self.is_edit else "Generate Image"

    @property
    def prompt_label(self) -> str:
        return "Editing Prompt" if self.is_edit else "Creation Prompt"

    @property
    def char_count_label(self) -> str:
        return f"{len(self.prompt)} chars"


# Events


@dataclass(frozen=True)
class PromptChanged:
    prompt: str


@dataclass(frozen=True)
class SourceImageSelected:
    data_url: str


@dataclass(frozen=True)
class SourceImageCleared:
    pass


@dataclass(frozen=True)
class AspectRatioChanged:
    aspect_ratio: AspectRatio


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class GenerationSucceeded:
    result: GenerationResult


@dataclass(frozen=True)
class GenerationFailed:
    message: str


@dataclass(frozen=True)
class Dismiss:
    pass


Event = (
    PromptChanged
    | SourceImageSelected
    | SourceImageCleared
    | AspectRatioChanged
    | Submit
    | GenerationSucceeded
    | GenerationFailed
    | Dismiss
)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


def reduce(snapshot: Snapshot, event: Event) -> Snapshot:
    """Return the snapshot that follows event. Events that do not apply return snapshot unchanged."""
    if isinstance(event, Submit):
        if not snapshot.can_submit:
            return snapshot
        return replace(
            snapshot,
            submission=SubmissionState(SubmissionStatus.LOADING),
            result=None,
        )

    if isinstance(event, GenerationSucceeded):
        if not snapshot.is_loading:
            return snapshot
        return replace(
            snapshot,
            submission=SubmissionState(SubmissionStatus.SUCCESS),
            result=event.result,
        )

    if isinstance(event, GenerationFailed):
        if not snapshot.is_loading:
            return snapshot
        return replace(
            snapshot,
            submission=SubmissionState(
                SubmissionStatus.ERROR, event.message or UNEXPECTED_ERROR_MESSAGE
            ),
            result=None,
        )

    if isinstance(event, Dismiss):
        if snapshot.status is not SubmissionStatus.ERROR:
            return snapshot
        return replace(snapshot, submission=SubmissionState())

    # Input edits; controls are disabled while loading
    if snapshot.is_loading:
        return snapshot
    if isinstance(event, PromptChanged):
        return replace(snapshot, prompt=event.prompt)
    if isinstance(event, SourceImageSelected):
        return replace(snapshot, source_image=event.data_url or None)
    if isinstance(event, SourceImageCleared):
        return replace(snapshot, source_image=None)
    if isinstance(event, AspectRatioChanged):
        return replace(snapshot, aspect_ratio=AspectRatio.parse(event.aspect_ratio))
    return snapshot


__all__ = [
    "AspectRatioChanged",
    "Dismiss",
    "Event",
    "GenerationFailed",
    "GenerationSucceeded",
    "PromptChanged",
    "Snapshot",
    "SourceImageCleared",
    "SourceImageSelected",
    "SubmissionState",
    "SubmissionStatus",
    "Submit",
    "reduce",
]
