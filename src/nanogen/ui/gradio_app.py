"""
Gradio web UI for nanogen.

Single-page UI: optional reference image, aspect ratio, prompt, generate or edit,
view/download the result (nanogen-<unix ms>.png).
The UI state is a nanogen Snapshot kept in gr.State; every handler maps
(inputs, snapshot) to a new snapshot through the reducer and renders it.
"""

import argparse
import atexit
import contextlib
import html
import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any, cast

import gradio as gr

from nanogen import (
    AspectRatio,
    Config,
    Snapshot,
    SubmissionStatus,
    ValidationError,
    __version__,
    exception_to_message,
    load_source_image,
    reduce,
    save_result,
    submit_stream,
)
from nanogen.core.state import (
    AspectRatioChanged,
    Dismiss,
    GenerationFailed,
    PromptChanged,
    SourceImageCleared,
    SourceImageSelected,
    Submit,
)
from nanogen.logging_config import configure_logging, get_logger, get_verbosity_from_env

logger = get_logger(__name__)

# Default server port; overridable via NANOGEN_UI_PORT
DEFAULT_UI_PORT = 7860
DEFAULT_UI_HOST = "127.0.0.1"

BASE_PAGE_TITLE = "NanoGen – Create & Edit"

ASPECT_RATIO_CHOICES = [
    ("Square (1:1)", AspectRatio.SQUARE.value),
    ("Portrait (3:4)", AspectRatio.PORTRAIT.value),
    ("Landscape (4:3)", AspectRatio.LANDSCAPE.value),
    ("Wide (16:9)", AspectRatio.WIDE.value),
    ("Tall (9:16)", AspectRatio.TALL.value),
]

PLACEHOLDER_CREATE = "e.g., A futuristic robot playing chess in a park, photorealistic, 8k..."
PLACEHOLDER_EDIT = "e.g., Make it look like a cyberpunk city, add neon lights..."

# Result PNGs we write for download; cleaned on process exit
_temp_paths: set[str] = set()


def _register_temp_path(path: str) -> None:
    _temp_paths.add(path)


def _cleanup_temp_paths() -> None:
    for path in _temp_paths:
        with contextlib.suppress(OSError):
            Path(path).unlink(missing_ok=True)


atexit.register(_cleanup_temp_paths)


def _format_status(message: str, status_type: str = "info") -> str:
    """
    Format a status message with color and icon.

    Args:
        message: The status message text.
        status_type: One of "info", "success", "error", "warning", "idle".

    Returns:
        HTML-formatted status string ("" for idle).
    """
    if status_type == "success":
        icon = "✅"
        color = "#10b981"
        bg_color = "#d1fae5"
    elif status_type == "error":
        icon = "❌"
        color = "#ef4444"
        bg_color = "#fee2e2"
    elif status_type == "warning":
        icon = "⚠️"
        color = "#f59e0b"
        bg_color = "#fef3c7"
    elif status_type == "info":
        icon = "ℹ️"
        color = "#6366f1"
        bg_color = "#e0e7ff"
    else:  # idle
        return ""

    return f"""<div style="padding: 12px 16px; border-radius: 8px; background-color: {bg_color}; border-left: 4px solid {color}; margin: 8px 0;">
    <span style="font-size: 16px; margin-right: 8px;">{icon}</span>
    <span style="color: {color}; font-weight: 500;">{message}</span>
</div>"""


def _status_html(snapshot: Snapshot) -> str:
    status = snapshot.status
    if status is SubmissionStatus.LOADING:
        return _format_status("Processing…", "info")
    if status is SubmissionStatus.ERROR:
        # Provider text is shown verbatim, never as markup
        message = html.escape(snapshot.submission.message or "")
        return _format_status(f"Generation Failed: {message}", "error")
    if status is SubmissionStatus.SUCCESS:
        return _format_status("Done.", "success")
    return _format_status("", "idle")


def _result_download_path(snapshot: Snapshot) -> str | None:
    """Write the visible result to a temp PNG for the download button; None if no result."""
    result = snapshot.visible_result
    if result is None:
        return None
    out_dir = Path(tempfile.gettempdir()) / "nanogen"
    path = str(save_result(result, out_dir))
    _register_temp_path(path)
    return path


def _render(snapshot: Snapshot) -> tuple[Any, ...]:
    """
    Map a snapshot to UI updates.

    Order matches _RENDER_OUTPUTS in _build_blocks: (state, status, output image,
    download button, dismiss button, generate button, prompt box, reference image,
    aspect ratio, char count).
    """
    enabled = snapshot.inputs_enabled
    download_path = _result_download_path(snapshot)
    if snapshot.is_loading:
        button_label = "Processing..."
    else:
        button_label = snapshot.mode_label
    return (
        snapshot,
        _status_html(snapshot),
        download_path,
        gr.update(value=download_path, visible=download_path is not None),
        gr.update(visible=snapshot.status is SubmissionStatus.ERROR),
        gr.update(value=button_label, interactive=snapshot.can_submit),
        gr.update(interactive=enabled, label=snapshot.prompt_label),
        gr.update(interactive=enabled),
        gr.update(interactive=enabled),
        snapshot.char_count_label,
    )


def _generate_click_handler(snapshot: Snapshot | None) -> Generator[tuple[Any, ...], None, None]:
    """Generate/Edit button: yield the loading render, then the settled one."""
    snapshot = snapshot or Snapshot()
    logger.debug("Generate clicked")
    if not snapshot.can_submit:
        rendered = list(_render(snapshot))
        if not snapshot.prompt.strip():
            rendered[1] = _format_status("Enter a prompt to generate.", "warning")
        yield tuple(rendered)
        return
    try:
        for snap in submit_stream(snapshot, config=Config.from_env()):
            snapshot = snap
            yield _render(snap)
    except Exception as e:
        # Config.from_env can fail before the state machine runs
        snapshot = reduce(reduce(snapshot, Submit()), GenerationFailed(exception_to_message(e)))
        yield _render(snapshot)


def _dismiss_click_handler(snapshot: Snapshot | None) -> tuple[Any, ...]:
    """Dismiss button: error -> idle."""
    return _render(reduce(snapshot or Snapshot(), Dismiss()))


def _prompt_change_handler(text: str, snapshot: Snapshot | None) -> tuple[Any, Any, str]:
    """Prompt edit: update state, enable the button only for a non-empty prompt, update char count."""
    snapshot = reduce(snapshot or Snapshot(), PromptChanged(text or ""))
    return snapshot, gr.update(interactive=snapshot.can_submit), snapshot.char_count_label


def _reference_source(value: Any) -> str | None:
    """Normalize a Gradio Image value (path str or dict with path/url) to a path or data URI."""
    if value is None:
        return None
    if isinstance(value, dict):
        for key in ("path", "url"):
            candidate = value.get(key)
            if isinstance(candidate, str) and candidate.strip():
                return candidate
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return str(value)


def _reference_change_handler(value: Any, snapshot: Snapshot | None) -> tuple[Any, ...]:
    """Reference image picked or removed: switch between generate and edit mode."""
    snapshot = snapshot or Snapshot()
    status = _format_status("", "idle")
    source = _reference_source(value)
    if source is None:
        snapshot = reduce(snapshot, SourceImageCleared())
    else:
        try:
            data_url = source if source.startswith("data:") else load_source_image(source)
            snapshot = reduce(snapshot, SourceImageSelected(data_url))
        except ValidationError as e:
            logger.info("Rejected reference image: %s", e)
            snapshot = reduce(snapshot, SourceImageCleared())
            status = _format_status(html.escape(exception_to_message(e)), "warning")
    placeholder = PLACEHOLDER_EDIT if snapshot.is_edit else PLACEHOLDER_CREATE
    return (
        snapshot,
        gr.update(label=snapshot.prompt_label, placeholder=placeholder),
        gr.update(value=snapshot.mode_label, interactive=snapshot.can_submit),
        status,
    )


def _aspect_ratio_change_handler(value: str, snapshot: Snapshot | None) -> Snapshot:
    return reduce(snapshot or Snapshot(), AspectRatioChanged(AspectRatio.parse(value)))


def _build_blocks() -> gr.Blocks:
    """Build the Gradio Blocks UI."""
    header_html = """
<div style="display: flex; align-items: center; gap: 16px; margin: 16px 0 24px 0; flex-wrap: wrap;">
    <h1 style="
        font-size: 2.2em;
        font-weight: 700;
        margin: 0;
        background: linear-gradient(135deg, #6366f1 0%, #9333ea 100%);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        background-clip: text;
    ">NanoGen</h1>
    <p style="font-size: 1.0em; color: #6b7280; margin: 0;">
        Generate visuals from text, or upload an image and use a prompt to edit it.
    </p>
</div>
"""

    initial = Snapshot()

    with gr.Blocks(title=BASE_PAGE_TITLE) as app:
        gr.HTML(header_html)
        snapshot_state = gr.State(value=initial)

        with gr.Row():
            with gr.Column(scale=5):
                ref_image = gr.Image(
                    label="Reference image (optional)",
                    type="filepath",
                    sources=["upload", "clipboard"],
                )
                aspect_radio = gr.Radio(
                    label="Aspect Ratio",
                    choices=ASPECT_RATIO_CHOICES,
                    value=initial.aspect_ratio.value,
                )
                prompt_tb = gr.Textbox(
                    label=initial.prompt_label,
                    placeholder=PLACEHOLDER_CREATE,
                    lines=5,
                    max_lines=12,
                )
                char_count_md = gr.Markdown(initial.char_count_label)
                generate_btn = gr.Button(initial.mode_label, variant="primary", interactive=False)
            with gr.Column(scale=7):
                status_html = gr.HTML(value="")
                out_image = gr.Image(label="Result", type="filepath", interactive=False, height=600)
                with gr.Row():
                    download_btn = gr.DownloadButton("Download Image", visible=False)
                    dismiss_btn = gr.Button("Dismiss", visible=False)

        _RENDER_OUTPUTS = [
            snapshot_state,
            status_html,
            out_image,
            download_btn,
            dismiss_btn,
            generate_btn,
            prompt_tb,
            ref_image,
            aspect_radio,
            char_count_md,
        ]

        prompt_tb.change(
            fn=_prompt_change_handler,
            inputs=[prompt_tb, snapshot_state],
            outputs=[snapshot_state, generate_btn, char_count_md],
        )
        ref_image.change(
            fn=_reference_change_handler,
            inputs=[ref_image, snapshot_state],
            outputs=[snapshot_state, prompt_tb, generate_btn, status_html],
        )
        aspect_radio.change(
            fn=_aspect_ratio_change_handler,
            inputs=[aspect_radio, snapshot_state],
            outputs=[snapshot_state],
        )
        # One in-flight request per page: the button is disabled while loading and
        # the event queue runs one submission at a time.
        generate_btn.click(
            fn=_generate_click_handler,
            inputs=[snapshot_state],
            outputs=_RENDER_OUTPUTS,
            concurrency_limit=1,
        )
        dismiss_btn.click(
            fn=_dismiss_click_handler,
            inputs=[snapshot_state],
            outputs=_RENDER_OUTPUTS,
        )

        gr.HTML(f"""
<div style="text-align: center; margin: 40px 0 20px 0; padding-top: 20px; border-top: 1px solid #e5e7eb;">
    <p style="font-size: 0.9em; color: #9ca3af; margin: 0;">nanogen v{__version__} · Powered by Gemini 2.5 Flash Image</p>
</div>
""")

    return cast(gr.Blocks, app)


def launch(
    server_name: str | None = None,
    server_port: int | None = None,
    share: bool = False,
) -> None:
    """
    Build the Gradio app and launch the server.

    Args:
        server_name: Host to bind (default: NANOGEN_UI_HOST or 127.0.0.1).
        server_port: Port (default: NANOGEN_UI_PORT or 7860).
        share: If True, create a public share link (e.g. gradio.live).
    """
    host = server_name or os.getenv("NANOGEN_UI_HOST", DEFAULT_UI_HOST)
    port = server_port
    if port is None:
        try:
            port = int(os.getenv("NANOGEN_UI_PORT", str(DEFAULT_UI_PORT)))
        except ValueError:
            port = DEFAULT_UI_PORT
    print(f"nanogen ui is starting (v{__version__}) on http://{host}:{port}...")
    app = _build_blocks()
    app.launch(server_name=host, server_port=port, share=share, inbrowser=True)


def main() -> None:
    """Entry point for the nanogen-ui console script. Parses --port, --host, --share."""
    parser = argparse.ArgumentParser(
        description="Launch the nanogen Gradio web UI.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        metavar="PORT",
        help=f"Port to bind (default: NANOGEN_UI_PORT or {DEFAULT_UI_PORT}).",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        metavar="HOST",
        help=f"Host to bind (default: NANOGEN_UI_HOST or {DEFAULT_UI_HOST}). Use 0.0.0.0 for LAN.",
    )
    parser.add_argument(
        "--share",
        action="store_true",
        default=None,
        help="Create a public share link (e.g. gradio.live). Overrides NANOGEN_UI_SHARE.",
    )
    args = parser.parse_args()
    share_val = args.share
    if share_val is None:
        env_share = os.environ.get("NANOGEN_UI_SHARE", "").lower()
        share_val = env_share in ("1", "true", "yes")
    configure_logging(get_verbosity_from_env())
    launch(
        server_name=args.host,
        server_port=args.port,
        share=share_val,
    )
