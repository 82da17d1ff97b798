"""
Click command definitions for the nanogen CLI.

This module contains the Click command group and all CLI commands
(generate, ui).
"""

import os
import time
from pathlib import Path

import click

from nanogen import (
    AspectRatio,
    Config,
    GenerationResult,
    ValidationError,
    __version__,
    generate_or_edit,
    load_source_image,
)
from nanogen.cli import progress
from nanogen.cli.handlers import run_with_error_handling
from nanogen.cli.utils import default_output_path
from nanogen.logging_config import configure_logging, get_verbosity_from_env

_SUFFIX_MIME = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}


def _write_output(result: GenerationResult, out: Path | None) -> Path:
    """Write result to out (re-encoding when the suffix does not match), or to nanogen-<ms>.png."""
    if out is None:
        out = Path(default_output_path(result.timestamp))
    out.parent.mkdir(parents=True, exist_ok=True)
    if _SUFFIX_MIME.get(out.suffix.lower()) == result.mime_type:
        out.write_bytes(result.image_data)
    else:
        image = result.image
        if out.suffix.lower() in (".jpg", ".jpeg") and image.mode != "RGB":
            image = image.convert("RGB")
        image.save(str(out))
    return out


@click.group(help=f"Generate and edit images with the Gemini image model.\n\nVersion: {__version__}")
@click.version_option(version=__version__, package_name="nanogen")
@click.pass_context
def cli(ctx: click.Context) -> None:
    ctx.color = True


@cli.command()
@click.option("--prompt", "-p", required=True, help="Text description of the image (or the edit).")
@click.option(
    "--reference",
    "-r",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Image to edit. Without it a new image is generated.",
)
@click.option(
    "--aspect-ratio",
    "-a",
    type=click.Choice([r.value for r in AspectRatio]),
    default=AspectRatio.SQUARE.value,
    show_default=True,
    help="Output aspect ratio (advisory when editing).",
)
@click.option("--model", "-m", help="Image model ID (default from config).")
@click.option("--out", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Output file path.")
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Minimize progress messages; only print result path or errors.",
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Increase log verbosity (-v prompts, -vv API calls and payloads).",
)
@click.option(
    "--debug-api",
    is_flag=True,
    help="Log request payload and response (image data truncated) for debugging.",
)
def generate(
    prompt: str,
    reference: Path | None,
    aspect_ratio: str,
    model: str | None,
    out: Path | None,
    quiet: bool,
    verbose_count: int,
    debug_api: bool,
) -> None:
    """Generate an image from a prompt, or edit --reference according to the prompt."""
    # CLI flags override NANOGEN_VERBOSITY
    verbose_level = min(verbose_count, 2) if verbose_count > 0 else get_verbosity_from_env()
    configure_logging(verbose_level=verbose_level, quiet=quiet)

    def do_generate() -> None:
        if not prompt.strip():
            raise ValidationError("Prompt cannot be empty", field="prompt")

        config = Config.from_env()
        if model:
            config.set_model(model)
        if debug_api:
            config.debug_api = True
        config.validate()

        source_image = load_source_image(reference) if reference is not None else None
        ratio = AspectRatio.parse(aspect_ratio)

        start_time = time.time()
        if not quiet:
            with progress.generation_progress(
                model=config.model,
                is_edit=source_image is not None,
                aspect_ratio=ratio.value,
            ):
                image_url = generate_or_edit(prompt, source_image, ratio, config=config)
        else:
            image_url = generate_or_edit(prompt, source_image, ratio, config=config)
        elapsed = time.time() - start_time

        result = GenerationResult(
            image_url=image_url, prompt=prompt, is_edit=source_image is not None
        )
        out_path = _write_output(result, out)

        if not quiet:
            progress.print_success_result(
                output_path=out_path,
                generation_time=elapsed,
                model_used=config.model,
                prompt_used=prompt,
                is_edit=result.is_edit,
                aspect_ratio=ratio.value,
            )
        # Path on stdout for scriptability
        click.echo(str(out_path))

    run_with_error_handling(do_generate, quiet=quiet)


@cli.command()
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    envvar="NANOGEN_UI_PORT",
    help="Port for the Gradio server (default: 7860 or NANOGEN_UI_PORT).",
)
@click.option(
    "--host",
    "host",
    type=str,
    default=None,
    envvar="NANOGEN_UI_HOST",
    help="Host to bind (default: 127.0.0.1 or NANOGEN_UI_HOST). Use 0.0.0.0 for LAN.",
)
@click.option(
    "--share",
    is_flag=True,
    default=None,
    help="Create a public share link (e.g. gradio.live).",
)
def ui(port: int | None, host: str | None, share: bool | None) -> None:
    """Launch the Gradio web UI."""
    configure_logging(get_verbosity_from_env())
    from nanogen.ui.gradio_app import launch as launch_ui

    share_val = share
    if share_val is None:
        env_share = os.environ.get("NANOGEN_UI_SHARE", "").lower()
        share_val = env_share in ("1", "true", "yes")
    launch_ui(server_name=host, server_port=port, share=share_val)
