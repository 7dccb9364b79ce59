# ai_router/cli.py
"""
CLI entry point for ai-router.

Available commands:
  ai-router providers [--config ai_router.yaml]
  ai-router ask PROMPT [--config ai_router.yaml] [--provider P] [--model M]
                       [--image FILE] [--stream] [--estimate]

Requires: pip install "ai-router[cli]"
"""

from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from enum import Enum
from pathlib import Path
from typing import Optional

try:
    import typer
    from rich.console import Console
    from rich.table import Table
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "CLI dependencies missing. Install with: pip install 'ai-router[cli]'"
    ) from exc

from pydantic import ValidationError

from .exceptions import AIRouterError
from .constants import DEFAULT_IMAGE_MIME_TYPE
from .models import CompletionRequest
from .router import AIRouter

app = typer.Typer(
    name="ai-router",
    help="AI provider routing with cross-provider fallback.",
    add_completion=False,
)
console = Console()


class ProviderOption(str, Enum):
    auto = "auto"
    anthropic = "anthropic"
    openai = "openai"
    gemini = "gemini"


def _load_router(config_path: Optional[str]) -> AIRouter:
    if config_path:
        return AIRouter.from_yaml(config_path)
    return AIRouter.from_env()


def _build_table(router: AIRouter) -> Table:
    """Render provider configuration as a Rich table."""
    table = Table(title="AI Router Providers", show_lines=True)
    table.add_column("Priority", justify="right")
    table.add_column("Provider", style="bold cyan", no_wrap=True)
    table.add_column("Configured")
    table.add_column("Default model")

    available = router.available_providers()
    for rank, name in enumerate(router.config.priority, start=1):
        configured = available.get(name, False)
        configured_str = "[green]yes ✓[/green]" if configured else "[red]no  ✗[/red]"
        model = router.config.provider(name).model or "(built-in)"
        table.add_row(str(rank), name, configured_str, model)

    return table


@app.command()
def providers(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to ai_router.yaml"),
) -> None:
    """Show which providers are configured and the fallback order."""
    router = _load_router(config)
    console.print(_build_table(router))
    console.print(f"Primary provider: [bold]{router.primary_provider_label()}[/bold]")


async def _ask(router: AIRouter, request: CompletionRequest, stream: bool) -> None:
    async with router:
        if stream:
            async for chunk in router.stream(request):
                console.print(chunk, end="", markup=False, highlight=False)
            console.print()
            return
        response = await router.complete(request)
        console.print(response.content, markup=False, highlight=False)
        console.print(
            f"[dim]{response.provider} · {response.model} · "
            f"{response.tokens.total} tokens · ${response.estimated_cost_usd:.6f} · "
            f"{response.attempts} attempt(s)[/dim]"
        )


def _image_data_url(path: Path) -> str:
    mime_type = mimetypes.guess_type(path.name)[0] or DEFAULT_IMAGE_MIME_TYPE
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Prompt text"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to ai_router.yaml"),
    provider: ProviderOption = typer.Option(ProviderOption.auto, "--provider", "-p", help="Provider for the first attempt"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model override"),
    system: Optional[str] = typer.Option(None, "--system", "-s", help="System prompt"),
    image: Optional[Path] = typer.Option(
        None, "--image", "-i", exists=True, dir_okay=False, help="Image file to attach (Gemini only)"
    ),
    stream: bool = typer.Option(False, "--stream", help="Stream the response"),
    estimate: bool = typer.Option(False, "--estimate", help="Print the estimated cost and exit"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log routing decisions"),
) -> None:
    """Send one prompt through the router."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        request = CompletionRequest(
            prompt=prompt,
            provider=provider.value,
            model=model,
            system_prompt=system,
            image=_image_data_url(image) if image else None,
        )
    except ValidationError as exc:
        raise typer.BadParameter(
            "; ".join(error["msg"] for error in exc.errors()), param_hint="PROMPT"
        ) from exc

    router = _load_router(config)
    if estimate:
        console.print(
            f"Selected provider: {router.select_provider(request)} · "
            f"estimated cost up to ${router.estimate_cost(request):.6f}"
        )
        return
    try:
        asyncio.run(_ask(router, request, stream))
    except AIRouterError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)
