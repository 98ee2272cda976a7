import argparse
import os
import sys
from rich.console import Console
from rich.panel import Panel
from rich.markdown import Markdown
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from transcript_formatter.config import settings
from transcript_formatter.core.errors import FormatterError
from transcript_formatter.services.formatter import DEFAULT_MODELS, TranscriptFormatter
from transcript_formatter.services.transcript_service import TranscriptService

console = Console()

def render_models(models):
    table = Table(title="Models", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="white")
    for m in models:
        table.add_row(m["id"], m["name"])
    console.print(table)

def save_output(video_id: str, transcript: str, formatted: str = None) -> str:
    output_dir = os.path.join(settings.OUTPUT_DIR, video_id)
    os.makedirs(output_dir, exist_ok=True)
    with open(os.path.join(output_dir, "transcript.txt"), "w", encoding="utf-8") as f:
        f.write(transcript)
    if formatted is not None:
        with open(os.path.join(output_dir, "formatted.md"), "w", encoding="utf-8") as f:
            f.write(formatted)
    return output_dir

def main(argv=None):
    parser = argparse.ArgumentParser(description="YouTube Transcript Formatter")
    parser.add_argument("url", nargs="?", help="YouTube video URL or 11-character video id")
    parser.add_argument("--lang", help="Caption language code", default=settings.TRANSCRIPT_LANG)
    parser.add_argument("--format", action="store_true", help="Reformat the transcript with the LLM")
    parser.add_argument("--instructions", help="Formatting instructions for the LLM")
    parser.add_argument("--model", help="LLM Model to use")
    parser.add_argument("--api-key", help="API key for the formatting service")
    parser.add_argument("--list-models", action="store_true", help="List available formatting models and exit")
    parser.add_argument("--no-save", action="store_true", help="Do not save output to file (default: saves to outputs/)")

    args = parser.parse_args(argv)

    if args.list_models:
        api_key = args.api_key or settings.LLM_API_KEY
        models = TranscriptFormatter(api_key=api_key).list_models() if api_key else list(DEFAULT_MODELS)
        render_models(models)
        return 0

    if not args.url:
        parser.print_help()
        console.print("[red]Missing URL.[/red]")
        return 2

    url = args.url.strip().strip('`').strip('"').strip("'").strip()
    service = TranscriptService()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True
    ) as progress:
        task = progress.add_task(description="Extracting transcript...", total=None)
        outcome = service.extract(url, args.lang)
        progress.update(task, completed=True)

    if not outcome.success:
        console.print(f"[bold red]Failed to extract transcript:[/bold red] {outcome.error}")
        return 1

    console.print(f"[green]✔[/green] Transcript extracted via {outcome.strategy} ({len(outcome.transcript)} characters)")
    console.print(Panel(outcome.transcript or "[dim](empty transcript)[/dim]", title="Transcript", border_style="blue"))

    formatted = None
    if args.format:
        try:
            formatter = TranscriptFormatter(api_key=args.api_key, model=args.model)
            with console.status("Formatting transcript..."):
                formatted = formatter.format(outcome.transcript, args.instructions)
        except FormatterError as e:
            console.print(f"[bold red]Failed to format transcript:[/bold red] {e}")
            return 1
        console.print(Panel(Markdown(formatted), title="Formatted", border_style="green"))

    if not args.no_save:
        output_dir = save_output(outcome.video_id, outcome.transcript, formatted)
        console.print(f"\n[blue]Saved output to {output_dir}[/blue]")
    return 0

if __name__ == "__main__":
    sys.exit(main())
