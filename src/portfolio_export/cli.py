"""Portfolio Export CLI - static-site export and GitHub publishing."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.panel import Panel

from . import __version__
from .config import settings
from .models import Portfolio
from .publishing import (
    GitHubAPIError,
    GitHubClient,
    JSONFileStore,
    PublishConfig,
    PublishProgress,
    github_pages_url,
    has_token,
    remove_token,
    resolve_token,
    save_token,
)
from .services import ExportError, ExportService, PublishError, PublishService, save_archive
from .utils.console import console
from .utils.logging import setup_logging
from .validation import (
    DocumentInput,
    PublishInput,
    RepositoryInput,
    TokenInput,
    ValidationError,
    count_by_kind,
    group_by_kind,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _validate_input(model_class: type, **kwargs: Any) -> Any:
    """Validate input using Pydantic model, exit on validation error.

    Args:
        model_class: Pydantic model class to use for validation
        **kwargs: Keyword arguments to pass to the model constructor

    Returns:
        The validated model instance

    Raises:
        typer.Exit: If validation fails (exits with code 1)
    """
    try:
        return model_class(**kwargs)
    except PydanticValidationError as e:
        console.print(f"[red]Validation error: {e.errors()[0]['msg']}[/red]")
        raise typer.Exit(code=1)


def _print_panel(message: str, style: str = "blue") -> None:
    """Print a styled panel message."""
    console.print(Panel(f"[bold]{message}[/bold]", style=style))


def _load_portfolio(path: Path) -> Portfolio:
    """Load and validate a portfolio document, exit on failure."""
    document = _validate_input(DocumentInput, path=path)
    try:
        return Portfolio.from_json_file(document.path)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        console.print(f"[red]Invalid document: {location}: {first['msg']}[/red]")
        raise typer.Exit(code=1)
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not read document: {e}[/red]")
        raise typer.Exit(code=1)


def _print_report(errors: list[ValidationError]) -> None:
    """Print validation errors grouped by kind."""
    counts = count_by_kind(errors)
    console.print(f"\n[bold red]{len(errors)} problem(s) found[/bold red]")
    for kind, items in group_by_kind(errors).items():
        console.print(f"\n[bold yellow]{kind.label.capitalize()}[/bold yellow] ({counts[kind]})")
        for error in items:
            where = f"{error.section_type}:{error.section_id}" if error.section_id else "document"
            console.print(f"  • [dim]{where}[/dim] {error.message}")


app = typer.Typer(
    name="portfolio-export",
    help="Portfolio Export - validate, export and publish portfolio sites",
    no_args_is_help=True,
)

auth_app = typer.Typer(help="Manage the GitHub token used for publishing")
app.add_typer(auth_app, name="auth")

github_app = typer.Typer(help="Browse and prepare GitHub repositories for publishing")
app.add_typer(github_app, name="github")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]Portfolio Export[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show informational log messages"),
    ] = False,
) -> None:
    """Portfolio Export - turn a portfolio document into a static site."""
    setup_logging(console_level="INFO" if verbose else "WARNING")
    settings.ensure_directories()


# ============================================================================
# EXPORT COMMANDS
# ============================================================================


@app.command("validate")
def validate_document(
    document: Annotated[Path, typer.Argument(help="Portfolio JSON document")],
    unsaved: Annotated[
        bool,
        typer.Option("--unsaved", help="Treat the document as having unsaved changes"),
    ] = False,
) -> None:
    """Run the pre-export checks without building anything."""
    portfolio = _load_portfolio(document)
    _print_panel(f"Validating {portfolio.name}...")

    errors = asyncio.run(ExportService().validate(portfolio, unsaved))
    if errors:
        _print_report(errors)
        raise typer.Exit(code=1)

    console.print("[green]✓ Ready to export[/green]")


@app.command("export")
def export_document(
    document: Annotated[Path, typer.Argument(help="Portfolio JSON document")],
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Output directory (default: data/output)"),
    ] = None,
    unsaved: Annotated[
        bool,
        typer.Option("--unsaved", help="Treat the document as having unsaved changes"),
    ] = False,
) -> None:
    """Export a portfolio as a zipped static site."""
    portfolio = _load_portfolio(document)
    _print_panel(f"Exporting {portfolio.name}...")

    result = asyncio.run(ExportService().export(portfolio, unsaved))
    if not result.success:
        _print_report(result.errors)
        raise typer.Exit(code=1)

    try:
        path = save_archive(result, out or settings.output_dir)
    except (ExportError, OSError) as e:
        logger.exception("Saving archive failed")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Saved:[/green] {path}")
    if result.stats:
        console.print(
            f"  Pages: {result.stats.page_count}  "
            f"Assets: {result.stats.asset_count}  "
            f"Size: {result.stats.file_size / 1024:.1f} KB"
        )


# ============================================================================
# PUBLISH COMMANDS
# ============================================================================


def _print_progress(progress: PublishProgress) -> None:
    if progress.status == "uploading" and progress.total:
        console.print(f"  [dim]{progress.message} {progress.current}/{progress.total}[/dim]")
    elif progress.status != "error":
        console.print(f"  [dim]{progress.message}[/dim]")


@app.command("publish")
def publish_document(
    document: Annotated[Path, typer.Argument(help="Portfolio JSON document")],
    repo: Annotated[
        str | None,
        typer.Option(
            "--repo", "-r", help="Target repository as owner/name (default: last publish)"
        ),
    ] = None,
    branch: Annotated[
        str,
        typer.Option("--branch", "-b", help="Target branch"),
    ] = "main",
    base_path: Annotated[
        str,
        typer.Option("--base-path", help="Directory in the repository: / or /docs"),
    ] = "/",
    message: Annotated[
        str | None,
        typer.Option("--message", "-m", help="Commit message"),
    ] = None,
    include_readme: Annotated[
        bool,
        typer.Option("--include-readme", help="Also publish README.txt"),
    ] = False,
    include_assets: Annotated[
        bool,
        typer.Option("--include-assets", help="Download images and publish local copies"),
    ] = False,
    unsaved: Annotated[
        bool,
        typer.Option("--unsaved", help="Treat the document as having unsaved changes"),
    ] = False,
) -> None:
    """Publish a portfolio site to a GitHub repository."""
    portfolio = _load_portfolio(document)
    service = PublishService(store=JSONFileStore(settings.state_file))

    if repo is None:
        try:
            config = service.last_config(portfolio, message=message)
        except PublishError as e:
            console.print(f"[red]✗ {e}[/red]")
            console.print("[dim]Pass --repo owner/name to choose a destination[/dim]")
            raise typer.Exit(code=1) from None
    else:
        target = _validate_input(PublishInput, repo=repo, branch=branch, base_path=base_path)
        config = PublishConfig(
            owner=target.owner,
            repo=target.name,
            branch=target.branch,
            base_path=target.base_path,
            message=message,
        )
    destination = f"{config.owner}/{config.repo}@{config.branch}"
    _print_panel(f"Publishing {portfolio.name} to {destination}...")
    outcome = asyncio.run(
        service.publish(
            portfolio,
            unsaved,
            config,
            include_readme=include_readme,
            include_assets=include_assets,
            on_progress=_print_progress,
        )
    )

    if outcome.errors:
        _print_report(outcome.errors)
        raise typer.Exit(code=1)
    if not outcome.result.success:
        console.print(f"[red]✗ {outcome.result.error}[/red]")
        if outcome.result.failed_path:
            console.print(
                f"  [dim]{outcome.result.files_updated} file(s) written before the failure[/dim]"
            )
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Pushed {outcome.result.files_updated} file(s)[/green]")
    console.print(f"  Repository: {outcome.result.commit_url}")
    console.print(f"  Pages: {github_pages_url(config.owner, config.repo)}")


# ============================================================================
# AUTH COMMANDS
# ============================================================================


async def _fetch_login(token: str) -> str:
    async with GitHubClient(token) as client:
        user = await client.get_user()
    return user.login


@auth_app.command("login")
def auth_login(
    token: Annotated[str, typer.Argument(help="GitHub personal access token")],
    skip_check: Annotated[
        bool,
        typer.Option("--skip-check", help="Save without verifying against GitHub"),
    ] = False,
) -> None:
    """Save a GitHub token for publishing."""
    validated = _validate_input(TokenInput, token=token)

    if not skip_check:
        try:
            login = asyncio.run(_fetch_login(validated.token))
        except GitHubAPIError as e:
            console.print(f"[red]Token rejected by GitHub: {e}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green]✓ Authenticated as[/green] {login}")

    store = JSONFileStore(settings.state_file)
    save_token(store, validated.token)
    console.print("[green]✓ Token saved[/green]")


@auth_app.command("logout")
def auth_logout() -> None:
    """Remove the saved GitHub token and publish settings."""
    remove_token(JSONFileStore(settings.state_file))
    console.print("[green]✓ Logged out[/green]")


@auth_app.command("status")
def auth_status() -> None:
    """Show where the GitHub token comes from."""
    if settings.has_github_token:
        console.print("[green]✓ Token set via GITHUB_TOKEN[/green]")
    elif has_token(JSONFileStore(settings.state_file)):
        console.print("[green]✓ Token saved[/green]")
    else:
        console.print("[yellow]⚠ No GitHub token. Run `portfolio-export auth login`.[/yellow]")


# ============================================================================
# GITHUB COMMANDS
# ============================================================================


def _run_github(operation: Callable[[GitHubClient], Awaitable[T]]) -> T:
    """Run one operation with an authenticated client, exit on API errors."""
    token = resolve_token(JSONFileStore(settings.state_file))
    if not token:
        console.print("[red]✗ No GitHub token. Run `portfolio-export auth login` first.[/red]")
        raise typer.Exit(code=1)

    async def _run() -> T:
        async with GitHubClient(token) as client:
            return await operation(client)

    try:
        return asyncio.run(_run())
    except GitHubAPIError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)


@github_app.command("repos")
def github_repos(
    page: Annotated[int, typer.Option("--page", min=1, help="Page of results")] = 1,
) -> None:
    """List your repositories, most recently updated first."""
    repos = _run_github(lambda client: client.list_repos(page=page))
    if not repos:
        console.print("[dim]No repositories found[/dim]")
        return
    for repo in repos:
        visibility = "[yellow]private[/yellow]" if repo.private else "public"
        console.print(f"  {repo.full_name}  {visibility}  [dim]{repo.default_branch}[/dim]")


@github_app.command("branches")
def github_branches(
    repo: Annotated[str, typer.Argument(help="Repository as owner/name")],
) -> None:
    """List the branches of a repository."""
    target = _validate_input(PublishInput, repo=repo)
    branches = _run_github(lambda client: client.list_branches(target.owner, target.name))
    for branch in branches:
        suffix = "  [dim](protected)[/dim]" if branch.protected else ""
        console.print(f"  {branch.name}{suffix}")


@github_app.command("create-repo")
def github_create_repo(
    name: Annotated[str, typer.Argument(help="New repository name")],
    private: Annotated[bool, typer.Option("--private", help="Create a private repository")] = False,
    description: Annotated[
        str | None,
        typer.Option("--description", "-d", help="Repository description"),
    ] = None,
) -> None:
    """Create a repository, initialized with a README, to publish into."""
    target = _validate_input(RepositoryInput, name=name, private=private, description=description)
    repo = _run_github(
        lambda client: client.create_repo(target.name, target.private, target.description)
    )
    console.print(f"[green]✓ Created[/green] {repo.full_name}")
    if repo.html_url:
        console.print(f"  {repo.html_url}")


@github_app.command("create-branch")
def github_create_branch(
    repo: Annotated[str, typer.Argument(help="Repository as owner/name")],
    branch: Annotated[str, typer.Argument(help="New branch name")],
    from_branch: Annotated[
        str,
        typer.Option("--from", help="Branch to start from"),
    ] = "main",
) -> None:
    """Create a branch from the head of another branch."""
    target = _validate_input(PublishInput, repo=repo, branch=branch)
    source = _validate_input(PublishInput, repo=repo, branch=from_branch)
    created = _run_github(
        lambda client: client.create_branch(
            target.owner, target.name, target.branch, from_branch=source.branch
        )
    )
    console.print(f"[green]✓ Created branch[/green] {created.name} at {created.sha[:7]}")


if __name__ == "__main__":
    app()
