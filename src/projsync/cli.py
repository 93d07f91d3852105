"""CLI entry point for projsync.

Commands mirror the stages of a project migration:
- migrate: copy git history, settings, labels, milestones, issues and wiki
- fields: shift schedule dates and write field values on the project board
- link: build the parent/child issue hierarchy
- run-all: the three stages above, in order
- clean-issues: strip attribution blocks from migrated issue bodies
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import click

from projsync.config import SyncConfig, load_config
from projsync.exceptions import ConfigurationError, NotFoundError, ParseError
from projsync.github import GitHubClient, GitHubError, describe_error
from projsync.linker import ParentChildLinker
from projsync.logging import setup_logging
from projsync.migration import IssueCleaner, MetadataCopier, MirrorError, RepositoryMirror
from projsync.retry import RetryExecutor
from projsync.schedule import parse_date
from projsync.sync import ProjectFieldSync, SyncSummary
from projsync.tabular import load_table

logger = logging.getLogger("projsync.cli")

# Length of the development sprint that starts on the project start date
SPRINT_LENGTH_DAYS = 79


def common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add --config and --verbose to a command."""
    func = click.option(
        "-v",
        "--verbose",
        is_flag=True,
        help="Enable verbose output",
    )(func)
    func = click.option(
        "-c",
        "--config",
        "config_path",
        type=click.Path(exists=True, path_type=Path),
        help="Path to projsync.yaml (auto-detected if not specified)",
    )(func)
    return func


def setup(config_path: Path | None, verbose: bool) -> SyncConfig:
    """Configure logging and load the configuration, exiting on a missing token."""
    setup_logging(level="DEBUG" if verbose else None)
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


def make_client(config: SyncConfig) -> GitHubClient:
    return GitHubClient(config.token, graphql_url=config.graphql_url, api_url=config.api_url)


def make_executor(config: SyncConfig) -> RetryExecutor:
    return RetryExecutor(
        initial_delay=config.retry.initial_delay,
        increment=config.retry.increment,
        max_attempts=config.retry.max_attempts,
    )


def resolve_owner(client: GitHubClient, config: SyncConfig) -> str:
    """Configured owner, or the login of the token's user."""
    if config.owner:
        return config.owner
    owner = client.viewer_login()
    logger.info("Using authenticated user %s as owner", owner)
    return owner


def validate_date(value: str) -> str:
    value = value.strip()
    if len(value) != 10 or parse_date(value) is None:
        raise click.BadParameter("Please use format YYYY-MM-DD")
    return value


def report(summary: SyncSummary) -> None:
    click.echo(summary.describe())
    for failure in summary.failures:
        click.echo(f"  - {failure}", err=True)


def fail(message: str) -> None:
    click.echo(message, err=True)
    sys.exit(1)


@click.group()
@click.version_option(package_name="projsync")
def main() -> None:
    """projsync - migrate GitHub project metadata between repositories."""
    pass


@main.command()
@click.argument("origin", required=False)
@click.argument("target", required=False)
@click.option(
    "--input",
    "input_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Tab-separated issue list (default: update.tsv)",
)
@click.option("--skip-mirror", is_flag=True, help="Do not push git history")
@click.option("--skip-wiki", is_flag=True, help="Do not copy the wiki")
@common_options
def migrate(
    origin: str | None,
    target: str | None,
    input_path: Path | None,
    skip_mirror: bool,
    skip_wiki: bool,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Copy repository contents and metadata from ORIGIN to TARGET."""
    config = setup(config_path, verbose)
    if not origin:
        origin = click.prompt("Enter origin repo name (without owner)").strip()
    if not target:
        target = click.prompt("Enter target repo name (without owner)").strip()

    client = make_client(config)
    try:
        owner = resolve_owner(client, config)
        table = load_table(input_path or config.update_file)
        mirror = RepositoryMirror(owner, config.token)
        if not skip_mirror:
            mirror.mirror(origin, target)

        copier = MetadataCopier(client, owner, origin, target, make_executor(config))
        settings_ok = copier.copy_settings()
        labels = copier.copy_labels()
        milestone_map = copier.copy_milestones()
        issues = copier.copy_issues(table, milestone_map)
        wiki_ok = False if skip_wiki else mirror.mirror_wiki(origin, target)
    except MirrorError as e:
        fail(f"Mirror error: {e}")
    except ParseError as e:
        fail(f"Input error: {e}")
    except GitHubError as e:
        fail(f"GitHub error: {describe_error(e)}")
    finally:
        client.close()

    summary = {
        "origin": f"{owner}/{origin}",
        "target": f"{owner}/{target}",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "settings": settings_ok,
        "labels": labels.updated,
        "milestones": len(milestone_map),
        "issues": issues.updated,
        "issue_failures": issues.failed,
        "wiki": wiki_ok,
    }
    click.echo("\nMigration Summary")
    click.echo(json.dumps(summary, indent=2))


@main.command()
@click.argument("target", required=False)
@click.argument("base_date", required=False)
@click.option(
    "--input",
    "input_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Tab-separated field values (default: update.tsv)",
)
@click.option("--project", "project_title", default=None, help="Project title (default: TARGET)")
@common_options
def fields(
    target: str | None,
    base_date: str | None,
    input_path: Path | None,
    project_title: str | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Shift schedule dates to BASE_DATE and update project fields for TARGET."""
    config = setup(config_path, verbose)
    if not target:
        target = click.prompt("Enter the GitHub project name (same as repo)").strip()
    if not base_date:
        base_date = click.prompt("Enter the base date (YYYY-MM-DD)", value_proc=validate_date)
    elif parse_date(base_date) is None:
        fail(f"Invalid base date '{base_date}', expected YYYY-MM-DD")

    client = make_client(config)
    try:
        table = load_table(input_path or config.update_file)
        owner = resolve_owner(client, config)
        sync = ProjectFieldSync(client, config, owner, target, make_executor(config))
        summary = sync.run(table, base_date, project_title)
    except ParseError as e:
        fail(f"Input error: {e}")
    except NotFoundError as e:
        fail(f"Not found: {e}")
    except GitHubError as e:
        fail(f"GitHub error: {describe_error(e)}")
    finally:
        client.close()

    report(summary)


@main.command()
@click.argument("target", required=False)
@click.option(
    "--input",
    "input_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Tab-separated parent list (default: parents.tsv)",
)
@common_options
def link(
    target: str | None,
    input_path: Path | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Link issues in TARGET under their parent issues."""
    config = setup(config_path, verbose)
    if not target:
        target = click.prompt("Enter the target repository name (e.g. my-repo)").strip()

    client = make_client(config)
    try:
        table = load_table(input_path or config.parents_file)
        if table.rows:
            logger.debug("First row sample: %s", table.rows[0])
        owner = resolve_owner(client, config)
        linker = ParentChildLinker(client, owner, target, make_executor(config))
        summary = linker.link_rows(table.rows)
    except ParseError as e:
        fail(f"Input error: {e}")
    except GitHubError as e:
        fail(f"GitHub error: {describe_error(e)}")
    finally:
        client.close()

    report(summary)


@main.command("clean-issues")
@click.argument("repo")
@common_options
def clean_issues(repo: str, config_path: Path | None, verbose: bool) -> None:
    """Remove 'Original issue by @user' blocks from every issue in REPO."""
    config = setup(config_path, verbose)
    client = make_client(config)
    try:
        owner = resolve_owner(client, config)
        summary = IssueCleaner(client, owner, make_executor(config)).clean(repo)
    except GitHubError as e:
        fail(f"GitHub error: {describe_error(e)}")
    finally:
        client.close()

    report(summary)


@main.command("run-all")
@click.argument("target", required=False)
@click.argument("start_date", required=False)
@common_options
@click.pass_context
def run_all(
    ctx: click.Context,
    target: str | None,
    start_date: str | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Migrate the template into TARGET, shift fields to START_DATE, link issues."""
    config = setup(config_path, verbose)
    if not target:
        target = click.prompt("Enter target repo name (also used as project name)").strip()
    if not start_date:
        start_date = click.prompt("Enter project start date (YYYY-MM-DD)", value_proc=validate_date)
    else:
        try:
            start_date = validate_date(start_date)
        except click.BadParameter as e:
            fail(str(e))

    steps: list[tuple[str, Callable[..., Any], dict[str, Any]]] = [
        (
            "Clone and migrate repository",
            migrate,
            {"origin": config.template_repo, "target": target},
        ),
        ("Update GitHub Project fields", fields, {"target": target, "base_date": start_date}),
        ("Link parent-child issues", link, {"target": target}),
    ]
    for name, command, kwargs in steps:
        click.echo(f"\nStarting: {name}")
        try:
            ctx.invoke(command, config_path=config_path, verbose=verbose, **kwargs)
        except SystemExit as e:
            if e.code:
                click.echo(f"Failed during: {name}", err=True)
                raise
        click.echo(f"Completed: {name}")

    sprint_end = datetime.strptime(start_date, "%Y-%m-%d") + timedelta(days=SPRINT_LENGTH_DAYS)
    click.echo("\nAll steps completed successfully.")
    click.echo(f"Sprint dates to set on the project: {start_date} to {sprint_end:%Y-%m-%d}")


if __name__ == "__main__":
    main()
