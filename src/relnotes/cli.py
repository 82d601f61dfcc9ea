from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import click
import typer
from typer.core import TyperCommand

from . import __version__
from .arguments import Arguments, OptionType, Rule
from .categories import Category, CategoryFormatError, categorize, default_categories, parse_categories
from .config import Config, load_config
from .git import GitError, GitRepository
from .log import configure_logging, notice, parse_level
from .report import ReleaseNote

logger = logging.getLogger(__name__)

PROG = "relnotes"
OUTPUT_FORMATS = ("markdown", "json")

RULES: tuple[Rule, ...] = (
    Rule("-h", "--help", OptionType.BOOLEAN, "Show help message."),
    Rule("-t", "--tag", OptionType.STRING, "Release tag (defaults to the latest tag)."),
    Rule(
        "-c",
        "--category",
        OptionType.STRING,
        'Category to put on the release note, formatted as "<Category Title>:<Commit Prefix>,<Commit Prefix>,...". '
        "May be repeated.",
    ),
    Rule("-d", "--debug", OptionType.BOOLEAN, "Enable debug logging."),
    Rule("-r", "--repo", OptionType.STRING, "Path to the git repository (defaults to the current directory)."),
    Rule("-o", "--output", OptionType.STRING, "Write the release note to this file instead of stdout."),
    Rule("-f", "--format", OptionType.STRING, "Output format: markdown or json."),
    Rule("-v", "--version", OptionType.BOOLEAN, "Show the version and exit."),
)


class RawArgsCommand(TyperCommand):
    """Keep the untouched token list; Click drops the `--` separator from `ctx.args`."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.meta["relnotes.raw_args"] = list(args)
        return super().parse_args(ctx, args)


app = typer.Typer(
    help="Generate a categorized release note from the commits between two tags.",
    add_completion=False,
)


@dataclass(slots=True)
class ValidationResult:
    is_valid: bool = True
    need_help: bool = False

    def fail(self) -> None:
        self.is_valid = False
        self.need_help = True


def parse_args(argv: list[str]) -> Arguments:
    return Arguments(RULES, argv, prog=PROG)


def _requires_value(args: Arguments, key: str, hint: str) -> bool:
    option = args.get_string(key)
    if not option.found:
        logger.debug("--%s option was not found.", key)
        return True
    if not option.values:
        logger.error("Invalid args. --%s option should have %s.", key, hint)
        return False
    return True


def validate_args(args: Arguments) -> ValidationResult:
    result = ValidationResult(need_help=args.get_boolean("help").found)

    tag_option = args.get_string("tag")
    if not _requires_value(args, "tag", "<tag name>"):
        result.fail()
    elif tag_option.values and len(tag_option.values) > 1:
        logger.error("Invalid args. Multiple --tag options were found.")
        result.fail()

    if not _requires_value(args, "category", "<category title>:<commit prefix>"):
        result.fail()
    if not _requires_value(args, "repo", "<path>"):
        result.fail()
    if not _requires_value(args, "output", "<path>"):
        result.fail()

    if not _requires_value(args, "format", "one of " + ", ".join(OUTPUT_FORMATS)):
        result.fail()
    else:
        for value in args.get_string("format").values or ():
            if value.lower() not in OUTPUT_FORMATS:
                logger.error("Invalid args. Unknown --format %r.", value)
                result.fail()
    return result


def _last_string(args: Arguments, key: str) -> str | None:
    values = args.get_string(key).values
    return values[-1] if values else None


def get_debug_flag(args: Arguments) -> bool:
    values = args.get_boolean("debug").values
    if not values:
        return False
    return values[-1]


def get_output_format(args: Arguments) -> str:
    value = _last_string(args, "format")
    return value.lower() if value else "markdown"


def get_release_tag(args: Arguments, repo: GitRepository) -> str:
    values = args.get_string("tag").values
    if not values or len(values) != 1:
        logger.debug("The value of --tag was not found. Use the latest tag instead.")
        return repo.latest_tag()
    return values[0]


def get_categories(args: Arguments, config: Config) -> list[Category]:
    values = args.get_string("category").values
    if values:
        return parse_categories(values)
    if config.categories:
        logger.debug("Using categories from %s.", config.project_root)
        return parse_categories(config.categories)
    logger.debug("No categories given. Use the default categories instead.")
    return default_categories()


def build_release_note(args: Arguments, config: Config) -> ReleaseNote:
    repo = GitRepository(_last_string(args, "repo"))

    release_tag = get_release_tag(args, repo)
    logger.debug('The release tag is "%s".', release_tag)

    categories = get_categories(args, config)
    logger.debug("The categories are %s.", [category.title for category in categories])

    previous_tag = repo.previous_tag(release_tag)
    logger.debug('The previous tag is "%s".', previous_tag)
    start = previous_tag or repo.first_commit()
    logger.debug('"%s" is used for the start point of the release note.', start)

    commits = repo.commits_between(start, release_tag)
    logger.debug("Found %d commits between %s and %s.", len(commits), start, release_tag)
    return ReleaseNote(tag=release_tag, categories=categorize(commits, categories), start=start)


def _configure_logging(args: Arguments, config: Config) -> None:
    if get_debug_flag(args):
        configure_logging(logging.DEBUG, color=config.color)
        return
    try:
        level = parse_level(config.log_level)
    except ValueError as exc:
        configure_logging(logging.WARNING, color=config.color)
        logger.warning("Ignoring configured log level: %s", exc)
        return
    configure_logging(level, color=config.color)


def _render(note: ReleaseNote, output_format: str) -> str:
    if output_format == "json":
        return json.dumps(note.to_dict(), indent=2) + "\n"
    return note.to_markdown()


@app.command(
    cls=RawArgsCommand,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    add_help_option=False,
)
def main(ctx: typer.Context) -> None:
    """Generate a categorized release note from the commits between two tags."""

    raw_args = ctx.meta.get("relnotes.raw_args", ctx.args)
    args = parse_args([PROG, *raw_args])
    config = load_config()
    _configure_logging(args, config)
    logger.debug("Parsed arguments: %s", list(args.argv))

    validation = validate_args(args)
    if not validation.is_valid:
        typer.echo(args.generate_help())
        raise typer.Exit(code=1)
    if validation.need_help:
        typer.echo(args.generate_help())
        raise typer.Exit()
    if args.get_boolean("version").found:
        typer.echo(f"{PROG} version: {__version__}")
        raise typer.Exit()

    try:
        note = build_release_note(args, config)
    except (GitError, CategoryFormatError) as exc:
        logger.error("%s", exc)
        raise typer.Exit(code=1) from exc

    notice(logger, "Release note for %s covers %d commits.", note.tag, note.commit_count)
    content = _render(note, get_output_format(args))
    output = _last_string(args, "output")
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        typer.echo(f"Wrote release note to {path}")
    else:
        typer.echo(content, nl=False)


def run() -> None:
    app(prog_name=PROG)
