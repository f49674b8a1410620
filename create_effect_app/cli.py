"""Command-line front end.

Resolves the project directory and project type from arguments or
interactive prompts, then materializes and customizes the project.

Usage::

    create-effect-app my-app --template basic --eslint --workflows
    create-effect-app my-app --example http-server
    create-effect-app my-app --template-repo owner/repo/path@ref
    python -m create_effect_app
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from rich.markup import escape
from rich.prompt import Confirm, Prompt

from create_effect_app import __version__
from create_effect_app.catalog import (
    Choice,
    discover_examples,
    discover_templates,
    example_choices,
    template_choices,
)
from create_effect_app.config import Config
from create_effect_app.customize import (
    apply_template_preferences,
    configure_expo_app,
    find_placeholder_files,
    normalize_gitignore,
)
from create_effect_app.domain import ExampleProject, ProjectConfig, ProjectType, TemplateProject
from create_effect_app.errors import CreateAppError, ProjectNameError
from create_effect_app.github import ArchiveMaterializer
from create_effect_app.utils import (
    console,
    create_progress,
    ensure_dir,
    print_error,
    print_file_list,
    print_info,
    print_success,
    print_warning,
    validate_project_name,
)

DEFAULT_PROJECT_NAME = "effect-app"

SelectFn = Callable[[str, list[Choice]], str]
ConfirmFn = Callable[[str, bool], bool]
TextFn = Callable[[str, str], str]


# ---------------------------------------------------------------------------
# Interactive prompts
# ---------------------------------------------------------------------------


def prompt_text(message: str, default: str) -> str:
    return Prompt.ask(message, default=default, console=console)


def prompt_confirm(message: str, default: bool) -> bool:
    return Confirm.ask(message, default=default, console=console)


def prompt_select(message: str, choices: list[Choice]) -> str:
    """Show a numbered list of *choices* and return the selected value."""
    console.print(f"[bold]{escape(message)}[/bold]")
    for index, choice in enumerate(choices, 1):
        line = f"  {index}) [magenta]{escape(choice.title)}[/magenta]"
        if choice.description:
            line += f" [dim]- {escape(choice.description)}[/dim]"
        console.print(line)
    numbers = [str(index) for index in range(1, len(choices) + 1)]
    answer = Prompt.ask("Enter number", choices=numbers, default="1", console=console)
    return choices[int(answer) - 1].value


# ---------------------------------------------------------------------------
# Option resolution
# ---------------------------------------------------------------------------


def resolve_project_name(raw: str | None, ask: TextFn = prompt_text) -> Path:
    """Validate the project directory, prompting for it when not given."""
    if raw is not None:
        return validate_project_name(raw)
    while True:
        answer = ask("What is your project named?", DEFAULT_PROJECT_NAME)
        try:
            return validate_project_name(answer or DEFAULT_PROJECT_NAME)
        except ProjectNameError as exc:
            print_warning(f"{escape(str(exc))}; try again")


def prompt_project_type(
    config: Config,
    select: SelectFn = prompt_select,
    confirm: ConfirmFn = prompt_confirm,
) -> ProjectType:
    """Ask whether to start from a template or an example, and which one."""
    kind = select(
        "What type of project would you like to create?",
        [
            Choice(
                "Template",
                "template",
                "A template project suitable for a package or application",
            ),
            Choice("Example", "example", "An example project demonstrating usage of Effect"),
        ],
    )
    if kind == "example":
        example = select(
            "What project example should be used?", example_choices(config.examples_dir)
        )
        return ExampleProject(example=example)

    template = select(
        "What project template should be used?", template_choices(config.templates_dir)
    )
    return TemplateProject(
        template=template,
        with_changesets=confirm("Initialize project with Changesets?", True),
        with_nix_flake=confirm("Initialize project with a Nix flake?", True),
        with_eslint=confirm("Initialize project with ESLint?", True),
        with_workflows=confirm("Initialize project with Effect's recommended GitHub actions?", True),
    )


def project_type_from_args(args: argparse.Namespace) -> ProjectType | None:
    """Build the project type from parsed options, or ``None`` if none were given."""
    if args.example:
        return ExampleProject(example=args.example)
    if not (args.template or args.template_repo or args.template_folder):
        return None
    return TemplateProject(
        template=args.template or "basic",
        template_folder=args.template_folder,
        template_repo=args.template_repo,
        with_changesets=args.changesets,
        with_nix_flake=args.flake,
        with_eslint=args.eslint,
        with_workflows=args.workflows,
    )


# ---------------------------------------------------------------------------
# Project creation
# ---------------------------------------------------------------------------


async def create_example(project: ProjectConfig, materializer: ArchiveMaterializer) -> None:
    """Examples are copied as they are."""
    assert isinstance(project.project_type, ExampleProject)
    destination = project.project_name
    example = project.project_type.example

    print_info(
        f"Creating a new Effect application in: [magenta]{escape(str(destination))}[/magenta]"
    )
    ensure_dir(destination)

    print_info(f"Initializing example project: [magenta]{escape(example)}[/magenta]")
    with create_progress() as progress:
        progress.add_task(f"Fetching example {example}...", total=None)
        await materializer.download_example(example, destination)

    normalize_gitignore(destination)

    print_success("Success!")
    print_info(
        "Effect example application was initialized in: "
        f"[cyan]{escape(str(destination))}[/cyan]"
    )


async def _materialize_template(
    template: TemplateProject, destination: Path, materializer: ArchiveMaterializer
) -> None:
    if template.template_repo:
        await materializer.download_from_repo(template.template_repo, destination)
    elif template.template_folder:
        await materializer.copy_template_folder(template.template_folder, destination)
    else:
        await materializer.download_template(template.template, destination)


async def create_template(project: ProjectConfig, materializer: ArchiveMaterializer) -> None:
    """Templates are downloaded, then trimmed to the user's preferences."""
    assert isinstance(project.project_type, TemplateProject)
    template = project.project_type
    destination = project.project_name

    print_info(f"Creating a new Effect project in [green]{escape(str(destination))}[/green]")
    ensure_dir(destination)

    print_info(
        f"Initializing project with template: [magenta]{escape(template.source_label)}[/magenta]"
    )
    with create_progress() as progress:
        progress.add_task("Fetching template...", total=None)
        await _materialize_template(template, destination, materializer)

    normalize_gitignore(destination)
    apply_template_preferences(destination, template)

    print_success("Success!")
    print_info(
        f"Effect template project was initialized in: [cyan]{escape(str(destination))}[/cyan]"
    )
    print_info("Take a look at the template's [cyan]README.md[/cyan] for more information")

    placeholders = find_placeholder_files(destination, template)
    if placeholders:
        print_file_list(
            "Make sure to replace any [cyan]<PLACEHOLDER>[/cyan] entries in the following files:",
            [escape(str(path)) for path in placeholders],
        )

    if template.template == "expo-app":
        configure_expo_app(destination)


async def create_project(project: ProjectConfig, materializer: ArchiveMaterializer) -> None:
    if isinstance(project.project_type, ExampleProject):
        await create_example(project, materializer)
    else:
        await create_template(project, materializer)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-effect-app",
        description="Create an Effect application from an example or a template repository",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-effect-app my-app --template basic --eslint --workflows\n"
            "  create-effect-app my-app --example http-server\n"
            "  create-effect-app my-app --template-repo owner/repo/templates/x@main\n"
            "  create-effect-app my-app --template-repo https://github.com/o/r/tree/main/dir\n"
        ),
    )
    parser.add_argument(
        "project_name",
        nargs="?",
        default=None,
        metavar="project-name",
        help="The folder to output the Effect application code into",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--example", "-e",
        choices=discover_examples(config.examples_dir),
        help="The name of an official Effect example to use to bootstrap the application",
    )
    source.add_argument(
        "--template", "-t",
        choices=discover_templates(config.templates_dir),
        help="The name of an official Effect template to use to bootstrap the application",
    )

    parser.add_argument(
        "--template-repo",
        default=None,
        metavar="SPEC",
        help="GitHub repo spec for a template: owner/repo[/path][@ref], gh:owner/repo or a URL",
    )
    parser.add_argument(
        "--template-folder",
        default=None,
        metavar="DIR",
        help="Path to a local template folder",
    )
    parser.add_argument(
        "--changesets", action="store_true", help="Initialize project with Changesets"
    )
    parser.add_argument("--flake", action="store_true", help="Initialize project with a Nix flake")
    parser.add_argument("--eslint", action="store_true", help="Initialize project with ESLint")
    parser.add_argument(
        "--workflows",
        action="store_true",
        help="Initialize project with Effect's recommended GitHub actions",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s v{__version__}")
    return parser


def parse_args(argv: Sequence[str] | None, config: Config) -> argparse.Namespace:
    parser = build_parser(config)
    args = parser.parse_args(argv)
    template_only = (
        args.template_repo
        or args.template_folder
        or args.changesets
        or args.flake
        or args.eslint
        or args.workflows
    )
    if args.example and template_only:
        parser.error("--example cannot be combined with template options")
    return args


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``create-effect-app``."""
    config = Config.from_env()
    args = parse_args(argv, config)

    try:
        project_name = resolve_project_name(args.project_name)
        project_type = project_type_from_args(args) or prompt_project_type(config)
        project = ProjectConfig(project_name=project_name, project_type=project_type)
        asyncio.run(create_project(project, ArchiveMaterializer(config)))
    except CreateAppError as exc:
        print_error(escape(str(exc)))
        sys.exit(1)
    except KeyboardInterrupt:
        console.print()
        print_warning("Aborted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
