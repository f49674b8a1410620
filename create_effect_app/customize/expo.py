"""Interactive app-identity setup for the ``expo-app`` template.

Asks for the display name, slug, deep-link scheme, iOS bundle identifier and
Android package, validates each answer, and writes them into ``app.json``
(and the slug into ``package.json``).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.markup import escape
from rich.prompt import Prompt

from create_effect_app.utils import console, load_json, print_info, print_warning, save_json

DEFAULT_NAME = "My App"
DEFAULT_BUNDLE_ID = "com.example.app"

_SLUG_RE = re.compile(r"^[0-9a-z][0-9a-z-]*$")
_SCHEME_RE = re.compile(r"^[a-z][0-9+.a-z-]*$")
_BUNDLE_ID_RE = re.compile(r"^[A-Za-z][0-9A-Za-z]*(\.[A-Za-z][0-9A-Za-z]*)+$")
_ANDROID_PACKAGE_RE = re.compile(r"^[a-z][0-9a-z]*(\.[a-z][0-9a-z]*)+$")

AskFn = Callable[[str, str], str]


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def sanitize_slug(value: str) -> str:
    """Lowercase *value* and replace runs of disallowed characters with ``-``.

    Leading dashes are dropped; a trailing run collapses to a single dash.
    """
    slug = re.sub(r"[^0-9a-z-]+", "-", str(value).strip().lower())
    slug = re.sub(r"^-+|-+$", "-", slug)
    return re.sub(r"^-+", "", slug)


def is_valid_slug(value: str) -> bool:
    return bool(_SLUG_RE.match(value))


def is_valid_scheme(value: str) -> bool:
    return bool(_SCHEME_RE.match(value))


def is_valid_bundle_id(value: str) -> bool:
    return bool(_BUNDLE_ID_RE.match(value))


def is_valid_android_package(value: str) -> bool:
    return bool(_ANDROID_PACKAGE_RE.match(value))


def to_android_package(bundle_id: str) -> str:
    return ".".join(segment.lower() for segment in bundle_id.split("."))


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------


def ask_text(message: str, default: str) -> str:
    """Prompt for a line of text on the shared console."""
    return Prompt.ask(message, default=default, console=console, show_default=True)


def ask_validated(
    message: str,
    initial: str,
    sanitize: Callable[[str], str],
    validate: Callable[[str], bool],
    error: str,
    ask: AskFn = ask_text,
) -> str:
    """Ask until the sanitized answer passes *validate*."""
    while True:
        value = sanitize(ask(message, initial))
        if validate(value):
            return value
        print_warning(f"{escape(error)}; try again")


@dataclass(frozen=True)
class ExpoIdentity:
    """App-identity values written into ``app.json``."""

    name: str
    slug: str
    scheme: str
    bundle_identifier: str
    android_package: str


def current_identity(app_json: dict[str, Any]) -> ExpoIdentity:
    """Read the identity currently in ``app.json``, filling in defaults."""
    expo = app_json.get("expo")
    if not isinstance(expo, dict):
        expo = {}
    ios = expo.get("ios") if isinstance(expo.get("ios"), dict) else {}
    android = expo.get("android") if isinstance(expo.get("android"), dict) else {}

    name = expo["name"] if isinstance(expo.get("name"), str) else DEFAULT_NAME
    slug = expo["slug"] if isinstance(expo.get("slug"), str) else sanitize_slug(name)
    scheme = expo["scheme"] if isinstance(expo.get("scheme"), str) else slug
    bundle_id = ios.get("bundleIdentifier") or DEFAULT_BUNDLE_ID
    android_package = android.get("package") or to_android_package(bundle_id)
    return ExpoIdentity(
        name=name,
        slug=slug,
        scheme=scheme,
        bundle_identifier=bundle_id,
        android_package=android_package,
    )


def prompt_identity(current: ExpoIdentity, ask: AskFn = ask_text) -> ExpoIdentity:
    """Interactively collect a new :class:`ExpoIdentity`."""
    name = ask("Display name (Expo)", current.name).strip() or current.name

    slug = ask_validated(
        "App slug (URL-safe)",
        current.slug or sanitize_slug(name),
        sanitize_slug,
        is_valid_slug,
        "Slug must be lowercase letters, numbers, hyphens",
        ask,
    )
    scheme = ask_validated(
        "Deep link scheme",
        current.scheme or slug,
        str.strip,
        is_valid_scheme,
        "Scheme must match ^[a-z][a-z0-9+.-]*$",
        ask,
    )
    bundle_identifier = ask_validated(
        "iOS bundleIdentifier",
        current.bundle_identifier,
        str.strip,
        is_valid_bundle_id,
        "Invalid bundleIdentifier (e.g., com.example.app)",
        ask,
    )
    android_package = ask_validated(
        "Android package",
        current.android_package or to_android_package(bundle_identifier),
        str.strip,
        is_valid_android_package,
        "Invalid Android package (lowercase, e.g., com.example.app)",
        ask,
    )
    return ExpoIdentity(
        name=name,
        slug=slug,
        scheme=scheme,
        bundle_identifier=bundle_identifier,
        android_package=android_package,
    )


# ---------------------------------------------------------------------------
# Manifest update
# ---------------------------------------------------------------------------


def apply_identity(
    app_json: dict[str, Any], package_json: dict[str, Any], identity: ExpoIdentity
) -> None:
    """Write *identity* into the parsed ``app.json`` and ``package.json``."""
    expo = app_json.get("expo")
    if not isinstance(expo, dict):
        expo = app_json["expo"] = {}
    expo["name"] = identity.name
    expo["slug"] = identity.slug
    expo["scheme"] = identity.scheme
    if not isinstance(expo.get("ios"), dict):
        expo["ios"] = {}
    expo["ios"]["bundleIdentifier"] = identity.bundle_identifier
    if not isinstance(expo.get("android"), dict):
        expo["android"] = {}
    expo["android"]["package"] = identity.android_package

    package_json["name"] = identity.slug


def configure_expo_app(project_dir: Path, ask: AskFn = ask_text) -> ExpoIdentity | None:
    """Run the Expo identity setup in *project_dir*.

    Does nothing and returns ``None`` when the project has no ``app.json``.
    """
    app_json_path = project_dir / "app.json"
    package_json_path = project_dir / "package.json"
    if not app_json_path.exists():
        return None

    app_json = load_json(app_json_path)
    package_json = load_json(package_json_path)

    print_info("Configure Expo app settings in [cyan]app.json[/cyan]")
    identity = prompt_identity(current_identity(app_json), ask)

    apply_identity(app_json, package_json, identity)
    save_json(app_json, app_json_path)
    save_json(package_json, package_json_path)

    print_info("Updated files:")
    print_info(
        f'- app.json -> name="{escape(identity.name)}", slug="{identity.slug}", '
        f'scheme="{identity.scheme}"'
    )
    print_info(
        f'- app.json -> ios.bundleIdentifier="{identity.bundle_identifier}", '
        f'android.package="{identity.android_package}"'
    )
    print_info(f'- package.json -> name="{identity.slug}"')
    return identity
