"""Post-download customization of scaffolded projects."""

from create_effect_app.customize.expo import configure_expo_app
from create_effect_app.customize.manifest import (
    apply_template_preferences,
    find_placeholder_files,
    normalize_gitignore,
)

__all__ = [
    "apply_template_preferences",
    "configure_expo_app",
    "find_placeholder_files",
    "normalize_gitignore",
]
