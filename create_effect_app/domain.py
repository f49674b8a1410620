"""Project-type models resolved from CLI options or interactive prompts."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ExampleProject(BaseModel):
    """An official example, copied as-is."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["example"] = "example"
    example: str = Field(..., min_length=1)


class TemplateProject(BaseModel):
    """A template, customized after download according to user preferences.

    ``template_repo`` takes precedence over ``template_folder``, which takes
    precedence over the built-in ``template`` name.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["template"] = "template"
    template: str = Field(default="basic", min_length=1)
    template_folder: str | None = Field(
        default=None, description="Absolute or relative path to a local template folder"
    )
    template_repo: str | None = Field(
        default=None, description="GitHub repo spec such as owner/repo/path@ref or a URL"
    )
    with_changesets: bool = False
    with_nix_flake: bool = False
    with_eslint: bool = False
    with_workflows: bool = False

    @property
    def source_label(self) -> str:
        """What the project is initialized from, for console output."""
        if self.template_repo:
            return self.template_repo
        if self.template_folder:
            return self.template_folder
        return self.template


ProjectType = Union[ExampleProject, TemplateProject]


class ProjectConfig(BaseModel):
    """Fully resolved configuration for one invocation."""

    project_name: Path
    project_type: ProjectType = Field(..., discriminator="kind")
