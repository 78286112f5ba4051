"""YAML loading for templates and data workspaces."""

from __future__ import annotations

from pathlib import Path

import yaml

from ..errors import ConfigurationError


def _read_yaml(path: Path) -> dict:
    try:
        content = yaml.safe_load(path.read_text(encoding="utf-8-sig"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"{path} must contain a mapping")
    return content


def load_workspace(path: Path) -> dict:
    """Load a workspace file with ``templates``, ``assessments``, ``subscriptions`` and ``vendors``.

    A ``templates_dir`` key (relative to the workspace file) adds every template
    YAML found under that directory.
    """
    data = _read_yaml(path)
    templates_dir = data.pop("templates_dir", None)
    if templates_dir:
        data["templates"] = list(data.get("templates") or []) + [
            t["content"] for t in get_available_templates(path.parent / templates_dir)
        ]
    return data


def get_available_templates(templates_dir: Path) -> list[dict]:
    """List every template YAML under a directory."""
    templates: list[dict] = []

    if not templates_dir.exists():
        return templates

    for yaml_file in sorted(templates_dir.rglob("*.yaml")):
        content = _read_yaml(yaml_file)
        if content.get("id"):
            templates.append({
                "id": content["id"],
                "name": content.get("name", ""),
                "version": str(content.get("version", "")),
                "path": str(yaml_file),
                "content": content,
            })

    return templates


def load_template_file(path: Path) -> dict:
    return _read_yaml(path)