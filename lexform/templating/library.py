"""YAML-backed library of legal document templates.

Each template is stored under its name with a body containing
``{{placeholder}}`` tokens. Placeholders are never stored on their own;
they are derived from the body whenever they are asked for.
"""

from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from lexform.errors import TemplateNotFoundError, TemplateValidationError
from lexform.utils.logger import get_logger

from .placeholders import extract_placeholders, format_placeholder

logger = get_logger(__name__)

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"

_REQUIRED_ATTRS = ("name", "category", "content")


@dataclass
class DocumentTemplate:
    """A named document template."""

    name: str
    category: str
    content: str
    description: str = ""
    language: str = "english"
    required_documents: list[str] = field(default_factory=list)
    status: str = STATUS_ACTIVE

    @property
    def placeholders(self) -> list[str]:
        return extract_placeholders(self.content)

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    def to_dict(self) -> dict[str, Any]:
        """Serialize the template, including its placeholder tokens."""
        data = asdict(self)
        data["placeholders"] = [format_placeholder(p) for p in self.placeholders]
        return data


class TemplateLibrary:
    """In-memory template store loaded from, and saved to, a YAML file.

    Args:
        templates_path: Path to the YAML file of template definitions.
    """

    def __init__(self, templates_path: Path = Path("configs/templates.yaml")) -> None:
        self.templates_path = templates_path
        self._templates: dict[str, DocumentTemplate] = self._load_templates(
            templates_path
        )

    def _load_templates(self, path: Path) -> dict[str, DocumentTemplate]:
        if not path.exists():
            logger.debug("No templates file at %s, starting empty", path)
            return {}

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise TemplateValidationError(
                f"{path} must map template names to definitions"
            )

        templates = {
            str(name): _from_definition(str(name), definition)
            for name, definition in data.items()
        }
        logger.info("Loaded %d templates from %s", len(templates), path)
        return templates

    def list_templates(
        self, include_inactive: bool = False
    ) -> list[DocumentTemplate]:
        """Return templates, active ones only unless asked otherwise."""
        return [
            t for t in self._templates.values() if include_inactive or t.is_active
        ]

    def get(self, name: str) -> DocumentTemplate:
        """Look up a template by name.

        Raises:
            TemplateNotFoundError: If no template has that name.
        """
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def add(self, template: DocumentTemplate) -> DocumentTemplate:
        """Add a new template.

        Raises:
            TemplateValidationError: If name, category or content is empty,
                or a template with the same name exists.
        """
        _validate(template)
        if template.name in self._templates:
            raise TemplateValidationError(f"Template already exists: {template.name}")
        self._templates[template.name] = template
        logger.info(
            "Added template '%s' with %d placeholders",
            template.name,
            len(template.placeholders),
        )
        return template

    def update(self, name: str, **changes: Any) -> DocumentTemplate:
        """Replace attributes of an existing template.

        Renaming is not supported; ``name`` in ``changes`` is rejected.

        Raises:
            TemplateNotFoundError: If the template does not exist.
            TemplateValidationError: If the result is invalid.
        """
        current = self.get(name)
        if "name" in changes and changes["name"] != name:
            raise TemplateValidationError("Templates cannot be renamed")
        changes.pop("name", None)
        changes.pop("placeholders", None)

        updated = replace(current, **changes)
        _validate(updated)
        self._templates[name] = updated
        logger.info("Updated template '%s'", name)
        return updated

    def remove(self, name: str) -> None:
        """Delete a template.

        Raises:
            TemplateNotFoundError: If the template does not exist.
        """
        self.get(name)
        del self._templates[name]
        logger.info("Removed template '%s'", name)

    def save(self, path: Path | None = None) -> Path:
        """Write the library to YAML, by default back to where it was loaded."""
        path = path or self.templates_path
        data = {}
        for name, template in self._templates.items():
            entry = asdict(template)
            entry.pop("name")
            data[name] = entry

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
        logger.info("Saved %d templates to %s", len(data), path)
        return path


def _validate(template: DocumentTemplate) -> None:
    missing = [attr for attr in _REQUIRED_ATTRS if not getattr(template, attr)]
    if missing:
        raise TemplateValidationError(
            f"Missing required fields: {', '.join(missing)}"
        )


def _from_definition(name: str, definition: Any) -> DocumentTemplate:
    """Build a template from one YAML entry, ignoring keys it does not know."""
    if not isinstance(definition, dict):
        raise TemplateValidationError(f"Template '{name}' must be a mapping")

    known = {f.name for f in fields(DocumentTemplate)} - {"name"}
    # placeholders are derived and name comes from the mapping key.
    expected = known | {"name", "placeholders"}
    ignored = sorted(str(key) for key in definition if key not in expected)
    if ignored:
        logger.warning(
            "Template '%s': ignoring unknown keys %s", name, ", ".join(ignored)
        )

    missing = [attr for attr in ("category", "content") if attr not in definition]
    if missing:
        raise TemplateValidationError(
            f"Template '{name}' is missing: {', '.join(missing)}"
        )
    return DocumentTemplate(
        name=name, **{k: v for k, v in definition.items() if k in known}
    )
