"""User G-code snippets attached to lifecycle hooks."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class GCodeHook(Enum):
    """Points in the job where snippets are inserted.

    Values match the keys stored by the layout editor.
    """

    BEFORE_ALL = "beforeAll"
    BEFORE_JOB = "beforeJob"
    BEFORE_PATH = "beforePath"
    AFTER_PATH = "afterPath"
    AFTER_JOB = "afterJob"
    AFTER_ALL = "afterAll"


@dataclass(frozen=True, slots=True)
class GCodeSnippet:
    """A user-authored G-code template.

    Attributes:
        id: Unique snippet identifier
        name: Display name
        hook: Lifecycle point where the snippet is inserted
        template: G-code text with ``{{dotted.path}}`` placeholders
        enabled: Disabled snippets are ignored
        order: Position among snippets of the same hook, ascending
        description: Free-form note
    """

    id: str
    name: str
    hook: GCodeHook
    template: str
    enabled: bool = True
    order: int = 0
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "hook": self.hook.value,
            "template": self.template,
            "enabled": self.enabled,
            "order": self.order,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GCodeSnippet":
        """Deserialize from the editor's snippet record.

        Args:
            data: Snippet record

        Returns:
            GCodeSnippet instance

        Raises:
            KeyError: If ``id`` or ``hook`` is missing
            ValueError: If ``hook`` is not a known hook name
        """
        template = data.get("template", "")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            hook=GCodeHook(data["hook"]),
            template=str(template or ""),
            enabled=bool(data.get("enabled", True)),
            order=int(data.get("order", 0)),
            description=str(data.get("description", "")),
        )
