"""Group configuration loader for plugin check issue grouping."""

from typing import Any, Dict, List, Literal, Optional
from pathlib import Path
import json
import logging

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..grouping.rule_set import RuleConfigError, RuleSet

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILE = Path(__file__).resolve().parent.parent / "data" / "groups.json"


class RulesFileError(RuleConfigError):
    """Invalid or unreadable group configuration file."""
    pass


class ChildGroupSchema(BaseModel):
    """Schema for a nested group. Nested groups cannot have children."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1, description="Unique group identifier")
    title: str = Field(description="Display title")
    type: Optional[Literal["prefix", "contains"]] = Field(
        default=None,
        description="Match type; omitted for pure container groups"
    )
    checks: Optional[List[str]] = Field(
        default=None,
        min_length=1,
        description="Patterns matched against issue codes"
    )
    parent: Optional[str] = Field(default=None, description="Parent group id")

    @model_validator(mode="after")
    def _check_matcher(self):
        if self.type is not None and not self.checks:
            raise ValueError(f"group '{self.id}' has type '{self.type}' but no checks")
        if self.checks is not None and self.type is None:
            raise ValueError(f"group '{self.id}' has checks but no type")
        if self.checks is not None and any(not check for check in self.checks):
            raise ValueError(f"group '{self.id}' has an empty check pattern")
        return self


class GroupSchema(ChildGroupSchema):
    """Schema for a top-level group."""

    children: Optional[Dict[str, ChildGroupSchema]] = None


class RulesLoader:
    """Load grouping rules from JSON or YAML documents.

    Expected document format (JSON shown, YAML is equivalent):
    ```json
    {
      "security": {
        "id": "security",
        "title": "Security",
        "children": {
          "escaping": {
            "id": "escaping",
            "title": "Escaping",
            "type": "prefix",
            "checks": ["WordPress.Security.EscapeOutput"],
            "parent": "security"
          }
        }
      },
      "i18n": {
        "id": "i18n",
        "title": "Internationalization",
        "type": "contains",
        "checks": ["I18n"]
      }
    }
    ```
    """

    SCHEMA_KEY = "$schema"

    def load(self, path: Optional[str] = None) -> RuleSet:
        """Load a rule set.

        Args:
            path: Path to the group configuration (None for the bundled default)

        Returns:
            RuleSet built from the document

        Raises:
            RulesFileError: If the file cannot be read, decoded or validated
        """
        records = self.load_records(path)
        try:
            rule_set = RuleSet.from_records(records)
        except RulesFileError:
            raise
        except RuleConfigError as e:
            raise RulesFileError(f"Invalid group configuration file: {e}") from e

        logger.info(f"Loaded {len(rule_set)} grouping rules from {path or DEFAULT_RULES_FILE}")
        return rule_set

    def load_records(self, path: Optional[str] = None) -> List[Dict[str, Any]]:
        """Read, validate and flatten a group configuration document.

        Args:
            path: Path to the group configuration (None for the bundled default)

        Returns:
            Flat list of rule records in declaration order, each group
            followed by its children
        """
        file_path = Path(path) if path else DEFAULT_RULES_FILE
        data = self._read_document(file_path)
        groups = self.validate(data)
        return self.flatten(groups)

    def _read_document(self, file_path: Path) -> Any:
        if not file_path.exists():
            raise RulesFileError(f"Invalid group configuration file: File not found: {file_path}")
        if not file_path.is_file():
            raise RulesFileError(f"Invalid group configuration file: Not a file: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise RulesFileError(
                f"Invalid group configuration file: Could not read file: {file_path}: {e}"
            ) from e

        suffix = file_path.suffix.lower()
        try:
            if suffix in (".yaml", ".yml"):
                return yaml.safe_load(content)
            return json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise RulesFileError(
                f"Invalid group configuration file: Decode error in {file_path}: {e}"
            ) from e

    def validate(self, data: Any) -> Dict[str, GroupSchema]:
        """Validate a decoded document against the group schema.

        Args:
            data: Decoded JSON/YAML document

        Returns:
            Mapping of group key to validated group, in document order

        Raises:
            RulesFileError: If the document does not satisfy the schema
        """
        if not isinstance(data, dict):
            raise RulesFileError(
                "Invalid group configuration file: top-level value must be an object"
            )

        groups: Dict[str, GroupSchema] = {}
        errors: List[str] = []

        for key, value in data.items():
            if key == self.SCHEMA_KEY:
                continue
            try:
                group = GroupSchema.model_validate(value)
            except ValidationError as e:
                errors.extend(self._format_errors(key, e))
                continue

            if group.id != key:
                errors.append(f'Property "{key}": id "{group.id}" does not match its key')
            for child_key, child in (group.children or {}).items():
                if child.id != child_key:
                    errors.append(
                        f'Property "{key}.children.{child_key}": '
                        f'id "{child.id}" does not match its key'
                    )
            groups[key] = group

        if errors:
            raise RulesFileError(
                f"Invalid group configuration file: JSON validation failed: {'; '.join(errors)}"
            )
        return groups

    @staticmethod
    def _format_errors(key: str, error: ValidationError) -> List[str]:
        messages = []
        for item in error.errors():
            location = ".".join(str(part) for part in (key,) + tuple(item["loc"]))
            messages.append(f'Property "{location}": {item["msg"]}')
        return messages

    @staticmethod
    def flatten(groups: Dict[str, GroupSchema]) -> List[Dict[str, Any]]:
        """Promote children into the flat rule namespace.

        Args:
            groups: Validated groups

        Returns:
            List of records with keys id, title, type, checks, parent
        """
        records = []
        for group in groups.values():
            records.append(RulesLoader._to_record(group, group.parent))
            for child in (group.children or {}).values():
                records.append(RulesLoader._to_record(child, child.parent or group.id))
        return records

    @staticmethod
    def _to_record(group: ChildGroupSchema, parent: Optional[str]) -> Dict[str, Any]:
        record: Dict[str, Any] = {"id": group.id, "title": group.title}
        if group.type:
            record["type"] = group.type
            record["checks"] = list(group.checks or [])
        if parent:
            record["parent"] = parent
        return record


def default_rules_path() -> str:
    """Get the path of the bundled group configuration."""
    return str(DEFAULT_RULES_FILE)
