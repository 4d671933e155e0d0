# publicview/core/loader.py

"""Field policy loader for types that cannot carry suppression markers."""

import yaml
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

from publicview.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def qualified_name(cls: type) -> str:
    """Returns the ``module.QualName`` key used by field policies."""
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass(frozen=True)
class FieldPolicy:
    """Immutable set of extra hidden fields, keyed by qualified type name."""

    hidden_fields: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

    def hides(self, cls: type, attr: str) -> bool:
        """Checks whether ``attr`` of ``cls`` is hidden by this policy."""
        if not self.hidden_fields:
            return False
        return attr in self.hidden_fields.get(qualified_name(cls), frozenset())

    def __bool__(self) -> bool:
        return bool(self.hidden_fields)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.hidden_fields.items())))


EMPTY_POLICY = FieldPolicy()


class PolicyLoader:
    """Loads a YAML field policy file.

    Expected layout::

        hidden_fields:
          myapp.models.User:
            - password
    """

    REQUIRED_SECTION = "hidden_fields"

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> FieldPolicy:
        """Reads and validates the policy file.

        Returns:
            FieldPolicy built from the file contents

        Raises:
            ConfigurationError: If the file is missing, invalid, or malformed.
        """
        try:
            if not self.path.exists():
                error_msg = f"Field policy file not found: {self.path}"
                logger.error(error_msg)
                raise ConfigurationError(error_msg)

            with open(self.path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)

            if not raw:
                raise ConfigurationError("Field policy file is empty or invalid")

            policy = FieldPolicy(hidden_fields=self._parse(raw))

            logger.info(
                "Field policy loaded successfully",
                extra={
                    "policy_path": str(self.path),
                    "type_count": len(policy.hidden_fields),
                },
            )
            return policy

        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}", exc_info=True)
            raise ConfigurationError(f"Failed to parse {self.path.name}: {e}") from e
        except OSError as e:
            logger.error(f"Field policy loading failed: {e}", exc_info=True)
            raise ConfigurationError(f"Failed to read field policy: {e}") from e

    def _parse(self, raw: Any) -> Dict[str, FrozenSet[str]]:
        """Validates the document shape.

        Raises:
            ConfigurationError: If a required section or entry is malformed.
        """
        if not isinstance(raw, dict) or self.REQUIRED_SECTION not in raw:
            error_msg = f"Missing required configuration section: {self.REQUIRED_SECTION}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        section = raw[self.REQUIRED_SECTION] or {}
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"'{self.REQUIRED_SECTION}' must map type names to field lists"
            )

        hidden: Dict[str, FrozenSet[str]] = {}
        for type_name, attrs in section.items():
            if not isinstance(attrs, list) or not all(isinstance(a, str) for a in attrs):
                raise ConfigurationError(
                    f"Hidden fields for '{type_name}' must be a list of field names"
                )
            hidden[str(type_name)] = frozenset(attrs)

        return hidden


def load_policy(path: Optional[Union[str, Path]]) -> FieldPolicy:
    """Loads the policy at ``path``, or returns the empty policy when unset."""
    if not path:
        return EMPTY_POLICY
    return PolicyLoader(path).load()
