"""Prefill data loading.

Prefill files supply fixed, pre-keyed instances for some entity types (e.g. a
country list) so that generated entities reference known records. Rows are
grouped by entity class name:

    Country:
      - id: 1
        name: Finland
      - id: 2
        name: Sweden
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from relseed.config import GenerationConfig
from relseed.exceptions import PrefillError
from relseed.introspection import build_instance
from relseed.schema import Schema

logger = logging.getLogger(__name__)


class PrefillSource:
    """
    Rows per entity type name, loaded from YAML or JSON.

    Example:
        >>> source = PrefillSource.from_yaml("fixtures/prefill.yaml")
        >>> config = GenerationConfig().count(Address, 10)
        >>> source.apply(schema, config)
    """

    def __init__(self, data: dict[str, list[dict[str, Any]]]):
        self._data = data

    @classmethod
    def from_directory(cls, directory: str | Path) -> "PrefillSource":
        """
        Load prefill from a directory with environment detection.

        Resolution order:
        1. prefill.{ENV}.yaml (if RELSEED_ENV or ENV is set)
        2. prefill.yaml
        3. prefill.json

        Raises:
            FileNotFoundError: If no prefill file is found
        """
        directory = Path(directory)
        env = os.getenv("RELSEED_ENV") or os.getenv("ENV")

        if env:
            env_yaml = directory / f"prefill.{env}.yaml"
            if env_yaml.exists():
                logger.info(f"Loading prefill for environment: {env}")
                return cls.from_yaml(env_yaml)

        base_yaml = directory / "prefill.yaml"
        if base_yaml.exists():
            logger.info("Loading base prefill (YAML)")
            return cls.from_yaml(base_yaml)

        base_json = directory / "prefill.json"
        if base_json.exists():
            logger.info("Loading base prefill (JSON)")
            return cls.from_json(base_json)

        raise FileNotFoundError(
            f"No prefill found in {directory}. Expected:\n"
            + (f"  - prefill.{env}.yaml (if ENV={env})\n" if env else "")
            + "  - prefill.yaml or prefill.json"
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "PrefillSource":
        """
        Load prefill rows from a YAML file.

        Args:
            path: Path to YAML file

        Returns:
            PrefillSource instance

        Raises:
            PrefillError: If the file is not a mapping of entity names to row lists

        Example:
            >>> source = PrefillSource.from_yaml("fixtures/prefill.yaml")
        """
        import yaml

        with open(Path(path)) as f:
            config = yaml.safe_load(f) or {}
        return cls(cls._parse(config, path))

    @classmethod
    def from_json(cls, path: str | Path) -> "PrefillSource":
        """Load prefill rows from a JSON file (same layout as YAML)."""
        with open(Path(path)) as f:
            config = json.load(f)
        return cls(cls._parse(config, path))

    @staticmethod
    def _parse(config: Any, path: str | Path) -> dict[str, list[dict[str, Any]]]:
        if not isinstance(config, dict):
            raise PrefillError(f"Prefill file {path} must map entity names to row lists")

        data = {}
        for name, rows in config.items():
            if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
                raise PrefillError(
                    f"Prefill file {path}: '{name}' must be a list of field mappings"
                )
            data[name] = rows
        return data

    def entity_names(self) -> list[str]:
        return list(self._data)

    def get_rows(self, name: str) -> list[dict[str, Any]]:
        """Get raw rows for an entity name, or an empty list."""
        return self._data.get(name, [])

    def apply(self, schema: Schema, config: GenerationConfig) -> GenerationConfig:
        """
        Build instances from the rows and register them as prefill.

        Args:
            schema: Schema whose entity names the rows are grouped by
            config: Run configuration to add prefill to

        Returns:
            The same config, for chaining

        Raises:
            PrefillError: If a name is not an entity or a row lacks its key
        """
        for name, rows in self._data.items():
            try:
                definition = schema.get_entity_by_name(name)
            except KeyError:
                raise PrefillError(
                    f"Prefill entity '{name}' is not registered in the schema"
                ) from None

            instances = []
            for position, row in enumerate(rows, start=1):
                if definition.key_field and row.get(definition.key_field) is None:
                    raise PrefillError(
                        f"Prefill row {position} of '{name}' has no key "
                        f"'{definition.key_field}'"
                    )
                try:
                    instances.append(build_instance(definition.entity_type, dict(row)))
                except TypeError as e:
                    raise PrefillError(f"Prefill row {position} of '{name}': {e}") from e

            logger.debug(f"Prefill {name}: {len(instances)} row(s)")
            config.prefill(definition.entity_type, instances)

        return config
