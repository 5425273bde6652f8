"""
Pool Contracts — JSON Schema контракты снапшотов и событий пула

Схемы (src/core/contracts/schema/, Draft 2020-12):
- pool_state.json — снапшот пула (PoolState)
- pool_event.json — события пула и фабрики; поля проверяются по name

Каждая схема проходит meta-валидацию один раз при первой загрузке;
скомпилированный валидатор переиспользуется всеми вызовами.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from jsonschema import Draft202012Validator, SchemaError, ValidationError
from pydantic import BaseModel


SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADING
# =============================================================================


@lru_cache(maxsize=None)
def load_schema(schema_name: str, schema_dir: Path = SCHEMA_DIR) -> Dict[str, Any]:
    """
    Загрузить и проверить схему контракта.

    Raises:
        FileNotFoundError: нет файла схемы
        ValueError: файл не является корректной Draft 2020-12 схемой
    """
    schema_path = schema_dir / f"{schema_name}.json"
    if not schema_path.is_file():
        raise FileNotFoundError(f"Schema not found: {schema_path}")

    with open(schema_path, "r", encoding="utf-8") as f:
        schema = json.load(f)

    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as e:
        raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e.message}") from e

    return schema


@lru_cache(maxsize=None)
def _compiled(schema_name: str) -> Draft202012Validator:
    return Draft202012Validator(load_schema(schema_name))


# =============================================================================
# CONTRACTS
# =============================================================================


class PoolContract:
    """Контракт одного вида документа (schema_name задаётся подклассом)."""

    schema_name: str = ""

    @property
    def validator(self) -> Draft202012Validator:
        return _compiled(self.schema_name)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: первое нарушение контракта
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def violations(self, data: Dict[str, Any]) -> List[str]:
        """Все нарушения как "path: message", упорядоченные по пути."""
        errors = sorted(self.validator.iter_errors(data), key=lambda e: list(map(str, e.path)))
        return [f"{'/'.join(map(str, e.path)) or '<root>'}: {e.message}" for e in errors]


class PoolStateValidator(PoolContract):
    schema_name = "pool_state"


class PoolEventValidator(PoolContract):
    schema_name = "pool_event"


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_pool_state(data: Dict[str, Any]) -> None:
    PoolStateValidator().validate(data)


def validate_pool_event(data: Dict[str, Any]) -> None:
    PoolEventValidator().validate(data)


def dump_contract(model: BaseModel, contract: PoolContract) -> Dict[str, Any]:
    """Pydantic модель → JSON-совместимый dict, проверенный по контракту."""
    data = model.model_dump(mode="json")
    contract.validate(data)
    return data


__all__ = [
    "SCHEMA_DIR",
    "load_schema",
    "PoolContract",
    "PoolStateValidator",
    "PoolEventValidator",
    "ValidationError",
    "validate_pool_state",
    "validate_pool_event",
    "dump_contract",
]
