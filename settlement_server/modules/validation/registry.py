"""Engine-tag to validator lookup."""

from __future__ import annotations

from typing import Callable, TypeVar

from .base import SequenceValidator
from .generic import GenericValidator
from .tetris import TetrisValidator

ValidatorT = TypeVar("ValidatorT", bound=type)


class ValidatorRegistry:
    """Maps an engine tag to a validator; unknown tags get the fallback."""

    def __init__(self, fallback: SequenceValidator) -> None:
        self._validators: dict[str, SequenceValidator] = {}
        self._fallback = fallback

    def register(self, engine: str, validator: SequenceValidator) -> None:
        self._validators[engine] = validator

    def get(self, engine: str) -> SequenceValidator:
        return self._validators.get(engine, self._fallback)

    def __contains__(self, engine: str) -> bool:
        return engine in self._validators

    def engines(self) -> list[str]:
        return sorted(self._validators)


default_registry = ValidatorRegistry(fallback=GenericValidator())
default_registry.register("tetris", TetrisValidator())


def register_validator(engine: str, registry: ValidatorRegistry = default_registry) -> Callable[[ValidatorT], ValidatorT]:
    """Class decorator registering an instance of the decorated validator."""

    def decorator(cls: ValidatorT) -> ValidatorT:
        registry.register(engine, cls())
        return cls

    return decorator
