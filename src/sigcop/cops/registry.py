"""
Cop registry.

Central registry for all cops. Handles lookup and selection by configuration.
"""

from typing import Type

from sigcop.config.models import SigCopConfig
from sigcop.cops.base import Cop
from sigcop.cops.empty_line_after_sig import EmptyLineAfterSig
from sigcop.cops.methods_should_have_signatures import MethodsShouldHaveSignatures


class CopRegistry:
    """Registry for cops."""

    _cops: dict[str, Type[Cop]] = {
        MethodsShouldHaveSignatures.name: MethodsShouldHaveSignatures,
        EmptyLineAfterSig.name: EmptyLineAfterSig,
    }

    @classmethod
    def get_cop(cls, name: str) -> Type[Cop]:
        """
        Get a cop class by name.

        Raises:
            ValueError: If no cop is registered under that name
        """
        if name not in cls._cops:
            raise ValueError(f"Unknown cop: {name}. Available cops: {list(cls._cops.keys())}")
        return cls._cops[name]

    @classmethod
    def register_cop(cls, cop_class: Type[Cop]):
        """Register a new cop class under its ``name``."""
        if not issubclass(cop_class, Cop):
            raise TypeError(f"{cop_class} must extend Cop")
        if not cop_class.name:
            raise ValueError(f"{cop_class.__name__} has no name")

        cls._cops[cop_class.name] = cop_class

    @classmethod
    def list_cops(cls) -> list[str]:
        return list(cls._cops.keys())

    @classmethod
    def enabled_cops(cls, config: SigCopConfig, only: list[str] | None = None) -> list[Type[Cop]]:
        """Cops to run: ``only`` if given (enabled or not), else everything enabled."""
        if only:
            return [cls.get_cop(name) for name in only]
        return [cop for name, cop in cls._cops.items() if config.is_enabled(name)]
