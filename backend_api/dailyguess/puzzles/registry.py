from __future__ import annotations

from typing import Dict, List, Type

from .domains import BUILTIN_DOMAINS, Domain
from .engines import Engine, FreeTextEngine, LetterDiffEngine


# PUBLIC_INTERFACE
class EngineRegistry:
    """Registry mapping comparator kinds to engine classes."""

    _registry: Dict[str, Type] = {
        "letters": LetterDiffEngine,
        "free_text": FreeTextEngine,
    }

    @classmethod
    def get(cls, kind: str):
        """Return an engine class for a comparator kind, or raise KeyError."""
        key = (kind or "").strip().lower()
        if key not in cls._registry:
            raise KeyError(f"Unknown comparator kind: {kind!r}")
        return cls._registry[key]

    @classmethod
    def register(cls, kind: str, engine_cls) -> None:
        """Register or override an engine class for a comparator kind."""
        key = (kind or "").strip().lower()
        if not key:
            raise ValueError("kind must be a non-empty string")
        cls._registry[key] = engine_cls


# PUBLIC_INTERFACE
class DomainRegistry:
    """Registry of Domain descriptors keyed by name."""

    _registry: Dict[str, Domain] = {d.name: d for d in BUILTIN_DOMAINS}

    @classmethod
    def get(cls, name: str) -> Domain:
        key = (name or "").strip().lower()
        if key not in cls._registry:
            raise KeyError(f"Unknown domain: {name!r}")
        return cls._registry[key]

    @classmethod
    def register(cls, domain: Domain) -> None:
        if not domain.name:
            raise ValueError("domain.name must be a non-empty string")
        cls._registry[domain.name] = domain

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._registry)


# PUBLIC_INTERFACE
def get_engine(domain: Domain) -> Engine:
    """Instantiate the comparator engine configured for a domain.

    Example:
        engine = get_engine(DomainRegistry.get("plant"))
        result = engine.evaluate(target="rosa rubiginosa", guess="rosa")
    """
    engine_cls = EngineRegistry.get(domain.comparator)
    if issubclass(engine_cls, FreeTextEngine):
        return engine_cls(partial_match_score=domain.partial_match_score)
    return engine_cls()


# PUBLIC_INTERFACE
def get_domain(name: str) -> Domain:
    return DomainRegistry.get(name)
