"""Typed configuration dataclasses for heuristic-matcher.

Provides strongly-typed configuration objects on top of the dict returned
by :func:`hmatch.config.load_config`.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Dict, Any


@dataclass
class OutputConfig:
    """CLI output configuration."""
    format: str = "text"  # "text" or "json"
    precision: int = 3  # decimals shown for scores
    show_errors: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class KnowledgeConfig:
    """Schema registry configuration for CLI runs."""
    skills: bool = True  # register the expr: string schema

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AppConfig:
    """Root application configuration with all subsections."""
    log_level: str = "INFO"
    output: OutputConfig = field(default_factory=OutputConfig)
    knowledge: KnowledgeConfig = field(default_factory=KnowledgeConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary matching the load_config format."""
        return {
            "log_level": self.log_level,
            "output": self.output.to_dict(),
            "knowledge": self.knowledge.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create typed config from dictionary (from load_config).

        Unknown keys inside a section are ignored.
        """
        return cls(
            log_level=data.get("log_level", "INFO"),
            output=OutputConfig(**_known(OutputConfig, data.get("output", {}))),
            knowledge=KnowledgeConfig(**_known(KnowledgeConfig, data.get("knowledge", {}))),
        )


def _known(section_cls, values: Dict[str, Any]) -> Dict[str, Any]:
    names = section_cls.__dataclass_fields__.keys()
    return {k: v for k, v in values.items() if k in names}


__all__ = ["AppConfig", "OutputConfig", "KnowledgeConfig"]
