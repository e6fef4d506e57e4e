"""OpenAI-compatible middleware — anonymize chat messages before they
leave for an AI provider.

Usage:

    mw = AnonymizeMiddleware.create(
        config={"enabled": True, "nomesUsuario": ["João Silva"]},
    )

    # Before sending to the provider
    safe_messages = mw.pre_send(messages)

Placeholders are one-way: there is nothing to restore in the response.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .config import AnonymizationConfig, load_config
from .engine import anonymize, anonymize_messages


@dataclass
class AnonymizeMiddleware:
    """Middleware that sits between client and LLM provider."""

    config: AnonymizationConfig | None
    names: list[str] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        *,
        config: AnonymizationConfig | dict[str, Any] | None = None,
        names: list[str] | None = None,
    ) -> "AnonymizeMiddleware":
        """Factory: normalizes a settings dict; names default to the config's list."""
        cfg = load_config(config)
        if names is None:
            names = list(cfg.nomes_usuario) if cfg is not None else []
        return cls(config=cfg, names=names)

    @property
    def active(self) -> bool:
        return self.config is not None and self.config.enabled

    def pre_send(self, messages: list[dict]) -> list[dict]:
        """Anonymize outbound messages."""
        return anonymize_messages(messages, self.config, self.names)

    def anonymize_text(self, text: str) -> str:
        """Anonymize a single string (convenience)."""
        return anonymize(text, self.config, self.names)
