"""Anonymization engine — the main API.

Structural pass first (document numbers, phones, e-mails...), then the
name pass over its output:

    from anonimizador import anonymize, AnonymizationConfig

    anonymize("CPF: 123.456.789-00", AnonymizationConfig())
    # "CPF: [CPF]"

    anonymize("João Silva, CPF 123.456.789-00", AnonymizationConfig(), ["João Silva"])
    # "[PESSOA 1], CPF [CPF]"

With no config, or ``enabled=False``, the text comes back untouched.
Nothing is shared between calls, so calls may run concurrently.
"""

from __future__ import annotations
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from .config import AnonymizationConfig, load_config
from .names import NameIndexer
from .redactor import StructuredRedactor
from .types import AnonymizationResult

logger = logging.getLogger(__name__)


def _resolve(config: AnonymizationConfig | dict[str, Any] | None) -> AnonymizationConfig | None:
    config = load_config(config)
    if config is None or not config.enabled:
        return None
    return config


def anonymize_detailed(
    text: str,
    config: AnonymizationConfig | dict[str, Any] | None,
    names: Sequence[str] | None = None,
) -> AnonymizationResult:
    """Anonymize ``text`` and report every replacement made.

    ``names=None`` uses ``config.nomes_usuario``; a list passed here,
    even an empty one, takes precedence.
    """
    cfg = _resolve(config)
    if cfg is None or not text:
        return AnonymizationResult(text=text)

    intermediate, matches = StructuredRedactor(cfg).redact(text)

    if names is None:
        names = cfg.nomes_usuario
    if cfg.nomes and names:
        final, name_matches = NameIndexer().redact(intermediate, names)
        matches = matches + name_matches
    else:
        final = intermediate

    result = AnonymizationResult(text=final, matches=matches)
    if matches:
        logger.debug("anonymized %d spans: %s", len(matches), result.counts())
    return result


def anonymize(
    text: str,
    config: AnonymizationConfig | dict[str, Any] | None,
    names: Sequence[str] | None = None,
) -> str:
    """Return ``text`` with identifiers and names replaced by placeholders."""
    return anonymize_detailed(text, config, names).text


def anonymize_messages(
    messages: Iterable[dict],
    config: AnonymizationConfig | dict[str, Any] | None,
    names: Sequence[str] | None = None,
    *,
    content_key: str = "content",
) -> list[dict]:
    """Anonymize a list of OpenAI-format messages.

    Returns new message dicts.  Does NOT mutate the originals.
    """
    cfg = _resolve(config)
    out: list[dict] = []
    for msg in messages:
        content = msg.get(content_key)
        if cfg is not None and isinstance(content, str) and content:
            out.append({**msg, content_key: anonymize(content, cfg, names)})
        else:
            out.append(dict(msg))
    return out
