"""Anonymization settings and the YAML/JSON/dict loaders.

The settings UI stores a camelCase object; files may use snake_case.
Both shapes are accepted, optionally nested under an "anonymization" key.

Example YAML:

    anonymization:
      enabled: true
      cpf: true
      valores: false          # currency is opt-in
      contaBancaria: true
      join_split_digits: true
      nomesUsuario:
        - João Silva
        - EMPRESA LTDA (1ª reclamada)
"""

from __future__ import annotations
import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any


class ConfigError(ValueError):
    """Raised when a settings object has the wrong shape."""


@dataclass
class AnonymizationConfig:
    """Which categories the engine redacts.

    Structural categories are on unless explicitly switched off.
    ``valores`` (currency) is opt-in.
    """
    enabled: bool = True
    cnpj: bool = True
    cpf: bool = True
    rg: bool = True
    pis: bool = True
    ctps: bool = True
    cep: bool = True
    processo: bool = True
    oab: bool = True
    telefone: bool = True
    email: bool = True
    conta_bancaria: bool = True
    valores: bool = False
    nomes: bool = True              # gate for the name pass
    nomes_usuario: list[str] = field(default_factory=list)
    # Remove line breaks that split a number in two (PDF extraction)
    join_split_digits: bool = False


# camelCase (settings UI) → field name
_ALIASES = {
    "contaBancaria": "conta_bancaria",
    "nomesUsuario": "nomes_usuario",
    "joinSplitDigits": "join_split_digits",
}
_BOOL_FIELDS = {f.name for f in fields(AnonymizationConfig)} - {"nomes_usuario"}


def load_config(data: dict[str, Any] | AnonymizationConfig | None) -> AnonymizationConfig | None:
    """Normalize a settings dict into an ``AnonymizationConfig``.

    ``None`` stays ``None`` (the engine treats it as "off").
    """
    if data is None or isinstance(data, AnonymizationConfig):
        return data
    if not isinstance(data, dict):
        raise ConfigError(f"anonymization settings must be a mapping, got {type(data).__name__}")

    if "anonymization" in data:
        data = data["anonymization"] or {}
        if not isinstance(data, dict):
            raise ConfigError("'anonymization' must be a mapping")

    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _ALIASES.get(key, key)
        if name in _BOOL_FIELDS:
            # null means "not set"
            if value is None:
                continue
            if not isinstance(value, bool):
                raise ConfigError(f"{key!r} must be true or false, got {value!r}")
            kwargs[name] = value
        elif name == "nomes_usuario":
            if value is None:
                continue
            if not isinstance(value, list) or not all(isinstance(n, str) for n in value):
                raise ConfigError(f"{key!r} must be a list of strings")
            kwargs[name] = list(value)
        # unknown keys are ignored

    # A settings object without "enabled" is treated as switched off.
    kwargs.setdefault("enabled", False)
    return AnonymizationConfig(**kwargs)


def load_from_yaml(path: str | Path) -> AnonymizationConfig | None:
    """Load settings from a YAML file."""
    import yaml
    with open(path, encoding="utf-8") as f:
        return load_config(yaml.safe_load(f) or {})


def load_from_file(path: str | Path) -> AnonymizationConfig | None:
    """Load settings from a ``.json`` file or, otherwise, YAML."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        with open(path, encoding="utf-8") as f:
            return load_config(json.load(f))
    return load_from_yaml(path)
