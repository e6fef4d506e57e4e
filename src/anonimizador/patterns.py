"""Pattern registry — one rule per structural category, in priority order.

The order is the tie-breaker for contested spans: the more literal
separators and the more fixed the digit count, the earlier the rule.
Every regex uses bounded quantifiers only, so a scan is linear in the
length of the text.
"""

from __future__ import annotations
import re
from dataclasses import dataclass

from .config import AnonymizationConfig
from .types import Match

_SP = r"\s{0,3}"    # optional spacing around separators
_NUM = r"(?:n[º°o]\.?\s{0,2})?"   # "nº 123"


@dataclass(frozen=True, slots=True)
class PatternRule:
    category: str           # also the placeholder label
    flag: str               # AnonymizationConfig field that gates it
    regex: re.Pattern[str]

    @property
    def placeholder(self) -> str:
        return f"[{self.category}]"


_AGENCIA = rf"ag(?:[êe]ncia)?\.?{_SP}{_NUM}:?{_SP}\d(?:[.-]?\d){{0,9}}"
_CONTA_LABEL = r"(?:c\.?\s{0,2}/?\s{0,2}c\.?|conta(?:\s{1,3}corrente)?)"

REGISTRY: tuple[PatternRule, ...] = (
    # CNJ process number: 0000000-00.0000.0.00.0000, spaces allowed
    PatternRule("PROCESSO", "processo", re.compile(
        rf"(?<!\d)\d{{7}}{_SP}-{_SP}\d{{2}}{_SP}\.{_SP}\d{{4}}{_SP}\.{_SP}\d"
        rf"{_SP}\.{_SP}\d{{2}}{_SP}\.{_SP}\d{{4}}(?!\d)"
    )),

    # CNPJ: 00.000.000/0000-00 or 14 bare digits
    PatternRule("CNPJ", "cnpj", re.compile(
        r"(?<!\d)\d{2}\.?\d{3}\.?\d{3}/?\d{4}-?\d{2}(?!\d)"
    )),

    # CPF: 000.000.000-00 or 11 bare digits
    PatternRule("CPF", "cpf", re.compile(
        r"(?<!\d)\d{3}\.?\d{3}\.?\d{3}-?\d{2}(?!\d)"
    )),

    # PIS/PASEP: 000.00000.00-0
    PatternRule("PIS", "pis", re.compile(
        r"(?<!\d)\d{3}\.?\d{5}\.?\d{2}-?\d(?!\d)"
    )),

    # CTPS: 0000000/00000; not right after an area code "(11) " or "(11)  "
    PatternRule("CTPS", "ctps", re.compile(
        r"(?<![\d)])(?<!\)\s)(?<!\)\s\s)\d{5,7}[/-]\d{3,5}(?!\d)"
    )),

    # RG: 00.000.000-0, check digit may be X
    PatternRule("RG", "rg", re.compile(
        r"(?<!\d)\d{1,2}\.?\d{3}\.?\d{3}-?[\dXx](?![\dA-Za-z])"
    )),

    # CEP: 00.000-000, 00000-000 or 00000000
    PatternRule("CEP", "cep", re.compile(
        r"(?<!\d)\d{2}\.?\d{3}-?\d{3}(?!\d)"
    )),

    # OAB/SP 123.456, OAB SP 123456
    PatternRule("OAB", "oab", re.compile(
        rf"\bOAB{_SP}/?{_SP}[A-Z]{{2}}{_SP}{_NUM}\d(?:\.?\d){{0,8}}(?!\d)",
        re.IGNORECASE,
    )),

    # (11) 98765-4321, 11 3456-7890, 3456-7890
    PatternRule("TELEFONE", "telefone", re.compile(
        r"(?<!\d)(?:\(\d{2}\)\s{0,2}|\d{2}\s{0,2})?\d{4,5}-?\d{4}(?!\d)"
    )),

    PatternRule("EMAIL", "email", re.compile(
        r"(?<![\w.+-])[\w.+-]{1,64}@[\w-]{1,63}(?:\.[\w-]{1,63}){1,8}(?![\w-])"
    )),

    # Ag. 1234 C/C 56789-0, Agência: 1234 C/C: 56789, conta corrente 12345-6
    PatternRule("CONTA", "conta_bancaria", re.compile(
        rf"\b(?:{_AGENCIA}{_SP},?{_SP}{_CONTA_LABEL}|conta(?:\s{{1,3}}corrente)?)"
        rf"{_SP}{_NUM}:?{_SP}\d(?:[.-]?\d){{2,14}}",
        re.IGNORECASE,
    )),

    # R$ 1.234,56 (opt-in)
    PatternRule("VALOR", "valores", re.compile(
        r"R\$\s{0,3}\d(?:[.,]?\d){0,20}"
    )),
)

CATEGORIES: tuple[str, ...] = tuple(rule.category for rule in REGISTRY)
PLACEHOLDERS: dict[str, str] = {rule.category: rule.placeholder for rule in REGISTRY}


def enabled_rules(config: AnonymizationConfig) -> list[PatternRule]:
    """Rules whose flag is on, still in priority order."""
    if not config.enabled:
        return []
    return [rule for rule in REGISTRY if getattr(config, rule.flag)]


def candidates(text: str, config: AnonymizationConfig) -> list[Match]:
    """All matches of the enabled rules, by priority then position.

    Candidates may overlap; resolving them is the redactor's job.
    """
    found: list[Match] = []
    for rule in enabled_rules(config):
        for m in rule.regex.finditer(text):
            found.append(Match(
                category=rule.category,
                start=m.start(),
                end=m.end(),
                placeholder=rule.placeholder,
                source="pattern",
                text=m.group(),
            ))
    return found
