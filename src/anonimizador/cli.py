"""CLI interface for anonimizador.

Usage:
    # Anonymize plain text (stdin → stdout)
    echo 'CPF: 123.456.789-00' | anonimizador redact-text

    # Same, with names and a per-category report (no original text in it)
    anonimizador --name "João Silva" --names-file partes.txt redact-text --json < peticao.txt

    # Anonymize OpenAI-format messages (stdin: JSON array, stdout: JSON array)
    echo '[{"role":"user","content":"Tel: (11) 9876-5432"}]' | anonimizador redact

    # Settings from the app (JSON) or a YAML file, minus some categories
    anonimizador --config settings.json --disable cep,oab redact-text < doc.txt
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

from .config import AnonymizationConfig, ConfigError, load_from_file
from .engine import anonymize_detailed, anonymize_messages
from .log import configure_logging
from .patterns import REGISTRY

logger = logging.getLogger(__name__)

# Accepted by --disable: category names and config field names
_FLAGS = {rule.category.lower(): rule.flag for rule in REGISTRY}
_FLAGS.update({rule.flag: rule.flag for rule in REGISTRY})
_FLAGS["nomes"] = "nomes"


def _read_names_file(path: str) -> list[str]:
    with open(path, encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def _build_config(args: argparse.Namespace) -> AnonymizationConfig:
    if args.config:
        config = load_from_file(args.config) or AnonymizationConfig(enabled=False)
    else:
        config = AnonymizationConfig()

    for item in args.disable:
        for name in filter(None, (part.strip().lower() for part in item.split(","))):
            if name not in _FLAGS:
                raise ConfigError(f"unknown category {name!r}")
            setattr(config, _FLAGS[name], False)
    if args.valores:
        config.valores = True
    if args.join_split_digits:
        config.join_split_digits = True
    return config


def _build_names(args: argparse.Namespace) -> list[str] | None:
    if not args.name and not args.names_file:
        return None     # fall back to the config's own list
    names = list(args.name)
    if args.names_file:
        names.extend(_read_names_file(args.names_file))
    return names


def cmd_redact(args: argparse.Namespace) -> None:
    """Anonymize OpenAI-format messages on stdin."""
    messages = json.loads(sys.stdin.read())
    if not isinstance(messages, list):
        raise ConfigError("expected a JSON array of messages on stdin")
    out = anonymize_messages(messages, args.cfg, args.names)
    json.dump(out, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_redact_text(args: argparse.Namespace) -> None:
    """Anonymize plain text on stdin."""
    result = anonymize_detailed(sys.stdin.read(), args.cfg, args.names)
    if args.json:
        json.dump({"text": result.text, "counts": result.counts()}, sys.stdout, ensure_ascii=False)
        sys.stdout.write("\n")
    else:
        sys.stdout.write(result.text)


def cmd_categories(args: argparse.Namespace) -> None:
    """List categories, their placeholders and whether they are on."""
    for rule in REGISTRY:
        state = "on" if args.cfg.enabled and getattr(args.cfg, rule.flag) else "off"
        sys.stdout.write(f"{rule.category:<10} {rule.placeholder:<12} {state}\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="anonimizador",
        description="Anonymize identifiers and names before text leaves for an AI provider",
    )
    parser.add_argument("--config", help="Settings file (.json, .yaml)")
    parser.add_argument("--name", action="append", default=[], help="Name to replace (repeatable)")
    parser.add_argument("--names-file", help="File with one name per line")
    parser.add_argument("--disable", action="append", default=[],
                        help="Comma-separated categories to leave untouched (e.g. cep,oab)")
    parser.add_argument("--valores", action="store_true", help="Also replace R$ amounts")
    parser.add_argument("--join-split-digits", action="store_true",
                        help="Join numbers broken across lines before matching")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $ANONIMIZADOR_LOG_LEVEL, $LOG_LEVEL or WARNING)")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("redact", help="Anonymize OpenAI messages (JSON stdin)")
    text_parser = sub.add_parser("redact-text", help="Anonymize plain text (stdin)")
    text_parser.add_argument("--json", action="store_true", help="Emit text and per-category counts as JSON")
    sub.add_parser("categories", help="List categories and placeholders")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    cmds = {
        "redact": cmd_redact,
        "redact-text": cmd_redact_text,
        "categories": cmd_categories,
    }
    try:
        args.cfg = _build_config(args)
        args.names = _build_names(args)
        cmds[args.command](args)
    except (ConfigError, json.JSONDecodeError) as e:
        parser.error(str(e))
    except OSError as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
