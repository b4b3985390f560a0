#!/usr/bin/env python3
# PYTHON_ARGCOMPLETE_OK
"""
Command-line interface for the GEMET thesaurus
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import argcomplete

from ._version import __version__
from .config import Config
from .relations import MatchingMode
from .service import ThesaurusService
from .terms import Term, TreeTerm


def _label(term: Term | TreeTerm) -> str:
    name = term.name if term.name is not None else "(untranslated)"
    if term.alternate_name:
        name = f"{name} / {term.alternate_name}"
    return f"{name} [{term.id}]"


def print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def print_terms(terms: Sequence[Term], as_json: bool = False) -> int:
    """Print a term list, return 1 if it is empty."""
    if as_json:
        print_json([term.to_dict() for term in terms])
    else:
        for term in terms:
            print(f"{term.type.value:<10} {_label(term)}")
    return 0 if terms else 1


def print_tree(node: TreeTerm, indent: int = 0) -> None:
    prefix = "  " * indent
    if node.has_unexpanded_children:
        marker = "▶"
    elif node.children:
        marker = "▼"
    else:
        marker = "○"
    print(f"{prefix}{marker} {_label(node)}")
    if isinstance(node.children, list):
        for child in node.children:
            print_tree(child, indent + 1)


def search_command(args, service: ThesaurusService) -> int:
    """Find concepts matching a query."""
    matching = MatchingMode[args.mode.upper()]
    terms = service.find_terms_from_query_term(" ".join(args.query), matching, args.lang)
    if not terms and not args.json:
        print(f"No concepts found for '{' '.join(args.query)}'")
        return 1
    return print_terms(terms, args.json)


def similar_command(args, service: ThesaurusService) -> int:
    terms = service.get_similar_terms_from_names(args.names, args.lang)
    if not terms and not args.json:
        print(f"No concepts containing all of {args.names}")
        return 1
    return print_terms(terms, args.json)


def text_command(args, service: ThesaurusService) -> int:
    """Find the concepts named by the words of a text."""
    text = args.text if args.text != "-" else sys.stdin.read()
    terms = service.get_terms_from_text(text, args.max_words, args.lang)
    if not terms and not args.json:
        print("No concepts recognized in text")
        return 1
    return print_terms(terms, args.json)


def term_command(args, service: ThesaurusService) -> int:
    if args.json_api:
        service = service.with_settings(request_rdf=False)
    term = service.get_term(args.id, args.lang)
    if term is None:
        print(f"No concept found for {args.id}")
        return 1
    if args.json:
        print_json(term.to_dict())
    else:
        print(f"{term.type.value:<10} {_label(term)}")
    return 0


def related_command(args, service: ThesaurusService) -> int:
    related = service.get_related_terms(args.id, args.lang)
    if args.json:
        print_json([term.to_dict() for term in related])
        return 0 if related else 1
    if not related:
        print(f"No related concepts for {args.id}")
        return 1
    for term in related:
        print(f"{term.relation_type.value:<8} {_label(term)}")
    return 0


def tree_command(args, service: ThesaurusService) -> int:
    """Show the top level, or the next level below an entry."""
    nodes = service.get_hierarchy_next_level(args.id, args.lang)
    if args.json:
        print_json([node.to_dict(include_parents=False) for node in nodes])
        return 0 if nodes else 1
    if not nodes:
        print(f"No entries below {args.id}" if args.id else "No top level entries found")
        return 1
    if args.id:
        print(_label(nodes[0].parents[0]))
        indent = 1
    else:
        indent = 0
    for node in nodes:
        print_tree(node, indent)
    return 0


def path_command(args, service: ThesaurusService) -> int:
    """Show the path from an entry up to the top of the hierarchy."""
    node = service.get_hierarchy_path_to_top(args.id, args.lang)
    if node is None:
        print(f"No concept found for {args.id}")
        return 1
    if args.json:
        print_json(node.to_dict(include_children=False))
        return 0

    chain = [node]
    while chain[-1].parents:
        chain.append(chain[-1].parents[0])
    for indent, entry in enumerate(reversed(chain)):
        print(f"{'  ' * indent}{_label(entry)}")
    return 0


def config_command(config_path: Path | None = None, show: bool = False, show_path: bool = False) -> int:
    """Show configuration information."""
    config = Config(config_path)

    if show_path:
        if config.path:
            print(config.path)
        else:
            print("No configuration file found")
        return 0

    if config.path:
        print(f"# Configuration loaded from: {config.path}")
    else:
        print("# No configuration file found, showing defaults")
    print()
    print(json.dumps(config.data, indent=2))
    return 0


def setup_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser_cli = argparse.ArgumentParser(
        prog="gemet-thesaurus",
        description="GEMET thesaurus - search concepts and browse the hierarchy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Find concepts whose name contains all words of a query
  gemet-thesaurus search Wasser Schutz

  # Exact match, names in English
  gemet-thesaurus search water --mode exact --lang en

  # Concepts named by the words of a text
  gemet-thesaurus text "Schutz der Wälder vor Luftverschmutzung"

  # Top level of the hierarchy, then one level below a supergroup
  gemet-thesaurus tree
  gemet-thesaurus tree --id http://www.eionet.europa.eu/gemet/supergroup/4044

  # Path from a concept up to its supergroup
  gemet-thesaurus path http://www.eionet.europa.eu/gemet/concept/9242
        """
    )
    parser_cli.add_argument(
        '--version', '-V',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    parser_cli.add_argument('--verbose', '-v', action='count', default=0, help='More logging (-vv for debug)')
    parser_cli.add_argument('--config', '-c', type=Path, help='Use this config file only')

    # Options shared by all lookup commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--lang', '-l', help='Language of names (default: from config)')
    common.add_argument('--json', action='store_true', help='Output as JSON')

    subparsers = parser_cli.add_subparsers(dest='command', help='Command to run')

    config_parser = subparsers.add_parser('config', help='Show configuration')
    config_parser.add_argument('--show', action='store_true', help='Show merged configuration')
    config_parser.add_argument('--path', action='store_true', help='Show config file path')

    search_parser = subparsers.add_parser('search', parents=[common], help='Find concepts matching a query')
    search_parser.add_argument('query', nargs='+', help='Query words')
    search_parser.add_argument(
        '--mode', '-m',
        choices=[m.name.lower() for m in MatchingMode],
        default='contains',
        help='Search mode (default: contains)'
    )

    similar_parser = subparsers.add_parser('similar', parents=[common], help='Find concepts containing all names')
    similar_parser.add_argument('names', nargs='+', help='Names that must all be contained')

    text_parser = subparsers.add_parser('text', parents=[common], help='Find concepts named in a text')
    text_parser.add_argument('text', help='Text to analyze, "-" reads stdin')
    text_parser.add_argument('--max-words', type=int, help='Analyze at most this many words')

    term_parser = subparsers.add_parser('term', parents=[common], help='Look up a single concept')
    term_parser.add_argument('id', help='Concept URI')
    term_parser.add_argument('--json-api', action='store_true', help='Read the JSON API instead of RDF')

    related_parser = subparsers.add_parser('related', parents=[common], help='List related entries')
    related_parser.add_argument('id', help='Concept URI')

    tree_parser = subparsers.add_parser('tree', parents=[common], help='Show one level of the hierarchy')
    tree_parser.add_argument('--id', help='Entry to expand (default: top level)')

    path_parser = subparsers.add_parser('path', parents=[common], help='Show the path to the top')
    path_parser.add_argument('id', help='Concept URI')

    return parser_cli


COMMANDS = {
    'search': search_command,
    'similar': similar_command,
    'text': text_command,
    'term': term_command,
    'related': related_command,
    'tree': tree_command,
    'path': path_command,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser_cli = build_parser()

    # Enable shell tab completion
    argcomplete.autocomplete(parser_cli)

    args = parser_cli.parse_args(argv)
    setup_logging(args.verbose)

    if args.command == 'config':
        return config_command(
            args.config,
            show=getattr(args, 'show', False),
            show_path=getattr(args, 'path', False)
        )
    elif args.command in COMMANDS:
        config = Config(args.config)
        return COMMANDS[args.command](args, ThesaurusService.from_config(config))
    else:
        parser_cli.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
