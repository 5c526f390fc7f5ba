"""
Developer command for inspecting lexer and parser output.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import version
from .config import TokenizerConfig
from .errors import TokenizerError, UnsupportedLanguageError
from .languages import available_languages, get_parser


logger = logging.getLogger(__name__)


@click.command()
@click.argument("source", required=False)
@click.option(
    "--language", "-l",
    required=True,
    help="Language id or file extension, e.g. c, javascript, .scss"
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the lexer tokens instead of the parsed declaration"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Optional tokenizer config JSON file"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose logging"
)
@click.version_option(version=version())
def main(
    source: Optional[str],
    language: str,
    tokens: bool,
    config_path: Optional[Path],
    verbose: bool
) -> None:
    """
    Describe the declaration in SOURCE as JSON.

    SOURCE defaults to standard input; multiple input lines are joined into
    one declaration.
    """
    config = TokenizerConfig.load(config_path) if config_path else TokenizerConfig()
    config.apply_logging()
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if source is None:
        source = click.get_text_stream("stdin").read()

    try:
        parser = get_parser(language, config)
    except UnsupportedLanguageError as e:
        click.echo(f"error: {e}. Available: {', '.join(available_languages())}", err=True)
        sys.exit(2)

    try:
        if tokens:
            lexed = parser.lexer(parser.prepare(source)).get_tokens()
            output = [token.to_dict() for token in lexed]
        else:
            output = parser.parse_lines(source.splitlines() or [""]).to_dict()
    except TokenizerError as e:
        logger.debug(f"Tokenizing failed: {e}", exc_info=True)
        click.echo(json.dumps({"error": e.to_dict()}, indent=2), err=True)
        sys.exit(1)

    click.echo(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
