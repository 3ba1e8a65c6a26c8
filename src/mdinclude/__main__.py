from __future__ import annotations

import argparse
import logging
import sys
import typing as t
from pathlib import Path

from nr.util.logging.formatters.terminal_colors import TerminalColorFormatter

from mdinclude import __version__
from mdinclude.build import run
from mdinclude.config import PROFILES, Config, load_config
from mdinclude.context import BuildMode
from mdinclude.errors import PreprocessorError

if t.TYPE_CHECKING:
  from mdinclude.markdown.tagparser import Directive

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
  level = logging.DEBUG if verbose else logging.INFO
  logging.basicConfig(level=level)
  logging.root.setLevel(level)

  formatter = TerminalColorFormatter('%(message)s')
  assert formatter.styles
  formatter.styles.add_style('path', 'yellow')
  formatter.install()


def log_include(directive: Directive) -> None:
  logger.info('including: <fg=cyan>%s</fg>', directive.relative_path)


def _build_mode(value: str) -> BuildMode:
  try:
    return BuildMode.parse(value)
  except ValueError as exc:
    raise argparse.ArgumentTypeError(str(exc))


def get_argument_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog='mdinclude',
    description='Resolve `{{link or include|...}}` and `{{include|...}}` directives in a Markdown document.',
  )
  parser.add_argument(
    '--version',
    action='version',
    version=__version__,
  )
  parser.add_argument(
    '-i', '--input-file',
    type=Path,
    required=True,
    help='The Markdown document to process.',
    metavar='PATH',
  )
  parser.add_argument(
    '-m', '--build-mode',
    type=_build_mode,
    required=True,
    help='How `link or include` directives are resolved: "dynamic", "static" or "spoiler".',
    metavar='MODE',
  )
  parser.add_argument(
    '-o', '--output-file',
    type=Path,
    required=True,
    help='The file to write the processed document to.',
    metavar='PATH',
  )
  parser.add_argument(
    '-c', '--config-file',
    type=Path,
    help='A TOML configuration file. Settings are read from the [mdinclude] table if present.',
    metavar='PATH',
  )
  parser.add_argument(
    '-p', '--profile',
    choices=sorted(PROFILES),
    help='The configuration profile to use. Overrides the profile of the configuration file. (default: default)',
  )
  parser.add_argument(
    '--encoding',
    help='The encoding to read and write files as. (default: utf-8)',
  )
  parser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='Enable debug logging.',
  )
  return parser


def main(argv: list[str] | None = None) -> None:
  parser = get_argument_parser()
  args = parser.parse_args(argv)
  setup_logging(args.verbose)
  logger.debug('Arguments: %s', args)

  try:
    config = load_config(args.config_file) if args.config_file else Config()
    if args.profile:
      config.profile = args.profile
    if args.encoding:
      config.encoding = args.encoding
    run(
      args.input_file,
      args.output_file,
      args.build_mode,
      profile=config.get_profile(),
      encoding=config.encoding,
      observer=log_include,
    )
  except PreprocessorError as exc:
    logger.error('<fg=red>error: %s</fg>', exc)
    sys.exit(1)

  logger.debug('Wrote <path>%s</path>', args.output_file)


if __name__ == '__main__':
  main()
