""" Exceptions raised by the preprocessor. Every failure is fatal for a run; the command-line entrypoint catches
#PreprocessorError once, reports it and exits with a non-zero status. """

from __future__ import annotations

import typing as t
from pathlib import Path

if t.TYPE_CHECKING:
  from mdinclude.markdown.tagparser import Directive


class PreprocessorError(Exception):
  """ Base class for all errors raised by mdinclude. """


class ArgumentValidationError(PreprocessorError):
  """ Raised when the input or output path or the build mode is unacceptable, before any I/O happens. """


class ConfigError(PreprocessorError):
  """ Raised when a configuration file cannot be parsed or contains invalid values. """


class FragmentAccessError(PreprocessorError):
  """ Raised when a fragment referenced by a directive can not be canonicalized, opened or read. """

  def __init__(self, path: Path, directive: Directive, reason: str) -> None:
    self.path = path
    self.directive = directive
    self.reason = reason

  def __str__(self) -> str:
    return f'unable to include {self.path} (from {self.directive.source!r}): {self.reason}'


class OutputWriteError(PreprocessorError):
  """ Raised when the output document can not be written. """

  def __init__(self, path: Path, reason: str) -> None:
    self.path = path
    self.reason = reason

  def __str__(self) -> str:
    return f'could not write output to {self.path}: {self.reason}'
