from __future__ import annotations

import logging
from pathlib import Path

from mdinclude.config import PROFILES, OutputPolicy, Profile, check_encoding
from mdinclude.context import BuildContext, BuildMode
from mdinclude.errors import ArgumentValidationError, OutputWriteError
from mdinclude.markdown.preprocessor import IncludeObserver, MarkdownPipeline

logger = logging.getLogger(__name__)


def validate_arguments(input_file: Path, output_file: Path, mode: BuildMode, profile: Profile) -> None:
  """ Check the arguments of a run before any file is read or written. Raises an #ArgumentValidationError. """

  if input_file.is_dir():
    raise ArgumentValidationError(f'the input path must point to a file: {input_file}')
  if not input_file.exists():
    raise ArgumentValidationError(f'the input file does not exist: {input_file}')
  if output_file.is_dir():
    raise ArgumentValidationError(f'the output path must point to a file: {output_file}')
  if profile.output_policy is OutputPolicy.MUST_PRE_EXIST and not output_file.exists():
    raise ArgumentValidationError(f'the output file does not exist: {output_file} (profile {profile.name!r})')
  if mode is BuildMode.SPOILER and not profile.allow_spoiler:
    raise ArgumentValidationError(f'build mode {mode.value!r} is not available in profile {profile.name!r}')


class Builder:
  """ Reads the input document, runs the #MarkdownPipeline over it and writes the result. Nothing is written if
  any directive can not be resolved. """

  def __init__(
    self,
    context: BuildContext,
    profile: Profile = PROFILES['default'],
    encoding: str = 'utf-8',
    observer: IncludeObserver | None = None,
  ) -> None:
    check_encoding(encoding)
    self.context = context
    self.profile = profile
    self.encoding = encoding
    self.pipeline = MarkdownPipeline.default(encoding=encoding, observer=observer)

  def process(self, content: str) -> str:
    """ Resolve all directives in *content* as if it was the content of the input file. """

    return self.pipeline.process(self.context, content)

  def read_input(self) -> str:
    try:
      with self.context.input_file.open(encoding=self.encoding, newline='') as fp:
        return fp.read()
    except (OSError, UnicodeDecodeError) as exc:
      raise ArgumentValidationError(f'unable to read input file {self.context.input_file}: {exc}') from exc

  def write_output(self, output_file: Path, content: str) -> None:
    # r+ fails if the file is absent.
    policy = self.profile.output_policy
    mode = 'r+' if policy is OutputPolicy.MUST_PRE_EXIST else 'w'
    try:
      with output_file.open(mode, encoding=self.encoding, newline='') as fp:
        fp.write(content)
        fp.truncate()
    except (OSError, UnicodeEncodeError) as exc:
      raise OutputWriteError(output_file, str(exc)) from exc

  def build(self, output_file: Path) -> str:
    """ Process the input file and write the result to *output_file*. Returns the written content. """

    logger.debug('Building %s in %s mode', self.context.input_file, self.context.mode.value)
    content = self.process(self.read_input())
    self.write_output(output_file, content)
    return content


def run(
  input_file: Path,
  output_file: Path,
  mode: BuildMode,
  profile: Profile = PROFILES['default'],
  encoding: str = 'utf-8',
  observer: IncludeObserver | None = None,
) -> str:
  """ Validate the arguments and execute a complete build. """

  check_encoding(encoding)
  validate_arguments(input_file, output_file, mode, profile)
  builder = Builder(BuildContext(mode, input_file), profile, encoding, observer)
  return builder.build(output_file)
