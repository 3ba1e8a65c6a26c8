from __future__ import annotations

import abc
import logging
import typing as t
from pathlib import Path

import typing_extensions as te

from mdinclude.context import BuildMode
from mdinclude.errors import FragmentAccessError
from mdinclude.markdown.fragment import extract_fragment
from mdinclude.markdown.preprocessor import MarkdownPreprocessor
from mdinclude.markdown.tagparser import DirectiveKind, parse_directives, replace_directives

if t.TYPE_CHECKING:
  from mdinclude.context import BuildContext
  from mdinclude.markdown.preprocessor import MarkdownDocument
  from mdinclude.markdown.tagparser import Directive

logger = logging.getLogger(__name__)


class DirectiveProcessor(MarkdownPreprocessor):
  """ Base class for processors that replace all directives of one #DirectiveKind in a single pass. """

  kind: t.ClassVar[DirectiveKind]

  def process(self, context: BuildContext, document: MarkdownDocument) -> None:
    directives = []
    for directive in parse_directives(document.content, self.kind):
      if document.is_inserted(directive.offset_span):
        logger.debug('Skipping %s inside included content', directive.source)
        continue
      directives.append(directive)

    if directives:
      logger.debug('Found %d "%s" directive(s) in %s', len(directives), self.kind.value, document.path)
      replace_directives(document, directives, lambda d: self._replace_directive(context, d))

  def _replace_directive(self, context: BuildContext, directive: Directive) -> str:
    self.pipeline.notify(directive)
    return self.replace_directive(context, directive)

  @abc.abstractmethod
  def replace_directive(self, context: BuildContext, directive: Directive) -> str:
    """ Return the replacement text for *directive*. """

  def read_fragment(self, context: BuildContext, directive: Directive) -> tuple[Path, str]:
    """ Resolve the file referenced by *directive* relative to the input document and return its canonical path
    and content. Newlines are returned untranslated. """

    path = context.directory / directive.directory / directive.filename
    try:
      path = path.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
      raise FragmentAccessError(path, directive, str(exc)) from exc

    logger.debug('Reading %s', path)
    try:
      with path.open(encoding=self.pipeline.encoding, newline='') as fp:
        return path, fp.read()
    except (OSError, UnicodeDecodeError) as exc:
      raise FragmentAccessError(path, directive, str(exc)) from exc


class LinkOrIncludeProcessor(DirectiveProcessor):
  """ Replaces `{{link or include|./<dir>/<file>.md}}` directives depending on the #BuildMode.

  * `dynamic` &ndash; a link to the fragment, relative to the input document.
  * `static` &ndash; the regions of the fragment enclosed in `<!-- START -->` and `<!-- END -->` markers, with
    their headers shifted down by one level.
  * `spoiler` &ndash; like `static`, but wrapped in a `<details>` block naming the fragment's path.
  """

  kind = DirectiveKind.LINK_OR_INCLUDE

  def replace_directive(self, context: BuildContext, directive: Directive) -> str:
    flavor = self.pipeline.flavor
    mode = context.mode

    if mode is BuildMode.DYNAMIC:
      return flavor.render_migrated_link(directive.filename, './' + directive.relative_path)
    elif mode is BuildMode.STATIC:
      _path, text = self.read_fragment(context, directive)
      return extract_fragment(text)
    elif mode is BuildMode.SPOILER:
      path, text = self.read_fragment(context, directive)
      return flavor.render_details(f'content of {path}', extract_fragment(text))
    else:
      te.assert_never(mode)


class AlwaysIncludeProcessor(DirectiveProcessor):
  """ Replaces `{{include|./<dir>/<file>}}` directives with the raw content of the referenced file, regardless of
  the build mode. The file does not need to be Markdown. """

  kind = DirectiveKind.INCLUDE

  def replace_directive(self, context: BuildContext, directive: Directive) -> str:
    return self.read_fragment(context, directive)[1]
