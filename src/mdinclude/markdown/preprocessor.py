from __future__ import annotations

import abc
import dataclasses
import importlib
import logging
import typing as t
import typing_extensions as te

from mdinclude.markdown.flavor import MarkdownFlavor

if t.TYPE_CHECKING:
  from pathlib import Path
  from mdinclude.context import BuildContext
  from mdinclude.markdown.tagparser import Directive

logger = logging.getLogger(__name__)

#: Called once for every directive that is about to be resolved.
IncludeObserver: te.TypeAlias = 't.Callable[[Directive], t.Any]'

#: The preprocessors that can be referenced by name in #MarkdownPipeline.use().
BUILTIN_PREPROCESSORS = {
  'link-or-include': 'mdinclude.markdown.tags.include.LinkOrIncludeProcessor',
  'include': 'mdinclude.markdown.tags.include.AlwaysIncludeProcessor',
}


@dataclasses.dataclass
class MarkdownDocument:
  """ Represents the document that is being processed by a #MarkdownPipeline. """

  #: The path of the input file that the content was read from.
  path: Path

  #: The content to be preprocessed.
  content: str

  #: Spans of #content that were inserted in place of a directive. Preprocessors must not resolve directives found
  #: in these spans, so fragments are never expanded recursively.
  inserted: list[tuple[int, int]] = dataclasses.field(default_factory=list)

  def is_inserted(self, span: tuple[int, int]) -> bool:
    """ Returns `True` if *span* overlaps with any of the #inserted spans. """

    return any(start < span[1] and span[0] < end for start, end in self.inserted)

  def substitute(self, ranges: t.Sequence[tuple[int, int, str]]) -> None:
    """ Replace the given non-overlapping ranges of #content and record the replacements as #inserted spans.
    None of the ranges may overlap with a span that is already in #inserted. """

    from nr.util.text import substitute_ranges

    ranges = sorted(ranges)

    def _shift(pos: int) -> int:
      return pos + sum(len(text) - (end - start) for start, end, text in ranges if end <= pos)

    inserted = [(_shift(start), _shift(end)) for start, end in self.inserted]
    delta = 0
    for start, end, text in ranges:
      inserted.append((start + delta, start + delta + len(text)))
      delta += len(text) - (end - start)

    self.content = substitute_ranges(self.content, ranges)
    self.inserted = sorted(inserted)


class MarkdownPipeline:
  """ Runs a sequence of #MarkdownPreprocessor#s over a document. Every preprocessor scans the output of the one
  before it exactly once. Text that was inserted in place of a directive is never scanned again. """

  def __init__(
    self,
    encoding: str = 'utf-8',
    flavor: MarkdownFlavor | None = None,
    observer: IncludeObserver | None = None,
  ) -> None:
    self.encoding = encoding
    self.flavor = flavor or MarkdownFlavor()
    self.observer = observer
    self._processors: dict[str, MarkdownPreprocessor] = {}

  @classmethod
  def default(cls, **kwargs: t.Any) -> MarkdownPipeline:
    """ Create a pipeline that resolves `link or include` directives first and `include` directives second. """

    pipeline = cls(**kwargs)
    pipeline.use('link-or-include')
    pipeline.use('include')
    return pipeline

  @property
  def processors(self) -> t.Mapping[str, MarkdownPreprocessor]:
    return self._processors

  def use(self, processor: str | type[MarkdownPreprocessor], name: str | None = None) -> MarkdownPreprocessor:
    """ Append a processor to the pipeline. A string is either the name of a builtin processor or the fully
    qualified name of a #MarkdownPreprocessor subclass. """

    if isinstance(processor, str):
      name = name or processor
      module_name, class_name = BUILTIN_PREPROCESSORS.get(processor, processor).rpartition('.')[::2]
      module = importlib.import_module(module_name)
      processor = getattr(module, class_name)

    assert isinstance(processor, type), processor
    if not issubclass(processor, MarkdownPreprocessor):
      raise TypeError(f'expected MarkdownPreprocessor subclass, got {processor.__name__}')

    name = name or processor.__name__
    if name in self._processors:
      raise ValueError(f'processor name {name!r} is already in use')

    instance = processor(self, name)
    self._processors[name] = instance
    return instance

  def notify(self, directive: Directive) -> None:
    if self.observer is not None:
      self.observer(directive)

  def process(self, context: BuildContext, content: str) -> str:
    """ Run all processors over *content* and return the result. """

    document = MarkdownDocument(context.input_file, content)
    for processor in self._processors.values():
      logger.debug('Running preprocessor %s', processor.name)
      processor.process(context, document)
    return document.content


class MarkdownPreprocessor(abc.ABC):
  """ Interface for steps of a #MarkdownPipeline. """

  def __init__(self, pipeline: MarkdownPipeline, name: str) -> None:
    self.pipeline = pipeline
    self.name = name

  @abc.abstractmethod
  def process(self, context: BuildContext, document: MarkdownDocument) -> None:
    """ Resolve the directives handled by this processor in the *document*. """
