""" Utilities for parsing directive tags in Markdown files.

A directive is an inline tag of the form `{{<kind>|<relative path>}}` that instructs the preprocessor to
substitute content in its place. Two kinds are understood:

```md
See {{link or include|./guide/install.md}} for details.

{{include|./assets/snippet.txt}}
```

The path must start with `./`, followed by one or more directory segments and the file name. Directory segments
only consist of word characters. The file name of a `link or include` directive must end with `.md`, the file
name of an `include` directive may contain any word characters and dots.
"""

from __future__ import annotations

import enum
import re
import typing as t
import typing_extensions as te

if t.TYPE_CHECKING:
  from mdinclude.markdown.preprocessor import MarkdownDocument


class DirectiveKind(enum.Enum):
  LINK_OR_INCLUDE = 'link or include'
  INCLUDE = 'include'


#: The patterns that match a directive of the given kind. Group 1 contains the directory segments including the
#: trailing slash, group 2 the file name.
PATTERNS: dict[DirectiveKind, re.Pattern[str]] = {
  DirectiveKind.LINK_OR_INCLUDE: re.compile(r'\{\{link or include\|\./((?:\w+/)+)(\w+\.md)\}\}'),
  DirectiveKind.INCLUDE: re.compile(r'\{\{include\|\./((?:\w+/)+)([\w.]+)\}\}'),
}

#: Function signature for computing the replacement of a directive.
ReplacementFunc: te.TypeAlias = 't.Callable[[Directive], str]'


class Directive(t.NamedTuple):
  kind: DirectiveKind
  directory: str
  filename: str
  offset_span: tuple[int, int]
  source: str

  @property
  def relative_path(self) -> str:
    """ The directory segments and file name, without the leading `./`. """

    return self.directory + self.filename


def parse_directives(content: str, kind: DirectiveKind) -> t.Iterator[Directive]:
  """ Yields all directives of the given *kind* in *content*, from left to right. """

  for match in PATTERNS[kind].finditer(content):
    yield Directive(kind, match.group(1), match.group(2), match.span(), match.group(0))


def replace_directives(document: MarkdownDocument, directives: t.Iterable[Directive], repl: ReplacementFunc) -> None:
  """ Replaces the *directives* in the *document* by the text that *repl* returns. All replacements are computed in
  the order of the directives before any of them is spliced in, thus replacing one directive can never change the
  boundaries of another. """

  ranges = []
  for directive in directives:
    ranges.append((directive.offset_span[0], directive.offset_span[1], repl(directive)))

  document.substitute(ranges)
