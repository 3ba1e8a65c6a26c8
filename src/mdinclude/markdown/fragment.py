from __future__ import annotations

import re

START_MARKER = '<!-- START -->'
END_MARKER = '<!-- END -->'

_HEADER_PATTERN = re.compile(r'^(#{1,5})(?!#)', re.M)
_REGION_PATTERN = re.compile(re.escape(START_MARKER) + r'\n?(.*?)' + re.escape(END_MARKER), re.S)


def shift_headers(text: str) -> str:
  """ Demotes every ATX heading in *text* by one level. Lines starting with six or more `#` are left alone. """

  return _HEADER_PATTERN.sub(r'#\1', text)


def extract_fragment(text: str) -> str:
  """ Returns the concatenated regions between `<!-- START -->` and `<!-- END -->` markers in *text*, with the
  headers in each region shifted down by one level. A single newline following the start marker is dropped.

  Every start marker is closed by the first end marker that follows it and scanning resumes after that end
  marker. A start marker appearing inside a region is kept as text, and end markers without a preceding start
  marker are ignored. If there is no complete marker pair, the result is empty. """

  return ''.join(shift_headers(match.group(1)) for match in _REGION_PATTERN.finditer(text))
