from __future__ import annotations

import dataclasses
import enum
from pathlib import Path


class BuildMode(enum.Enum):
  """ Controls how `link or include` directives are resolved. The mode is selected once per run. """

  #: Replace the directive with a relative link to the fragment.
  DYNAMIC = 'dynamic'

  #: Inline the marked regions of the fragment with their headers shifted down by one level.
  STATIC = 'static'

  #: Like #STATIC, but wrap the inlined text in a collapsible `<details>` block.
  SPOILER = 'spoiler'

  @classmethod
  def parse(cls, value: str) -> BuildMode:
    try:
      return cls(value.strip().lower())
    except ValueError:
      choices = ', '.join(mode.value for mode in cls)
      raise ValueError(f'unknown build mode {value!r} (choose from {choices})') from None


@dataclasses.dataclass(frozen=True)
class BuildContext:
  """ The build context is passed to every preprocessor. Fragment paths in directives are relative to the
  directory that contains #input_file. """

  mode: BuildMode
  input_file: Path

  def __post_init__(self) -> None:
    object.__setattr__(self, 'input_file', Path(self.input_file).resolve())

  @property
  def directory(self) -> Path:
    return self.input_file.parent
