""" A Markdown preprocessor that assembles a document from fragment files. """

from mdinclude.context import BuildContext, BuildMode
from mdinclude.errors import PreprocessorError

__all__ = [
  'BuildContext',
  'BuildMode',
  'PreprocessorError',
]

__version__ = '0.1.0'
