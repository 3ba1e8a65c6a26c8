from pathlib import Path

import pytest

from mdinclude.build import Builder, run, validate_arguments
from mdinclude.config import PROFILES, OutputPolicy, Profile
from mdinclude.context import BuildContext, BuildMode
from mdinclude.errors import ArgumentValidationError, ConfigError, FragmentAccessError, OutputWriteError


@pytest.fixture
def project(tmp_path: Path) -> Path:
  (tmp_path / 'docs' / 'chapters').mkdir(parents=True)
  (tmp_path / 'docs' / 'chapters' / 'install.md').write_text(
    '# Install\n<!-- START -->\n# Installation\nRun it.\n<!-- END -->\n')
  (tmp_path / 'docs' / 'chapters' / 'cmd.sh').write_text('echo hi\n')
  (tmp_path / 'docs' / 'manual.md').write_text(
    '# Manual\n\n{{link or include|./chapters/install.md}}\n```sh\n{{include|./chapters/cmd.sh}}```\n')
  return tmp_path


def test_build_context_resolves_input_file(tmp_path: Path):
  context = BuildContext(BuildMode.STATIC, tmp_path / 'a' / '..' / 'doc.md')
  assert context.input_file == tmp_path.resolve() / 'doc.md'
  assert context.directory == tmp_path.resolve()


def test_build_mode_parse():
  assert BuildMode.parse('dynamic') is BuildMode.DYNAMIC
  assert BuildMode.parse('Static') is BuildMode.STATIC
  assert BuildMode.parse('SPOILER') is BuildMode.SPOILER
  with pytest.raises(ValueError):
    BuildMode.parse('fancy')


def test_run_static(project: Path):
  output = project / 'out' / 'manual.md'
  output.parent.mkdir()
  content = run(project / 'docs' / 'manual.md', output, BuildMode.STATIC)
  assert content == '# Manual\n\n## Installation\nRun it.\n\n```sh\necho hi\n```\n'
  assert output.read_text() == content


def test_run_dynamic_truncates_existing_output(project: Path):
  output = project / 'manual.md'
  output.write_text('x' * 1000)
  run(project / 'docs' / 'manual.md', output, BuildMode.DYNAMIC)
  assert output.read_text() == (
    '# Manual\n\nThis section is migrated. Please see [install.md](./chapters/install.md)\n'
    '```sh\necho hi\n```\n'
  )


def test_run_strict_requires_existing_output(project: Path):
  output = project / 'manual.md'
  with pytest.raises(ArgumentValidationError):
    run(project / 'docs' / 'manual.md', output, BuildMode.STATIC, PROFILES['strict'])
  assert not output.exists()

  output.write_text('previous content that is longer than the result ' * 10)
  content = run(project / 'docs' / 'manual.md', output, BuildMode.STATIC, PROFILES['strict'])
  assert output.read_text() == content


def test_validate_arguments(tmp_path: Path):
  document = tmp_path / 'doc.md'
  document.write_text('')
  default = PROFILES['default']

  with pytest.raises(ArgumentValidationError, match='must point to a file'):
    validate_arguments(tmp_path, tmp_path / 'out.md', BuildMode.STATIC, default)
  with pytest.raises(ArgumentValidationError, match='does not exist'):
    validate_arguments(tmp_path / 'missing.md', tmp_path / 'out.md', BuildMode.STATIC, default)
  with pytest.raises(ArgumentValidationError, match='must point to a file'):
    validate_arguments(document, tmp_path, BuildMode.STATIC, default)
  with pytest.raises(ArgumentValidationError, match='not available'):
    validate_arguments(document, document, BuildMode.SPOILER, PROFILES['strict'])

  validate_arguments(document, tmp_path / 'out.md', BuildMode.SPOILER, default)
  validate_arguments(document, document, BuildMode.DYNAMIC, PROFILES['strict'])


def test_fragment_error_writes_nothing(tmp_path: Path):
  document = tmp_path / 'doc.md'
  document.write_text('{{link or include|./sub/a.md}}\n{{include|./sub/missing.txt}}\n')
  (tmp_path / 'sub').mkdir()
  (tmp_path / 'sub' / 'a.md').write_text('<!-- START -->A<!-- END -->')
  output = tmp_path / 'out.md'

  with pytest.raises(FragmentAccessError):
    run(document, output, BuildMode.STATIC)
  assert not output.exists()


def test_output_write_error(tmp_path: Path):
  document = tmp_path / 'doc.md'
  document.write_text('text')
  builder = Builder(BuildContext(BuildMode.STATIC, document))
  with pytest.raises(OutputWriteError) as excinfo:
    builder.build(tmp_path / 'missing-dir' / 'out.md')
  assert excinfo.value.path == tmp_path / 'missing-dir' / 'out.md'


def test_builder_process_with_custom_profile(tmp_path: Path):
  profile = Profile('custom', OutputPolicy.CREATE_IF_ABSENT, allow_spoiler=False)
  builder = Builder(BuildContext(BuildMode.DYNAMIC, tmp_path / 'doc.md'), profile)
  assert builder.process('plain') == 'plain'
  assert list(builder.pipeline.processors) == ['link-or-include', 'include']


def test_input_newlines_are_preserved(tmp_path: Path):
  document = tmp_path / 'doc.md'
  document.write_bytes(b'# A\r\n{{link or include|./s/p.md}}\r\n')
  output = tmp_path / 'out.md'
  run(document, output, BuildMode.DYNAMIC)
  assert output.read_bytes() == b'# A\r\nThis section is migrated. Please see [p.md](./s/p.md)\r\n'


def test_unknown_encoding_is_rejected_before_io(tmp_path: Path):
  document = tmp_path / 'doc.md'
  document.write_text('text')
  output = tmp_path / 'out.md'
  with pytest.raises(ConfigError, match='unknown encoding'):
    run(document, output, BuildMode.STATIC, encoding='bogus-codec')
  with pytest.raises(ConfigError, match='unknown encoding'):
    Builder(BuildContext(BuildMode.STATIC, document), encoding='bogus-codec')
  assert not output.exists()
