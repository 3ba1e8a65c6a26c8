""" Configuration profiles and the optional TOML configuration file.

Two built-in profiles describe the supported behaviours of a run:

* `default` &ndash; the output file is created if it does not exist (and truncated otherwise) and the `spoiler`
  build mode is available.
* `strict` &ndash; the output file must already exist and only the `dynamic` and `static` modes are accepted.

A configuration file may select a profile and override its individual settings. The settings are read from the
`[mdinclude]` table if present, otherwise from the top level of the file.

```toml
[mdinclude]
profile = "strict"
output_policy = "create-if-absent"
encoding = "utf-8"
```
"""

from __future__ import annotations

import codecs
import dataclasses
import enum
import logging
import typing as t
from pathlib import Path

from databind.core.settings import Alias

from mdinclude.errors import ConfigError

logger = logging.getLogger(__name__)


class OutputPolicy(enum.Enum):
  CREATE_IF_ABSENT: t.Annotated[str, Alias('create-if-absent')] = 'create-if-absent'
  MUST_PRE_EXIST: t.Annotated[str, Alias('must-pre-exist')] = 'must-pre-exist'


@dataclasses.dataclass(frozen=True)
class Profile:
  name: str
  output_policy: OutputPolicy
  allow_spoiler: bool


PROFILES: dict[str, Profile] = {
  'default': Profile('default', OutputPolicy.CREATE_IF_ABSENT, allow_spoiler=True),
  'strict': Profile('strict', OutputPolicy.MUST_PRE_EXIST, allow_spoiler=False),
}


def get_profile(name: str) -> Profile:
  try:
    return PROFILES[name]
  except KeyError:
    raise ConfigError(f'unknown profile {name!r} (choose from {", ".join(PROFILES)})') from None


def check_encoding(encoding: str) -> None:
  """ Raise a #ConfigError if *encoding* is not known to the #codecs registry. """

  try:
    codecs.lookup(encoding)
  except LookupError:
    raise ConfigError(f'unknown encoding {encoding!r}') from None


@dataclasses.dataclass
class Config:

  #: The name of the profile to start from.
  profile: str = 'default'

  #: Overrides #Profile.output_policy if set.
  output_policy: t.Optional[OutputPolicy] = None

  #: Overrides #Profile.allow_spoiler if set.
  allow_spoiler: t.Optional[bool] = None

  #: The encoding to read and write files as.
  encoding: str = 'utf-8'

  def get_profile(self) -> Profile:
    """ Returns the named #profile with the overrides of this configuration applied. """

    profile = get_profile(self.profile)
    if self.output_policy is not None:
      profile = dataclasses.replace(profile, output_policy=self.output_policy)
    if self.allow_spoiler is not None:
      profile = dataclasses.replace(profile, allow_spoiler=self.allow_spoiler)
    return profile


def load_config(path: Path) -> Config:
  """ Load a #Config from a TOML file. """

  import databind.json
  import tomli
  from databind.core.converter import ConversionError

  try:
    data = tomli.loads(path.read_text('utf-8'))
  except OSError as exc:
    raise ConfigError(f'unable to read configuration file {path}: {exc}') from exc
  except (tomli.TOMLDecodeError, UnicodeDecodeError) as exc:
    raise ConfigError(f'invalid TOML in {path}: {exc}') from exc

  if isinstance(data.get('mdinclude'), dict):
    data = data['mdinclude']

  try:
    config = databind.json.load(data, Config, filename=str(path))
  except ConversionError as exc:
    raise ConfigError(f'invalid configuration in {path}: {exc}') from exc

  # Fail early on an unknown profile or encoding.
  config.get_profile()
  check_encoding(config.encoding)
  logger.debug('Loaded configuration from %s: %s', path, config)
  return config
