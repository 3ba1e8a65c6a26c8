import dataclasses


@dataclasses.dataclass
class MarkdownFlavor:
  """ Renders the Markdown snippets that directives are replaced with. """

  #: The text placed before the link that replaces a `link or include` directive in dynamic mode.
  migrated_notice: str = 'This section is migrated. Please see '

  def render_link(self, text: str, href: str) -> str:
    """ Construct syntax for a link to *href* with the specified *text*. """

    return f'[{text}]({href})'

  def render_migrated_link(self, text: str, href: str) -> str:
    return self.migrated_notice + self.render_link(text, href)

  def render_details(self, summary: str, body: str) -> str:
    """ Wrap *body* in a collapsible HTML `<details>` block. """

    return f'<details><summary>{summary}</summary>\n\n{body}\n</details>'
