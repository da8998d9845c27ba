"""Reporter that shows leaked tags on the page itself."""

import html
import logging
import re

from tagleak.types import CacheableResponse, LeakSet

logger = logging.getLogger(__name__)

# Comments and scripts are matched first so a "<body" inside them is skipped.
_BODY_OPEN = re.compile(
    r"<!--.*?-->|<script\b.*?</script\s*>|(?P<body><body(?:\s[^>]*)?>)",
    re.IGNORECASE | re.DOTALL,
)

_PANEL_ID = "tagleak-errors"

_PANEL_TEMPLATE = """\
<dialog id="{panel_id}" style="padding: 0; border-width: 1px; border-radius: 4px; \
box-shadow: 0 2px 8px rgba(0, 0, 0, 0.26); border-color: rgba(0, 0, 0, 0.26)">
  <div style="display: flex; justify-content: space-between; width: 100%; \
background: #DDDDDD; padding: 10px; position: sticky; top: 0">
    <h3 style="margin: 0">Some cache tags are missing</h3>
    <button style="padding: 0; width: 28px; height: 28px; border-radius: 4px; \
border: 1px solid rgba(0, 0, 0, 0.26)" title="Close" \
onclick="document.getElementById('{panel_id}').close()">&#x2715;</button>
  </div>
  <div style="padding: 0 20px 20px;">
    <p>The following cache tags are missing from the response:</p>
    <ul>
{items}
    </ul>
  </div>
</dialog>
<script>document.getElementById('{panel_id}').showModal()</script>
"""


def render_panel(leaks: LeakSet) -> str:
    """Markup for a dismissible panel listing the leaked tags."""
    items = "\n".join(
        f"      <li><pre>{html.escape(tag)}</pre></li>" for tag in leaks
    )
    return _PANEL_TEMPLATE.format(panel_id=_PANEL_ID, items=items)


def inject_panel(markup: str, leaks: LeakSet) -> str | None:
    """Insert the panel right after the opening body tag.

    Returns None when the markup has no body element.
    """
    for match in _BODY_OPEN.finditer(markup):
        if match.group("body") is not None:
            end = match.end()
            return markup[:end] + render_panel(leaks) + markup[end:]
    return None


class AnnotateReporter:
    """Injects a panel listing the leaked tags into HTML responses."""

    def report(self, leaks: LeakSet, response: CacheableResponse) -> None:
        content = response.get_content()
        is_bytes = isinstance(content, bytes)
        if is_bytes:
            try:
                markup = content.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("Response body is not UTF-8, leaving it untouched")
                return
        else:
            markup = content

        annotated = inject_panel(markup, leaks)
        if annotated is None:
            logger.debug("No <body> element found, leaving response untouched")
            return

        response.set_content(annotated.encode("utf-8") if is_bytes else annotated)
