"""
On-disk format of a note blob:

    Title: <title>
    <blank line>
    <content, verbatim>

Parsing is positional: line 0 is the title line, line 1 is dropped whatever
it holds, lines 2.. are the content. Content whose first line starts with
"Title:" or that begins with blank lines does not round-trip beyond this
split; existing stored notes depend on it, so it stays as is.
"""
import base64
from typing import Tuple

TITLE_PREFIX = "Title:"
DEFAULT_TITLE = "Untitled"


def encode(title: str, content: str) -> str:
    return f"{TITLE_PREFIX} {title}\n\n{content}"


def parse(blob: str) -> Tuple[str, str]:
    lines = blob.split("\n")
    title_line = lines[0]
    if title_line.startswith(TITLE_PREFIX):
        title_line = title_line[len(TITLE_PREFIX):].lstrip()
    title = title_line or DEFAULT_TITLE
    content = "\n".join(lines[2:])
    return title, content


def to_transport(blob: str) -> str:
    # the contents API only accepts base64 payloads
    return base64.b64encode(blob.encode("utf-8")).decode("ascii")
