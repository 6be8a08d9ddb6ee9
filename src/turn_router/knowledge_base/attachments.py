"""
Inline attachment markup embedded in knowledge-base answers.

Answers may carry directives such as

    <attachment contentType="image/png" contentUrl="https://host/a.png" name="A" />

either raw or HTML-escaped (&lt;attachment ... /&gt;). Each directive is
removed from the visible text and turned into an Attachment.
"""
import html
import logging
import re
from typing import List, Optional, Tuple

from ..exceptions import MalformedAttachmentMarkup
from ..schemas import Attachment

logger = logging.getLogger(__name__)

# An unterminated directive runs to the end of the text.
_DIRECTIVE = re.compile(
    r"(?:<|&lt;)attachment\b(?P<body>.*?)(?:(?P<close>/?\s*(?:>|&gt;))|\Z)",
    re.IGNORECASE | re.DOTALL,
)
_ATTRIBUTE = re.compile(
    r"(?P<key>[A-Za-z]+)\s*=\s*(?:\"|&quot;)(?P<value>.*?)(?:\"|&quot;)",
    re.DOTALL,
)
_FIELDS = {
    "contenttype": "content_type",
    "contenturl": "content_url",
    "name": "name",
    "thumbnailurl": "thumbnail_url",
}
_REQUIRED = ("content_type", "content_url")


def parse_directive(body: str) -> Attachment:
    """
    Parse the attribute section of one directive.

    :param body: Text between "<attachment" and "/>"
    :return: Attachment with every field found
    :raises MalformedAttachmentMarkup: on unknown attributes, stray text or
        missing contentType/contentUrl; partial_fields carries what parsed
    """
    fields = {}
    problems = []

    for match in _ATTRIBUTE.finditer(body):
        key = match.group("key")
        field_name = _FIELDS.get(key.lower())
        if field_name is None:
            problems.append(f"unknown attribute '{key}'")
            continue
        fields[field_name] = html.unescape(match.group("value")).strip()

    leftover = _ATTRIBUTE.sub("", body).strip()
    if leftover:
        problems.append(f"unparsed text {leftover!r}")

    for required in _REQUIRED:
        if not fields.get(required):
            problems.append(f"missing {required}")

    if problems:
        raise MalformedAttachmentMarkup("; ".join(problems), partial_fields=fields)

    return Attachment(**fields)


def _from_partial(fields: dict) -> Optional[Attachment]:
    if not any(fields.values()):
        return None
    return Attachment(
        content_type=fields.get("content_type", ""),
        content_url=fields.get("content_url", ""),
        name=fields.get("name") or None,
        thumbnail_url=fields.get("thumbnail_url") or None,
    )


def extract_attachments(text: str) -> Tuple[str, List[Attachment]]:
    """
    Strip every attachment directive from text.

    Malformed directives are still removed; whatever fields parsed are
    kept and a warning is logged. Running this on its own output changes
    nothing.

    :param text: Answer text, possibly containing directives
    :return: (visible text, attachments in order of appearance)
    """
    if not text:
        return text or "", []

    attachments: List[Attachment] = []

    def _replace(match: re.Match) -> str:
        if match.group("close") is None:
            logger.warning("Unterminated attachment directive; parsing to end of text")
        try:
            attachments.append(parse_directive(match.group("body")))
        except MalformedAttachmentMarkup as err:
            logger.warning(f"Malformed attachment markup ({err}); keeping partial fields")
            partial = _from_partial(err.partial_fields)
            if partial is not None:
                attachments.append(partial)
        return ""

    stripped = _DIRECTIVE.sub(_replace, text)
    return stripped.strip(), attachments


def strip_attachments(text: str) -> str:
    """Return text with attachment directives removed."""
    return extract_attachments(text)[0]
