"""Extraction prompts for each scrape stage and coercion of their payloads."""

import json
import re
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from eventleads.models import ContactInfo, EventDetails, OrganizerInfo

# Path marker of event detail pages (vs. search or organizer pages)
DETAIL_PATH_MARKER = "/e/"

# The listing site's own social profile, often picked up from page chrome
GENERIC_SOCIAL_PROFILES = ("facebook.com/eventbrite",)

# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

PROMPT_EVENT_URLS = """
Extract all event URLs from this Eventbrite search page.
Return JSON: { "event_urls": ["https://www.eventbrite.com/e/...", ...] }
Only include URLs containing /e/ (actual event pages).
"""

PROMPT_EVENT = """
Extract: event_name, organizer_name, organizer_url (the /o/... link)
"""

PROMPT_ORGANIZER = """
Extract: organizer_name, website (external URL), facebook, follower_count, total_events
"""

PROMPT_WEBSITE_CONTACT = """
Extract contact info from this website. Return EXACTLY this flat JSON format:
{ "email": "...", "phone": "...", "address": "...", "facebook": "..." }
- email: contact email address
- phone: phone number
- address: physical address
- facebook: facebook URL from social media links
Use null for any field not found. Do NOT nest the data.
"""

PROMPT_SOCIAL_ABOUT = """
Extract from About section. Return EXACTLY this flat JSON format:
{ "email": "...", "phone": "...", "address": "..." }
Use null for any field not found. Do NOT nest the data.
"""

# ---------------------------------------------------------------------------
# JSON parsing
# ---------------------------------------------------------------------------


def _strip_markdown_fences(text: str) -> str:
    """Remove markdown code fences the extractor may have added."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:])
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def _repair_json(text: str) -> str:
    """Attempt to fix trailing commas and unclosed brackets."""
    text = re.sub(r",\s*([}\]])", r"\1", text)
    open_brackets = text.count("[") - text.count("]")
    open_braces = text.count("{") - text.count("}")
    text = text.rstrip().rstrip(",")
    text += "}" * max(0, open_braces)
    text += "]" * max(0, open_brackets)
    return text


def parse_json_content(raw: str) -> Any:
    """
    Decode extracted content that arrived as a string rather than JSON.

    Returns the raw string unchanged when it is not JSON at all.
    """
    text = _strip_markdown_fences(raw)
    if not text or text[0] not in "[{":
        return raw

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        print(f"    JSON parse failed ({e}), attempting repair...")
        try:
            return json.loads(_repair_json(text))
        except json.JSONDecodeError:
            print("    JSON repair failed, using raw content.")
            return raw


# ---------------------------------------------------------------------------
# Payload coercion
# ---------------------------------------------------------------------------

M = TypeVar("M", bound=BaseModel)


def coerce(model: type[M], payload: Any) -> M:
    """
    Build a partial record from a loosely shaped payload.

    Non-object payloads give an empty record. Fields that fail validation are
    dropped rather than failing the whole record.
    """
    if not isinstance(payload, dict):
        return model()

    data = dict(payload)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        bad = {err["loc"][0] for err in e.errors() if err["loc"]}
        print(f"    Dropping invalid fields: {', '.join(sorted(map(str, bad)))}")
        return model.model_validate({k: v for k, v in data.items() if k not in bad})


def parse_event(payload: Any) -> EventDetails:
    return coerce(EventDetails, payload)


def parse_organizer(payload: Any) -> OrganizerInfo:
    return coerce(OrganizerInfo, payload)


def parse_contact(payload: Any) -> ContactInfo:
    return coerce(ContactInfo, payload)


def parse_event_urls(payload: Any) -> list[str]:
    """Pull the ``event_urls`` list out of a discovery payload."""
    if isinstance(payload, list):
        urls = payload
    elif isinstance(payload, dict):
        urls = payload.get("event_urls") or []
    else:
        return []

    if not isinstance(urls, list):
        return []
    return [u for u in urls if isinstance(u, str)]


def is_detail_url(url: str) -> bool:
    return DETAIL_PATH_MARKER in url


def clean_social_link(link: Optional[str]) -> Optional[str]:
    """Null out links to the listing site's own social profile."""
    if not link:
        return None
    lowered = link.lower()
    if any(generic in lowered for generic in GENERIC_SOCIAL_PROFILES):
        return None
    return link
