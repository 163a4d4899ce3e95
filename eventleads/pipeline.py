"""Full scraping pipeline: discover event URLs, enrich each event, save as we go."""

import asyncio
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from eventleads.config import Settings
from eventleads.extractor import (
    PROMPT_EVENT,
    PROMPT_EVENT_URLS,
    PROMPT_ORGANIZER,
    PROMPT_SOCIAL_ABOUT,
    PROMPT_WEBSITE_CONTACT,
    clean_social_link,
    is_detail_url,
    parse_contact,
    parse_event,
    parse_event_urls,
    parse_organizer,
)
from eventleads.models import (
    ContactInfo,
    EnrichmentStage,
    EventDetails,
    EventRecord,
    OrganizerInfo,
)
from eventleads.pages import parse_pages
from eventleads.scraper import ScrapeClient
from eventleads.store import ResultStore


# ---------------------------------------------------------------------------
# Phase 1: URL discovery
# ---------------------------------------------------------------------------


def page_url(search_url: str, page: int) -> str:
    """Page 1 is the bare search URL; later pages add a ``page`` parameter."""
    if page == 1:
        return search_url
    sep = "&" if "?" in search_url else "?"
    return f"{search_url}{sep}page={page}"


async def discover_event_urls(
    client: ScrapeClient,
    search_url: str,
    pages: list[int],
    *,
    delay: float = 1.0,
) -> list[str]:
    """
    Collect unique event detail URLs from the selected search result pages.

    A page that fails to scrape contributes nothing. URLs are kept in the
    order they were first seen.
    """
    seen: set[str] = set()
    event_urls: list[str] = []

    for page in pages:
        url = page_url(search_url, page)
        print(f"  Page {page}: {url}")
        try:
            result = await client.scrape([url], PROMPT_EVENT_URLS)
            urls = parse_event_urls(result)
            for u in urls:
                if is_detail_url(u) and u not in seen:
                    seen.add(u)
                    event_urls.append(u)
            print(f"    Found {len(urls)} events\n")
        except Exception as e:
            print(f"    Error on page {page} ({url}): {e}\n")
        await asyncio.sleep(delay)

    return event_urls


# ---------------------------------------------------------------------------
# Phase 2: per-event enrichment
# ---------------------------------------------------------------------------


class EnrichmentState(BaseModel):
    """Partial results gathered so far for one event."""

    event_url: str
    event: EventDetails = Field(default_factory=EventDetails)
    organizer: OrganizerInfo = Field(default_factory=OrganizerInfo)
    website: ContactInfo = Field(default_factory=ContactInfo)
    social: ContactInfo = Field(default_factory=ContactInfo)


def next_stage(stage: EnrichmentStage, state: EnrichmentState) -> EnrichmentStage:
    """
    Return the stage to run after *stage*.

    Each later stage only runs when the previous one produced the link it
    needs; the social fallback additionally requires that the website gave
    no email.
    """
    if stage == EnrichmentStage.EVENT:
        if state.event.organizer_url:
            return EnrichmentStage.ORGANIZER
    elif stage == EnrichmentStage.ORGANIZER:
        if state.organizer.website:
            return EnrichmentStage.WEBSITE
    elif stage == EnrichmentStage.WEBSITE:
        if state.website.facebook and not state.website.email:
            return EnrichmentStage.SOCIAL
    return EnrichmentStage.DONE


class _StageStep(BaseModel):
    label: str
    prompt: str
    target: Callable[[EnrichmentState], Optional[str]]
    parse: Callable[[Any], BaseModel]
    field: str


_STAGES: dict[EnrichmentStage, _StageStep] = {
    EnrichmentStage.EVENT: _StageStep(
        label="Event",
        prompt=PROMPT_EVENT,
        target=lambda s: s.event_url,
        parse=parse_event,
        field="event",
    ),
    EnrichmentStage.ORGANIZER: _StageStep(
        label="Organizer",
        prompt=PROMPT_ORGANIZER,
        target=lambda s: s.event.organizer_url,
        parse=parse_organizer,
        field="organizer",
    ),
    EnrichmentStage.WEBSITE: _StageStep(
        label="Website",
        prompt=PROMPT_WEBSITE_CONTACT,
        target=lambda s: s.organizer.website,
        parse=parse_contact,
        field="website",
    ),
    EnrichmentStage.SOCIAL: _StageStep(
        label="Facebook",
        prompt=PROMPT_SOCIAL_ABOUT,
        target=lambda s: s.website.facebook,
        parse=parse_contact,
        field="social",
    ),
}


async def _run_stage(
    client: ScrapeClient, stage: EnrichmentStage, state: EnrichmentState
) -> None:
    """Scrape one stage into *state*. Only event-stage errors propagate."""
    step = _STAGES[stage]
    url = step.target(state)
    if stage != EnrichmentStage.EVENT:
        print(f"  → {step.label}: {url}")

    try:
        payload = await client.scrape([url], step.prompt)
        setattr(state, step.field, step.parse(payload))
    except Exception as e:
        if stage == EnrichmentStage.EVENT:
            raise
        print(f"    {step.label} error ({url}): {e}")


def fuse_record(state: EnrichmentState) -> EventRecord:
    """Merge the partial stage results into one output record."""
    event, organizer = state.event, state.organizer
    website, social = state.website, state.social

    return EventRecord(
        event_name=event.event_name or "",
        event_url=state.event_url,
        organizer_name=organizer.organizer_name or event.organizer_name or "",
        organizer_url=event.organizer_url or "",
        organizer_website=organizer.website or None,
        email=website.email or social.email or None,
        phone=website.phone or social.phone or None,
        address=website.address or social.address or None,
        facebook=clean_social_link(website.facebook),
        follower_count=organizer.follower_count or 0,
        total_events=organizer.total_events or 0,
    )


async def enrich_event(client: ScrapeClient, event_url: str) -> EventRecord:
    """
    Run the enrichment chain for one event and return the fused record.

    Raises whatever the event stage raises; failures of the later stages
    leave their fields at defaults.
    """
    state = EnrichmentState(event_url=event_url)
    stage = EnrichmentStage.EVENT

    while stage != EnrichmentStage.DONE:
        await _run_stage(client, stage, state)
        stage = next_stage(stage, state)

    return fuse_record(state)


# ---------------------------------------------------------------------------
# Main pipeline
# ---------------------------------------------------------------------------


async def run_pipeline(
    settings: Settings,
    *,
    client: Optional[ScrapeClient] = None,
    store: Optional[ResultStore] = None,
) -> list[EventRecord]:
    """
    Scrape the configured search pages and enrich every event found.

    Results are written after each event, so an interrupted run keeps all
    completed records. Returns the records collected.
    """
    if client is None:
        client = ScrapeClient(settings)
    if store is None:
        store = ResultStore(settings.output_dir)

    pages = parse_pages(settings.pages)
    print(f"\n🕷️ Eventbrite Scraper\nSearch: {settings.search_url}")
    print(f"Pages: {', '.join(map(str, pages))} ({len(pages)} total)\n")

    store.archive_previous()

    # Step 1: event URLs
    print("📄 Step 1: Getting event URLs...\n")
    event_urls = await discover_event_urls(
        client, settings.search_url, pages, delay=settings.page_delay
    )
    print(f"✅ Total unique events: {len(event_urls)}\n")

    # Step 2: enrich each event
    print("📝 Step 2: Processing events...\n")
    records: list[EventRecord] = []

    for i, event_url in enumerate(event_urls, 1):
        print(f"[{i}/{len(event_urls)}] {event_url}")
        try:
            record = await enrich_event(client, event_url)
        except Exception as e:
            print(f"  Event error ({event_url}): {e}\n")
        else:
            records.append(record)
            store.persist(records)
            print(f"  ✓ Done: {record.event_name}\n")
        await asyncio.sleep(settings.item_delay)

    print(f"\n✅ Done! Scraped {len(records)} events.\n📁 Output: {store.path}\n")
    return records
