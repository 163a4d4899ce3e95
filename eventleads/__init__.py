"""Scrape event listings and enrich them with organizer contact details.

Modules
-------
- ``pages``: page selector parsing ("1-3,7").
- ``scraper``: Spidra scrape-job client (submit + poll).
- ``extractor``: prompts and coercion of scrape payloads into partial records.
- ``pipeline``: URL discovery, per-event enrichment and field fusion.
- ``store``: archive and incremental JSON persistence of results.
"""
