"""Run the Eventbrite organizer scraper."""

import asyncio
import sys

from eventleads.config import Settings
from eventleads.pipeline import run_pipeline


def _parse_main_args(argv: list[str]) -> dict[str, str]:
    """Return setting overrides from ``--pages`` and ``--search-url``."""
    flags = {"--pages": "pages", "--search-url": "search_url"}
    overrides: dict[str, str] = {}

    i = 1
    while i < len(argv):
        a = argv[i]
        name, sep, value = a.partition("=")
        if name in flags:
            if sep:
                overrides[flags[name]] = value
            elif i + 1 < len(argv):
                overrides[flags[name]] = argv[i + 1]
                i += 1
        i += 1

    return overrides


async def main(argv: list[str]) -> int:
    settings = Settings(**_parse_main_args(argv))

    missing = settings.missing()
    if missing:
        print(f"❌ Set {', '.join(missing)} in .env", file=sys.stderr)
        return 1

    await run_pipeline(settings)
    return 0


def run() -> None:
    """Console-script entry point."""
    try:
        code = asyncio.run(main(sys.argv))
    except Exception as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    run()
