"""Submit scrape jobs to the Spidra API and poll them until they finish."""

import asyncio
import json
import sys
import time
from typing import Any, Optional

import httpx

from eventleads.config import Settings
from eventleads.extractor import parse_json_content

# The API accepts at most this many URLs per job
MAX_URLS_PER_JOB = 3

STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


class ScrapeError(RuntimeError):
    """Base class for scrape job errors."""


class ScrapeSubmitError(ScrapeError):
    """The API rejected the job submission."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error: {status_code}")


class ScrapeJobFailed(ScrapeError):
    """The job reached the ``failed`` state."""


class ScrapeTimeoutError(ScrapeError):
    """The job did not finish within ``poll_timeout``."""


def _extract_content(result: Any) -> Any:
    """Return the extracted content of a completed job (first item of a list)."""
    content = result.get("content") if isinstance(result, dict) else None
    if isinstance(content, str):
        content = parse_json_content(content)
    if isinstance(content, list):
        return content[0] if content else None
    return content


class ScrapeClient:
    """
    Client for the Spidra scrape-job protocol.

    Every call to :meth:`scrape` submits a new job and polls it to a terminal
    state; nothing is cached between calls.

    Args:
        settings: API key, base URL and timing settings.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = settings.spidra_base_url.rstrip("/")
        self.api_key = settings.spidra_api_key
        self.poll_interval = settings.poll_interval
        self.poll_timeout = settings.poll_timeout
        self.request_timeout = settings.request_timeout
        self._transport = transport

    def _headers(self) -> dict:
        return {"Content-Type": "application/json", "x-api-key": self.api_key}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.request_timeout),
            headers=self._headers(),
            transport=self._transport,
        )

    async def submit(self, client: httpx.AsyncClient, urls: list[str], prompt: str) -> str:
        """Submit a job and return its id."""
        payload = {
            "urls": [{"url": url} for url in urls[:MAX_URLS_PER_JOB]],
            "prompt": prompt,
            "output": "json",
            "aiMode": True,
            "useProxy": True,
            "proxyCountry": "us",
        }
        resp = await client.post(f"{self.base_url}/scrape", json=payload)
        if not resp.is_success:
            raise ScrapeSubmitError(resp.status_code, resp.text)

        job_id = resp.json().get("jobId")
        if not job_id:
            raise ScrapeError("API response has no jobId")
        print(f"    Job: {job_id}")
        return job_id

    async def wait(self, client: httpx.AsyncClient, job_id: str) -> Any:
        """Poll a job until it completes or fails and return its content."""
        started = time.monotonic()

        while True:
            await asyncio.sleep(self.poll_interval)
            resp = await client.get(f"{self.base_url}/scrape/{job_id}")
            data = resp.json()
            status = data.get("status")

            if status == STATUS_COMPLETED:
                return _extract_content(data.get("result"))
            if status == STATUS_FAILED:
                raise ScrapeJobFailed(data.get("error") or "Job failed")

            progress = data.get("progress") or {}
            message = progress.get("message") if isinstance(progress, dict) else None
            print(f"    Status: {message or 'processing...'}")

            if self.poll_timeout is not None and time.monotonic() - started >= self.poll_timeout:
                raise ScrapeTimeoutError(
                    f"Job {job_id} not finished after {self.poll_timeout:.0f}s"
                )

    async def scrape(self, urls: list[str], prompt: str) -> Any:
        """
        Run one scrape job over up to three URLs and return the extracted payload.

        Extra URLs beyond the protocol limit are ignored. When the service
        returns a list of items, only the first is returned.

        Raises:
            ScrapeSubmitError: the submission was rejected (not retried).
            ScrapeJobFailed: the job finished in the ``failed`` state.
            ScrapeTimeoutError: ``poll_timeout`` is set and was exceeded.
        """
        async with self._client() as client:
            job_id = await self.submit(client, urls, prompt)
            return await self.wait(client, job_id)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


async def main() -> None:
    """CLI: run one scrape job and print the extracted JSON."""
    if len(sys.argv) < 3:
        print("Usage: uv run -m eventleads.scraper <url> <prompt>")
        print('Example: uv run -m eventleads.scraper "https://www.eventbrite.com/e/123" "Extract: event_name"')
        sys.exit(1)

    settings = Settings()
    missing = settings.missing()
    if missing:
        print(f"Set {', '.join(missing)} in .env", file=sys.stderr)
        sys.exit(1)

    result = await ScrapeClient(settings).scrape([sys.argv[1]], sys.argv[2])
    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
