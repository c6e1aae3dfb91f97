"""
Render orchestration.

Resolves a live control endpoint for the shared Chromium, attaches to it
over CDP, prints one URL to PDF on a page of its own, and detaches again
while leaving the browser running for the next request.
"""

import logging
from contextlib import asynccontextmanager
from functools import partial
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from playwright.async_api import async_playwright

from .config import PDFServiceSettings
from .discovery import discover_endpoint
from .endpoint_cache import EndpointCache
from .errors import RenderResult, RenderStage
from .health import is_endpoint_live
from .network_idle import track_network
from .temp_files import delete_file, new_temp_output_path, read_pdf_from_disk

logger = logging.getLogger(__name__)

DiscoverFn = Callable[[str], Awaitable[str]]
ProbeFn = Callable[[str], Awaitable[bool]]


@asynccontextmanager
async def open_page(browser: Any) -> AsyncIterator[Any]:
    """
    Open a page that is closed on every exit path.

    Pages are never shared between renders.
    """
    page = await browser.new_page()
    try:
        yield page
    finally:
        try:
            await page.close()
        except Exception as e:
            logger.warning(f"Could not close page: {e}")


async def _disconnect(browser: Any) -> None:
    # For a CDP connection close() only detaches; the remote process keeps running
    try:
        await browser.close()
    except Exception as e:
        logger.warning(f"Could not disconnect from browser: {e}")


class PDFRenderer:
    """
    Drives the remote browser for URL to PDF conversion.

    Args:
        settings: Page layout and discovery configuration
        cache: Endpoint cache shared across requests
        discover: Coroutine returning a fresh control endpoint for a discovery URL
        probe: Coroutine reporting whether a control endpoint is live
        temp_dir: Directory for intermediate PDFs (platform temp dir if None)
    """

    def __init__(
        self,
        settings: PDFServiceSettings,
        cache: Optional[EndpointCache] = None,
        discover: Optional[DiscoverFn] = None,
        probe: Optional[ProbeFn] = None,
        temp_dir: Optional[Path] = None,
    ):
        self.settings = settings
        self.cache = cache if cache is not None else EndpointCache()
        self._discover = discover or partial(
            discover_endpoint, timeout=settings.discovery_timeout_seconds
        )
        self._probe = probe or partial(
            is_endpoint_live, timeout=settings.health_check_timeout_seconds
        )
        self._temp_dir = temp_dir

    async def resolve_endpoint(self) -> str:
        """
        Return a control endpoint that was live a moment ago.

        The cached endpoint is probed on every call; when it is missing or
        dead a new one is discovered and cached.

        Raises:
            DiscoveryError: if a new endpoint is needed and cannot be fetched
        """
        endpoint = self.cache.get()
        if endpoint and await self._probe(endpoint):
            return endpoint

        self.cache.invalidate()
        endpoint = await self._discover(self.settings.chromium_version_url)
        self.cache.set(endpoint, self.settings.endpoint_cache_ttl)
        return endpoint

    async def render(self, url: str, output_path: Path) -> RenderResult:
        """
        Print url to output_path as PDF.

        Failures are logged and returned, never raised.

        Returns:
            RenderResult with the artifact path, or the failing stage and cause
        """
        stage = RenderStage.RESOLVE
        try:
            endpoint = await self.resolve_endpoint()

            async with async_playwright() as p:
                stage = RenderStage.CONNECT
                browser = await p.chromium.connect_over_cdp(endpoint)
                try:
                    async with open_page(browser) as page:
                        stage = RenderStage.NAVIGATE
                        async with track_network(
                            page,
                            max_inflight=self.settings.network_idle_max_inflight,
                            quiet_seconds=self.settings.network_idle_ms / 1000,
                        ) as network:
                            await page.goto(url, timeout=0, wait_until="load")
                            await network.settled()

                        stage = RenderStage.PRINT
                        await page.pdf(
                            path=str(output_path),
                            width=self.settings.paper_width,
                            height=self.settings.paper_height,
                            margin=self.settings.margins,
                            print_background=True,
                        )
                finally:
                    await _disconnect(browser)

        except Exception as e:
            logger.error(f"Could not generate PDF for {url} ({stage.value}): {e}", exc_info=True)
            return RenderResult.failure(stage, e)

        logger.info(f"Rendered {url} to {output_path}")
        return RenderResult.success(Path(output_path))

    async def generate_pdf(self, url: str) -> bytes:
        """
        Render url and return the PDF bytes.

        The intermediate file is deleted whether or not the render worked.

        Raises:
            RenderFailure: if the browser session failed
            ArtifactMissing: if no PDF was written
            DeleteFailure: if the temp file could not be removed
        """
        output_path = new_temp_output_path(self._temp_dir)
        try:
            result = await self.render(url, output_path)
            if not result.ok:
                raise result.error from result.error.cause
            return await read_pdf_from_disk(output_path)
        finally:
            delete_file(output_path)
