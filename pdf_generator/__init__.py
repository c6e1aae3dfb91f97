"""
PDF Generator - URL to PDF rendering service.

Renders a URL to PDF by driving an externally managed headless Chromium
over its remote-debugging protocol. The browser's control endpoint is
discovered once, cached, and re-validated before every render.
"""

__version__ = "0.1.0"
