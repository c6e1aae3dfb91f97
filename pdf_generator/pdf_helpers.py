"""
Helper functions for the PDF endpoint.
"""

from urllib.parse import quote, urlsplit


def is_absolute_url(url: str) -> bool:
    """
    Check that url has both a scheme and a network location.

    Example:
        >>> is_absolute_url("https://example.com/invoice/42")
        True
        >>> is_absolute_url("/invoice/42")
        False
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def escape_filename(filename: str) -> str:
    """
    Percent-encode a download name for the content-disposition header.

    Only RFC 3986 unreserved characters (letters, digits, "-", "_", ".",
    "~") are left as-is; everything else, including spaces, slashes and
    non-ASCII characters, is UTF-8 percent-encoded.

    Example:
        >>> escape_filename("Q3 rapport ø.pdf")
        "Q3%20rapport%20%C3%B8.pdf"
    """
    return quote(filename, safe="")


def content_disposition(filename: str) -> str:
    """Build an attachment content-disposition value for filename."""
    return f"attachment; filename={escape_filename(filename)}"
