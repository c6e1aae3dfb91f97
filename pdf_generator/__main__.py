"""
PDF Generator entrypoint - runs uvicorn server.
"""

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from pdf_generator.config import get_settings  # noqa: E402


def main() -> None:
    """Run the PDF Generator server."""
    settings = get_settings()

    uvicorn.run(
        "pdf_generator.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
