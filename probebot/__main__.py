"""Serve the API with uvicorn using the configured bind address."""

import uvicorn

from probebot.api.dependencies import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("probebot.api.app:app", host=settings.api.host, port=settings.api.port)


if __name__ == "__main__":
    main()
