"""Simple entrypoint to run the Virtual Fitting Room API locally."""

import os

import uvicorn

from server.api import create_app


def main() -> None:
    port = int(os.getenv("PORT", "8080"))
    uvicorn.run(create_app(), host=os.getenv("HOST", "127.0.0.1"), port=port)


if __name__ == "__main__":
    main()
