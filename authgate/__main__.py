"""Entry point: `python -m authgate` levanta la API con uvicorn."""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "authgate.api.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("UVICORN_LOG_LEVEL", "info"),
    )


if __name__ == "__main__":
    main()
