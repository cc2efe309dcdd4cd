"""Run the app with uvicorn: ``python -m oncall_override``."""

import uvicorn

from oncall_override.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("oncall_override.app:app", host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
