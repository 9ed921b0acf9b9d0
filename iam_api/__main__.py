"""Run the direct HTTP listener: ``python -m iam_api``."""

import uvicorn

from iam_api.config import settings
from iam_api.logging_config import configure_logging
from iam_api.main import app


def main() -> None:
    configure_logging(settings.log_level)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
