import logging

import uvicorn

from .config import load_settings
from .logs import setup_logging

logger = logging.getLogger("kasir")


def main():
    settings = load_settings()
    setup_logging(settings.log_level)
    logger.info("Kasir API listening on 0.0.0.0:%s (docs at /docs)", settings.port)
    from .api import create_app
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
