import logging

import uvicorn

from planifia.utilities.config import APP_HOST, APP_PORT, DEBUG, LOG_LEVEL

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("planifia_app")


def main():
    local_url = f"http://localhost:{APP_PORT}"
    logger.info("Planifia running on %s (Press CTRL+C to quit)", local_url)
    uvicorn.run("planifia.api.api_run:app", host=APP_HOST, port=APP_PORT, reload=DEBUG,
                log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
