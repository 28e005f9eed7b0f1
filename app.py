import logging
import sys

import uvicorn

from ofc_analyzer.config import load_config


def main() -> None:
    config = load_config()
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logger = logging.getLogger(__name__)
    if config.mock_mode:
        logger.info("Mock mode: serving bundled sample financials from %s", config.sample_data_path)
    logger.info("OFC analyzer listening on port %s", config.port)
    uvicorn.run("ofc_analyzer.web_app:app", host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
