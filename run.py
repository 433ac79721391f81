import logging

import uvicorn

from ga4audit import config
from ga4audit.api.server import create_app
from ga4audit.container import Container

logger = logging.getLogger(__name__)


def main(container: Container = None):
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if container is None:
        container = Container()

    app = create_app(container)
    env = container.config()
    host = env.get("HOST") or "0.0.0.0"
    port = int(env.get("PORT") or 8000)
    logger.info("GA4 audit API listening on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == '__main__':
    main()
