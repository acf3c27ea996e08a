import uvicorn

from .shared.env import get_setting
from .shared.logger import configure_logging, get_logger

logger = get_logger(__name__)


def main():
    configure_logging()

    host = get_setting('HOST')
    port = int(get_setting('PORT'))
    logger.info(f"Server listening on {host}:{port} with PostgreSQL")

    uvicorn.run(
        'eventos_clima.main:create_app',
        factory=True,
        host=host,
        port=port,
        log_config=None,
    )


if __name__ == '__main__':
    main()
