from legalrisk.bootstrap import build_container
from legalrisk.config.settings import Settings
from legalrisk.database.connection import close_pool, init_pool
from legalrisk.logging.logger import Log


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        container = build_container(settings)
        try:
            container.worker.run()
        finally:
            container.close()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
