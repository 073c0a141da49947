import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(log_level: str = "INFO") -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        console = Console(
            force_terminal=True,
            width=120,
        )

        rich_handler = RichHandler(
            console=console,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            tracebacks_width=120,
        )

        rich_handler.setFormatter(
            logging.Formatter(fmt="%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]")
        )

        logging.basicConfig(
            level=level,
            format="%(message)s",
            datefmt="[%Y-%m-%d %H:%M:%S]",
            handlers=[rich_handler],
            force=True,
        )
        logger = logging.getLogger("Bot")
        logger.debug("Rich logging enabled")
    except Exception as e:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            force=True,
        )
        logger = logging.getLogger("Bot")
        logger.warning(f"Failed to setup Rich logging: {e}, using standard logging")

    if level == logging.DEBUG:
        logging.getLogger("twitchio").setLevel(logging.DEBUG)
        logging.getLogger("twitchio.http").setLevel(logging.DEBUG)
        logging.getLogger("httpx").setLevel(logging.INFO)
    else:
        logging.getLogger("twitchio").setLevel(logging.INFO)
        logging.getLogger("twitchio.http").setLevel(logging.WARNING)
        logging.getLogger("twitchio.websockets").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger("asyncio").setLevel(logging.ERROR)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
