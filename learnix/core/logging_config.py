import logging

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configures the root logger once per process."""
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    _configured = True
