import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Logger:
    """Utility class for standardized logging configuration."""

    @staticmethod
    def get(name: str) -> logging.Logger:
        """
        Get a standardized logger for the application.
        Configures logging with basic setup if not already configured.
        """
        if not logging.getLogger().hasHandlers():
            logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        return logging.getLogger(name)

    @staticmethod
    def set_level(level: str) -> None:
        """Apply a level name such as "DEBUG" to the root logger."""
        if not logging.getLogger().hasHandlers():
            logging.basicConfig(format=LOG_FORMAT)
        logging.getLogger().setLevel(level.upper())
