import logging
import os
from logging.handlers import RotatingFileHandler
from app.core.config import get_settings

class LoggerConfig:
    """
    Logger configuration for the weather service.
    Writes to a rotating file under log_directory and to the console.
    """
    def __init__(
        self, env=20, logger_name="WeatherCache", log_directory="logs", log_file="app.log"
    ):
        try:
            self.logger_name = logger_name
            self.log_directory = os.path.abspath(log_directory)
            self.log_file_path = os.path.join(self.log_directory, log_file)
            self.env = env
            self.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

            self.logger = logging.getLogger(self.logger_name)
            self.setup_logger()
        except Exception as e:
            print(f"Failed to initialize logger: {str(e)}")

    def setup_logger(self):
        try:
            self.logger.setLevel(self.env)
            # Avoid adding duplicate handlers if re-initialized
            if self.logger.handlers:
                return

            os.makedirs(self.log_directory, exist_ok=True)

            file_handler = RotatingFileHandler(
                self.log_file_path, backupCount=5, maxBytes=1024 * 1024 * 10, encoding="utf-8"
            )
            file_handler.setLevel(self.env)

            console_handler = logging.StreamHandler()
            console_handler.setLevel(self.env)

            formatter = logging.Formatter(self.log_format)
            file_handler.setFormatter(formatter)
            console_handler.setFormatter(formatter)

            self.logger.addHandler(file_handler)
            self.logger.addHandler(console_handler)

        except Exception as e:
            print(f"Failed to setup logger handlers: {str(e)}")

    def configure(self, env: int, log_directory: str, log_file: str):
        """Re-point the handlers at the given settings, e.g. those passed to create_app()."""
        log_file_path = os.path.join(os.path.abspath(log_directory), log_file)
        if log_file_path != self.log_file_path:
            for handler in list(self.logger.handlers):
                self.logger.removeHandler(handler)
                handler.close()
            self.log_directory = os.path.abspath(log_directory)
            self.log_file_path = log_file_path

        self.env = env
        self.setup_logger()
        for handler in self.logger.handlers:
            handler.setLevel(env)

    def log(self, level: int, message: str, extra: dict = None, exc_info: bool = False):
        """Simple wrapper to log messages"""
        if extra:
            message = f"{message} | {extra}"
        self.logger.log(level, message, exc_info=exc_info)

_settings = get_settings()

logs = LoggerConfig(
    env=_settings.LOGGER,
    logger_name="WEATHER-API",
    log_directory=_settings.LOG_DIR,
    log_file=_settings.LOG_FILE
)
