import logging
import os

FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Logger:
    """Logging utility cho toàn bộ system"""

    def __init__(self, name, log_file=None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)

        # Handler chỉ gắn một lần cho mỗi tên logger
        if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
                   for h in self.logger.handlers):
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(logging.Formatter(FORMAT))
            self.logger.addHandler(console_handler)

        # File handler
        if log_file and not any(isinstance(h, logging.FileHandler)
                                and h.baseFilename == os.path.abspath(log_file)
                                for h in self.logger.handlers):
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(FORMAT))
            self.logger.addHandler(file_handler)

    def log(self, message, level="info"):
        """Log message"""
        if level == "debug":
            self.logger.debug(message)
        elif level == "info":
            self.logger.info(message)
        elif level == "warning":
            self.logger.warning(message)
        elif level == "error":
            self.logger.error(message)
