import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
LOG_FILE = Path("/tmp/pagewarden.log")

logging.basicConfig(
    level=logging.WARNING,  # Default level for root logger
    format=LOG_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)],
)

# Full dismissal trace goes to the file, other libraries stay at WARNING on stdout
package_logger = logging.getLogger(__name__)
package_logger.setLevel(logging.DEBUG)
if not any(isinstance(h, logging.FileHandler) for h in package_logger.handlers):
    file_handler = logging.FileHandler(LOG_FILE)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(file_handler)
