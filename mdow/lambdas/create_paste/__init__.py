from mdow.utils import initialize_logging


initialize_logging()
