from permaqr.utils import initialize_logging


initialize_logging()
