import sys
import logging
import torch

__all__ = [
    "DTYPE",
    "DEVICE",
    "ZEROPOINT",
    "QUAD_EPSABS",
    "QUAD_EPSREL",
    "QUAD_LIMIT",
    "QUAD_ACCEPT_ABSERR",
    "INTEGRATION_MULTIPLIER",
    "MAX_CHUNK_PIXELS",
    "logger",
    "set_logging_output",
]

# Numeric representation of every pixel grid and parameter vector
DTYPE = torch.float64
DEVICE = "cuda:0" if torch.cuda.is_available() else "cpu"

# Defaults copied into ModelOptions / QuadOptions at construction. Changing
# them here only affects objects built afterwards, evaluation never reads them.
ZEROPOINT = 0.0
QUAD_EPSABS = 1e-6
QUAD_EPSREL = 1e-6
QUAD_LIMIT = 1000
QUAD_ACCEPT_ABSERR = 1e-4
INTEGRATION_MULTIPLIER = 20.0
MAX_CHUNK_PIXELS = 256**2

_LOG_FORMAT = "%(asctime)s:%(levelname)s: %(message)s"

logging.basicConfig(
    filename="PhotoModel.log",
    level=logging.INFO,
    format=_LOG_FORMAT,
)
logger = logging.getLogger()
out_handler = logging.StreamHandler(sys.stdout)
out_handler.setLevel(logging.INFO)
out_handler.setFormatter(logging.Formatter("%(message)s"))
logger.addHandler(out_handler)


def set_logging_output(stdout=True, filename=None, **kwargs):
    """Redirect the photomodel log.

    All stream and file handlers currently attached to the logger are
    removed, then new ones are attached according to the arguments.

    **Args:**
    -  `stdout` (bool): print log messages to standard output. Default True.
    -  `filename` (str): file to append log messages to, None for no log file.
    -  `stdout_level`, `filename_level` (int): per handler logging level,
       default `logging.INFO`.
    -  `stdout_formatter`, `filename_formatter` (logging.Formatter): per
       handler formatting. The console only shows the message by default,
       the file also records time and level.
    """
    for handler in tuple(logger.handlers):
        if isinstance(handler, logging.StreamHandler):
            # FileHandler is a StreamHandler subclass
            logger.removeHandler(handler)

    if stdout:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(kwargs.get("stdout_level", logging.INFO))
        handler.setFormatter(kwargs.get("stdout_formatter", logging.Formatter("%(message)s")))
        logger.addHandler(handler)
        logger.debug("logging now going to stdout")
    if filename is not None:
        handler = logging.FileHandler(filename)
        handler.setLevel(kwargs.get("filename_level", logging.INFO))
        handler.setFormatter(kwargs.get("filename_formatter", logging.Formatter(_LOG_FORMAT)))
        logger.addHandler(handler)
        logger.debug(f"logging now going to {filename}")
