"""pyhankel package initialization."""

import logging
from .__version__ import version as __version__
from .transforms import QDHT, QDSHT, integrate_k, integrate_r, onaxis, oversample, r_symmetric, symmetric
from .linalg import dimdot, dot

# Prevent "No handlers could be found" warnings when pyhankel is imported by
# applications that have not configured logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())
