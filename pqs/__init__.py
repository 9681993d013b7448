from pqs.constants import CONFIG
from pqs.core.evaluate import Discard, Prediction, predict, predicted_value
from pqs.core.trace import trace
from pqs.dialect.enums import Dialects

__version__ = "0.1.0"

__all__ = [
    "CONFIG",
    "Dialects",
    "Discard",
    "Prediction",
    "predict",
    "predicted_value",
    "trace",
]
