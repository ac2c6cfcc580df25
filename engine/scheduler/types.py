from enum import Enum


class StrategyName(str, Enum):
    """
    Registered scoring strategies.
    WSM scores from task attributes only, MBAR also weighs device reliability.
    """

    WSM = "wsm"
    MBAR = "mbar"


class PipelineName(str, Enum):
    """
    Anomaly pipelines understood by the oracle adapter.
    """

    HYBRID = "hybrid"
    CNN = "cnn"
    HYBRID_LOGISTIC = "hybrid_logistic"
    CNN_LEGACY = "cnn_legacy"


class NormalizationMode(str, Enum):
    WINDOW = "window"
    LOGISTIC = "logistic"
    DIRECT = "direct"
