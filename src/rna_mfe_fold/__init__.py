from rna_mfe_fold.folding import (
    MfeFoldingConfig,
    MfeResult,
    InvalidFoldingConfigError,
    TracebackConsistencyError,
    predict_mfe,
    predict_batch,
)

__version__ = "0.1.0"

__all__ = [
    "MfeFoldingConfig",
    "MfeResult",
    "InvalidFoldingConfigError",
    "TracebackConsistencyError",
    "predict_mfe",
    "predict_batch",
]
