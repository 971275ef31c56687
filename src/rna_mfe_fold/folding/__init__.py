from rna_mfe_fold.folding.errors import InvalidFoldingConfigError, TracebackConsistencyError
from rna_mfe_fold.folding.fold_state import MfeFoldState, make_fold_state
from rna_mfe_fold.folding.recurrences import MfeFoldingConfig, MfeFoldingEngine, load_folding_config
from rna_mfe_fold.folding.traceback import traceback_mfe, traceback_interval
from rna_mfe_fold.folding.predictor import MfeResult, build_engine, predict_mfe, predict_batch

__all__ = [
    "InvalidFoldingConfigError",
    "TracebackConsistencyError",
    "MfeFoldState",
    "make_fold_state",
    "MfeFoldingConfig",
    "MfeFoldingEngine",
    "load_folding_config",
    "traceback_mfe",
    "traceback_interval",
    "MfeResult",
    "build_engine",
    "predict_mfe",
    "predict_batch",
]
