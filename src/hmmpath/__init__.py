"""Most probable hidden-state paths through discrete HMMs (Viterbi decoding)."""

from hmmpath.decode.decoder import decode, decode_names, viterbi_trellis
from hmmpath.model.experiment import ExperimentData, build_experiment_data
from hmmpath.model.hmm import Model, ModelDescriptor, build_model
from hmmpath.version import __version__

__all__ = [
    "Model",
    "ModelDescriptor",
    "ExperimentData",
    "build_model",
    "build_experiment_data",
    "decode",
    "decode_names",
    "viterbi_trellis",
    "__version__",
]
