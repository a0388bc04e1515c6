from .batch import run_program, run_to_memory
from .feedback import run_chain, run_feedback_loop, max_thruster_signal
from .network import Network, NetworkNode, NetworkResult
from .interactive import play, TextSession, run_script
