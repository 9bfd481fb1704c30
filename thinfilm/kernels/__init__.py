"""
Execution backends.

"numpy" is the vectorised reference, "numba" runs parallel CPU kernels and
"cuda" runs the same kernels on an NVIDIA GPU. All backends share one
numerical contract.
"""

from .cpu_baseline import CPUBackend

BACKENDS = ("numpy", "numba", "cuda")


def get_backend(name="numba"):
    """
    Resolve a backend by name.

    Parameters
    ----------
    name : str or backend
        "numpy", "numba" or "cuda". Backend instances are returned as is.

    Raises
    ------
    ValueError
        For unknown names
    RuntimeError
        If "cuda" is requested without a usable device
    """
    if not isinstance(name, str):
        return name
    if name == "numpy":
        return CPUBackend(use_fast=False)
    if name == "numba":
        return CPUBackend(use_fast=True)
    if name == "cuda":
        from .gpu_naive import CUDABackend
        return CUDABackend()
    raise ValueError(f"Unknown backend {name!r}, expected one of {BACKENDS}")
