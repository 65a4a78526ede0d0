"""
JAX Configuration - MUST be imported before any JAX imports.

This module sets environment variables for JAX configuration including:
- 64-bit floats, so log-density differences keep full precision
- Quieter XLA C++ logging
"""
import os

# --- PRECISION ---
# Metropolis ratios are differences of log densities; float32 rounding
# dominates those differences once the log posterior is a few hundred.
os.environ.setdefault("JAX_ENABLE_X64", "1")

# Suppress CUDA/XLA C++ warnings (GPU interconnect, NUMA, cuDNN factories)
os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")
