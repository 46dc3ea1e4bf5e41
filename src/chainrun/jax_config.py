"""
JAX Configuration - MUST be imported before any JAX imports.

This module sets environment variables for JAX configuration including:
- Double precision, so bounds, draws and the NaN sentinel are float64
- Persistent compilation cache directory
- Minimum compile time threshold for caching
"""
import os
from pathlib import Path

# --- PRECISION ---
# Validation checks compare against float64 limits; float32 would round
# large finite values to infinity before they ever reach a check.
os.environ.setdefault("JAX_ENABLE_X64", "True")

# --- PERSISTENT COMPILATION CACHE ---
_JAX_CACHE_DIR = Path.home() / ".cache" / "jax" / "chainrun_cache"
try:
    _JAX_CACHE_DIR.mkdir(parents=True, exist_ok=True)
except OSError:
    # Read-only home (containers, CI): JAX simply runs without the cache
    pass
else:
    os.environ.setdefault("JAX_COMPILATION_CACHE_DIR", str(_JAX_CACHE_DIR))
os.environ.setdefault("JAX_PERSISTENT_CACHE_MIN_COMPILE_TIME_SECS", "1.0")
