"""
Error Handling and Validation Utilities for Chain Runs

This module provides run configuration validation and post-run diagnostics.
"""

from typing import Any, Dict

import numpy as np

import logging
logger = logging.getLogger('chainrun')


def validate_run_config(run_config: Dict[str, Any]) -> None:
    """
    Validates that a chain run configuration is sensible.

    Args:
        run_config: Configuration dictionary

    Raises:
        ValueError: If configuration is invalid
    """
    errors = []

    required_keys = ['num_warmup', 'num_samples', 'thin', 'refresh']
    for key in required_keys:
        if key not in run_config:
            errors.append(f"Missing required config key: '{key}'")

    if 'num_warmup' in run_config:
        if run_config['num_warmup'] < 0:
            errors.append("num_warmup must be >= 0")

    if 'num_samples' in run_config:
        if run_config['num_samples'] < 0:
            errors.append("num_samples must be >= 0")

    if 'thin' in run_config:
        if run_config['thin'] < 1:
            errors.append("thin must be >= 1")

    if 'refresh' in run_config:
        if run_config['refresh'] < 0:
            errors.append("refresh must be >= 0")

    if 'seed' in run_config:
        seed = run_config['seed']
        if not isinstance(seed, (int, np.integer)) or isinstance(seed, bool):
            errors.append(f"seed must be an integer, got {seed!r}")

    if errors:
        raise ValueError("Invalid chain configuration:\n  " + "\n  ".join(errors))


def diagnose_draws(draws: np.ndarray, diagnostics: Dict[str, Any] = None) -> Dict[str, Any]:
    """
    Analyzes recorded draws to identify common issues.

    Args:
        draws: Draw array (n_draws, n_params)
        diagnostics: Existing diagnostics dict to extend

    Returns:
        diagnostics: Dictionary with issues, warnings, and info
    """
    diagnostics = dict(diagnostics or {})
    for key in ('issues', 'warnings', 'info'):
        diagnostics[key] = list(diagnostics.get(key, []))
    draws = np.asarray(draws, dtype=np.float64)

    if draws.size == 0:
        diagnostics['warnings'].append("No draws were recorded")
        return diagnostics

    # Check for NaN/Inf in draws
    if not np.all(np.isfinite(draws)):
        diagnostics['issues'].append(
            "Draws contain NaN or Inf values - sampler became unstable"
        )

    # Check for stuck parameters (variance near zero)
    if draws.shape[0] > 1:
        param_vars = np.var(draws, axis=0)
        stuck = int(np.sum(param_vars < 1e-10))
        if stuck > 0:
            diagnostics['warnings'].append(
                f"{stuck} parameter(s) appear stuck (near-zero variance)"
            )

    diagnostics['info'].append(f"Total draws: {draws.shape[0]}")
    diagnostics['info'].append(f"Number of columns: {draws.shape[1] if draws.ndim > 1 else 1}")

    return diagnostics


_DIAGNOSTIC_LEVELS = (
    ('issues', logging.ERROR, 'ERROR'),
    ('warnings', logging.WARNING, 'WARN'),
    ('info', logging.INFO, 'INFO'),
)


def print_diagnostics(diagnostics: Dict[str, Any], prefix: str = '') -> None:
    """
    Log diagnostics from diagnose_draws, one line per entry.

    Issues log at ERROR, warnings at WARNING and info at INFO. Every line
    starts with prefix (the chain label), and a closing summary line counts
    the issues and warnings.
    """
    for key, level, tag in _DIAGNOSTIC_LEVELS:
        for message in diagnostics.get(key, []):
            logger.log(level, f"{prefix}[{tag}] {message}")

    n_issues = len(diagnostics.get('issues', []))
    n_warnings = len(diagnostics.get('warnings', []))
    if n_issues or n_warnings:
        logger.warning(f"{prefix}Draw diagnostics: {n_issues} issue(s), {n_warnings} warning(s)")
    else:
        logger.info(f"{prefix}Draw diagnostics: no issues detected")
