"""
Progress reporting for the chain runner.

Lines look like:

    Iteration:  100 / 2000 [  5%]  (Warmup)

and are written to a text stream, or to the 'chainrun' logger when no
stream is given.
"""

import logging
logger = logging.getLogger('chainrun')


def should_report(m, num_iterations, refresh):
    """True when m is a multiple of refresh or the last iteration of the call."""
    if refresh <= 0:
        return False
    return m % refresh == 0 or m == num_iterations - 1


def format_progress(m, start, finish, warmup, prefix='', suffix=''):
    """Build the progress line for iteration m of the window [start, finish)."""
    current = start + m + 1
    width = len(str(finish))
    pct = int(100.0 * current / finish) if finish > 0 else 100
    phase = '(Warmup)' if warmup else '(Sampling)'
    return f"{prefix}Iteration: {current:>{width}} / {finish} [{pct:>3}%]  {phase}{suffix}"


def print_progress(m, num_iterations, start, finish, refresh, warmup, prefix='', suffix='\n', stream=None):
    """
    Emit a progress line for iteration m if it is due.

    Args:
        m: Iteration index within the current call (0-based)
        num_iterations: Number of iterations in the current call
        start: Absolute index of the first iteration of this call
        finish: Absolute end of the overall window (exclusive)
        refresh: Report every refresh iterations; 0 disables reporting
        warmup: Whether this call is the warmup phase
        prefix: Text prepended to the line (e.g. chain label)
        suffix: Text appended to the line
        stream: Text stream with write(); None logs through 'chainrun'

    Returns:
        True if a line was emitted.
    """
    if not should_report(m, num_iterations, refresh):
        return False
    line = format_progress(m, start, finish, warmup, prefix, suffix)
    if stream is None:
        logger.info(line.rstrip('\n'))
    else:
        stream.write(line)
        if hasattr(stream, 'flush'):
            stream.flush()
    return True
