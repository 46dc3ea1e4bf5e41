def clean_config(run_config):
    """
    Cleans the run config and sets defaults.
    All config keys use lowercase with underscores.
    """

    run_config.setdefault('num_warmup', 1000)
    run_config.setdefault('num_samples', 1000)
    run_config.setdefault('thin', 1)
    run_config.setdefault('refresh', 100)
    run_config.setdefault('save_warmup', False)
    run_config.setdefault('seed', 0)
    run_config.setdefault('label_prefix', '')
    run_config.setdefault('label_suffix', '\n')

    return run_config
