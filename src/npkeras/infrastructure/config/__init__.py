from ._config import BackendConfig, config_dir, load_config, save_config

__all__ = [
    BackendConfig.__name__,
    config_dir.__name__,
    load_config.__name__,
    save_config.__name__,
]
