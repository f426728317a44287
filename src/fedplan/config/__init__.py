from .config_mapper import ConfigMapper

__all__ = ["ConfigMapper"]
