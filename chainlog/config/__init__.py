from .settings import LoggerSettings, get_settings, reset_settings

__all__ = ['LoggerSettings', 'get_settings', 'reset_settings']
