import os
import re


def _split_addresses(value):
    return [address.strip() for address in re.split(r'[,|;]', value or '') if address.strip()]


class Config:
    """Base configuration"""

    DEBUG = False

    # Logging
    LOG_DIR = os.environ.get('SVNBACKUP_LOG_DIR') or os.path.join(os.getcwd(), 'logs')
    LOG_MAX_BYTES = int(os.environ.get('SVNBACKUP_LOG_MAX_BYTES', 10485760))  # 10MB
    LOG_BACKUP_COUNT = int(os.environ.get('SVNBACKUP_LOG_BACKUP_COUNT', 10))

    # Error notification
    SMTP_SERVER = os.environ.get('SMTP_SERVER')
    SMTP_PORT = int(os.environ.get('SMTP_PORT', 25))
    EMAIL_FROM = os.environ.get('EMAIL_FROM')
    EMAIL_TO = _split_addresses(os.environ.get('EMAIL_TO'))


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True

    # Use local data directory for development
    BASE_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    LOG_DIR = os.path.join(BASE_DIR, 'data', 'logs')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'default': ProductionConfig
}


def get_config(config_name=None):
    """
    Look up a configuration class by name.

    Falls back to SVNBACKUP_ENV, then to the default configuration.
    """
    if config_name is None:
        config_name = os.environ.get('SVNBACKUP_ENV', 'default')

    try:
        return config[config_name]
    except KeyError:
        raise ValueError(
            f"Unknown configuration: {config_name}. "
            f"Valid options: {list(config.keys())}"
        )
