# cos_drive/config_security.py - Environment-specific security configurations
import os

class SecurityConfig:
    """Base security configuration"""

    @staticmethod
    def get_env():
        return os.getenv('FLASK_ENV', 'production')

    @staticmethod
    def get_allowed_origins():
        """Get allowed CORS origins based on environment"""
        configured = os.getenv('CORS_ORIGINS')
        if configured:
            return [origin.strip() for origin in configured.split(',') if origin.strip()]

        if SecurityConfig.get_env() == 'development':
            return [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
            ]
        return []

    @staticmethod
    def is_debug_mode():
        """Check if debug mode should be enabled"""
        return SecurityConfig.get_env() == 'development'

    @staticmethod
    def get_log_level():
        """Get appropriate log level"""
        env = SecurityConfig.get_env()
        if env == 'development':
            return 'DEBUG'
        elif env == 'staging':
            return 'INFO'
        else:
            return 'WARNING'
