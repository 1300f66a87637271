#!/usr/bin/env python3
"""Marketing service main configuration

Combines all sub-configs with the service-level settings.
"""
import os
from dataclasses import dataclass, field

from .infra_config import InfraConfig
from .logging_config import LoggingConfig
from .service_config import ServiceConfig
from .channel_config import ChannelConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class MarketingConfig:
    """Main marketing platform configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False

    # Service settings
    service_name: str = "marketing_service"
    service_host: str = "0.0.0.0"
    service_port: int = 8260
    log_level: str = "INFO"

    # Sub-configurations
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    infrastructure: InfraConfig = field(default_factory=InfraConfig)
    services: ServiceConfig = field(default_factory=ServiceConfig)
    channels: ChannelConfig = field(default_factory=ChannelConfig)

    @classmethod
    def from_env(cls) -> 'MarketingConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        logging_config = LoggingConfig.from_env()
        return cls(
            # Environment
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),

            # Service settings
            service_name=os.getenv("MARKETING_SERVICE_NAME", "marketing_service"),
            service_host=os.getenv("HOST", "0.0.0.0"),
            service_port=_int(os.getenv("MARKETING_SERVICE_PORT") or os.getenv("PORT", "8260"), 8260),
            log_level=logging_config.log_level,

            # Load sub-configs
            logging=logging_config,
            infrastructure=InfraConfig.from_env(),
            services=ServiceConfig.from_env(),
            channels=ChannelConfig.from_env(),
        )
