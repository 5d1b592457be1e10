"""
Edge Agent Configuration.
"""

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Optional
import yaml


DEFAULT_SERVER_URL = "http://127.0.0.1:3000/api/metrics"


@dataclass
class BackoffConfig:
    """Reporting cadence and failure backoff."""
    interval: int = 5  # seconds between reports when healthy
    step: int = 2  # extra seconds per consecutive failure
    max_wait: int = 15  # cap on the progressive backoff
    max_consecutive_failures: int = 5
    cooldown: int = 30  # pause after a run of failures


@dataclass
class AgentConfig:
    """Main Edge Agent configuration."""
    # Collector connection
    server_url: str = DEFAULT_SERVER_URL
    request_timeout: int = 10

    backoff: BackoffConfig = field(default_factory=BackoffConfig)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_yaml(cls, path: str) -> "AgentConfig":
        """Load configuration from YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls._from_dict(data)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "AgentConfig":
        """Load configuration from environment variables."""
        env = os.environ if environ is None else environ
        config = cls()

        if env.get("TAILMON_SERVER_URL"):
            config.server_url = env["TAILMON_SERVER_URL"]
        if env.get("TAILMON_LOG_LEVEL"):
            config.log_level = env["TAILMON_LOG_LEVEL"]
        if env.get("TAILMON_LOG_FILE"):
            config.log_file = env["TAILMON_LOG_FILE"]

        return config

    @classmethod
    def _from_dict(cls, data: dict) -> "AgentConfig":
        """Create config from dictionary, rejecting unknown or ill-typed fields."""
        if not isinstance(data, dict):
            raise ValueError("Agent config must be a mapping")
        _validate("agent config", data, _AGENT_FIELDS)

        config = cls()

        for key in ["server_url", "request_timeout", "log_level", "log_file"]:
            if key in data:
                setattr(config, key, data[key])

        if "backoff" in data:
            backoff = data["backoff"] or {}
            _validate("backoff", backoff, _BACKOFF_FIELDS)
            config.backoff = BackoffConfig(**backoff)

        return config

    def to_yaml(self, path: str) -> None:
        """Save configuration to YAML file."""
        with open(path, 'w') as f:
            yaml.dump(dataclasses.asdict(self), f, default_flow_style=False)


NUMBER = (int, float)

_BACKOFF_FIELDS = {
    "interval": NUMBER,
    "step": NUMBER,
    "max_wait": NUMBER,
    "max_consecutive_failures": (int,),
    "cooldown": NUMBER,
}

_AGENT_FIELDS = {
    "server_url": (str,),
    "request_timeout": NUMBER,
    "log_level": (str,),
    "log_file": (str, type(None)),
    "backoff": (dict, type(None)),
}


def _validate(section: str, data: dict, expected: dict) -> None:
    """Raise ValueError naming the first unknown or ill-typed field."""
    for key, value in data.items():
        if key not in expected:
            raise ValueError(f"Unknown {section} field: {key!r}")
        # bool is an int subclass; never a valid number here
        if isinstance(value, bool) or not isinstance(value, expected[key]):
            raise ValueError(
                f"Invalid {section} field {key!r}: {value!r} "
                f"(expected {' or '.join(t.__name__ for t in expected[key])})"
            )
        if expected[key] in (NUMBER, (int,)) and value < 0:
            raise ValueError(f"Invalid {section} field {key!r}: must not be negative")
