"""YAML config loader with environment variable expansion."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field


def _expand_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""
    pattern = re.compile(r"\$\{([^}]+)\}")
    def replacer(match: re.Match) -> str:
        var = match.group(1)
        return os.environ.get(var, match.group(0))
    return pattern.sub(replacer, value)


def _walk_and_expand(obj: object) -> object:
    """Recursively expand environment variables in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_expand(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_expand(item) for item in obj]
    return obj


class NodeConfig(BaseModel):
    name: str = "riak@127.0.0.1"
    host: str = "127.0.0.1"
    http_port: int = 8098
    data_dir: str = "/var/lib/riak"
    service: str = "riak"


class ToolsConfig(BaseModel):
    ps: str = "ps"
    admin: str = "riak-admin"
    riak: str = "riak"
    erl: str = "erl"
    eleveldb_ebin: str = "/usr/lib/riak/lib/eleveldb-*/ebin"
    service_manager: str = "systemd"   # systemd | sysv
    systemctl: str = "systemctl"
    service: str = "service"


class ThresholdConfig(BaseModel):
    warning: float | None = None
    critical: float | None = None


class ThresholdsConfig(BaseModel):
    memory: ThresholdConfig = Field(
        default_factory=lambda: ThresholdConfig(warning=4096, critical=8192),
    )
    ping: ThresholdConfig = Field(
        default_factory=lambda: ThresholdConfig(warning=1000),
    )
    stats: ThresholdConfig = Field(
        default_factory=lambda: ThresholdConfig(warning=100_000, critical=500_000),
    )
    ring: ThresholdConfig = Field(default_factory=ThresholdConfig)
    compaction: ThresholdConfig = Field(
        default_factory=lambda: ThresholdConfig(critical=1),
    )
    top: ThresholdConfig = Field(
        default_factory=lambda: ThresholdConfig(warning=1000, critical=10_000),
    )


class ProcessConfig(BaseModel):
    pattern: str = "beam.smp"
    match_node: bool = True     # also require "-name <node>" in the command line


class StatsConfig(BaseModel):
    metric: str = "node_get_fsm_time_95"
    unit: str = "us"


class ProfilerConfig(BaseModel):
    interval: int = 1
    sort: str = "msg_q"          # runtime | reductions | memory | msg_q
    lines: int = 10
    duration: float = 5.0        # seconds before riak-admin top is stopped


class LoggingConfig(BaseModel):
    level: str = "WARNING"


class Settings(BaseModel):
    node: NodeConfig = Field(default_factory=NodeConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    process: ProcessConfig = Field(default_factory=ProcessConfig)
    stats: StatsConfig = Field(default_factory=StatsConfig)
    profiler: ProfilerConfig = Field(default_factory=ProfilerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    timeout: float = 10.0

    @property
    def data_path(self) -> Path:
        return Path(self.node.data_dir).expanduser()

    @property
    def base_url(self) -> str:
        return f"http://{self.node.host}:{self.node.http_port}"


CONFIG_CANDIDATES = [
    Path("nodewatch.yaml"),
    Path("nodewatch.yml"),
    Path.home() / ".nodewatch" / "config.yaml",
    Path("/etc/nodewatch/config.yaml"),
]


def load_config(path: str | Path | None = None) -> Settings:
    """Load configuration from a YAML file, falling back to defaults."""
    if path is None:
        for candidate in CONFIG_CANDIDATES:
            if candidate.exists():
                path = candidate
                break

    if path is not None:
        path = Path(path)
        if not path.is_file():
            raise ValueError(f"Config file not found: {path}")
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        raw = _walk_and_expand(raw)
        return Settings.model_validate(raw)

    return Settings()


def apply_overrides(
    settings: Settings,
    *,
    host: str | None = None,
    port: int | None = None,
    node: str | None = None,
    data_dir: str | None = None,
    service: str | None = None,
    timeout: float | None = None,
) -> Settings:
    """Layer command-line values on top of file settings.

    ``None`` means "not given" and leaves the file value in place.
    """
    if host is not None:
        settings.node.host = host
    if port is not None:
        settings.node.http_port = port
    if node is not None:
        settings.node.name = node
    if data_dir is not None:
        settings.node.data_dir = data_dir
    if service is not None:
        settings.node.service = service
    if timeout is not None:
        if timeout <= 0:
            raise ValueError("Timeout must be positive")
        settings.timeout = timeout
    return settings
