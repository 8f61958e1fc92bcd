"""
Declarative fleet configuration (fleet.yaml).

Example:

    mode: auto
    runtimes:
      zeroclaw:
        executable: /usr/local/bin/zeroclaw
        args: [daemon]
        env: [OPENAI_API_KEY]
    channels:
      support-telegram:
        type: telegram
        instance: zeroclaw-support
        runtime: zeroclaw
        credentials:
          bot_token: TELEGRAM_BOT_TOKEN
    teams:
      research:
        - {agent: zeroclaw-lead, role: leader}
        - {agent: picoclaw-a, role: worker}

Channel credentials name environment variables; secret values never live in
the file.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from agentfleet.core.exceptions import ConfigError, UnknownChannelTypeError
from agentfleet.core.models import ChannelType, ExecutionMode
from agentfleet.core.naming import normalize_runtime
from agentfleet.swarm.coordinator import SwarmMember, SwarmRole


logger = logging.getLogger(__name__)

BOT_TOKEN_KEY = "bot_token"


@dataclass
class RuntimeSpec:
    name: str
    executable: Optional[str] = None
    args: List[str] = field(default_factory=list)
    env_keys: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)


@dataclass
class ChannelSpec:
    instance_name: str
    channel_type: ChannelType
    instance_id: Optional[str] = None
    runtime: Optional[str] = None
    credentials: Dict[str, str] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)

    def resolve_credentials(self, environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Look up credential values from the environment.

        Unset variables are skipped with a warning.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for key, var in self.credentials.items():
            if var in environ:
                values[key] = environ[var]
            else:
                logger.warning(
                    f"Channel {self.instance_name}: ${var} is not set, skipping {key}"
                )
        return values


@dataclass
class TeamSpec:
    name: str
    members: List[SwarmMember] = field(default_factory=list)


@dataclass
class FleetConfig:
    mode: ExecutionMode = ExecutionMode.AUTO
    runtimes: Dict[str, RuntimeSpec] = field(default_factory=dict)
    channels: List[ChannelSpec] = field(default_factory=list)
    teams: List[TeamSpec] = field(default_factory=list)


def load_fleet_config(path: Union[str, Path]) -> FleetConfig:
    """Read and parse a fleet file.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Fleet file not found: {path}")
    return parse_fleet_config(path.read_text())


def parse_fleet_config(text: str) -> FleetConfig:
    """
    Parse fleet YAML into a FleetConfig.

    Args:
        text: YAML document.

    Returns:
        FleetConfig; an empty document yields the defaults.

    Raises:
        ConfigError: If the YAML is invalid or a section is malformed.
    """
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in fleet file: {e}")

    if not isinstance(data, dict):
        raise ConfigError("Fleet file must be a YAML dictionary.")

    try:
        mode = ExecutionMode.parse(data.get("mode", ExecutionMode.AUTO))
    except ValueError:
        raise ConfigError(f"Invalid execution mode: {data.get('mode')}")

    return FleetConfig(
        mode=mode,
        runtimes=_parse_runtimes(_section(data, "runtimes", dict)),
        channels=_parse_channels(_section(data, "channels", dict)),
        teams=_parse_teams(_section(data, "teams", dict)),
    )


def _section(data: Dict[str, Any], name: str, kind: type) -> Any:
    value = data.get(name)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise ConfigError(f"'{name}' must be a {kind.__name__}")
    return value


def _parse_runtimes(section: Dict[str, Any]) -> Dict[str, RuntimeSpec]:
    runtimes = {}
    for name, body in section.items():
        body = body or {}
        if not isinstance(body, dict):
            raise ConfigError(f"runtime '{name}' must be a dictionary")
        try:
            key = normalize_runtime(name)
        except ValueError as e:
            raise ConfigError(str(e))

        env = body.get("env") or []
        # env is either a list of pass-through keys or a mapping of values
        if isinstance(env, dict):
            env_keys, env_values = [], {str(k): str(v) for k, v in env.items()}
        elif isinstance(env, list):
            env_keys, env_values = [str(k) for k in env], {}
        else:
            raise ConfigError(f"runtime '{name}': env must be a list or dictionary")

        args = body.get("args") or []
        if not isinstance(args, list):
            raise ConfigError(f"runtime '{name}': args must be a list")

        runtimes[key] = RuntimeSpec(
            name=key,
            executable=body.get("executable"),
            args=[str(a) for a in args],
            env_keys=env_keys,
            env=env_values,
        )
    return runtimes


def _parse_channels(section: Dict[str, Any]) -> List[ChannelSpec]:
    channels = []
    for instance_name, body in section.items():
        if not isinstance(body, dict) or "type" not in body:
            raise ConfigError(f"channel '{instance_name}' needs a 'type'")
        channel_type = ChannelType.from_str_loose(body["type"])
        if channel_type is None:
            raise ConfigError(str(UnknownChannelTypeError(str(body["type"]))))

        credentials = body.get("credentials") or {}
        if not isinstance(credentials, dict):
            raise ConfigError(f"channel '{instance_name}': credentials must be a dictionary")

        runtime = body.get("runtime")
        if runtime is not None:
            try:
                runtime = normalize_runtime(str(runtime))
            except ValueError as e:
                raise ConfigError(f"channel '{instance_name}': {e}")

        channels.append(
            ChannelSpec(
                instance_name=str(instance_name),
                channel_type=channel_type,
                instance_id=body.get("instance"),
                runtime=runtime,
                credentials={str(k): str(v) for k, v in credentials.items()},
                options=dict(body.get("options") or {}),
            )
        )
    return channels


def _parse_teams(section: Dict[str, Any]) -> List[TeamSpec]:
    teams = []
    for name, members in section.items():
        if not isinstance(members, list):
            raise ConfigError(f"team '{name}' must be a list of members")
        parsed = []
        for member in members:
            if not isinstance(member, dict) or "agent" not in member:
                raise ConfigError(f"team '{name}': each member needs an 'agent'")
            try:
                role = SwarmRole(str(member.get("role", SwarmRole.WORKER.value)).lower())
            except ValueError:
                raise ConfigError(f"team '{name}': unknown role {member.get('role')}")
            parsed.append(SwarmMember(agent_id=str(member["agent"]), role=role))
        teams.append(TeamSpec(name=str(name), members=parsed))
    return teams
