"""Runtime constants shared across the process manager, stores and CLI."""

# Fleet state directory layout
FLEET_HOME_ENV = "AGENTFLEET_HOME"
DEFAULT_FLEET_DIRNAME = ".agentfleet"
STATE_DIRNAME = "run"
LOG_DIRNAME = "logs"
PID_SUFFIX = ".pid"
LOG_SUFFIX = ".log"

# Graceful shutdown: SIGTERM, then poll for exit before escalating to SIGKILL
STOP_POLL_INTERVAL_SEC = 0.1
STOP_POLL_ATTEMPTS = 20

# Container engine probe
DOCKER_BINARY = "docker"
DOCKER_PROBE_TIMEOUT_SEC = 5

# CLI defaults
DEFAULT_FLEET_FILE = "fleet.yaml"
DEFAULT_TAIL_LINES = 50

# Swarm task ids
SWARM_TASK_PREFIX = "swarm-task-"
