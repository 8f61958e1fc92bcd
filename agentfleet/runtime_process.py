"""
Direct-mode runtime process supervision.

Spawns runtime executables as detached local processes, persists one PID
record per runtime name, captures output into per-runtime log files, and
stops processes with SIGTERM followed by SIGKILL escalation. Docker mode is
only resolved here; container supervision belongs to the container engine.
"""

import json
import logging
import os
import shutil
import signal
import subprocess
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from agentfleet.constants import (
    DOCKER_BINARY,
    DOCKER_PROBE_TIMEOUT_SEC,
    LOG_SUFFIX,
    PID_SUFFIX,
    STOP_POLL_ATTEMPTS,
    STOP_POLL_INTERVAL_SEC,
)
from agentfleet.core.exceptions import EnvironmentConfigError, ExecutableNotFoundError
from agentfleet.core.models import ExecutionMode, ProcessInfo, RuntimeProcessStatus
from agentfleet.core.naming import now_unix_ms, safe_name
from agentfleet.support.paths import ensure_fleet_dirs, get_log_dir, get_state_dir


logger = logging.getLogger(__name__)


def docker_available() -> bool:
    """
    Probe whether the container engine is installed.

    Runs `docker --version` with output discarded; has no side effects.

    Returns:
        True if the probe exits successfully, False otherwise.
    """
    try:
        result = subprocess.run(
            [DOCKER_BINARY, "--version"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=DOCKER_PROBE_TIMEOUT_SEC,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0


def resolve_executable(executable: Union[str, Path]) -> Path:
    """
    Resolve a runtime executable to an existing path.

    Accepts an explicit path, or a bare command name looked up on PATH.

    Raises:
        ExecutableNotFoundError: If nothing exists at the path or on PATH.
    """
    path = Path(executable).expanduser()
    if path.exists():
        return path
    if os.sep not in str(executable):
        found = shutil.which(str(executable))
        if found:
            return Path(found)
    raise ExecutableNotFoundError(str(executable))


class ProcessManager:
    """Supervisor for runtimes launched in direct (non-containerized) mode."""

    def __init__(
        self,
        mode: Union[ExecutionMode, str] = ExecutionMode.AUTO,
        root_dir: Optional[Union[str, Path]] = None,
        poll_interval: float = STOP_POLL_INTERVAL_SEC,
        poll_attempts: int = STOP_POLL_ATTEMPTS,
    ):
        """
        Initialize process manager.

        Args:
            mode: Configured execution mode (auto resolves by probing docker).
            root_dir: Fleet root holding run/ and logs/. Defaults to
                $AGENTFLEET_HOME or ~/.agentfleet.
            poll_interval: Seconds between liveness checks while stopping.
            poll_attempts: Liveness checks before escalating to SIGKILL.
        """
        self.mode = ExecutionMode.parse(mode)
        root = ensure_fleet_dirs(root_dir)
        self.state_dir = get_state_dir(root)
        self.log_dir = get_log_dir(root)
        self.poll_interval = poll_interval
        self.poll_attempts = poll_attempts

        # Popen handles for processes spawned by this instance, so exited
        # children are reaped instead of lingering as zombies.
        self._children: Dict[int, subprocess.Popen] = {}
        self._lock = threading.RLock()
        # Never set; waiting on it gives an interruptible timed sleep.
        self._timer = threading.Event()
        self._executor: Optional[ThreadPoolExecutor] = None

    # ------------------------------------------------------------------
    # Mode resolution
    # ------------------------------------------------------------------

    def resolve_mode(self, force_no_docker: bool = False) -> ExecutionMode:
        """Resolve the effective execution mode.

        Args:
            force_no_docker: Always run directly when True.

        Returns:
            DIRECT when forced; for AUTO, DOCKER if the engine is available
            else DIRECT; otherwise the configured mode unchanged.
        """
        if force_no_docker:
            return ExecutionMode.DIRECT
        if self.mode == ExecutionMode.AUTO:
            return ExecutionMode.DOCKER if docker_available() else ExecutionMode.DIRECT
        return self.mode

    # ------------------------------------------------------------------
    # Spawn
    # ------------------------------------------------------------------

    def start_direct(
        self,
        runtime: str,
        executable: Union[str, Path],
        args: Sequence[str] = (),
        env: Optional[Dict[str, str]] = None,
    ) -> ProcessInfo:
        """
        Launch a runtime process detached from the manager's standard streams.

        Output and errors are appended to logs/<runtime>.log. The PID record
        for this runtime is overwritten.

        Args:
            runtime: Runtime name; keys both the log file and the PID record.
            executable: Path or command name of the runtime binary.
            args: Command-line arguments.
            env: Environment for the child (inherits the manager's if None).

        Returns:
            The persisted ProcessInfo.

        Raises:
            ExecutableNotFoundError: If the executable does not exist.
            EnvironmentConfigError: If the process cannot be spawned.
        """
        exe_path = resolve_executable(executable)
        log_path = self.log_path(runtime)
        cmd = [str(exe_path), *[str(a) for a in args]]

        logger.debug(f"Launching {runtime} with: {' '.join(cmd)}")

        try:
            with open(log_path, "a") as log_file:
                child = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=log_file,
                    stderr=subprocess.STDOUT,
                    env=env,
                    start_new_session=True,
                )
        except OSError as e:
            raise EnvironmentConfigError(f"failed to spawn {exe_path}: {e}") from e

        with self._lock:
            self._children[child.pid] = child

        info = ProcessInfo(
            runtime=runtime,
            pid=child.pid,
            started_at_unix_ms=now_unix_ms(),
            mode=ExecutionMode.DIRECT,
            log_path=str(log_path),
        )
        self._write_pid_file(runtime, info)
        logger.info(f"Runtime {runtime} started (pid {child.pid}), logging to {log_path}")
        return info

    # ------------------------------------------------------------------
    # Stop
    # ------------------------------------------------------------------

    def stop(self, runtime: str) -> bool:
        """
        Stop a directly-run runtime: SIGTERM, wait, then SIGKILL if needed.

        Idempotent: a runtime without a PID record is left alone and no
        signal is sent. The record is always removed once the sequence runs.
        Blocks for up to poll_interval * poll_attempts seconds.

        Args:
            runtime: Runtime name.

        Returns:
            True if a record existed and the stop sequence ran, False otherwise.
        """
        info = self.get_process(runtime)
        if info is None:
            logger.debug(f"No PID record for {runtime}, nothing to stop")
            return False

        self._send_signal(info.pid, signal.SIGTERM)
        if self._wait_for_exit(info.pid):
            logger.info(f"Runtime {runtime} (pid {info.pid}) stopped")
        else:
            logger.warning(
                f"Runtime {runtime} (pid {info.pid}) still alive after SIGTERM, sending SIGKILL"
            )
            self._send_signal(info.pid, signal.SIGKILL)
            self._reap(info.pid)

        self._remove_pid_file(runtime)
        with self._lock:
            self._children.pop(info.pid, None)
        return True

    def stop_in_background(self, runtime: str) -> "Future[bool]":
        """Run stop() on a worker thread so callers are not blocked while it polls."""
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=4, thread_name_prefix="fleet-stop"
                )
            executor = self._executor
        return executor.submit(self.stop, runtime)

    def close(self) -> None:
        """Wait for background stops to finish and release the worker pool."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def _wait_for_exit(self, pid: int) -> bool:
        """Poll liveness every poll_interval for poll_attempts checks."""
        for _ in range(self.poll_attempts):
            if not self.is_pid_running(pid):
                return True
            self._timer.wait(self.poll_interval)
        return False

    def _send_signal(self, pid: int, sig: int) -> None:
        # Best-effort: a vanished or foreign process is not an error here.
        try:
            os.kill(pid, sig)
        except ProcessLookupError:
            logger.debug(f"pid {pid} already gone before signal {sig}")
        except OSError as e:
            logger.warning(f"Failed to send signal {sig} to pid {pid}: {e}")

    def _reap(self, pid: int) -> None:
        with self._lock:
            child = self._children.get(pid)
        if child is None:
            return
        try:
            child.wait(timeout=max(self.poll_interval, 0.1) * 10)
        except subprocess.TimeoutExpired:
            logger.warning(f"pid {pid} did not exit after SIGKILL")

    # ------------------------------------------------------------------
    # Status and logs
    # ------------------------------------------------------------------

    def is_pid_running(self, pid: int) -> bool:
        """Probe process liveness at call time."""
        with self._lock:
            child = self._children.get(pid)
        if child is not None:
            return child.poll() is None
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            # Exists but belongs to another user
            return True
        except OSError:
            return False
        return True

    def is_running(self, runtime: str) -> bool:
        info = self.get_process(runtime)
        return info is not None and self.is_pid_running(info.pid)

    def get_process(self, runtime: str) -> Optional[ProcessInfo]:
        """Return the persisted ProcessInfo for a runtime, or None."""
        return self._read_pid_file(self.pid_file(runtime))

    def list_statuses(self) -> List[RuntimeProcessStatus]:
        """
        Report every persisted runtime with a freshly probed liveness flag.

        Returns:
            Statuses sorted by runtime name.
        """
        statuses = []
        if not self.state_dir.exists():
            return statuses

        for path in self.state_dir.glob(f"*{PID_SUFFIX}"):
            try:
                info = self._read_pid_file(path)
            except ValueError as e:
                logger.warning(f"Skipping unreadable PID record: {e}")
                continue
            if info is None:
                continue
            statuses.append(
                RuntimeProcessStatus(
                    runtime=info.runtime,
                    pid=info.pid,
                    running=self.is_pid_running(info.pid),
                    mode=info.mode,
                    log_path=info.log_path,
                )
            )

        statuses.sort(key=lambda s: s.runtime)
        return statuses

    def tail_logs(self, runtime: str, lines: int) -> str:
        """
        Return the last `lines` lines of a runtime's log.

        Args:
            runtime: Runtime name.
            lines: Number of lines to keep from the end.

        Returns:
            The lines joined with newlines; empty if the log does not exist yet.
        """
        log_path = self.log_path(runtime)
        if not log_path.exists():
            return ""
        rows = log_path.read_text(errors="replace").splitlines()
        start = max(len(rows) - max(lines, 0), 0)
        return "\n".join(rows[start:])

    # ------------------------------------------------------------------
    # PID records
    # ------------------------------------------------------------------

    def pid_file(self, runtime: str) -> Path:
        return self.state_dir / f"{safe_name(runtime, 'runtime')}{PID_SUFFIX}"

    def log_path(self, runtime: str) -> Path:
        return self.log_dir / f"{safe_name(runtime, 'runtime')}{LOG_SUFFIX}"

    def _write_pid_file(self, runtime: str, info: ProcessInfo) -> None:
        """Write the PID record atomically via a temporary file."""
        path = self.pid_file(runtime)
        temp_file = path.with_suffix(PID_SUFFIX + ".tmp")
        try:
            with open(temp_file, "w") as f:
                json.dump(info.to_dict(), f, indent=2)
            temp_file.replace(path)
        except Exception:
            if temp_file.exists():
                temp_file.unlink()
            raise

    def _read_pid_file(self, path: Path) -> Optional[ProcessInfo]:
        if not path.exists():
            return None
        try:
            with open(path, "r") as f:
                return ProcessInfo.from_dict(json.load(f))
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            raise ValueError(f"Error reading PID record {path}: {e}") from e

    def _remove_pid_file(self, runtime: str) -> None:
        path = self.pid_file(runtime)
        if path.exists():
            path.unlink()
