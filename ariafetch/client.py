"""Control an aria2c daemon over JSON-RPC and follow downloads to completion."""

from __future__ import annotations

import json
import logging
import socket
import subprocess
import sys
import threading
import time
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .embedder import extract_binary

log = logging.getLogger(__name__)

DEFAULT_PORT = 6800


class Aria2Error(Exception):
    """Raised when the aria2c daemon or a download fails."""


class RpcError(Aria2Error):
    """An error object returned by the JSON-RPC endpoint."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"JSON-RPC error {code}: {message}")
        self.code = code
        self.message = message


def _string(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise Aria2Error(f"field {key!r} is not a string: {value!r}")
    return value


@dataclass
class FileEntry:
    """One file belonging to a download."""

    path: str = ""

    @classmethod
    def from_json(cls, data: Any) -> "FileEntry":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise Aria2Error(f"file entry is not an object: {data!r}")
        return cls(path=_string(data, "path"))


_STATUS_FIELDS = {
    "gid": "gid",
    "status": "status",
    "totalLength": "total_length",
    "completedLength": "completed_length",
    "downloadSpeed": "download_speed",
    "pieceLength": "piece_length",
    "numPieces": "num_pieces",
    "connections": "connections",
    "errorCode": "error_code",
    "errorMessage": "error_message",
}


@dataclass
class DownloadStatus:
    """State of a download as reported by aria2.tellStatus."""

    gid: str = ""
    status: str = ""
    total_length: str = ""
    completed_length: str = ""
    download_speed: str = ""
    piece_length: str = ""
    num_pieces: str = ""
    connections: str = ""
    error_code: str = ""
    error_message: str = ""
    files: list[FileEntry] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> "DownloadStatus":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise Aria2Error(f"failed to parse status: {data!r}")
        values = {attr: _string(data, key) for key, attr in _STATUS_FIELDS.items()}
        files = data.get("files") or []
        if not isinstance(files, list):
            raise Aria2Error(f"failed to parse status files: {files!r}")
        return cls(files=[FileEntry.from_json(item) for item in files], **values)


def find_available_port(port: int = DEFAULT_PORT) -> int:
    """Return the first port from *port* upwards that can be bound."""
    while True:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            try:
                sock.bind(("", port))
            except OSError:
                port += 1
                continue
        return port


class Aria2:
    """An aria2c daemon started on demand and driven over JSON-RPC."""

    def __init__(self, port: Optional[int] = None, timeout: float = 10.0) -> None:
        self.port = find_available_port(DEFAULT_PORT) if port is None else port
        self.timeout = timeout
        self._lock = threading.Lock()
        self._running = False
        self._process: Optional[subprocess.Popen] = None

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def start(self) -> None:
        """Launch aria2c and wait until its RPC port accepts connections."""
        with self._lock:
            log.info("starting aria2c")
            if self._running:
                raise Aria2Error("aria2c is already running")
            binary = extract_binary()
            extra: dict[str, Any] = {}
            if sys.platform == "win32":
                extra["creationflags"] = subprocess.CREATE_NO_WINDOW
            try:
                process = subprocess.Popen(
                    [str(binary), *self.build_args()],
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    **extra,
                )
            except OSError as exc:
                raise Aria2Error(f"failed to launch aria2c: {exc}") from exc
            self._process = process
            try:
                self.wait_for_rpc()
            except Aria2Error as exc:
                process.kill()
                raise Aria2Error(f"RPC service failed to start: {exc}") from exc
            self._running = True
        threading.Thread(target=self._monitor, args=(process,), daemon=True).start()

    def _monitor(self, process: subprocess.Popen) -> None:
        process.wait()
        if self._process is process:
            self.stop()

    def stop(self) -> None:
        """Mark the daemon stopped and kill its process."""
        with self._lock:
            self._running = False
            if self._process is not None:
                try:
                    self._process.kill()
                except OSError as exc:
                    raise Aria2Error(f"failed to kill aria2c process: {exc}") from exc

    def build_args(self) -> list[str]:
        return [
            f"--rpc-listen-port={self.port}",
            "--disk-cache=64M",
            "--always-resume=false",
            "--max-resume-failure-tries=0",
            "--enable-rpc=true",
            "--rpc-listen-all=true",
            "--continue=true",
            "--max-connection-per-server=16",
            "--min-split-size=1M",
            "--split=64",
            "--optimize-concurrent-downloads=true",
            "--log-level=error",
            "--http-accept-gzip=true",
            "--content-disposition-default-utf8=true",
            "--check-certificate=false",
        ]

    def wait_for_rpc(self, timeout: float = 10.0, interval: float = 0.1) -> None:
        """Poll the RPC port until it accepts a TCP connection."""
        deadline = time.monotonic() + timeout
        while True:
            time.sleep(interval)
            if time.monotonic() > deadline:
                raise Aria2Error("timed out waiting for the RPC service")
            try:
                with socket.create_connection(("localhost", self.port), timeout=1.0):
                    return
            except OSError:
                continue

    def call(self, method: str, params: list) -> Any:
        """Invoke a JSON-RPC method and return its decoded result."""
        body = json.dumps(
            {
                "jsonrpc": "2.0",
                "method": method,
                "params": params,
                "id": str(time.time_ns()),
            }
        ).encode("utf-8")
        request = urllib.request.Request(
            f"http://127.0.0.1:{self.port}/jsonrpc",
            data=body,
            method="POST",
            headers={"Content-Type": "application/json"},
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as exc:
            raw = exc.read()
        except (urllib.error.URLError, OSError) as exc:
            raise Aria2Error(f"HTTP request failed: {exc}") from exc

        try:
            reply = json.loads(raw)
        except ValueError as exc:
            raise Aria2Error(f"failed to parse response: {exc}") from exc
        if not isinstance(reply, dict):
            raise Aria2Error(f"failed to parse response: {reply!r}")
        error = reply.get("error")
        if error is not None:
            if not isinstance(error, dict):
                raise Aria2Error(f"failed to parse response: {error!r}")
            raise RpcError(int(error.get("code", 0)), str(error.get("message", "")))
        return reply.get("result")

    def add_uri(self, uri: str, directory: str = "") -> str:
        """Queue *uri* for download into *directory* and return its GID."""
        gid = self.call("aria2.addUri", [[uri], {"dir": directory}])
        if not isinstance(gid, str):
            raise Aria2Error(f"failed to parse GID: {gid!r}")
        return gid

    def tell_status(self, gid: str) -> DownloadStatus:
        return DownloadStatus.from_json(self.call("aria2.tellStatus", [gid]))

    def monitor_download(
        self,
        gid: str,
        callback: Optional[Callable[[DownloadStatus], None]] = None,
        interval: float = 1.0,
    ) -> str:
        """Poll a download until it completes and return the first file's path."""
        while True:
            time.sleep(interval)
            status = self.tell_status(gid)
            if callback is not None:
                callback(status)
            if status.status == "complete":
                if not status.files:
                    raise Aria2Error("download completed without any files")
                return status.files[0].path
            if status.status == "error":
                raise Aria2Error(f"download failed: {status.error_message}")


_default: Optional[Aria2] = None
_default_lock = threading.Lock()


def _daemon() -> Aria2:
    global _default
    with _default_lock:
        if _default is None:
            _default = Aria2()
        return _default


def download(
    url: str,
    directory: str = "",
    callback: Optional[Callable[[DownloadStatus], None]] = None,
) -> str:
    """Download *url* with the shared daemon, starting it if needed."""
    daemon = _daemon()
    if not daemon.is_running():
        daemon.start()
    gid = daemon.add_uri(url, directory)
    return daemon.monitor_download(gid, callback)


def stop() -> None:
    """Stop the shared daemon if one was created."""
    with _default_lock:
        daemon = _default
    if daemon is not None:
        daemon.stop()