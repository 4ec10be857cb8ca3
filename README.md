# ariafetch

Download files from Python by driving an `aria2c` daemon over its JSON-RPC
interface.

## How the aria2c binary is found

The package looks for a platform-specific `aria2c` executable in the
`binaries` directory inside the installed `ariafetch` package:

| Platform | Bundled file          | Installed as  |
|----------|-----------------------|---------------|
| Windows  | `binaries/aria2c.exe` | `aria2c.exe`  |
| Linux    | `binaries/aria2c-linux` | `aria2c`    |
| macOS    | `binaries/aria2c-darwin` | `aria2c`   |

On first use that file is copied (mode 0755) into a per-user data directory
named `aria2`:

- Windows: `%LOCALAPPDATA%\aria2`, or `~\AppData\Local\aria2`
- macOS: `~/Library/Application Support/aria2`
- Linux: `$XDG_DATA_HOME/aria2`, or `~/.local/share/aria2`

If an executable already exists at the installed location it is used as is,
without looking at the bundled file.

The daemon is started with RPC enabled on the first free port from 6800
upwards and is reused for later downloads.

## Installation

```
pip install ariafetch
```

## Command line

```
ariafetch https://example.com/files/archive.zip
ariafetch -d downloads https://example.com/files/archive.zip
```

`-d/--dir` chooses the directory to save into; when left empty aria2c uses
its own default. Without a URL argument a built-in default URL is fetched.

About once a second the command prints the task status, elapsed time,
progress percentage, speed in MB/s and any error message reported by aria2,
then the path of the finished file. It exits with status 1 if the download
fails, and stops the daemon before exiting.

## Library use

```python
from ariafetch.client import download, stop

def on_progress(status):
    print(status.status, status.completed_length, "/", status.total_length)

path = download("https://example.com/files/archive.zip", "", on_progress)
print("saved to", path)

stop()
```

`download` blocks until aria2 reports the task as `complete` (returning the
path of the first file) or as `error` (raising `Aria2Error`). The callback
receives a `DownloadStatus` on every poll and may be `None`.

`ariafetch.cli.format_status(status, elapsed)` renders the same progress
report the command prints.

For finer control, work with an `Aria2` instance directly:

```python
from ariafetch.client import Aria2, find_available_port

daemon = Aria2(find_available_port(6800), 10.0)
daemon.start()
try:
    gid = daemon.add_uri("https://example.com/files/archive.zip", "downloads")
    print(daemon.tell_status(gid).status)
finally:
    daemon.stop()
```

`Aria2.call(method, params)` sends any aria2 JSON-RPC method and returns the
decoded result; errors returned by aria2 are raised as `RpcError`.
`Aria2.monitor_download(gid, callback, interval)` polls a task until it
finishes, and `Aria2.build_args()` lists the options aria2c is launched with.

## Errors

- `ariafetch.client.Aria2Error` – the daemon failed to start, a request
  failed, a reply could not be parsed, or a download ended in error.
- `ariafetch.client.RpcError` – aria2 answered with a JSON-RPC error; it
  carries `code` and `message`.
- `ariafetch.embedder.UnsupportedPlatformError` – no binary is known for this
  operating system.
- `ariafetch.embedder.BinaryMissingError` – the bundled binary is missing or
  only a placeholder (two bytes or fewer).

## What this package does not do

- It does not ship `aria2c` executables. Place them under
  `ariafetch/binaries/` with the names above, or put an `aria2c` executable
  in the per-user `aria2` directory yourself.
- Apart from `add_uri`, `tell_status` and the generic `call`, it has no
  wrappers for aria2's other RPC methods (pause, resume, remove, torrents).