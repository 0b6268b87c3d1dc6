# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import sys
import time
from pathlib import Path
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler


class CheckEventHandler(FileSystemEventHandler):
    def __init__(self, target, run, delay=0.5):
        self.target = Path(target).resolve()
        self.run = run
        self.delay = delay
        self.last_run = 0.0
        self.last_code = None

    def _is_target(self, event):
        paths = [getattr(event, "src_path", ""), getattr(event, "dest_path", "")]
        return any(p and Path(p).resolve() == self.target for p in paths)

    def on_any_event(self, event):
        if event.is_directory or event.event_type not in {"modified", "created", "moved"}:
            return
        if not self._is_target(event):
            return

        # Debounce editors that write in several steps
        now = time.time()
        if now - self.last_run < self.delay:
            return
        self.last_run = now

        sys.stderr.write(f"[watch] Change detected in {self.target}...\n")
        try:
            self.last_code = self.run()
        except Exception as e:
            sys.stderr.write(f"[error] Check failed: {e}\n")


def cmd_watch(target, run):
    """Watch one file and re-run the check on change; returns the last exit code."""
    target_path = Path(target).resolve()
    if not target_path.exists():
        raise FileNotFoundError(f"File not found: {target_path}")
    sys.stderr.write(f"[watch] Watching {target_path} for changes...\n")

    handler = CheckEventHandler(target_path, run)
    handler.last_code = run()
    observer = Observer()
    observer.schedule(handler, str(target_path.parent), recursive=False)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        observer.stop()
    observer.join()
    return handler.last_code
