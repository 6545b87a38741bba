import json
import logging
import threading
import time
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class OperationLog:
    """
    Append-only JSONL trace of what each tracking request did.

    One line per operation:
    {"timestamp": "...", "run_id": "...", "carrier": "dhl", "code": "123",
     "operation_type": "fetch_failed", "data": {...}, "success": false,
     "duration_ms": 30012}
    """

    def __init__(self, log_dir):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.complete_log_path = self.log_dir / "complete.jsonl"
        self._lock = threading.Lock()

    def new_run(self, carrier, code):
        return OperationRun(self, carrier, code)

    def write(self, entry):
        line = json.dumps(entry) + "\n"
        with self._lock:
            try:
                with open(self.complete_log_path, "a") as f:
                    f.write(line)
            except OSError as e:
                # Tracking requests never fail on the trace
                logger.warning("⚠️  Failed to write operation log: %s", e)


class OperationRun:
    """The operations of a single tracking request, sharing one run id."""

    def __init__(self, oplog, carrier, code, run_id=None):
        self.oplog = oplog
        self.carrier = carrier
        self.code = code
        self.run_id = run_id or datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.start_time = time.time()

    def log_operation(self, operation_type, data=None, success=True, duration_ms=None):
        entry = {
            "timestamp": datetime.now().isoformat(),
            "run_id": self.run_id,
            "carrier": self.carrier,
            "code": self.code,
            "operation_type": operation_type,
            "data": data or {},
            "success": success,
        }
        if duration_ms is not None:
            entry["duration_ms"] = duration_ms
        self.oplog.write(entry)

    def elapsed_ms(self):
        return int((time.time() - self.start_time) * 1000)


class NullRun:
    """Stand-in used when no operation log is configured."""

    def log_operation(self, operation_type, data=None, success=True, duration_ms=None):
        pass

    def elapsed_ms(self):
        return 0
