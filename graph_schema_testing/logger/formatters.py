import json
import logging
import os
import socket
from datetime import datetime, timezone
from typing import Any, Dict


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    fields = getattr(record, "fields", None)
    return dict(fields) if isinstance(fields, dict) else {}


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, bound fields merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            'name': record.name,
            'hostname': socket.gethostname(),
            'pid': os.getpid(),
            'level': record.levelname,
        }
        log_data.update(_record_fields(record))
        log_data['msg'] = record.getMessage()
        log_data['time'] = _timestamp(record)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class PrettyFormatter(logging.Formatter):
    """Short human readable lines for local runs."""

    def format(self, record: logging.LogRecord) -> str:
        fields = _record_fields(record)
        err = fields.pop('err', None)

        line = f"{_timestamp(record)} {record.levelname:>5}: {record.name}: {record.getMessage()}"
        if fields:
            line += " (" + ", ".join(f"{k}={json.dumps(v, default=str)}" for k, v in fields.items()) + ")"
        if isinstance(err, dict) and err.get('stack'):
            line += "\n" + err['stack']
        return line
