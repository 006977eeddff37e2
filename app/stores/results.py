from __future__ import annotations

import json
from typing import Any

import redis


class RedisResultStore:
    """Materialized results: one hash per exam, one field per candidate.

    ``put`` overwrites the candidate's field, so recomputing a result replaces
    the previous snapshot instead of accumulating.
    """

    def __init__(self, client: redis.Redis, prefix: str = "results") -> None:
        self.client = client
        self.prefix = prefix

    def _key(self, exam_id: str) -> str:
        return f"{self.prefix}:{exam_id}"

    def put(self, exam_id: str, registration_number: str, payload: dict[str, Any]) -> None:
        self.client.hset(self._key(exam_id), registration_number, json.dumps(payload))

    def get(self, exam_id: str, registration_number: str) -> dict[str, Any] | None:
        raw = self.client.hget(self._key(exam_id), registration_number)
        return json.loads(raw) if raw is not None else None

    def all(self) -> dict[str, dict[str, dict[str, Any]]]:
        head = f"{self.prefix}:"
        data: dict[str, dict[str, dict[str, Any]]] = {}
        for key in sorted(self.client.scan_iter(match=f"{head}*")):
            exam_id = key[len(head):]
            entries = self.client.hgetall(key)
            data[exam_id] = {reg: json.loads(raw) for reg, raw in sorted(entries.items())}
        return data
