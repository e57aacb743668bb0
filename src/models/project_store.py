"""
Saved projects - named estimate snapshots, one list per account
"""

import copy
import json
import math
import time
import uuid

from .key_value_store import StorageError
from utils.debug_logger import debug_logger


PROJECTS_KEY_PREFIX = 'bfe_projects_v1__'
ANONYMOUS_OWNER = 'anonymous'


def projects_key(owner):
    return f"{PROJECTS_KEY_PREFIX}{owner or ANONYMOUS_OWNER}"


def _timestamp(value):
    """Saved time in epoch milliseconds; 0 when the stored value is unusable"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return int(value)


class ProjectStore:
    """Save, list, load and delete projects for an owner (None = no account)"""

    def __init__(self, store):
        self.store = store

    def _load(self, owner):
        raw = self.store.get(projects_key(owner))
        if not raw:
            return []
        try:
            projects = json.loads(raw)
        except ValueError:
            debug_logger.warning("Projects", f"Project list for '{owner or ANONYMOUS_OWNER}' is corrupt")
            return []
        if not isinstance(projects, list):
            return []
        records = [p for p in projects if isinstance(p, dict)]
        for record in records:
            record['updatedAt'] = _timestamp(record.get('updatedAt'))
        return records

    def _write(self, owner, projects):
        try:
            payload = json.dumps(projects)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Project could not be serialized: {e}")
        self.store.set(projects_key(owner), payload)

    def save_project(self, owner, name, state):
        """Append a project record; returns it"""
        name = (name or "").strip()
        if not name:
            raise ValueError("Please enter a project name.")
        snapshot = (state or {}).get('snapshot') or {}
        record = {
            'id': uuid.uuid4().hex,
            'name': name,
            'updatedAt': int(time.time() * 1000),
            'totalSqFt': snapshot.get('totalSqFt', 0),
            'count': snapshot.get('selectionsCount', 0),
            'state': copy.deepcopy(state),
        }
        projects = self._load(owner)
        projects.append(record)
        self._write(owner, projects)
        debug_logger.info("Projects", f"Saved project '{name}'",
                          {'owner': owner or ANONYMOUS_OWNER, 'total_sq_ft': record['totalSqFt']})
        return record

    def list_projects(self, owner):
        """Newest first"""
        return sorted(self._load(owner), key=lambda p: p['updatedAt'], reverse=True)

    def get_project(self, owner, project_id):
        for project in self._load(owner):
            if project.get('id') == project_id:
                return project
        return None

    def delete_project(self, owner, project_id):
        """Returns True when a project was removed"""
        projects = self._load(owner)
        remaining = [p for p in projects if p.get('id') != project_id]
        if len(remaining) == len(projects):
            return False
        self._write(owner, remaining)
        debug_logger.info("Projects", "Deleted project", {'id': project_id})
        return True
