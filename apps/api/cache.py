"""
Read-through cache of full resource lists, shared by every view.

Fresh entries expire after EDUMANAGER_CACHE_TIMEOUT seconds or when a
mutation invalidates them. The last list that loaded successfully is kept
without expiry so a view can keep showing it after a failed reload.
"""
from __future__ import annotations

from typing import Callable

from django.conf import settings
from django.core.cache import cache

from .client import records


STUDENTS = "students"
COURSES = "courses"
AVAILABLE_COURSES = "available_courses"
ENROLLMENTS = "enrollments"

RESOURCES = (STUDENTS, COURSES, AVAILABLE_COURSES, ENROLLMENTS)


def _fresh_key(resource: str) -> str:
    return f"edumanager:{resource}"


def _last_key(resource: str) -> str:
    return f"edumanager:{resource}:last"


def read_through(resource: str, loader: Callable[[], list]) -> list:
    items = cache.get(_fresh_key(resource))
    if items is not None:
        return items

    items = records(loader(), resource)
    cache.set(_fresh_key(resource), items, timeout=settings.EDUMANAGER_CACHE_TIMEOUT)
    cache.set(_last_key(resource), items, timeout=None)
    return items


def last_known(resource: str) -> list:
    return cache.get(_last_key(resource)) or []


def invalidate(*resources: str) -> None:
    cache.delete_many([_fresh_key(resource) for resource in resources])
