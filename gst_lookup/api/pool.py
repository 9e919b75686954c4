# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
GST Lookup Connection Pool

HTTP connection pooling for lookup requests.
Reuses TCP connections between calls on the same thread.

Features:
- Connection pooling with requests.Session
- One session per thread (the combined lookup runs two legs in parallel)
- Retries disabled by default: every call is a single attempt
"""

import threading

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def build_session(
    pool_connections: int = 10,
    pool_maxsize: int = 20,
    max_retries: int = 0,
    backoff_factor: float = 0.3
) -> requests.Session:
    """
    Create an HTTP session with a pooled adapter.

    Args:
        pool_connections: Number of connection pools
        pool_maxsize: Max connections per pool
        max_retries: Max retry attempts (0 = single attempt)
        backoff_factor: Retry backoff factor

    Returns:
        requests.Session: Pooled session
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=max_retries,
        connect=max_retries,
        read=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=[429, 500, 502, 503, 504] if max_retries else [],
        allowed_methods=["HEAD", "GET", "OPTIONS"],
        raise_on_status=False
    )

    adapter = HTTPAdapter(
        pool_connections=pool_connections,
        pool_maxsize=pool_maxsize,
        max_retries=retry_strategy
    )

    session.mount("https://", adapter)
    session.mount("http://", adapter)

    return session


class SessionPool:
    """
    Thread-local sessions owned by one client.

    Usage:
        pool = SessionPool(max_retries=0)
        response = pool.session.get("https://api.taxlookup.fastgst.in/search/hsn/0401")
    """

    def __init__(self, pool_connections: int = 10, pool_maxsize: int = 20, max_retries: int = 0):
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self.max_retries = max_retries
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """Get or create the current thread's session"""
        session = getattr(self._local, "session", None)
        if session is None:
            session = build_session(
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize,
                max_retries=self.max_retries
            )
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def close(self):
        """Close every session opened through this pool"""
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()
