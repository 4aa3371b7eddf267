# -*- coding: utf-8 -*-
"""
Long-running operation poller for SharePoint tenant operations.

Removing a site collection starts an asynchronous operation on the server.
The poller sends the initial CSOM request and, when asked to wait, re-checks
the operation after each server-advised polling interval until it completes,
fails, or the wait is cancelled.

State machine:

    IDLE -> DISPATCHING -> DONE                       (complete, or not waiting)
                        -> FAILED                     (ErrorInfo / bad response)
                        -> WAITING -> DISPATCHING ... (incomplete)
                                   -> CANCELLED       (cancel() while waiting)

Only one network call is ever in flight and at most one wait is pending.
"""

import enum
import threading
import time

from .csom import (
    build_operation_status_request,
    build_remove_site_request,
    parse_client_svc_response,
)
from .digest import DigestManager
from .errors import SharePointAdminError
from .spo_client import execute_process_query
from .utils import is_debug_enabled, is_verbose_enabled


class PollerStatus(enum.Enum):
    IDLE = 'idle'
    DISPATCHING = 'dispatching'
    WAITING = 'waiting'
    DONE = 'done'
    FAILED = 'failed'
    CANCELLED = 'cancelled'


class WaitInterrupted(Exception):
    """Raised out of a pending wait by OperationPoller.interrupt_wait()"""


class PendingWait:
    """The single scheduled re-check of an operation"""

    def __init__(self, object_identity, interval_ms, due_at):
        self.object_identity = object_identity
        self.interval_ms = interval_ms
        self.due_at = due_at
        self.cancelled = False


class PollerState:
    """
    Mutable state owned by exactly one OperationPoller.

    Attributes:
        digest_manager (DigestManager): Request digest cache for the target site
        status (PollerStatus): Current state machine position
        pending (PendingWait): Scheduled re-check, None when nothing is scheduled
        cancel_event (threading.Event): Signalled by cancel() to end a pending wait
    """

    def __init__(self, digest_manager, cancel_event=None):
        self.digest_manager = digest_manager
        self.status = PollerStatus.IDLE
        self.pending = None
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()


class OperationPoller:
    """
    Runs a site removal operation and optionally waits for it to finish.

    Args:
        site_url (str): Tenant admin site that receives ProcessQuery calls
        access_token (str): Bearer token for the SharePoint resource
        state (PollerState): Pre-built state (digest cache, wait event); created if omitted
        clock (callable): Monotonic clock used for PendingWait.due_at
    """

    def __init__(self, site_url, access_token, state=None, clock=time.monotonic):
        self.site_url = site_url
        self.access_token = access_token
        self.state = state if state is not None else PollerState(DigestManager(site_url, access_token))
        self.clock = clock
        self._dots = ''

    @property
    def status(self):
        return self.state.status

    def start(self, kind, url, wait=False):
        """
        Start an operation on a site collection.

        Args:
            kind (OperationKind): Operation to run
            url (str): Absolute URL of the site collection
            wait (bool): Keep polling until the server reports completion

        Returns:
            PollerStatus: DONE, or CANCELLED if cancel() ended the wait

        Raises:
            RemoteOperationError: If the server reported an error
            ProtocolError: If a response could not be interpreted
            CommandError: If a request could not be sent
        """
        operation = self._dispatch(build_remove_site_request(kind, url))

        if operation.is_complete or not wait:
            self.state.status = PollerStatus.DONE
            return self.state.status

        return self._wait_until_complete(operation)

    def recheck(self, object_identity):
        """
        Query the current state of a pending operation.

        Args:
            object_identity (str): Identity returned by the latest response

        Returns:
            SpoOperation: Operation state with a fresh identity and polling interval
        """
        if is_debug_enabled():
            print(f"[DEBUG] Checking if operation {object_identity} completed...")
        return self._dispatch(build_operation_status_request(object_identity))

    def cancel(self):
        """
        Cancel the pending re-check, if any.

        In-flight requests are not interrupted; the poll loop stops at its
        next wait. Calling cancel() again, or with nothing scheduled, has no
        effect.

        Safe to call from another thread. Signal handlers must use
        interrupt_wait() instead, since Event.set() takes a lock the
        interrupted thread may already hold.

        Returns:
            bool: True if a pending wait was cancelled
        """
        pending = self.state.pending
        if pending is None or pending.cancelled:
            return False
        pending.cancelled = True
        self.state.cancel_event.set()
        return True

    def interrupt_wait(self):
        """
        Cancel the pending wait from a signal handler.

        Takes no locks. When a wait is pending, marks it cancelled and raises
        WaitInterrupted, which the poll loop catches and turns into CANCELLED.

        Returns:
            bool: False if there was no pending wait to cancel

        Raises:
            WaitInterrupted: If a pending wait was cancelled
        """
        pending = self.state.pending
        if pending is None or pending.cancelled:
            return False
        pending.cancelled = True
        raise WaitInterrupted(pending.object_identity)

    def _dispatch(self, body):
        """Ensure a digest, POST one CSOM batch and interpret the response"""
        self.state.status = PollerStatus.DISPATCHING
        try:
            digest = self.state.digest_manager.ensure_digest()
            response_text = execute_process_query(self.site_url, self.access_token, digest.value, body)
            return parse_client_svc_response(response_text)
        except SharePointAdminError:
            self.state.status = PollerStatus.FAILED
            raise

    def _wait_until_complete(self, operation):
        """Re-check the operation until it completes or the wait is cancelled"""
        while not operation.is_complete:
            if not self._wait(operation):
                self._end_progress()
                return self.state.status

            self._show_progress()
            # Identity and interval are re-read from every response
            operation = self.recheck(operation.object_identity)

        self._end_progress()
        self.state.status = PollerStatus.DONE
        return self.state.status

    def _wait(self, operation):
        """
        Block for the operation's polling interval.

        Returns:
            bool: True if the interval elapsed, False if cancel() interrupted it
        """
        interval_ms = max(operation.polling_interval_ms, 0)
        pending = PendingWait(
            operation.object_identity,
            interval_ms,
            self.clock() + interval_ms / 1000.0
        )
        event = self.state.cancel_event
        event.clear()
        self.state.status = PollerStatus.WAITING

        try:
            self.state.pending = pending
            try:
                woke = event.wait(interval_ms / 1000.0)
                # Wake-ups left over from a cancel() aimed at an earlier wait
                while woke and not pending.cancelled:
                    event.clear()
                    woke = event.wait(max(pending.due_at - self.clock(), 0))
            finally:
                self.state.pending = None
        except WaitInterrupted:
            pending.cancelled = True
            self.state.pending = None

        if pending.cancelled:
            self.state.status = PollerStatus.CANCELLED
            return False
        return True

    def _show_progress(self):
        if is_verbose_enabled() and not is_debug_enabled():
            self._dots += '.'
            print(f"\r{self._dots}", end='', flush=True)

    def _end_progress(self):
        if self._dots:
            print()
            self._dots = ''
