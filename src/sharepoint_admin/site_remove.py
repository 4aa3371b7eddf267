# -*- coding: utf-8 -*-
"""
Classic site collection removal.

Removing a site moves it to the tenant recycle bin. The site can later be
purged from the recycle bin, or both steps can be chained to delete it
permanently in one command.
"""

import contextlib
import signal
import threading

from .csom import OperationKind
from .poller import OperationPoller, PollerStatus
from .utils import is_verbose_enabled


@contextlib.contextmanager
def cancel_on_interrupt(poller):
    """
    Route Ctrl+C to poller.interrupt_wait() while the poller is waiting.

    An interrupt that arrives while nothing is scheduled (e.g. during an
    HTTP call) still raises KeyboardInterrupt.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def handler(signum, frame):
        if not poller.interrupt_wait():
            raise KeyboardInterrupt

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def confirm_removal(url, input_func=input):
    """
    Ask the user to confirm removing a site. Defaults to no.

    Returns:
        bool: True if the user answered yes
    """
    answer = input_func(f"Are you sure you want to remove the site {url}? [y/N] ")
    return answer.strip().lower() in ('y', 'yes')


def remove_classic_site(config, spo_auth, input_func=input, poller_factory=OperationPoller):
    """
    Remove a classic site collection.

    Args:
        config (Config): url, skip_recycle_bin, from_recycle_bin, wait, confirm, admin_url
        spo_auth (ServiceAuth): Connected SharePoint Online auth
        input_func (callable): Prompt function used when confirm is not set
        poller_factory (callable): Builds the OperationPoller for the admin site

    Returns:
        PollerStatus: DONE, CANCELLED, or None if the user declined the prompt

    Raises:
        CommandError: If not connected, or a request could not be sent
        RemoteOperationError: If SharePoint rejected the operation
        ProtocolError: If a response could not be interpreted
    """
    if not config.confirm and not confirm_removal(config.url, input_func):
        print("[=] Site removal aborted")
        return None

    access_token = spo_auth.ensure_connected(
        "Connect to a SharePoint Online tenant admin site first"
    )
    poller = poller_factory(config.admin_url, access_token)
    verbose = is_verbose_enabled()

    with cancel_on_interrupt(poller):
        if config.from_recycle_bin:
            if verbose:
                print(f"[*] Removing site {config.url} from the Recycle Bin...")
            status = poller.start(OperationKind.REMOVE_DELETED_SITE, config.url, wait=config.wait)

        elif config.skip_recycle_bin:
            if verbose:
                print(f"[*] Deleting site collection {config.url}...")
            # The site must have reached the recycle bin before it can be purged
            status = poller.start(OperationKind.REMOVE_SITE, config.url, wait=True)
            if status == PollerStatus.DONE:
                if verbose:
                    print(f"[*] Removing site {config.url} from the Recycle Bin...")
                status = poller.start(OperationKind.REMOVE_DELETED_SITE, config.url, wait=config.wait)

        else:
            if verbose:
                print(f"[*] Deleting site collection {config.url}...")
            status = poller.start(OperationKind.REMOVE_SITE, config.url, wait=config.wait)

    if status == PollerStatus.CANCELLED:
        print("[!] Stopped waiting for the operation to complete")
    elif verbose:
        print("[✓] DONE")
    return status
