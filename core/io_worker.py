# core/io_worker.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
import threading
import queue
import traceback

from core.log import Log

class Ticket:
    """Handle for one queued task. cancel() suppresses its callback."""

    def __init__(self, name: str):
        self.name = name
        self._cancelled = threading.Event()
        self._done = threading.Event()

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout=None) -> bool:
        return self._done.wait(timeout)

class IOWorker:
    """
    Single background thread for file/IO tasks.

    dispatch(fn, *args) hands callbacks back to the caller's thread; the GUI
    passes wx.CallAfter. Without one, callbacks run on the worker thread.
    """

    def __init__(self, dispatch=None):
        self._dispatch = dispatch
        self._q = queue.Queue()
        self._t = threading.Thread(target=self._run, name="IOWorker", daemon=True)
        self._t.start()

    def submit(self, fn, *args, callback=None, **kwargs) -> Ticket:
        """Queue a task; callback(result, error) runs once unless the ticket is cancelled."""
        ticket = Ticket(getattr(fn, "__name__", "task"))
        self._q.put((ticket, fn, args, kwargs, callback))
        return ticket

    def _deliver(self, ticket, cb, result, err):
        # Cancellation may land between the worker finishing and dispatch.
        if not ticket.cancelled:
            cb(result, err)

    def _run(self):
        """Background thread main loop."""
        while True:
            ticket, fn, args, kwargs, cb = self._q.get()
            result = None
            err = None

            if ticket.cancelled:
                ticket._done.set()
                self._q.task_done()
                continue

            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                err = (e, traceback.format_exc())

            if cb:
                if self._dispatch is not None:
                    self._dispatch(self._deliver, ticket, cb, result, err)
                else:
                    self._deliver(ticket, cb, result, err)
            elif err is not None:
                # No callback provided; keep the traceback in the log.
                Log.debug(err[1], 0)

            ticket._done.set()
            self._q.task_done()
