# public/tests/test_mutation_lock.py

import threading
import time

from django.test import SimpleTestCase

from public.services.exceptions import ServerBusyError
from public.services.mutation_lock import MutationLock


class MutationLockTests(SimpleTestCase):
    """
    GUARANTEES:
    - holders never overlap
    - a wait that runs past the bound fails fast with a retryable error
    - the lock is released on every exit path
    """

    def test_holders_never_interleave(self):
        lock = MutationLock(timeout=5)
        active = []
        overlaps = []

        def work():
            with lock.hold():
                active.append(1)
                if len(active) > 1:
                    overlaps.append(len(active))
                time.sleep(0.01)
                active.pop()

        threads = [threading.Thread(target=work) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(overlaps, [])
        self.assertFalse(lock.locked())

    def test_busy_when_bound_expires(self):
        lock = MutationLock(timeout=0.05)
        lock.acquire()
        try:
            with self.assertRaises(ServerBusyError) as ctx:
                with lock.hold():
                    pass
            self.assertTrue(ctx.exception.retryable)
        finally:
            lock.release()

    def test_released_after_error(self):
        lock = MutationLock(timeout=0.05)

        with self.assertRaises(RuntimeError):
            with lock.hold():
                raise RuntimeError("boom")

        self.assertFalse(lock.locked())
        with lock.hold():
            self.assertTrue(lock.locked())

    def test_waiter_proceeds_once_released(self):
        lock = MutationLock(timeout=2)
        lock.acquire()
        threading.Timer(0.05, lock.release).start()

        with lock.hold():
            self.assertTrue(lock.locked())
