# lab/session.py
"""
In-memory session: the last generated query artifact and encoded value,
kept across requests so later steps (submit, decode, feed) can reuse them.
Nothing is durable.
"""

import threading
import time


class LabSession:
    def __init__(self):
        self._lock = threading.Lock()
        self.query = None        # (QueryDescriptor, EncodedArtifact)
        self.value = None        # (tuple of ValueDescriptor, bytes)
        self.contract_address = ""
        self.last_submission = None

    def record_query(self, descriptor, artifact):
        with self._lock:
            self.query = (descriptor, artifact)

    def record_value(self, descriptors, encoded: bytes):
        with self._lock:
            self.value = (tuple(descriptors), bytes(encoded))

    def set_contract(self, address: str):
        with self._lock:
            self.contract_address = address

    def record_submission(self, tx_hash: str):
        with self._lock:
            self.last_submission = {"tx_hash": tx_hash, "at": time.time()}

    def value_descriptors(self):
        with self._lock:
            return self.value[0] if self.value else ()

    def clear(self):
        with self._lock:
            self.query = None
            self.value = None
            self.contract_address = ""
            self.last_submission = None
