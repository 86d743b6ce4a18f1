from fluent_gwt.store.recorder import TestRecorder
from fluent_gwt.store.records import RecordStore

__all__ = ["RecordStore", "TestRecorder"]
