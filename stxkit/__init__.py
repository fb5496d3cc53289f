"""Owned strings, capacity-tracking vectors, reference-counted resources, thread slots and a task timeline."""

__version__ = "1.0.0"
__all__ = ["strings", "vec", "rc", "thread_slot", "timeline"]