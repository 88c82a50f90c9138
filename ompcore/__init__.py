"""Core building blocks: JSON documents, thread-safe containers, a thread pool, undoable commands, a camera and assets."""

__version__ = "0.1.0"