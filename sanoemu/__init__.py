"""Logging, memory, mailbox, timing and video components for the SANo console emulator."""

__version__ = "1.0.0"
__all__ = ["log", "memory_bus", "ram", "mailbox", "master_clock", "video_renderer"]