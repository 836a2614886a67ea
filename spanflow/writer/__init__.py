"""Writers receiving completed traces."""

from spanflow.writer.base import InMemoryWriter, Writer
from spanflow.writer.batch_writer import BatchWriter

__all__ = [
    "Writer",
    "InMemoryWriter",
    "BatchWriter",
]
