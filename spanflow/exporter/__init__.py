"""Exporters for delivering traces to backends."""

from spanflow.exporter.console_exporter import ConsoleExporter
from spanflow.exporter.in_memory_exporter import InMemoryExporter
from spanflow.exporter.logging_exporter import LoggingExporter
from spanflow.exporter.otlp_exporter import OTLPExporter

__all__ = ["ConsoleExporter", "InMemoryExporter", "LoggingExporter", "OTLPExporter"]
