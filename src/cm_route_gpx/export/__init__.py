"""GPX export of pattern shapes."""

from .gpx import build_trajectory_file, export_filename, to_gpx

__all__ = ["build_trajectory_file", "export_filename", "to_gpx"]
