"""Calibration map definitions, scaling, detection, map packs, comparison and bulk editing for ECU binary images."""

__version__ = "1.0.0"