"""Screening pipeline combining decoding, extraction and risk scoring"""

from voicescreen.screening.pipeline import ScreeningPipeline, ScreeningResult

__all__ = ["ScreeningPipeline", "ScreeningResult"]
