"""Decoding, quality checking and batch loading of voice recordings"""

from voicescreen.data.decoders import LibrosaDecoder, SoundFileDecoder
from voicescreen.data.preprocessing import SignalQualityChecker
from voicescreen.data.datasets import RecordingDataset

__all__ = [
    # Decoders
    "LibrosaDecoder",
    "SoundFileDecoder",
    # Preprocessing
    "SignalQualityChecker",
    # Datasets
    "RecordingDataset"
]
