"""Batch feature extraction over a directory of recordings"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Any, Optional, Union

import pandas as pd
from tqdm import tqdm

from voicescreen.core.base import AudioDecoder, AudioSampleBuffer, DecodingError, VoiceFeatures
from voicescreen.dsp.extractor import VoiceFeatureExtractor

logger = logging.getLogger(__name__)


class RecordingDataset:
    """Recordings listed in a metadata table

    The metadata CSV needs the columns ``recording_id``, ``patient_id`` and
    ``path``; paths are relative to ``data_dir``. Extra columns are carried
    through to the feature table.
    """

    REQUIRED_COLUMNS = ('recording_id', 'patient_id', 'path')

    def __init__(self,
                 data_dir: Union[str, Path],
                 metadata_file: str = 'metadata.csv'):
        self.data_dir = Path(data_dir)
        self.metadata = pd.read_csv(self.data_dir / metadata_file)

        missing = [c for c in self.REQUIRED_COLUMNS if c not in self.metadata.columns]
        if missing:
            raise ValueError(f"Metadata file is missing columns: {missing}")
        for column in self.REQUIRED_COLUMNS:
            self.metadata[column] = self.metadata[column].astype(str)

        self.samples = self._prepare_samples()

    def _prepare_samples(self) -> List[Dict[str, Any]]:
        """Prepare sample list with resolved audio paths"""
        samples = []
        for _, row in self.metadata.iterrows():
            sample = row.to_dict()
            sample['audio_path'] = self.data_dir / row['path']
            samples.append(sample)

        logger.info(f"Prepared {len(samples)} recordings from {self.data_dir}")
        return samples

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, idx: int) -> Dict[str, Any]:
        return self.samples[idx]

    def load(self, idx: int, decoder: AudioDecoder) -> AudioSampleBuffer:
        """Decode one recording with an open decoder"""
        return decoder.decode(self.samples[idx]['audio_path'])

    def _process(self,
                 sample: Dict[str, Any],
                 decoder: AudioDecoder,
                 extractor: VoiceFeatureExtractor) -> Dict[str, Any]:
        row = {k: v for k, v in sample.items() if k != 'audio_path'}
        try:
            buffer = decoder.decode(sample['audio_path'])
        except DecodingError as e:
            logger.warning(f"Skipping recording {sample['recording_id']}: {e}")
            row['error'] = str(e)
            return row

        row.update(extractor.extract(buffer).to_flat_dict())
        row['error'] = None
        return row

    def feature_columns(self, extractor: VoiceFeatureExtractor) -> List[str]:
        names = [n for n in VoiceFeatures.__dataclass_fields__ if n != 'formants']
        names += [f'formant_{i}' for i in range(1, extractor.config.max_formants + 1)]
        return names

    def extract_features(self,
                         decoder: AudioDecoder,
                         extractor: Optional[VoiceFeatureExtractor] = None,
                         max_workers: int = 4,
                         progress: bool = True) -> pd.DataFrame:
        """
        Decode every recording and extract its features.

        Args:
            decoder: Open decoder shared by all workers
            extractor: Feature extractor (default configuration if None)
            max_workers: Thread pool size; 1 runs sequentially
            progress: Show a tqdm progress bar

        Returns:
            One row per recording: metadata columns, feature columns and an
            ``error`` column holding the decode failure message, if any.
        """
        extractor = extractor or VoiceFeatureExtractor()
        logger.info(f"Extracting features from {len(self.samples)} recordings "
                    f"with {max_workers} workers")

        def process(sample):
            return self._process(sample, decoder, extractor)

        if max_workers == 1:
            rows = [process(s) for s in tqdm(self.samples, disable=not progress,
                                             desc="Extracting features")]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                rows = list(tqdm(executor.map(process, self.samples),
                                 total=len(self.samples),
                                 disable=not progress,
                                 desc="Extracting features"))

        metadata_columns = list(self.metadata.columns)
        columns = metadata_columns + self.feature_columns(extractor) + ['error']
        table = pd.DataFrame(rows, columns=columns)

        failed = int(table['error'].notna().sum())
        logger.info(f"Extracted features for {len(table) - failed} recordings, {failed} failed")
        return table
