#!/usr/bin/env python3
import argparse
import json
import logging
import sys
from pathlib import Path

import yaml
sys.path.append(str(Path(__file__).parent.parent))

from voicescreen.core.base import DecodingError
from voicescreen.data.datasets import RecordingDataset
from voicescreen.screening.pipeline import ScreeningPipeline

logger = logging.getLogger("voicescreen.analyze")


def analyze_files(pipeline, files, patient_id):
    failures = 0
    for path in files:
        try:
            result = pipeline.analyze(path, patient_id=patient_id, recording_id=Path(path).stem)
        except DecodingError as e:
            logger.error(f"{path}: {e}")
            failures += 1
            continue
        print(json.dumps(result.to_dict(), indent=2))
    return failures


def analyze_dataset(pipeline, data_dir, output, batch_config):
    dataset = RecordingDataset(data_dir)
    table = dataset.extract_features(
        pipeline.decoder,
        extractor=pipeline.extractor,
        max_workers=batch_config.get('max_workers', 4),
        progress=batch_config.get('progress', True)
    )
    if output:
        table.to_csv(output, index=False)
        logger.info(f"Wrote {len(table)} rows to {output}")
    else:
        print(table.to_string(index=False))
    return int(table['error'].notna().sum())


def main(args):
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Load config
    config = {}
    if args.config:
        with open(args.config, 'r') as f:
            config = yaml.safe_load(f) or {}

    pipeline = ScreeningPipeline.from_config(config)

    with pipeline:
        if args.metadata:
            failures = analyze_dataset(pipeline, args.metadata, args.output,
                                       config.get('batch') or {})
        else:
            failures = analyze_files(pipeline, args.files, args.patient_id)

    return 1 if failures else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Screen voice recordings')
    parser.add_argument('files', nargs='*',
                        help='Audio files to analyze')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to config file')
    parser.add_argument('--metadata', type=str, default=None,
                        help='Directory holding metadata.csv for batch extraction')
    parser.add_argument('--output', type=str, default=None,
                        help='CSV file for the batch feature table')
    parser.add_argument('--patient-id', type=str, default='anonymous',
                        help='Patient id attached to single-file results')
    parser.add_argument('--log-level', type=str, default='INFO',
                        help='Logging level')
    args = parser.parse_args()

    if not args.files and not args.metadata:
        parser.error('give audio files or --metadata')

    sys.exit(main(args))
