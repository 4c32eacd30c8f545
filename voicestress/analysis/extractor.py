"""Frame Feature Extraction

This module turns a recorded take into a sequence of per-frame acoustic
descriptors. Decoding uses PyAV so any container the recorder produces
(WebM/Opus, Ogg, WAV, ...) is accepted; the spectral math is delegated to
librosa.

Each take is rendered offline to completion: the whole buffer is decoded and
analyzed in a worker thread and the caller awaits the full list of frames.
"""

import asyncio
import io
import logging
from typing import List

import av
import librosa
import numpy as np

from voicestress.errors import AudioDecodeError
from voicestress.models.frames import FrameFeatures, RecordedTake
from voicestress.models.interfaces import FrameFeatureSource
from voicestress.config.config_loader import config


logger = logging.getLogger(__name__)


class LibrosaFeatureExtractor(FrameFeatureSource):
    """Extracts rms, zcr, spectral centroid, spectral flatness and MFCCs per frame.

    Frames are non-overlapping windows of ``frame_size`` samples; a trailing
    partial window is dropped. Every frame yields exactly ``n_mfcc``
    coefficients, so the MFCC length is stable for the whole session.

    Attributes:
        sample_rate: Rate takes are resampled to before analysis (Hz)
        frame_size: Samples per analysis frame
        n_mfcc: Number of MFCC coefficients per frame
    """

    def __init__(self, sample_rate: int = None, frame_size: int = None, n_mfcc: int = None):
        self.sample_rate = sample_rate or config.get('audio.sample_rate', 44100)
        self.frame_size = frame_size or config.get('audio.frame_size', 1024)
        self.n_mfcc = n_mfcc or config.get('audio.n_mfcc', 13)

        logger.info(f"LibrosaFeatureExtractor initialized: sample_rate={self.sample_rate}, "
                    f"frame_size={self.frame_size}, n_mfcc={self.n_mfcc}")

    def decode(self, take: RecordedTake) -> np.ndarray:
        """Decode a recorded take to mono float32 PCM at the configured rate.

        Args:
            take: Recorded take holding encoded audio bytes

        Returns:
            1-D float32 array of samples

        Raises:
            AudioDecodeError: If the bytes are not a decodable audio container
        """
        try:
            with av.open(io.BytesIO(take.data)) as container:
                if not container.streams.audio:
                    raise AudioDecodeError("Recorded take contains no audio stream")

                resampler = av.AudioResampler(format='fltp', layout='mono', rate=self.sample_rate)
                chunks = []
                for frame in container.decode(audio=0):
                    for resampled in resampler.resample(frame):
                        chunks.append(resampled.to_ndarray()[0])

                # Flush samples buffered inside the resampler
                for resampled in resampler.resample(None):
                    chunks.append(resampled.to_ndarray()[0])
        except av.error.FFmpegError as e:
            logger.error(f"Failed to decode take ({take.size} bytes, {take.mime_type}): {e}")
            raise AudioDecodeError(f"Could not decode recorded audio: {e}")

        if not chunks:
            return np.zeros(0, dtype=np.float32)

        return np.concatenate(chunks).astype(np.float32)

    def extract(self, samples: np.ndarray, sample_rate: int = None) -> List[FrameFeatures]:
        """Extract per-frame features from a PCM buffer.

        Args:
            samples: Mono PCM samples
            sample_rate: Sample rate of ``samples``; defaults to the configured rate

        Returns:
            One FrameFeatures per full frame, in time order
        """
        sr = sample_rate or self.sample_rate
        y = np.asarray(samples, dtype=np.float32)
        n = self.frame_size

        if len(y) < n:
            logger.debug(f"Buffer shorter than one frame ({len(y)} < {n} samples)")
            return []

        frame_args = dict(hop_length=n, center=False)
        rms = librosa.feature.rms(y=y, frame_length=n, **frame_args)[0]
        zcr = librosa.feature.zero_crossing_rate(y, frame_length=n, **frame_args)[0]
        centroid = librosa.feature.spectral_centroid(y=y, sr=sr, n_fft=n, **frame_args)[0]
        flatness = librosa.feature.spectral_flatness(y=y, n_fft=n, **frame_args)[0]
        mfcc = librosa.feature.mfcc(y=y, sr=sr, n_mfcc=self.n_mfcc, n_fft=n, **frame_args)

        # Silent windows can produce NaN centroids
        centroid = np.nan_to_num(centroid, nan=0.0)
        flatness = np.clip(np.nan_to_num(flatness, nan=0.0), 0.0, 1.0)
        mfcc = np.nan_to_num(mfcc, nan=0.0, posinf=0.0, neginf=0.0)

        num_frames = min(len(rms), len(zcr), len(centroid), len(flatness), mfcc.shape[1])
        frames = [
            FrameFeatures(
                rms=float(rms[i]),
                zcr=float(zcr[i]),
                spectral_centroid=float(centroid[i]),
                spectral_flatness=float(flatness[i]),
                mfcc=tuple(float(c) for c in mfcc[:, i]),
            )
            for i in range(num_frames)
        ]

        logger.debug(f"Extracted {len(frames)} frames from {len(y)} samples at {sr} Hz")
        return frames

    def _decode_and_extract(self, take: RecordedTake) -> List[FrameFeatures]:
        samples = self.decode(take)
        return self.extract(samples, self.sample_rate)

    async def extract_take(self, take: RecordedTake) -> List[FrameFeatures]:
        """Decode and analyze a whole take off the event loop.

        Args:
            take: Recorded take to analyze

        Returns:
            Ordered per-frame features (unfiltered)

        Raises:
            AudioDecodeError: If the take cannot be decoded
        """
        return await asyncio.to_thread(self._decode_and_extract, take)
