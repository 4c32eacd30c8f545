"""Exception hierarchy for the VoiceStress pipeline"""


class VoiceStressError(Exception):
    """Base class for all recoverable pipeline errors"""
    pass


class InsufficientSignalError(VoiceStressError):
    """Raised when too few voiced frames survive the silence filter.

    Attributes:
        frame_count: Number of frames that survived filtering
        required: Minimum number of frames needed
    """

    def __init__(self, frame_count: int, required: int):
        self.frame_count = frame_count
        self.required = required
        super().__init__(
            f"Not enough clear speech detected ({frame_count} of {required} voiced frames). "
            f"Please record again in a quieter environment."
        )


class InvalidTakeError(VoiceStressError):
    """Raised when a captured take is too small to be a real recording"""

    def __init__(self, size: int, minimum: int):
        self.size = size
        self.minimum = minimum
        super().__init__(f"Recorded take is too short ({size} bytes, need more than {minimum})")


class FeatureContractError(VoiceStressError):
    """Raised when frame features break the extractor contract (e.g. MFCC length drift)"""
    pass


class AudioDecodeError(VoiceStressError):
    """Raised when a recorded take cannot be decoded to PCM"""
    pass


class BaselineFormatError(VoiceStressError):
    """Raised when a persisted baseline is not a valid feature object"""
    pass


class BaselineStoreError(VoiceStressError):
    """Raised when the baseline backend cannot be read or written"""
    pass


class CalibrationStateError(VoiceStressError):
    """Raised when a calibration operation is not allowed in the current state"""
    pass


class AnalysisStateError(VoiceStressError):
    """Raised when an analysis operation is not allowed in the current state"""
    pass


class ServiceError(VoiceStressError):
    """Base class for reasoning-service failures"""
    pass


class ServiceUnavailableError(ServiceError):
    """Raised when the reasoning service call fails or times out"""
    pass


class ServiceSchemaViolationError(ServiceError):
    """Raised when the reasoning service response does not match the result schema"""
    pass
